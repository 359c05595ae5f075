"""
Scheduler for the daily brief snapshot
Writes today's brief every day at SCHEDULE_HOUR:SCHEDULE_MINUTE
"""
import schedule
import time
from datetime import datetime
from layer_4_distribution.daily_brief import write_daily_brief
from layer_4_distribution.insights_service import InsightsService
from config.settings import settings
from utils.logger import get_logger

logger = get_logger(__name__)


def run_daily_brief(service: InsightsService):
    """Write the daily brief; failures are logged and retried at the next run"""
    logger.info(f"Scheduled daily brief triggered at {datetime.now()}")
    try:
        result = write_daily_brief(service)
        logger.info(f"✅ Daily brief written to {result['markdown_path']}")
    except Exception as e:
        logger.error(f"Error writing scheduled daily brief: {e}", exc_info=True)


def start_scheduler():
    """Start the scheduler"""
    settings.ensure_directories()
    service = InsightsService.from_settings()
    run_at = f"{settings.SCHEDULE_HOUR:02d}:{settings.SCHEDULE_MINUTE:02d}"
    schedule.every().day.at(run_at).do(run_daily_brief, service)

    logger.info(f"Scheduler started. Will write the daily brief every day at {run_at}")
    logger.info("Press Ctrl+C to stop")

    while True:
        schedule.run_pending()
        time.sleep(60)  # Check every minute


if __name__ == "__main__":
    try:
        start_scheduler()
    except KeyboardInterrupt:
        logger.info("Scheduler stopped by user")
    except Exception as e:
        logger.error(f"Error in scheduler: {e}", exc_info=True)
