"""
Main entry point for the application

Usage:
    python main.py report            Print today's report (markdown)
    python main.py summary           Print the structured summary (JSON)
    python main.py kpi               Print the KPI themes per severity bucket (JSON)
    python main.py brief             Write today's brief to the reports directory
    python main.py add SOURCE SENTIMENT COMMENT
                                     Store one feedback row
    python main.py init              Create an empty feedback store
    python main.py seed              Load sample feedback (today + yesterday)
"""
import json
import sys

from config.settings import settings
from layer_1_data_import.storage import FeedbackStorage, StorageError
from layer_3_content_generation.report_builder import render_markdown
from layer_3_content_generation.summary_builder import source_breakdown
from layer_4_distribution.daily_brief import write_daily_brief
from layer_4_distribution.insights_service import InsightsService
from utils.logger import get_logger

logger = get_logger(__name__)

COMMANDS = ("report", "summary", "kpi", "brief", "add", "init", "seed")


def _print_json(data):
    print(json.dumps(data, indent=2, ensure_ascii=False))


def run(command: str, args: list) -> int:
    """
    Run one command

    Returns:
        Process exit code (0 = success)
    """
    if command == "init":
        FeedbackStorage().init_store()
        return 0

    if command == "seed":
        count = FeedbackStorage().seed()
        print(f"✅ Seeded {count} feedback rows into {settings.FEEDBACK_FILE}")
        return 0

    if command == "add":
        if len(args) < 3:
            print("Usage: python main.py add SOURCE SENTIMENT COMMENT")
            return 2
        source, sentiment, comment = args[0], args[1], " ".join(args[2:])
        try:
            record = FeedbackStorage().add_feedback(source, sentiment, comment)
        except ValueError as e:
            print(f"❌ {e}")
            return 2
        print(f"✅ Stored feedback #{record.id}")
        return 0

    service = InsightsService.from_settings()

    if command == "report":
        print(render_markdown(service.get_report()))
    elif command == "summary":
        summary = service.get_summary()
        _print_json({
            **summary.to_dict(),
            "source_breakdown": source_breakdown(summary.by_source),
            "recurring_themes": [
                {"theme": t.theme, "priority": t.priority} for t in service.get_theme_priorities()
            ],
        })
    elif command == "kpi":
        _print_json(service.get_kpi_themes().to_dict())
    elif command == "brief":
        result = write_daily_brief(service)
        print(f"✅ Daily brief for {result['date']} written to {result['markdown_path']}")
    return 0


def main(argv=None) -> int:
    """
    Parse the command line and run the requested command

    Storage failures are fatal for the request: the error and a remediation
    hint are printed and the exit code is 1.
    """
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] not in COMMANDS:
        print(__doc__)
        return 2

    settings.ensure_directories()
    try:
        return run(argv[0], argv[1:])
    except StorageError as e:
        logger.error(f"Feedback store unavailable: {e.args[0]}", exc_info=True)
        print(f"❌ {e.args[0]}")
        print(f"Hint: {e.hint}")
        return 1
    except Exception as e:
        logger.error(f"Error running '{argv[0]}': {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
