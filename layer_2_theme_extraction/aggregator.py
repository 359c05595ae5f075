"""
Theme aggregation: today vs yesterday counts per theme, split by customer tier
"""
import math
from collections import Counter, defaultdict
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Tuple

from models.feedback import FeedbackRecord
from models.insights import ThemeAggregate
from layer_2_theme_extraction.matcher import classify_comment
from layer_2_theme_extraction.theme_config import UNCLASSIFIED
from utils.logger import get_logger

logger = get_logger(__name__)


def round_half_up(value: float) -> int:
    """Round .5 away from zero on the positive side, like a spreadsheet would"""
    return int(math.floor(value + 0.5))


def partition_by_day(records: Iterable[FeedbackRecord],
                     now: datetime = None) -> Tuple[List[FeedbackRecord], List[FeedbackRecord]]:
    """
    Split records into today's and yesterday's (UTC calendar days)

    Records whose timestamp cannot be parsed land in neither list.

    Returns:
        (today_records, yesterday_records)
    """
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    today = now.date()
    yesterday = today - timedelta(days=1)

    today_records, yesterday_records, skipped = [], [], 0
    for record in records:
        moment = record.parsed_timestamp
        if moment is None:
            skipped += 1
            continue
        day = moment.date()
        if day == today:
            today_records.append(record)
        elif day == yesterday:
            yesterday_records.append(record)

    if skipped:
        logger.debug(f"Excluded {skipped} records with unparsable timestamps from day partitioning")
    return today_records, yesterday_records


def percent_change(today: int, yesterday: int) -> int:
    """Change vs yesterday; +100 when a theme is new today, 0 when absent on both days"""
    if yesterday > 0:
        return round_half_up((today - yesterday) / yesterday * 100)
    return 100 if today > 0 else 0


def aggregate_themes(today_records: Iterable[FeedbackRecord],
                     yesterday_records: Iterable[FeedbackRecord]) -> List[ThemeAggregate]:
    """
    Group records by theme and join today's counts with yesterday's

    Args:
        today_records: Records from today's partition
        yesterday_records: Records from yesterday's partition

    Returns:
        One aggregate per theme seen in either window, unclassified excluded.
        Order is unspecified.
    """
    tallies: Dict[str, Dict[str, int]] = defaultdict(lambda: {"total": 0, "enterprise": 0, "negative": 0})
    for record in today_records:
        rec = tallies[classify_comment(record.comment)]
        rec["total"] += 1
        if record.is_enterprise:
            rec["enterprise"] += 1
        if record.is_negative:
            rec["negative"] += 1

    yesterday_counts = Counter(classify_comment(record.comment) for record in yesterday_records)

    results = []
    for theme in set(tallies) | set(yesterday_counts):
        if theme == UNCLASSIFIED:
            continue
        rec = tallies.get(theme, {"total": 0, "enterprise": 0, "negative": 0})
        total = rec["total"]
        yesterday_mentions = yesterday_counts.get(theme, 0)
        results.append(ThemeAggregate(
            theme=theme,
            total_mentions=total,
            enterprise_mentions=rec["enterprise"],
            self_serve_mentions=total - rec["enterprise"],
            percent_negative=round_half_up(rec["negative"] / total * 100) if total else 0,
            yesterday_mentions=yesterday_mentions,
            percent_change_vs_yesterday=percent_change(total, yesterday_mentions),
        ))

    unclassified = tallies.get(UNCLASSIFIED, {}).get("total", 0)
    logger.debug(f"Aggregated {len(results)} themes ({unclassified} unclassified records today)")
    return results
