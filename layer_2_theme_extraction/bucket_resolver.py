"""
Bucketed KPI resolver

Resolves one headline theme per sentiment bucket (negative -> Critical,
neutral -> Monitor, positive -> Low Impact) without repeating a theme
across buckets.
"""
from collections import defaultdict
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence

from models.feedback import FeedbackRecord, Sentiment
from models.insights import BucketKpi, KpiThemes
from layer_2_theme_extraction.matcher import classify_comment
from layer_2_theme_extraction.theme_config import (
    UNCLASSIFIED,
    VARIOUS_FEEDBACK,
    KPI_EXCLUDED_THEMES,
    MONITOR_PREFERRED_THEME,
    LOW_IMPACT_MAX_ISSUES,
)
from utils.logger import get_logger

logger = get_logger(__name__)


def split_by_sentiment(records: Iterable[FeedbackRecord]) -> Dict[Sentiment, List[FeedbackRecord]]:
    """Group records into the three sentiment buckets; unknown sentiments are dropped"""
    buckets = {sentiment: [] for sentiment in Sentiment}
    for record in records:
        sentiment = record.sentiment_value
        if sentiment is not None:
            buckets[sentiment].append(record)
    return buckets


def kpi_for_rows(label: str, rows: Sequence[FeedbackRecord]) -> BucketKpi:
    return BucketKpi(
        label=label,
        count=len(rows),
        enterprise_count=sum(1 for row in rows if row.is_enterprise),
    )


def count_for_theme(records: Iterable[FeedbackRecord], theme: str) -> BucketKpi:
    """Count bucket records the keyword matcher assigns to `theme`"""
    return kpi_for_rows(theme, [r for r in records if classify_comment(r.comment) == theme])


def _group_by_theme(records: Iterable[FeedbackRecord], excluded: FrozenSet[str],
                    include_unclassified: bool = False) -> Dict[str, List[FeedbackRecord]]:
    grouped = defaultdict(list)
    for record in records:
        theme = classify_comment(record.comment)
        if theme in excluded:
            continue
        if theme == UNCLASSIFIED:
            if not include_unclassified:
                continue
            theme = VARIOUS_FEEDBACK
        grouped[theme].append(record)
    return grouped


def _ranked(grouped: Dict[str, List[FeedbackRecord]]) -> List[BucketKpi]:
    # Most frequent first; ties broken by label for stable output
    ordered = sorted(grouped.items(), key=lambda item: (-len(item[1]), item[0]))
    return [kpi_for_rows(label, rows) for label, rows in ordered]


def fallback_theme_and_count(records: Sequence[FeedbackRecord],
                             excluded: Iterable[str] = (),
                             preferred: Optional[str] = None) -> Optional[BucketKpi]:
    """
    Deterministic bucket theme: majority keyword theme, honoring exclusions

    Args:
        records: Records of one bucket
        excluded: Labels that must not be returned
        preferred: Theme returned instead of the majority whenever it is present

    Returns:
        BucketKpi, or None if no classified, non-excluded record exists
    """
    if not records:
        return None
    grouped = _group_by_theme(records, frozenset(excluded))
    if preferred and preferred in grouped:
        return kpi_for_rows(preferred, grouped[preferred])
    ranked = _ranked(grouped)
    return ranked[0] if ranked else None


def top_themes_for_low_bucket(records: Sequence[FeedbackRecord],
                              excluded: Iterable[str] = (),
                              include_unclassified: bool = False,
                              limit: int = LOW_IMPACT_MAX_ISSUES) -> List[BucketKpi]:
    """Top themes by frequency; unclassified rows fold into "Various feedback" when allowed"""
    if not records:
        return []
    return _ranked(_group_by_theme(records, frozenset(excluded), include_unclassified))[:limit]


class BucketKpiResolver:
    """Resolve Critical, Monitor and Low Impact KPI themes for a record snapshot"""

    def __init__(self, classifier=None):
        """
        Args:
            classifier: Optional oracle-backed classifier exposing
                classify_bucket(records, excluded, preferred). Without one the
                deterministic keyword fallback is used for every bucket.
        """
        self.classifier = classifier

    def _resolve_bucket(self, records: List[FeedbackRecord], excluded: FrozenSet[str],
                        preferred: Optional[str] = None) -> Optional[BucketKpi]:
        if not records:
            return None
        if self.classifier is not None:
            return self.classifier.classify_bucket(records, excluded, preferred)
        return fallback_theme_and_count(records, excluded, preferred)

    def _resolve_low(self, records: List[FeedbackRecord], picked: FrozenSet[str]) -> List[BucketKpi]:
        if not records:
            return []
        issues = top_themes_for_low_bucket(records, picked | KPI_EXCLUDED_THEMES)
        if not issues:
            logger.debug("Low Impact bucket empty after exclusions, relaxing never-surface themes")
            issues = top_themes_for_low_bucket(records, picked)
        if not issues:
            logger.debug("Low Impact bucket still empty, folding unclassified feedback")
            issues = top_themes_for_low_bucket(records, picked, include_unclassified=True)
        return issues

    def resolve(self, records: Iterable[FeedbackRecord]) -> KpiThemes:
        """
        Resolve the KPI themes, highest severity first

        Returns:
            KpiThemes where no label appears in two buckets
        """
        buckets = split_by_sentiment(records)

        critical = self._resolve_bucket(buckets[Sentiment.NEGATIVE], frozenset())

        picked = frozenset({critical.label}) if critical else frozenset()
        monitor = self._resolve_bucket(
            buckets[Sentiment.NEUTRAL],
            picked | KPI_EXCLUDED_THEMES,
            MONITOR_PREFERRED_THEME,
        )

        if monitor:
            picked = picked | {monitor.label}
        low = self._resolve_low(buckets[Sentiment.POSITIVE], picked)

        kpis = KpiThemes(critical=critical, monitor=monitor, low=low)
        logger.info(f"Resolved KPI themes: {', '.join(kpis.labels()) or 'none'}")
        return kpis
