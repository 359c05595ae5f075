"""
Layer 2: Theme extraction (keyword rules, label normalization, aggregation, KPI buckets).
"""
from .theme_config import (
    UNCLASSIFIED,
    CANONICAL_THEMES,
    THEME_RULES,
    KPI_EXCLUDED_THEMES,
    MONITOR_PREFERRED_THEME,
    get_theme_list,
    is_canonical_theme,
)
from .matcher import classify_comment
from .normalizer import (
    to_abstract_label,
    post_process_theme_label,
    canonicalize_label,
)
from .aggregator import partition_by_day, aggregate_themes
from .bucket_resolver import (
    BucketKpiResolver,
    fallback_theme_and_count,
    top_themes_for_low_bucket,
)
from .classifier import OracleThemeClassifier

__all__ = [
    'UNCLASSIFIED',
    'CANONICAL_THEMES',
    'THEME_RULES',
    'KPI_EXCLUDED_THEMES',
    'MONITOR_PREFERRED_THEME',
    'get_theme_list',
    'is_canonical_theme',
    'classify_comment',
    'to_abstract_label',
    'post_process_theme_label',
    'canonicalize_label',
    'partition_by_day',
    'aggregate_themes',
    'BucketKpiResolver',
    'fallback_theme_and_count',
    'top_themes_for_low_bucket',
    'OracleThemeClassifier',
]
