"""
Layer 4: Distribution
- Cached insights service (report, narrative, summary, KPI themes)
- Daily brief snapshots
"""
from .insights_service import InsightsService
from .daily_brief import write_daily_brief

__all__ = [
    'InsightsService',
    'write_daily_brief',
]
