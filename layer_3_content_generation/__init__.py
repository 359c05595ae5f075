"""
Layer 3: Content generation
- Risk scoring and headline selection
- Executive summary narrative
- Structured summary
- Daily report assembly
"""
from .risk_scorer import score_theme, score_themes, risk_tier_for
from .headline_selector import select_headlines
from .executive_summary import ExecutiveSummaryGenerator
from .summary_builder import SummaryBuilder, summary_from_feedback, derive_theme_priorities
from .report_builder import ReportBuilder, render_markdown

__all__ = [
    'score_theme',
    'score_themes',
    'risk_tier_for',
    'select_headlines',
    'ExecutiveSummaryGenerator',
    'SummaryBuilder',
    'summary_from_feedback',
    'derive_theme_priorities',
    'ReportBuilder',
    'render_markdown',
]
