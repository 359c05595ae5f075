"""
Assemble the daily report: brief, headlines, narrative, trend snapshot,
recurring themes and source breakdown
"""
from collections import Counter
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from models.feedback import FeedbackRecord
from models.insights import (
    DailyReport,
    HeadlineLine,
    RecurringTheme,
    RiskTier,
    ScoredTheme,
    SourceCount,
    TrendRow,
)
from layer_2_theme_extraction.aggregator import aggregate_themes, partition_by_day
from layer_3_content_generation.executive_summary import EMPTY_SUMMARY
from layer_3_content_generation.formatting import (
    display_source_name,
    plural,
    trend_direction,
    trend_text,
)
from layer_3_content_generation.headline_selector import select_headlines
from layer_3_content_generation.risk_scorer import score_themes
from utils.logger import get_logger

logger = get_logger(__name__)

RECURRING_THEME_COUNT = 5

NarrativeFn = Callable[[Sequence[ScoredTheme]], str]


def daily_brief_text(today_records: Sequence[FeedbackRecord]) -> str:
    count = len(today_records)
    sources = len({record.source for record in today_records})
    return (f"Today we received {count} feedback {plural(count, 'item')} "
            f"across {sources} {plural(sources, 'source')}.")


def headline_text(theme: ScoredTheme) -> str:
    """
    One headline line, e.g.
    "🔴 Critical: 10 customers reported Authentication / Login Issues, including 6 enterprise customers"
    """
    customers = plural(theme.total_mentions, "customer")
    show_enterprise = theme.enterprise_mentions > 0 and (
        theme.risk_tier in (RiskTier.CRITICAL, RiskTier.MONITOR)
        or theme.enterprise_mentions >= 2
    )
    enterprise = ""
    if show_enterprise:
        enterprise = (f", including {theme.enterprise_mentions} "
                      f"{plural(theme.enterprise_mentions, 'enterprise customer')}")
    return (f"{theme.risk_tier.icon} {theme.risk_tier.value}: {theme.total_mentions} {customers} "
            f"reported {theme.theme}{enterprise}")


def trend_row(theme: ScoredTheme) -> TrendRow:
    return TrendRow(
        theme=theme.theme,
        yesterday=theme.yesterday_mentions,
        today=theme.total_mentions,
        direction=trend_direction(theme.total_mentions, theme.yesterday_mentions),
        trend=trend_text(theme.percent_change_vs_yesterday, theme.risk_tier),
    )


def recurring_themes(scored: Sequence[ScoredTheme], limit: int = RECURRING_THEME_COUNT) -> List[RecurringTheme]:
    ranked = sorted(scored, key=lambda t: (-t.total_mentions, t.theme))[:limit]
    return [RecurringTheme(theme=t.theme, mentions=t.total_mentions) for t in ranked]


def source_counts(today_records: Sequence[FeedbackRecord]) -> List[SourceCount]:
    counts = Counter(record.source for record in today_records)
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [SourceCount(source=display_source_name(source), count=count) for source, count in ranked]


class ReportBuilder:
    """Build the daily report from a record snapshot"""

    def __init__(self, narrative: Optional[NarrativeFn] = None):
        """
        Args:
            narrative: Callable producing the executive summary for the
                headline themes (usually the cached LLM narrative)
        """
        self.narrative = narrative

    def build(self, records: Sequence[FeedbackRecord], now: Optional[datetime] = None) -> DailyReport:
        """
        Args:
            records: Full feedback snapshot
            now: Reference time (UTC); defaults to the current time

        Returns:
            DailyReport; an empty report when there is no feedback at all
        """
        now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
        date_key = now.strftime("%Y-%m-%d")
        if not records:
            logger.info("No feedback recorded; returning empty report")
            return DailyReport.empty(date_key)

        today, yesterday = partition_by_day(records, now)
        aggregates = aggregate_themes(today, yesterday)
        # Themes absent today are not scored
        scored = score_themes([a for a in aggregates if a.total_mentions > 0])
        headlines = select_headlines(scored)

        if headlines and self.narrative is not None:
            executive_summary = self.narrative(headlines)
        else:
            executive_summary = EMPTY_SUMMARY

        logger.info(
            f"Report for {date_key}: {len(today)} records today, {len(yesterday)} yesterday, "
            f"{len(scored)} themes, headlines: {', '.join(h.theme for h in headlines) or 'none'}"
        )

        return DailyReport(
            date=date_key,
            has_data=True,
            daily_brief=daily_brief_text(today),
            headlines=[HeadlineLine(theme=h.theme, risk_tier=h.risk_tier, text=headline_text(h)) for h in headlines],
            scored_themes=sorted(scored, key=lambda t: (-t.risk_score, t.theme)),
            executive_summary=executive_summary,
            trend_snapshot=[trend_row(h) for h in headlines],
            recurring_themes=recurring_themes(scored),
            source_breakdown=source_counts(today),
        )


def render_markdown(report: DailyReport) -> str:
    """Render the report as a markdown document"""
    lines = [f"# Product Feedback Report: {report.date}", ""]
    if not report.has_data:
        lines.append(report.daily_brief)
        return "\n".join(lines) + "\n"

    lines.extend(["## Daily Brief", report.daily_brief, ""])
    lines.extend(f"- {headline.text}" for headline in report.headlines)
    lines.extend(["", "## Executive Summary", report.executive_summary, "", "## Trend Snapshot"])

    arrows = {"up": "▲", "down": "▼", "flat": "—"}
    for row in report.trend_snapshot:
        lines.append(f"- {row.theme}: Yesterday {row.yesterday} → Today {row.today} "
                     f"{arrows[row.direction]} ({row.trend})")

    lines.extend(["", "## Top Recurring Themes"])
    lines.extend(f"- {theme.text}" for theme in report.recurring_themes)

    lines.extend(["", "## Source Breakdown"])
    lines.extend(f"- {entry.source}: {entry.count}" for entry in report.source_breakdown)
    return "\n".join(lines) + "\n"


def render_headline_html(line: HeadlineLine) -> str:
    """Dashboard markup for one headline (the text already leads with the tier icon and name)"""
    return f'<div class="headline-line">{line.text}</div>'
