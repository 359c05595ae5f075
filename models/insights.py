"""
Insight data models produced by the pipeline and consumed by the dashboard
"""
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import List, Optional


class RiskTier(str, Enum):
    """Risk tier; ordering is Critical > Monitor > Low Impact"""
    CRITICAL = "Critical"
    MONITOR = "Monitor"
    LOW_IMPACT = "Low Impact"

    @property
    def rank(self) -> int:
        return {RiskTier.CRITICAL: 2, RiskTier.MONITOR: 1, RiskTier.LOW_IMPACT: 0}[self]

    @property
    def icon(self) -> str:
        return {RiskTier.CRITICAL: "🔴", RiskTier.MONITOR: "🟡", RiskTier.LOW_IMPACT: "🟢"}[self]


@dataclass(frozen=True)
class ThemeAggregate:
    """Today-vs-yesterday counts for one theme"""
    theme: str
    total_mentions: int
    enterprise_mentions: int
    self_serve_mentions: int
    percent_negative: int
    yesterday_mentions: int
    percent_change_vs_yesterday: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ScoredTheme(ThemeAggregate):
    """Theme aggregate with its risk score and tier"""
    risk_score: int = 0
    risk_tier: RiskTier = RiskTier.LOW_IMPACT

    def to_dict(self) -> dict:
        data = asdict(self)
        data["risk_tier"] = self.risk_tier.value
        return data


@dataclass(frozen=True)
class BucketKpi:
    """Headline theme of one severity bucket"""
    label: str
    count: int
    enterprise_count: int

    def to_dict(self) -> dict:
        # Key names are consumed by the presentation layer as-is
        return {"label": self.label, "count": self.count, "enterpriseCount": self.enterprise_count}


@dataclass(frozen=True)
class KpiThemes:
    """One theme per bucket; Low Impact carries up to three"""
    critical: Optional[BucketKpi]
    monitor: Optional[BucketKpi]
    low: List[BucketKpi] = field(default_factory=list)

    def labels(self) -> List[str]:
        labels = [kpi.label for kpi in (self.critical, self.monitor) if kpi]
        return labels + [kpi.label for kpi in self.low]

    def to_dict(self) -> dict:
        return {
            "critical": self.critical.to_dict() if self.critical else None,
            "monitor": self.monitor.to_dict() if self.monitor else None,
            "low": {"issues": [kpi.to_dict() for kpi in self.low]} if self.low else None,
        }


@dataclass
class SourceSummary:
    """Per-channel slice of the structured summary"""
    source: str
    total_items: int
    dominant_sentiment: str
    key_issues: List[str] = field(default_factory=list)


@dataclass
class Summary:
    """Structured summary of the whole feedback set"""
    overall_summary: str
    by_source: List[SourceSummary] = field(default_factory=list)
    top_urgent_issues: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ThemePriority:
    """Recurring theme derived from the structured summary"""
    theme: str
    priority: str  # High / Moderate / Low


@dataclass(frozen=True)
class HeadlineLine:
    theme: str
    risk_tier: RiskTier
    text: str


@dataclass(frozen=True)
class TrendRow:
    theme: str
    yesterday: int
    today: int
    direction: str  # up / down / flat
    trend: str


@dataclass(frozen=True)
class RecurringTheme:
    theme: str
    mentions: int

    @property
    def text(self) -> str:
        noun = "mention" if self.mentions == 1 else "mentions"
        return f"{self.theme}: {self.mentions} {noun}"


@dataclass(frozen=True)
class SourceCount:
    source: str
    count: int


@dataclass
class DailyReport:
    """Everything the daily dashboard shows"""
    date: str
    has_data: bool
    daily_brief: str
    headlines: List[HeadlineLine] = field(default_factory=list)
    scored_themes: List[ScoredTheme] = field(default_factory=list)
    executive_summary: str = ""
    trend_snapshot: List[TrendRow] = field(default_factory=list)
    recurring_themes: List[RecurringTheme] = field(default_factory=list)
    source_breakdown: List[SourceCount] = field(default_factory=list)

    @classmethod
    def empty(cls, date: str) -> "DailyReport":
        return cls(date=date, has_data=False, daily_brief="No feedback has been recorded yet.")

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "has_data": self.has_data,
            "daily_brief": self.daily_brief,
            "headlines": [
                {"theme": h.theme, "risk_tier": h.risk_tier.value, "text": h.text} for h in self.headlines
            ],
            "executive_summary": self.executive_summary,
            "trend_snapshot": [asdict(row) for row in self.trend_snapshot],
            "recurring_themes": [
                {"theme": r.theme, "mentions": r.mentions, "text": r.text} for r in self.recurring_themes
            ],
            "source_breakdown": [asdict(s) for s in self.source_breakdown],
        }
