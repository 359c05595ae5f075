"""
Small text helpers shared by the report, the narrative and the dashboard
"""
from typing import Optional

from models.insights import RiskTier

# Channel names shown with consistent capitalization
SOURCE_DISPLAY_NAMES = {
    "email": "Email",
    "community forums": "Community Forums",
    "github issues": "GitHub Issues",
}


def plural(count: int, singular: str, plural_form: Optional[str] = None) -> str:
    if count == 1:
        return singular
    return plural_form or f"{singular}s"


def trend_text(percent_change: int, risk_tier: Optional[RiskTier] = None) -> str:
    """Qualitative trend wording for a percent change vs yesterday"""
    if percent_change >= 100:
        return "significant increase"
    if percent_change >= 25:
        return "significant increase" if risk_tier is RiskTier.CRITICAL else "increase"
    if percent_change > -25:
        return "no major change"
    return "decrease"


def trend_direction(today: int, yesterday: int) -> str:
    if today > yesterday:
        return "up"
    if today < yesterday:
        return "down"
    return "flat"


def display_source_name(source: str) -> str:
    return SOURCE_DISPLAY_NAMES.get((source or "").lower(), source)


def truncate(text: str, limit: int) -> str:
    """Cut to `limit` characters, marking the cut with an ellipsis"""
    return text[:limit] + ("…" if len(text) > limit else "")
