"""
Headline selection: a bounded, diverse top-N of scored themes
"""
from typing import List, Sequence

from models.insights import RiskTier, ScoredTheme

HEADLINE_COUNT = 3


def rank_by_risk(scored: Sequence[ScoredTheme]) -> List[ScoredTheme]:
    """Highest risk first; equal scores ordered by theme label"""
    return sorted(scored, key=lambda theme: (-theme.risk_score, theme.theme))


def select_headlines(scored: Sequence[ScoredTheme], limit: int = HEADLINE_COUNT) -> List[ScoredTheme]:
    """
    Pick the headline themes

    Takes the top `limit` by risk score. When none of them is Low Impact but a
    Low Impact theme exists, the last slot goes to the best Low Impact theme
    so the headline always carries one low-severity signal.

    Args:
        scored: Scored themes (any order)
        limit: Number of headlines

    Returns:
        Up to `limit` distinct themes
    """
    ranked = rank_by_risk(scored)
    candidates = ranked[:limit]
    if len(candidates) < limit:
        return candidates

    if any(theme.risk_tier is RiskTier.LOW_IMPACT for theme in candidates):
        return candidates

    best_low = next((theme for theme in ranked if theme.risk_tier is RiskTier.LOW_IMPACT), None)
    if best_low is None:
        return candidates
    return candidates[:limit - 1] + [best_low]
