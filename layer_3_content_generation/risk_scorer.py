"""
Risk scoring for theme aggregates

risk_score = 3 per enterprise mention + 1 per self-serve mention
             + 2 when at least half of the mentions are negative
"""
from dataclasses import asdict
from typing import Iterable, List

from models.insights import RiskTier, ScoredTheme, ThemeAggregate

ENTERPRISE_WEIGHT = 3
SELF_SERVE_WEIGHT = 1
NEGATIVE_BONUS = 2
NEGATIVE_MAJORITY_PERCENT = 50

CRITICAL_THRESHOLD = 20
MONITOR_THRESHOLD = 10


def risk_tier_for(score: int) -> RiskTier:
    if score >= CRITICAL_THRESHOLD:
        return RiskTier.CRITICAL
    if score >= MONITOR_THRESHOLD:
        return RiskTier.MONITOR
    return RiskTier.LOW_IMPACT


def compute_risk_score(aggregate: ThemeAggregate) -> int:
    score = aggregate.enterprise_mentions * ENTERPRISE_WEIGHT + aggregate.self_serve_mentions * SELF_SERVE_WEIGHT
    if aggregate.percent_negative >= NEGATIVE_MAJORITY_PERCENT:
        score += NEGATIVE_BONUS
    return score


def score_theme(aggregate: ThemeAggregate) -> ScoredTheme:
    """Attach risk score and tier to one aggregate"""
    score = compute_risk_score(aggregate)
    return ScoredTheme(**asdict(aggregate), risk_score=score, risk_tier=risk_tier_for(score))


def score_themes(aggregates: Iterable[ThemeAggregate]) -> List[ScoredTheme]:
    return [score_theme(aggregate) for aggregate in aggregates]
