"""
Keyword theme matcher: the single source of truth for comment -> theme.

The aggregator, the bucket KPI fallback, the label normalizer and the
oracle-label canonicaliser all call `classify_comment`, so one comment maps
to the same theme on every surface.
"""
import re
from typing import List, Pattern, Tuple

from layer_2_theme_extraction.theme_config import THEME_RULES, UNCLASSIFIED


def _compile_rules() -> List[Tuple[str, Pattern]]:
    compiled = []
    for theme, keywords in THEME_RULES:
        alternatives = "|".join(re.escape(keyword) for keyword in keywords)
        compiled.append((theme, re.compile(rf"\b(?:{alternatives})")))
    return compiled


_COMPILED_RULES = _compile_rules()


def classify_comment(comment: str) -> str:
    """
    Map comment text to a canonical theme

    Args:
        comment: Free-text comment (any case)

    Returns:
        Theme of the first matching rule, or UNCLASSIFIED
    """
    text = (comment or "").lower()
    if not text.strip():
        return UNCLASSIFIED
    for theme, pattern in _COMPILED_RULES:
        if pattern.search(text):
            return theme
    return UNCLASSIFIED
