"""
Abstract label normalizer

Turns oracle-proposed issue phrases or long "urgent issue" strings into short,
stable labels. Labels never carry full sentences, numeric IDs or UUIDs.
"""
import re
from typing import Optional

from layer_2_theme_extraction.matcher import classify_comment
from layer_2_theme_extraction.theme_config import (
    UNCLASSIFIED,
    MIN_LABEL_WORDS,
    MAX_LABEL_WORDS,
    MAX_LABEL_CHARS,
)

QUOTE_CHARS = "\"'"
UUID_PATTERN = re.compile(r"[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12}", re.IGNORECASE)
NUMERIC_ID_PATTERN = re.compile(r"\b\d{2,}\b")
FILLER_PREFIX_PATTERN = re.compile(
    r"^(?:Improvement in|Issues with|Problems related to|Problem with|Issue with|Lack of|Difficulty with)\s*",
    re.IGNORECASE,
)
ARTICLE_PREFIX_PATTERN = re.compile(r"^(?:The|A)\s+", re.IGNORECASE)


def scrub_identifiers(text: str) -> str:
    """Drop UUID-shaped tokens and numbers of two or more digits"""
    text = UUID_PATTERN.sub("", text)
    text = NUMERIC_ID_PATTERN.sub("", text)
    return re.sub(r"\s+", " ", text).strip()


def to_abstract_label(raw: str) -> Optional[str]:
    """
    Reduce arbitrary short text to a canonical theme or a 2-5 word phrase

    Args:
        raw: Oracle output or raw issue phrase

    Returns:
        A canonical theme when a keyword rule fires, otherwise the first
        2-5 words; None when nothing usable remains
    """
    if not raw:
        return None

    cleaned = scrub_identifiers(raw.strip().strip(QUOTE_CHARS))
    if len(cleaned) < 3:
        return None

    # A keyword hit always wins over free-form truncation
    theme = classify_comment(cleaned)
    if theme != UNCLASSIFIED:
        return theme

    words = cleaned.split()[:MAX_LABEL_WORDS]
    if len(words) < MIN_LABEL_WORDS:
        return None

    label = " ".join(words)
    if label.endswith(".") or len(label) > MAX_LABEL_CHARS:
        return " ".join(words[:MIN_LABEL_WORDS]) or None
    return label


def strip_filler_prefixes(raw: str) -> str:
    """Remove quotes, trailing lines and filler openers such as "Issues with" """
    text = (raw or "").strip().strip(QUOTE_CHARS)
    text = text.split("\n", 1)[0]
    text = FILLER_PREFIX_PATTERN.sub("", text)
    text = ARTICLE_PREFIX_PATTERN.sub("", text)
    return text.strip()


def _title_word(word: str) -> str:
    if len(word) >= 2 and word == word.upper():
        return word  # acronym
    return word[:1].upper() + word[1:].lower()


def post_process_theme_label(raw: str) -> str:
    """
    Clean an oracle label: strip fillers and identifiers, cap at 5 words, title-case

    Examples:
        "issues with SSO login redirect" -> "SSO Login Redirect"
        "Order 48213 missing" -> "Order Missing"
    """
    words = scrub_identifiers(strip_filler_prefixes(raw)).split()[:MAX_LABEL_WORDS]
    return " ".join(_title_word(word) for word in words)


def canonicalize_label(label: str) -> str:
    """Map a label to the fixed vocabulary when a keyword rule fires"""
    theme = classify_comment(label)
    return theme if theme != UNCLASSIFIED else label
