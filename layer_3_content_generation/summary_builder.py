"""
Structured summary of the feedback set (overall text, per-source view, urgent issues)

The LLM drafts the summary; any field it omits or botches is filled from a
deterministic summary computed straight from the records.
"""
import re
from collections import Counter
from typing import Any, Dict, List, Optional, Sequence

from models.feedback import FeedbackRecord, Sentiment
from models.insights import SourceSummary, Summary, ThemePriority
from layer_2_theme_extraction.normalizer import scrub_identifiers, to_abstract_label
from layer_2_theme_extraction.theme_config import CANONICAL_THEMES
from layer_3_content_generation.formatting import plural, truncate
from utils.json_extraction import extract_json_object
from utils.logger import get_logger

logger = get_logger(__name__)

NO_FEEDBACK_TEXT = "No feedback has been recorded yet."
KEY_ISSUES_PER_SOURCE = 5
URGENT_ISSUES = 5
MAX_PRIORITY_THEMES = 5

# "Discord: the login page ..." style entries are raw comments, not labels
SOURCE_PREFIX_PATTERN = re.compile(r"^[A-Za-z0-9 ]+:\s")

# Preferred order for the source breakdown; unlisted sources follow by name
SOURCE_DISPLAY_ORDER = [
    'Customer Support Tickets',
    'Discord',
    'GitHub issues',
    'email',
    'X/Twitter',
    'community forums',
]


def empty_summary() -> Summary:
    return Summary(overall_summary=NO_FEEDBACK_TEXT)


def _dominant_sentiment(records: Sequence[FeedbackRecord]) -> str:
    counts = Counter(record.sentiment_value for record in records)
    half = len(records) / 2
    if counts[Sentiment.NEGATIVE] > half:
        return Sentiment.NEGATIVE.value
    if counts[Sentiment.POSITIVE] > half:
        return Sentiment.POSITIVE.value
    return Sentiment.NEUTRAL.value


def summary_from_feedback(records: Sequence[FeedbackRecord]) -> Summary:
    """Build a fully populated summary without the LLM"""
    if not records:
        return empty_summary()

    sources = list(dict.fromkeys(record.source for record in records))
    overall = f"{len(records)} feedback {plural(len(records), 'item')} from {', '.join(sources)}."

    by_source = []
    for source in sources:
        rows = [record for record in records if record.source == source]
        by_source.append(SourceSummary(
            source=source,
            total_items=len(rows),
            dominant_sentiment=_dominant_sentiment(rows),
            key_issues=[truncate(row.comment, 80) for row in rows[:KEY_ISSUES_PER_SOURCE]],
        ))

    urgent = [f"{record.source}: {truncate(record.comment, 60)}" for record in records[:URGENT_ISSUES]]
    return Summary(overall_summary=overall, by_source=by_source, top_urgent_issues=urgent)


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _source_entries(value: Any) -> List[SourceSummary]:
    if not isinstance(value, list):
        return []
    entries = []
    for item in value:
        if not isinstance(item, dict) or not isinstance(item.get("source"), str):
            continue
        try:
            total = int(item.get("total_items") or 0)
        except (TypeError, ValueError):
            total = 0
        entries.append(SourceSummary(
            source=item["source"],
            total_items=total,
            dominant_sentiment=str(item.get("dominant_sentiment") or Sentiment.NEUTRAL.value).lower(),
            key_issues=_string_list(item.get("key_issues")),
        ))
    return entries


def normalize_summary(parsed: Dict[str, Any], records: Sequence[FeedbackRecord]) -> Summary:
    """Keep the LLM's fields where usable; fill the rest from the records"""
    fallback = summary_from_feedback(records)
    overall = parsed.get("overall_summary")
    by_source = _source_entries(parsed.get("by_source"))
    urgent = _string_list(parsed.get("top_urgent_issues"))
    return Summary(
        overall_summary=overall.strip() if isinstance(overall, str) and overall.strip() else fallback.overall_summary,
        by_source=by_source or fallback.by_source,
        top_urgent_issues=urgent or fallback.top_urgent_issues,
    )


class SummaryBuilder:
    """Produce the structured summary, LLM-first with a deterministic fallback"""

    def __init__(self, llm_client=None):
        self.llm_client = llm_client

    @staticmethod
    def build_prompt(records: Sequence[FeedbackRecord]) -> str:
        lines = "\n".join(
            f'[{r.source}] sentiment={r.sentiment} comment="{r.comment}" timestamp={r.timestamp}'
            for r in records
        )
        return f"""You are helping a product manager understand customer feedback aggregated from multiple channels.

Each line below is a single piece of feedback in the format:
[source] sentiment=<positive|neutral|negative> comment="<user comment>" timestamp=<ISO8601>

Feedback:
{lines}

Based on this feedback, respond ONLY with minified JSON (no markdown, no extra text) with this shape:

{{
  "overall_summary": "...",
  "by_source": [
    {{"source": "...", "total_items": 0, "dominant_sentiment": "...", "key_issues": ["..."]}}
  ],
  "top_urgent_issues": ["..."]
}}

Return ONLY valid JSON."""

    def build(self, records: Sequence[FeedbackRecord]) -> Summary:
        """
        Summarize the records

        Returns:
            Summary; the "no feedback" summary for an empty set
        """
        if not records:
            return empty_summary()
        if self.llm_client is None:
            return summary_from_feedback(records)

        try:
            raw_response = self.llm_client.generate(self.build_prompt(records))
            parsed = extract_json_object(raw_response)
        except Exception as e:
            logger.warning(f"Structured summary from LLM failed, using record-based summary: {e}")
            return summary_from_feedback(records)
        return normalize_summary(parsed, records)


def _label_for_urgent_issue(text: str) -> Optional[str]:
    """Short, clean issue phrases are kept; anything else is abstracted"""
    if SOURCE_PREFIX_PATTERN.match(text) or len(text) > 80:
        return to_abstract_label(text)
    words = text.split()
    if 2 <= len(words) <= 5 and len(text) <= 50 and scrub_identifiers(text) == text:
        return text
    return to_abstract_label(text)


def derive_theme_priorities(summary: Summary) -> List[ThemePriority]:
    """
    Recurring themes with a priority, derived from the summary's issues

    Priority is High for 4+ occurrences, Moderate for 2-3 and Low for one.
    The list is padded with canonical themes (Low) up to five entries.
    """
    counts: Counter = Counter()
    for text in summary.top_urgent_issues:
        if text.strip():
            label = _label_for_urgent_issue(text.strip())
            if label:
                counts[label] += 1
    for source in summary.by_source:
        for issue in source.key_issues:
            label = to_abstract_label(issue)
            if label:
                counts[label] += 1

    def priority(count: int) -> str:
        if count >= 4:
            return "High"
        if count >= 2:
            return "Moderate"
        return "Low"

    themes = [ThemePriority(theme, priority(count)) for theme, count in counts.most_common(MAX_PRIORITY_THEMES)]
    seen = {theme.theme for theme in themes}
    for theme in CANONICAL_THEMES:
        if len(themes) >= MAX_PRIORITY_THEMES:
            break
        if theme not in seen:
            seen.add(theme)
            themes.append(ThemePriority(theme, "Low"))
    return themes


def source_breakdown(by_source: Sequence[SourceSummary]) -> List[Dict[str, Any]]:
    """Per-source counts in display order"""
    order = {name.lower(): idx for idx, name in enumerate(SOURCE_DISPLAY_ORDER)}
    items = [{"source": s.source, "count": s.total_items} for s in by_source]
    return sorted(items, key=lambda item: (order.get(item["source"].lower(), len(order)), item["source"]))
