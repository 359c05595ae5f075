"""
Executive summary narrative (two sentences) generated by the LLM
"""
import re
from typing import Optional, Sequence

from models.insights import ScoredTheme
from layer_3_content_generation.formatting import trend_text
from utils.logger import get_logger

logger = get_logger(__name__)

MAX_SUMMARY_CHARS = 600
EMPTY_SUMMARY = "No executive summary available."
FAILED_SUMMARY = "Executive summary could not be generated."

BOLD_PATTERN = re.compile(r"\*\*([^*]+)\*\*")
ITALIC_PATTERN = re.compile(r"\*([^*]+)\*")
BOILERPLATE_PATTERN = re.compile(
    r"^(?:Critical Issue|Trend Changes|Summary|Here'?s? (?:a |the )?\d?-?sentence summary[.:]?|Executive summary:?)\s*",
    re.IGNORECASE | re.MULTILINE,
)
MENTION_COUNT_PATTERN = re.compile(r"\b\d+\s*mentions?\s*(?:of|for)\s*", re.IGNORECASE)


def clean_narrative(text: str) -> str:
    """Strip quotes, markdown emphasis, boilerplate openers and raw mention counts"""
    cleaned = (text or "").strip().strip("\"'")
    cleaned = BOLD_PATTERN.sub(r"\1", cleaned)
    cleaned = ITALIC_PATTERN.sub(r"\1", cleaned)
    cleaned = BOILERPLATE_PATTERN.sub("", cleaned).strip()
    cleaned = MENTION_COUNT_PATTERN.sub("", cleaned).strip()
    return cleaned[:MAX_SUMMARY_CHARS]


class ExecutiveSummaryGenerator:
    """Write the narrative paragraph for the headline themes"""

    def __init__(self, llm_client=None):
        """
        Args:
            llm_client: Object with generate(prompt) -> str; None disables the narrative
        """
        self.llm_client = llm_client

    @staticmethod
    def build_prompt(headlines: Sequence[ScoredTheme]) -> str:
        context = " ".join(
            f"{idx}. {t.theme}: {t.total_mentions} mentions, {t.enterprise_mentions} enterprise, "
            f"{t.risk_tier.value}, {trend_text(t.percent_change_vs_yesterday, t.risk_tier)}."
            for idx, t in enumerate(headlines, 1)
        )
        return (
            "Write a concise 2-sentence executive summary of today's product feedback. "
            "Focus on what changed, what matters most, and who is affected. "
            "Do not include raw numbers, percentages, or meta commentary. "
            "Use clear, natural language as if written by a product manager. "
            "Output only the 2 sentences, with no prefix like \"Here's a summary\" or explanatory text. "
            f"Context: {context}"
        )

    def generate(self, headlines: Sequence[ScoredTheme]) -> str:
        """
        Generate the executive summary

        Args:
            headlines: Selected headline themes

        Returns:
            Cleaned narrative text; a fixed message when the oracle is
            unavailable or fails
        """
        if self.llm_client is None:
            return FAILED_SUMMARY
        try:
            raw_response = self.llm_client.generate(self.build_prompt(headlines))
        except Exception as e:
            logger.warning(f"Executive summary generation failed: {e}")
            return FAILED_SUMMARY
        return clean_narrative(raw_response) or EMPTY_SUMMARY
