"""
Oracle-assisted bucket classifier

Asks the LLM for the dominant issue in a bucket of comments, canonicalises the
answer through the keyword matcher and falls back to the deterministic
majority theme whenever the answer is missing, malformed or implausible.
"""
from typing import Iterable, List, Optional, Sequence

from models.feedback import FeedbackRecord
from models.insights import BucketKpi
from layer_2_theme_extraction.bucket_resolver import (
    count_for_theme,
    fallback_theme_and_count,
    kpi_for_rows,
)
from layer_2_theme_extraction.normalizer import (
    canonicalize_label,
    post_process_theme_label,
    strip_filler_prefixes,
)
from layer_2_theme_extraction.theme_config import MAX_LABEL_WORDS, is_canonical_theme, is_surfaceable
from config.settings import settings
from utils.json_extraction import extract_json_object
from utils.logger import get_logger

logger = get_logger(__name__)


class OracleRejection(Exception):
    """The oracle answered, but the answer cannot be used"""


class OracleThemeClassifier:
    """Classify a sentiment bucket with the LLM, deterministic fallback on any failure"""

    def __init__(self, llm_client, max_comments: int = None, min_share: float = None):
        """
        Initialize classifier

        Args:
            llm_client: Object with generate(prompt) -> str
            max_comments: Comments included in the prompt (default settings.ORACLE_MAX_COMMENTS)
            min_share: Minimum share of the bucket an oracle theme must cover
        """
        self.llm_client = llm_client
        self.max_comments = max_comments or settings.ORACLE_MAX_COMMENTS
        self.min_share = settings.KPI_MIN_SHARE if min_share is None else min_share

    def classify_bucket(self, records: Sequence[FeedbackRecord],
                        excluded: Iterable[str] = (),
                        preferred: Optional[str] = None) -> Optional[BucketKpi]:
        """
        Resolve the bucket's dominant theme

        Args:
            records: Records of one sentiment bucket
            excluded: Labels already used by higher-severity buckets (or never surfaced)
            preferred: Theme to favor when it is present in the bucket

        Returns:
            BucketKpi, or None when neither the oracle nor the fallback finds a theme
        """
        if not records:
            return None
        excluded = frozenset(excluded)

        try:
            return self._classify_with_oracle(list(records), excluded, preferred)
        except OracleRejection as e:
            logger.warning(f"Oracle answer rejected ({e}); using keyword fallback")
        except Exception as e:
            logger.warning(f"Oracle classification failed: {e}; using keyword fallback")

        return fallback_theme_and_count(records, excluded, preferred)

    def _classify_with_oracle(self, records: List[FeedbackRecord], excluded: frozenset,
                              preferred: Optional[str]) -> BucketKpi:
        comments = [record.comment for record in records[:self.max_comments]]
        raw_response = self.llm_client.generate(self.build_prompt(comments))

        try:
            parsed = extract_json_object(raw_response)
        except ValueError as e:
            raise OracleRejection(f"unparsable response: {e}") from e

        raw_label = parsed.get("issue")
        if not isinstance(raw_label, str) or not raw_label.strip():
            raise OracleRejection("missing issue label")

        indices = parsed.get("matching_indices")
        if not isinstance(indices, list) or not indices:
            raise OracleRejection("no matching indices")

        if len(strip_filler_prefixes(raw_label).split()) > MAX_LABEL_WORDS:
            raise OracleRejection(f"label too long: {raw_label!r}")

        label = post_process_theme_label(raw_label)
        if len(label) < 3 or label.endswith("."):
            raise OracleRejection(f"unusable label: {raw_label!r}")

        canonical = canonicalize_label(label)
        if not is_surfaceable(canonical):
            raise OracleRejection(f"unusable label: {raw_label!r}")
        if canonical in excluded:
            raise OracleRejection(f"label '{canonical}' is excluded")

        if is_canonical_theme(canonical):
            kpi = count_for_theme(records, canonical)
        else:
            kpi = kpi_for_rows(canonical, self._rows_for_indices(records, len(comments), indices))

        if kpi.count == 0 or kpi.count < self.min_share * len(records):
            raise OracleRejection(
                f"'{canonical}' covers {kpi.count}/{len(records)} records, below the {self.min_share:.0%} minimum"
            )

        if preferred and preferred not in excluded:
            preferred_kpi = count_for_theme(records, preferred)
            if preferred_kpi.count >= 1:
                return preferred_kpi

        logger.info(f"Oracle classified bucket of {len(records)} as '{canonical}' ({kpi.count} records)")
        return kpi

    @staticmethod
    def _rows_for_indices(records: List[FeedbackRecord], prompt_size: int,
                          indices: list) -> List[FeedbackRecord]:
        """Records addressed by the oracle's 1-based indices (out-of-range and junk ignored)"""
        picked = set()
        for index in indices:
            if isinstance(index, bool):
                continue
            try:
                position = int(index)
            except (TypeError, ValueError):
                continue
            if 1 <= position <= prompt_size:
                picked.add(position)
        return [records[position - 1] for position in sorted(picked)]

    @staticmethod
    def build_prompt(comments: List[str]) -> str:
        """
        Build the numbered classification prompt

        Args:
            comments: Comment texts (already capped)

        Returns:
            Prompt string
        """
        numbered = "\n".join(f"{idx}. {comment}" for idx, comment in enumerate(comments, 1))
        return f"""You are analyzing product feedback. From the following comments, identify the single most recurring specific issue affecting enterprise customers or core product reliability. Return only a JSON object in this format:
{{
  "issue": "Short 2-5 word label",
  "matching_indices": [1, 2, 5, 7]
}}
The matching_indices array must contain the 1-based line numbers of comments that describe this specific issue. Do not return explanations. Do not return generic phrases. The issue must reflect actual user-reported problems. Maximum 5 words.

Comments:
{numbered}"""
