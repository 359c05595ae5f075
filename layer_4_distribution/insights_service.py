"""
Insights service: the cached entry points the CLI, scheduler and dashboard use

Each request reads one snapshot of the feedback store and computes from it.
The only shared mutable state is the three cache cells (full report,
narrative, structured summary), each replaced wholesale on write.
"""
from typing import List, Optional, Sequence

from config.settings import settings
from models.feedback import FeedbackRecord
from models.insights import DailyReport, KpiThemes, ScoredTheme, Summary, ThemePriority
from layer_1_data_import.storage import FeedbackStorage
from layer_2_theme_extraction.bucket_resolver import BucketKpiResolver
from layer_2_theme_extraction.classifier import OracleThemeClassifier
from layer_3_content_generation.executive_summary import ExecutiveSummaryGenerator
from layer_3_content_generation.report_builder import ReportBuilder
from layer_3_content_generation.summary_builder import SummaryBuilder, derive_theme_priorities
from utils.cache import Clock, TimedCache, utc_now, utc_today
from utils.llm_client import LLMClient
from utils.logger import get_logger

logger = get_logger(__name__)


class InsightsService:
    """Report, narrative, summary and KPI surfaces over one feedback store"""

    def __init__(self, storage: FeedbackStorage, llm_client=None,
                 report_cache: Optional[TimedCache] = None,
                 narrative_cache: Optional[TimedCache] = None,
                 summary_cache: Optional[TimedCache] = None,
                 clock: Optional[Clock] = None):
        """
        Args:
            storage: Feedback store (anything with list_feedback())
            llm_client: Text oracle with generate(prompt); None runs keyword-only
            report_cache / narrative_cache / summary_cache: Cache cells (built
                from settings when omitted)
            clock: Callable returning the current aware datetime
        """
        self.storage = storage
        self.llm_client = llm_client
        self.clock = clock or utc_now

        self.report_cache = report_cache or TimedCache("report", settings.REPORT_CACHE_TTL, self.clock)
        self.narrative_cache = narrative_cache or TimedCache("narrative", settings.NARRATIVE_CACHE_TTL, self.clock)
        self.summary_cache = summary_cache or TimedCache("summary", settings.SUMMARY_CACHE_TTL, self.clock)

        self.narrative_generator = ExecutiveSummaryGenerator(llm_client)
        self.summary_builder = SummaryBuilder(llm_client)
        classifier = OracleThemeClassifier(llm_client) if llm_client is not None else None
        self.kpi_resolver = BucketKpiResolver(classifier)
        self.report_builder = ReportBuilder(narrative=self.get_executive_summary)

    @classmethod
    def from_settings(cls) -> "InsightsService":
        """
        Build the service from settings; without GEMINI_API_KEY the
        service runs in keyword-only mode
        """
        try:
            llm_client = LLMClient()
        except ValueError as e:
            logger.warning(f"{e} Running without the LLM (keyword classification only).")
            llm_client = None
        return cls(FeedbackStorage(), llm_client=llm_client)

    def list_feedback(self) -> List[FeedbackRecord]:
        return self.storage.list_feedback()

    def get_report(self) -> DailyReport:
        """
        Daily report, served from cache while fresh

        Raises:
            StorageError: if the feedback store cannot be read
        """
        today = utc_today(self.clock)
        cached = self.report_cache.get(today)
        if cached is not None:
            return cached

        report = self.report_builder.build(self.storage.list_feedback(), self.clock())
        # "No data yet" is not cached so the first rows show up immediately
        if report.has_data:
            self.report_cache.put(today, report)
        return report

    def get_executive_summary(self, headlines: Sequence[ScoredTheme]) -> str:
        """Narrative for the headline themes, served from cache while fresh"""
        today = utc_today(self.clock)
        cached = self.narrative_cache.get(today)
        if cached is not None:
            return cached

        text = self.narrative_generator.generate(headlines)
        self.narrative_cache.put(today, text)
        return text

    def get_summary(self) -> Summary:
        """Structured summary, served from cache while fresh"""
        today = utc_today(self.clock)
        cached = self.summary_cache.get(today)
        if cached is not None:
            return cached

        records = self.storage.list_feedback()
        summary = self.summary_builder.build(records)
        if records:
            self.summary_cache.put(today, summary)
        return summary

    def get_theme_priorities(self) -> List[ThemePriority]:
        return derive_theme_priorities(self.get_summary())

    def get_kpi_themes(self) -> KpiThemes:
        """One KPI theme per sentiment bucket over the full snapshot"""
        return self.kpi_resolver.resolve(self.storage.list_feedback())
