"""
Comprehensive unit tests for Layer 3: Content Generation
Tests risk scoring, headline selection, executive summary, structured
summary and the daily report builder
"""
import sys
import os
from datetime import datetime, timezone
from unittest.mock import Mock

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from models.feedback import FeedbackRecord
from models.insights import RiskTier, ScoredTheme, SourceCount, SourceSummary, Summary, ThemeAggregate
from layer_2_theme_extraction.theme_config import (
    AUTHENTICATION,
    DOCUMENTATION,
    EMAIL_DELIVERY,
    PASSWORD_RESET,
    SUPPORT_DELAYS,
)
from layer_3_content_generation.risk_scorer import compute_risk_score, risk_tier_for, score_theme
from layer_3_content_generation.headline_selector import select_headlines
from layer_3_content_generation.formatting import trend_text, truncate
from layer_3_content_generation.executive_summary import (
    EMPTY_SUMMARY,
    FAILED_SUMMARY,
    MAX_SUMMARY_CHARS,
    ExecutiveSummaryGenerator,
    clean_narrative,
)
from layer_3_content_generation.summary_builder import (
    NO_FEEDBACK_TEXT,
    SummaryBuilder,
    derive_theme_priorities,
    source_breakdown,
    summary_from_feedback,
)
from layer_3_content_generation.report_builder import ReportBuilder, render_headline_html, render_markdown
from utils.logger import get_logger

logger = get_logger(__name__)

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


def make_aggregate(theme="Theme", enterprise=0, self_serve=0, percent_negative=0, yesterday=0, change=0):
    return ThemeAggregate(
        theme=theme,
        total_mentions=enterprise + self_serve,
        enterprise_mentions=enterprise,
        self_serve_mentions=self_serve,
        percent_negative=percent_negative,
        yesterday_mentions=yesterday,
        percent_change_vs_yesterday=change,
    )


def make_scored(theme, score, tier):
    return ScoredTheme(
        theme=theme, total_mentions=1, enterprise_mentions=0, self_serve_mentions=1,
        percent_negative=0, yesterday_mentions=0, percent_change_vs_yesterday=100,
        risk_score=score, risk_tier=tier,
    )


def make_record(idx, comment, sentiment="negative", source="Discord", timestamp="2025-01-15T10:00:00.000Z"):
    return FeedbackRecord(id=idx, source=source, sentiment=sentiment, comment=comment, timestamp=timestamp)


class TestRiskScorer:
    """Test risk scoring and tiers"""

    def test_critical_theme(self):
        scored = score_theme(make_aggregate(AUTHENTICATION, enterprise=6, self_serve=4, percent_negative=100))
        assert scored.risk_score == 24
        assert scored.risk_tier is RiskTier.CRITICAL
        assert scored.theme == AUTHENTICATION
        assert scored.total_mentions == 10

    def test_monitor_theme(self):
        # 3*3 + 1 + 2 (exactly half negative)
        assert compute_risk_score(make_aggregate(enterprise=3, self_serve=1, percent_negative=50)) == 12
        assert score_theme(make_aggregate(enterprise=3, self_serve=1, percent_negative=50)).risk_tier is RiskTier.MONITOR

    def test_low_impact_theme(self):
        scored = score_theme(make_aggregate(self_serve=5))
        assert scored.risk_score == 5
        assert scored.risk_tier is RiskTier.LOW_IMPACT

    def test_tier_boundaries(self):
        assert risk_tier_for(20) is RiskTier.CRITICAL
        assert risk_tier_for(19) is RiskTier.MONITOR
        assert risk_tier_for(10) is RiskTier.MONITOR
        assert risk_tier_for(9) is RiskTier.LOW_IMPACT
        assert risk_tier_for(0) is RiskTier.LOW_IMPACT

    def test_score_is_monotonic(self):
        """More enterprise or self-serve mentions never lower the score"""
        for enterprise in range(5):
            for self_serve in range(5):
                base = compute_risk_score(make_aggregate(enterprise=enterprise, self_serve=self_serve))
                assert compute_risk_score(make_aggregate(enterprise=enterprise + 1, self_serve=self_serve)) > base
                assert compute_risk_score(make_aggregate(enterprise=enterprise, self_serve=self_serve + 1)) > base


class TestHeadlineSelector:
    """Test headline selection"""

    def test_fewer_than_three(self):
        scored = [make_scored("B", 5, RiskTier.LOW_IMPACT), make_scored("A", 24, RiskTier.CRITICAL)]
        assert [t.theme for t in select_headlines(scored)] == ["A", "B"]

    def test_low_impact_slot_is_reserved(self):
        scored = [
            make_scored("C1", 30, RiskTier.CRITICAL),
            make_scored("C2", 25, RiskTier.CRITICAL),
            make_scored("M", 12, RiskTier.MONITOR),
            make_scored("L", 5, RiskTier.LOW_IMPACT),
        ]
        assert [t.theme for t in select_headlines(scored)] == ["C1", "C2", "L"]

    def test_no_low_impact_available(self):
        scored = [
            make_scored("C1", 30, RiskTier.CRITICAL),
            make_scored("C2", 25, RiskTier.CRITICAL),
            make_scored("C3", 21, RiskTier.CRITICAL),
        ]
        assert [t.theme for t in select_headlines(scored)] == ["C1", "C2", "C3"]

    def test_low_impact_already_present(self):
        scored = [
            make_scored("C", 30, RiskTier.CRITICAL),
            make_scored("L1", 5, RiskTier.LOW_IMPACT),
            make_scored("L2", 4, RiskTier.LOW_IMPACT),
            make_scored("L3", 3, RiskTier.LOW_IMPACT),
        ]
        assert [t.theme for t in select_headlines(scored)] == ["C", "L1", "L2"]

    def test_ties_ordered_by_theme(self):
        scored = [make_scored("Zeta", 5, RiskTier.LOW_IMPACT), make_scored("Alpha", 5, RiskTier.LOW_IMPACT)]
        assert [t.theme for t in select_headlines(scored)] == ["Alpha", "Zeta"]

    def test_headlines_are_distinct(self):
        scored = [make_scored(f"T{i}", 30 - i, RiskTier.CRITICAL) for i in range(5)]
        scored.append(make_scored("Low", 1, RiskTier.LOW_IMPACT))
        themes = [t.theme for t in select_headlines(scored)]
        assert len(themes) == 3
        assert len(set(themes)) == 3


class TestFormatting:
    """Test trend wording helpers"""

    def test_trend_text(self):
        assert trend_text(100) == "significant increase"
        assert trend_text(30, RiskTier.CRITICAL) == "significant increase"
        assert trend_text(30, RiskTier.MONITOR) == "increase"
        assert trend_text(0) == "no major change"
        assert trend_text(-24) == "no major change"
        assert trend_text(-25) == "decrease"

    def test_truncate(self):
        assert truncate("short", 10) == "short"
        assert truncate("abcdefghij", 5) == "abcde…"


class TestExecutiveSummary:
    """Test executive summary generation and cleanup"""

    def test_clean_markdown_and_quotes(self):
        raw = '"**Login failures** spiked today. *Docs* are fine."'
        assert clean_narrative(raw) == "Login failures spiked today. Docs are fine."

    def test_clean_boilerplate_prefix(self):
        assert clean_narrative("Here's a 2-sentence summary: Login broke.") == "Login broke."

    def test_clean_mention_counts(self):
        assert clean_narrative("12 mentions of login failures dominated.") == "login failures dominated."

    def test_length_is_capped(self):
        assert len(clean_narrative("word " * 500)) <= MAX_SUMMARY_CHARS

    def test_no_client(self):
        assert ExecutiveSummaryGenerator(None).generate([]) == FAILED_SUMMARY

    def test_oracle_failure(self):
        llm = Mock()
        llm.generate.side_effect = RuntimeError("quota exceeded")
        assert ExecutiveSummaryGenerator(llm).generate([]) == FAILED_SUMMARY

    def test_empty_response(self):
        llm = Mock()
        llm.generate.return_value = ""
        assert ExecutiveSummaryGenerator(llm).generate([]) == EMPTY_SUMMARY

    def test_prompt_context(self):
        headlines = [make_scored(AUTHENTICATION, 24, RiskTier.CRITICAL)]
        prompt = ExecutiveSummaryGenerator.build_prompt(headlines)
        assert AUTHENTICATION in prompt
        assert "Critical" in prompt
        assert "2-sentence" in prompt


class TestSummaryBuilder:
    """Test the structured summary"""

    def _records(self):
        return [
            make_record(1, "Login fails on Safari", "negative", "email"),
            make_record(2, "Login timeout", "negative", "email"),
            make_record(3, "Great release", "positive", "email"),
            make_record(4, "Docs are scattered", "neutral", "Discord"),
        ]

    def test_empty(self):
        summary = SummaryBuilder().build([])
        assert summary.overall_summary == NO_FEEDBACK_TEXT
        assert summary.by_source == []
        assert summary.top_urgent_issues == []

    def test_record_based_summary(self):
        summary = summary_from_feedback(self._records())
        assert summary.overall_summary.startswith("4 feedback items")
        by_source = {s.source: s for s in summary.by_source}
        assert by_source["email"].total_items == 3
        assert by_source["email"].dominant_sentiment == "negative"
        assert by_source["Discord"].dominant_sentiment == "neutral"
        assert summary.top_urgent_issues[0] == "email: Login fails on Safari"

    def test_partial_llm_answer_is_completed(self):
        llm = Mock()
        llm.generate.return_value = (
            '{"overall_summary": "Login is the main pain.", "by_source": "bad", '
            '"top_urgent_issues": ["SSO login failures"]}'
        )
        summary = SummaryBuilder(llm).build(self._records())
        assert summary.overall_summary == "Login is the main pain."
        assert {s.source for s in summary.by_source} == {"email", "Discord"}
        assert summary.top_urgent_issues == ["SSO login failures"]

    def test_garbage_llm_answer_falls_back(self):
        llm = Mock()
        llm.generate.return_value = "Sorry, I cannot help with that."
        records = self._records()
        assert SummaryBuilder(llm).build(records) == summary_from_feedback(records)

    def test_derive_theme_priorities(self):
        summary = Summary(
            overall_summary="x",
            by_source=[SourceSummary("email", 3, "negative", ["Login fails on Safari", "Login timeout", "SSO broken"])],
            top_urgent_issues=["Discord: login fails again", "Support replied after 5 days"],
        )
        priorities = derive_theme_priorities(summary)
        assert len(priorities) == 5
        assert priorities[0].theme == AUTHENTICATION
        assert priorities[0].priority == "High"
        assert priorities[1].theme == "Support replied after 5 days"
        assert priorities[1].priority == "Low"
        # Padded with canonical themes not already listed
        assert [p.theme for p in priorities[2:]] == [PASSWORD_RESET, SUPPORT_DELAYS, EMAIL_DELIVERY]

    def test_priorities_for_empty_summary(self):
        priorities = derive_theme_priorities(Summary(overall_summary=NO_FEEDBACK_TEXT))
        assert len(priorities) == 5
        assert all(p.priority == "Low" for p in priorities)

    def test_source_breakdown_order(self):
        items = source_breakdown([
            SourceSummary("Zendesk", 1, "neutral"),
            SourceSummary("email", 2, "negative"),
            SourceSummary("Discord", 3, "neutral"),
        ])
        assert [item["source"] for item in items] == ["Discord", "email", "Zendesk"]


class TestReportBuilder:
    """Test the daily report"""

    def _records(self):
        records = [make_record(i, "login fails", "negative", "email") for i in range(1, 7)]
        records += [make_record(i, "login fails", "negative", "Discord") for i in range(7, 11)]
        records += [make_record(i, "docs scattered", "positive", "Discord") for i in range(11, 13)]
        records += [
            make_record(i, "login fails", "negative", "Discord", timestamp="2025-01-14T09:00:00.000Z")
            for i in range(13, 18)
        ]
        return records

    def test_full_report(self):
        narrative = Mock(return_value="Login is on fire.")
        report = ReportBuilder(narrative=narrative).build(self._records(), NOW)

        assert report.date == "2025-01-15"
        assert report.has_data
        assert report.daily_brief == "Today we received 12 feedback items across 2 sources."

        assert [h.theme for h in report.headlines] == [AUTHENTICATION, DOCUMENTATION]
        assert report.headlines[0].text == (
            "🔴 Critical: 10 customers reported Authentication / Login Issues, including 6 enterprise customers"
        )
        assert report.headlines[1].text == "🟢 Low Impact: 2 customers reported Documentation Confusion"

        assert report.executive_summary == "Login is on fire."
        narrative.assert_called_once()

        trend = report.trend_snapshot[0]
        assert (trend.yesterday, trend.today, trend.direction) == (5, 10, "up")
        assert trend.trend == "significant increase"

        assert report.recurring_themes[0].text == "Authentication / Login Issues: 10 mentions"
        assert report.source_breakdown == [SourceCount("Discord", 6), SourceCount("Email", 6)]

    def test_empty_snapshot(self):
        report = ReportBuilder().build([], NOW)
        assert report.has_data == False
        assert report.daily_brief == "No feedback has been recorded yet."
        assert report.headlines == []

    def test_nothing_today(self):
        narrative = Mock(return_value="unused")
        records = [make_record(1, "login fails", timestamp="2025-01-14T09:00:00.000Z")]
        report = ReportBuilder(narrative=narrative).build(records, NOW)
        assert report.has_data
        assert report.headlines == []
        assert report.scored_themes == []
        assert report.executive_summary == EMPTY_SUMMARY
        assert report.daily_brief == "Today we received 0 feedback items across 0 sources."
        narrative.assert_not_called()

    def test_render_markdown(self):
        report = ReportBuilder(narrative=lambda headlines: "Summary text.").build(self._records(), NOW)
        markdown = render_markdown(report)
        assert markdown.startswith("# Product Feedback Report: 2025-01-15")
        assert "## Executive Summary" in markdown
        assert "Yesterday 5 → Today 10 ▲ (significant increase)" in markdown
        assert "- Email: 6" in markdown

    def test_headline_html_shows_tier_once(self):
        report = ReportBuilder(narrative=lambda headlines: "Summary text.").build(self._records(), NOW)
        markup = render_headline_html(report.headlines[0])
        assert markup == (
            '<div class="headline-line">🔴 Critical: 10 customers reported '
            'Authentication / Login Issues, including 6 enterprise customers</div>'
        )
        assert markup.count("🔴") == 1
        assert markup.count("Critical") == 1

    def test_render_empty_markdown(self):
        markdown = render_markdown(ReportBuilder().build([], NOW))
        assert "No feedback has been recorded yet." in markdown
        assert "## Daily Brief" not in markdown

    def test_report_to_dict(self):
        data = ReportBuilder().build(self._records(), NOW).to_dict()
        assert data["headlines"][0]["risk_tier"] == "Critical"
        assert data["trend_snapshot"][0]["direction"] == "up"


def run_all_tests():
    """Run all test suites"""
    print("=" * 80)
    print("Layer 3 Content Generation - Comprehensive Test Suite")
    print("=" * 80)

    test_classes = [
        ("Risk Scorer", TestRiskScorer),
        ("Headline Selector", TestHeadlineSelector),
        ("Formatting", TestFormatting),
        ("Executive Summary", TestExecutiveSummary),
        ("Summary Builder", TestSummaryBuilder),
        ("Report Builder", TestReportBuilder),
    ]

    failed_tests = []
    total_tests = 0
    for suite_name, test_class in test_classes:
        print(f"\nRunning {suite_name} Tests")
        test_instance = test_class()
        for test_method in [m for m in dir(test_instance) if m.startswith('test_')]:
            total_tests += 1
            try:
                getattr(test_instance, test_method)()
                print(f"  ✅ {test_method}")
            except Exception as e:
                print(f"  ❌ {test_method}: {e}")
                failed_tests.append((suite_name, test_method, str(e)))

    print(f"\nTotal tests: {total_tests}, Failed: {len(failed_tests)}")
    return 1 if failed_tests else 0


if __name__ == "__main__":
    sys.exit(run_all_tests())
