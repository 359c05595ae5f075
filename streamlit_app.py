"""
Streamlit Dashboard for Feedback Insights

Daily brief, KPI themes per severity bucket, trends and the raw feedback table.
"""
import streamlit as st
from typing import List
import pandas as pd
import plotly.express as px

from config.settings import settings
from layer_1_data_import.storage import StorageError
from layer_3_content_generation.formatting import display_source_name
from layer_3_content_generation.report_builder import render_headline_html, render_markdown
from layer_4_distribution.daily_brief import write_daily_brief
from layer_4_distribution.insights_service import InsightsService
from models.feedback import FeedbackRecord, Sentiment
from models.insights import BucketKpi, DailyReport, RiskTier
from utils.logger import get_logger

logger = get_logger(__name__)

# Page configuration
st.set_page_config(
    page_title="Feedback Insights Dashboard",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
    <style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        color: #1f77b4;
        margin-bottom: 1rem;
    }
    .headline-line {
        background-color: #f0f2f6;
        padding: 0.75rem 1rem;
        border-radius: 0.5rem;
        margin-bottom: 0.5rem;
    }
    </style>
""", unsafe_allow_html=True)

TREND_ARROWS = {"up": "▲", "down": "▼", "flat": "—"}


@st.cache_resource
def get_service() -> InsightsService:
    """One service per server process so the report caches are shared"""
    settings.ensure_directories()
    return InsightsService.from_settings()


def kpi_card(column, title: str, kpi: BucketKpi):
    """Render one severity bucket"""
    with column:
        if kpi is None:
            st.metric(title, "—", help="No matching feedback in this bucket")
            return
        st.metric(title, kpi.label, delta=f"{kpi.count} mentions", delta_color="off")
        st.caption(f"Enterprise: {kpi.enterprise_count}")


def low_impact_card(column, issues: List[BucketKpi]):
    with column:
        if not issues:
            st.metric(f"{RiskTier.LOW_IMPACT.icon} Low Impact", "—")
            return
        st.metric(f"{RiskTier.LOW_IMPACT.icon} Low Impact", issues[0].label,
                  delta=f"{issues[0].count} mentions", delta_color="off")
        for issue in issues[1:]:
            st.caption(f"{issue.label} ({issue.count})")


def feedback_to_dataframe(records: List[FeedbackRecord]) -> pd.DataFrame:
    """Feedback rows as a table, newest first"""
    rows = [
        {
            "ID": r.id,
            "Source": display_source_name(r.source),
            "Sentiment": r.sentiment.capitalize(),
            "Comment": r.comment,
            "Timestamp": r.parsed_timestamp,
            "Enterprise": r.is_enterprise,
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=["ID", "Source", "Sentiment", "Comment", "Timestamp", "Enterprise"])


def render_report(report: DailyReport):
    """Daily brief, headlines, executive summary and trends"""
    st.info(f"**Daily Brief:** {report.daily_brief}")

    st.subheader("🔥 Headlines")
    if not report.headlines:
        st.markdown("No themes surfaced today.")
    for line in report.headlines:
        st.markdown(render_headline_html(line), unsafe_allow_html=True)

    st.subheader("📝 Executive Summary")
    st.markdown(report.executive_summary or "No executive summary available.")

    st.subheader("📈 Trend Snapshot")
    if report.trend_snapshot:
        df_trend = pd.DataFrame([
            {
                "Theme": row.theme,
                "Yesterday": row.yesterday,
                "Today": row.today,
                "Trend": f"{TREND_ARROWS.get(row.direction, '')} {row.trend}",
            }
            for row in report.trend_snapshot
        ])
        st.dataframe(df_trend, width='stretch', hide_index=True)
    else:
        st.markdown("No trend data for today.")

    if report.scored_themes:
        df_scores = pd.DataFrame([
            {"Theme": t.theme, "Risk Score": t.risk_score, "Tier": t.risk_tier.value}
            for t in report.scored_themes
        ])
        fig = px.bar(
            df_scores.sort_values("Risk Score", ascending=False),
            x="Theme",
            y="Risk Score",
            color="Tier",
            title="Risk Score per Theme",
            color_discrete_map={
                RiskTier.CRITICAL.value: "#d62728",
                RiskTier.MONITOR.value: "#ffbf00",
                RiskTier.LOW_IMPACT.value: "#2ca02c",
            }
        )
        fig.update_layout(height=400, xaxis_tickangle=-45)
        st.plotly_chart(fig, width='stretch')


def render_sidebar(service: InsightsService):
    """Store actions: seed, add feedback and write today's brief"""
    st.sidebar.header("⚙️ Feedback Store")

    if st.sidebar.button("🌱 Load Sample Feedback", width='stretch'):
        try:
            count = service.storage.seed()
            st.sidebar.success(f"✅ Seeded {count} rows")
        except StorageError as e:
            st.sidebar.error(str(e))

    with st.sidebar.form("add_feedback", clear_on_submit=True):
        st.markdown("**➕ Add Feedback**")
        source = st.text_input("Source", placeholder="e.g. email, app store reviews")
        sentiment = st.selectbox("Sentiment", [s.value for s in Sentiment])
        comment = st.text_area("Comment")
        if st.form_submit_button("Save", type="primary"):
            try:
                record = service.storage.add_feedback(source, sentiment, comment)
                st.success(f"✅ Stored feedback #{record.id}")
            except (ValueError, StorageError) as e:
                st.error(f"❌ {e}")

    st.sidebar.markdown("---")
    if st.sidebar.button("💾 Write Today's Brief", width='stretch'):
        try:
            result = write_daily_brief(service)
            st.sidebar.success(f"✅ Written to {result['markdown_path']}")
        except Exception as e:
            logger.error(f"Error writing brief from dashboard: {e}", exc_info=True)
            st.sidebar.error(f"❌ {e}")

    st.sidebar.markdown("---")
    st.sidebar.markdown("**📅 Scheduled Runs:**")
    st.sidebar.markdown(
        f"The brief is written every day at {settings.SCHEDULE_HOUR:02d}:{settings.SCHEDULE_MINUTE:02d} "
        "(run `scheduler.py`)"
    )
    if service.llm_client is None:
        st.sidebar.warning("GEMINI_API_KEY not set: keyword classification only.")


def main():
    """Main Streamlit app"""
    st.markdown('<h1 class="main-header">📊 Feedback Insights Dashboard</h1>', unsafe_allow_html=True)

    service = get_service()
    render_sidebar(service)

    try:
        report = service.get_report()
        kpis = service.get_kpi_themes()
        records = service.list_feedback()
    except StorageError as e:
        logger.error(f"Feedback store unavailable: {e.args[0]}")
        st.error(f"❌ {e.args[0]}")
        st.info(f"💡 {e.hint}")
        st.stop()

    if not report.has_data:
        st.warning(f"🚀 {report.daily_brief} Use **Load Sample Feedback** in the sidebar to get started.")
        st.stop()

    col1, col2, col3 = st.columns(3)
    kpi_card(col1, f"{RiskTier.CRITICAL.icon} Critical", kpis.critical)
    kpi_card(col2, f"{RiskTier.MONITOR.icon} Monitor", kpis.monitor)
    low_impact_card(col3, kpis.low)

    tab1, tab2, tab3 = st.tabs(["📈 Daily Report", "🧭 Themes & Sources", "💬 Feedback"])

    # ============================================================
    # TAB 1: Daily Report
    # ============================================================
    with tab1:
        st.header(f"Daily Report · {report.date}")
        render_report(report)

        st.markdown("---")
        st.download_button(
            label="📥 Download Report as Markdown",
            data=render_markdown(report),
            file_name=f"brief_{report.date}.md",
            mime="text/markdown"
        )

    # ============================================================
    # TAB 2: Themes & Sources
    # ============================================================
    with tab2:
        col1, col2 = st.columns(2)
        with col1:
            st.subheader("🔁 Recurring Themes")
            for theme in report.recurring_themes:
                st.markdown(f"- {theme.text}")

            st.subheader("🎯 Theme Priorities")
            priorities = service.get_theme_priorities()
            if priorities:
                st.dataframe(
                    pd.DataFrame([{"Theme": p.theme, "Priority": p.priority} for p in priorities]),
                    width='stretch',
                    hide_index=True
                )
        with col2:
            st.subheader("📡 Source Breakdown")
            if report.source_breakdown:
                df_sources = pd.DataFrame([
                    {"Source": s.source, "Count": s.count} for s in report.source_breakdown
                ])
                fig = px.bar(
                    df_sources,
                    x="Source",
                    y="Count",
                    title="Feedback per Source",
                    color="Count",
                    color_continuous_scale="Blues"
                )
                fig.update_layout(height=400)
                st.plotly_chart(fig, width='stretch')

        summary = service.get_summary()
        st.subheader("🗂️ Structured Summary")
        st.markdown(summary.overall_summary)
        for item in summary.by_source:
            with st.expander(f"{item.source} · {item.total_items} items · {item.dominant_sentiment}"):
                for issue in item.key_issues:
                    st.markdown(f"- {issue}")
        if summary.top_urgent_issues:
            st.markdown("**Top Urgent Issues:**")
            for issue in summary.top_urgent_issues:
                st.markdown(f"- {issue}")

    # ============================================================
    # TAB 3: Feedback
    # ============================================================
    with tab3:
        st.header("All Feedback")
        df = feedback_to_dataframe(records)

        col1, col2, col3 = st.columns([1, 1, 2])
        with col1:
            source_filter = st.multiselect("Source", sorted(df["Source"].unique()))
        with col2:
            sentiment_filter = st.multiselect("Sentiment", sorted(df["Sentiment"].unique()))
        with col3:
            search = st.text_input("Search comments")

        if source_filter:
            df = df[df["Source"].isin(source_filter)]
        if sentiment_filter:
            df = df[df["Sentiment"].isin(sentiment_filter)]
        if search:
            df = df[df["Comment"].str.contains(search, case=False, regex=False)]

        st.caption(f"{len(df)} of {len(records)} rows")
        st.dataframe(df, width='stretch', hide_index=True)


if __name__ == "__main__":
    main()
