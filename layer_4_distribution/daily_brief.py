"""
Daily brief snapshot: writes the current report (markdown + JSON) and the KPI
themes to the reports directory
"""
import json
import os
from typing import Any, Dict

from config.settings import settings
from layer_3_content_generation.report_builder import render_markdown
from utils.logger import get_logger

logger = get_logger(__name__)


def write_daily_brief(service, reports_dir: str = None) -> Dict[str, Any]:
    """
    Generate and save today's brief

    Args:
        service: InsightsService
        reports_dir: Output directory (defaults to settings.REPORTS_DIR)

    Returns:
        Dictionary with the date and the written file paths
    """
    reports_dir = reports_dir or settings.REPORTS_DIR
    os.makedirs(reports_dir, exist_ok=True)

    report = service.get_report()
    kpis = service.get_kpi_themes()

    markdown_path = os.path.join(reports_dir, f"brief_{report.date}.md")
    json_path = os.path.join(reports_dir, f"brief_{report.date}.json")

    with open(markdown_path, 'w', encoding='utf-8') as f:
        f.write(render_markdown(report))

    payload = {
        "report": report.to_dict(),
        "kpi_themes": kpis.to_dict(),
    }
    with open(json_path, 'w', encoding='utf-8') as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)

    logger.info(f"Daily brief for {report.date} written to {markdown_path}")
    return {
        "date": report.date,
        "markdown_path": markdown_path,
        "json_path": json_path,
    }
