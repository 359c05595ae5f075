"""
Application settings and configuration

This file contains all the settings for the feedback insights service.
Most settings can be changed by creating a .env file in the project root.
If a setting isn't in .env, it uses the default value shown here.
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file (if it exists)
load_dotenv()


class Settings:
    """
    Application configuration settings

    Values are read once at import time from the environment (or .env).
    """

    # ============================================================
    # Storage Settings
    # ============================================================
    # Feedback rows live in a single JSON file; daily briefs are written
    # next to it as markdown snapshots
    DATA_DIR = os.getenv("DATA_DIR", "data")
    FEEDBACK_FILE = os.getenv("FEEDBACK_FILE", os.path.join(DATA_DIR, "feedback.json"))
    REPORTS_DIR = os.getenv("REPORTS_DIR", os.path.join(DATA_DIR, "reports"))

    # ============================================================
    # Gemini API Settings
    # ============================================================
    # Gemini is the text oracle used for bucket classification, the
    # executive summary and the structured summary. Without a key the
    # service runs in deterministic (keyword-only) mode.
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
    ORACLE_TIMEOUT_SECONDS = float(os.getenv("ORACLE_TIMEOUT_SECONDS", "20"))
    ORACLE_MAX_COMMENTS = int(os.getenv("ORACLE_MAX_COMMENTS", "50"))  # Comments per classification prompt

    # ============================================================
    # KPI Settings
    # ============================================================
    # An oracle-proposed theme must cover this share of its bucket
    KPI_MIN_SHARE = float(os.getenv("KPI_MIN_SHARE", "0.05"))

    # ============================================================
    # Cache Settings (seconds)
    # ============================================================
    # All caches are in-memory and also expire at the UTC day boundary
    REPORT_CACHE_TTL = float(os.getenv("REPORT_CACHE_TTL", "120"))  # Full rendered report
    NARRATIVE_CACHE_TTL = float(os.getenv("NARRATIVE_CACHE_TTL", "300"))  # Executive summary text
    SUMMARY_CACHE_TTL = float(os.getenv("SUMMARY_CACHE_TTL", "30"))  # Structured summary

    # ============================================================
    # Scheduler Settings
    # ============================================================
    # When to write the daily brief snapshot (24-hour clock)
    SCHEDULE_HOUR = int(os.getenv("SCHEDULE_HOUR", "9"))
    SCHEDULE_MINUTE = int(os.getenv("SCHEDULE_MINUTE", "0"))

    # ============================================================
    # Logging Settings
    # ============================================================
    # Options: DEBUG, INFO, WARNING, ERROR
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE", "logs/app.log")

    @staticmethod
    def ensure_directories():
        """
        Create necessary directories if they don't exist
        """
        os.makedirs(Settings.DATA_DIR, exist_ok=True)
        os.makedirs(Settings.REPORTS_DIR, exist_ok=True)
        feedback_dir = os.path.dirname(Settings.FEEDBACK_FILE)
        if feedback_dir:
            os.makedirs(feedback_dir, exist_ok=True)
        os.makedirs(os.path.dirname(Settings.LOG_FILE) if os.path.dirname(Settings.LOG_FILE) else "logs", exist_ok=True)


# Global settings instance
settings = Settings()
