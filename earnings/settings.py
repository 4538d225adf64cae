"""Configuration constants for the earnings tracker."""
import os
from pathlib import Path
from typing import List, Optional

# ============================================================================
# FILE SYSTEM CONFIGURATION
# ============================================================================

DATA_DIR = Path(os.getenv("EARNINGS_DATA_DIR", Path(__file__).resolve().parents[1]))
INITIAL_CSV_PATH = Path(os.getenv("EARNINGS_INITIAL_CSV", DATA_DIR / "Earnings_Report.csv"))

EXPORT_FILENAME_TEMPLATE = "weekly_earnings_report_{date}.csv"

# ============================================================================
# CALENDAR / GOAL DEFAULTS
# ============================================================================

# IANA zone used to localize timezone-aware timestamps; None means host local.
TIMEZONE: Optional[str] = os.getenv("EARNINGS_TIMEZONE") or None

DEFAULT_GOAL_HOURS_PER_WEEK = 30.0
DEFAULT_TIME_RANGE = "3m"
DEFAULT_PAGE_SIZE = 10
CYCLE_LENGTH_WEEKS = 4
TOP_PROJECTS = 8
DAILY_TREND_DAYS = 30

# ============================================================================
# LOGGING / API
# ============================================================================

LOG_LEVEL = os.getenv("EARNINGS_LOG_LEVEL", "INFO")


def cors_origins() -> List[str]:
    raw = os.getenv("EARNINGS_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
    return [o.strip() for o in raw.split(",") if o.strip()]
