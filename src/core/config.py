"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(
    os.environ.get("HEIMDALL_DB_PATH", str(PROJECT_ROOT / "data" / "db" / "heimdall.db"))
)
OUTPUT_DIR = PROJECT_ROOT / "output"

# =============================================================================
# CALENDAR CONSTANTS
# =============================================================================

BURNOUT_THRESHOLD = 3  # Simultaneously active events that flag a day
CHAIN_MIN_DAYS = 14  # Inclusive span that makes an event a chain

QUARTERS_PER_YEAR = 4
WEEKS_PER_QUARTER = 13
WEEKS_PER_CYCLE = 4
RESET_WEEK_INDEX = 12  # 0-based position of the reset week inside a quarter
CHECK_IN_POSITIONS = {1, 3}
DAYS_PER_WEEK = 7

# Grid geometry for the horizontal layout
WEEKDAY_MODE_COLUMNS = 37  # 31 days + up to 6 leading blanks
NUMERIC_MODE_COLUMNS = 31

# Grid geometry for the vertical layout
VERTICAL_BASE_ROWS = 31
VERTICAL_WEEKDAY_EXTRA_ROWS = 6
VERTICAL_BLOCKS = [[0, 1, 2, 3, 4, 5], [6, 7, 8, 9, 10, 11]]

# =============================================================================
# LOCALE (presentation only, injected into view assemblers)
# =============================================================================

SUPPORTED_LANGUAGES = {"en", "it"}
DEFAULT_LANGUAGE = "en"

MONTH_NAMES = {
    "en": [
        "January", "February", "March", "April", "May", "June",
        "July", "August", "September", "October", "November", "December",
    ],
    "it": [
        "Gennaio", "Febbraio", "Marzo", "Aprile", "Maggio", "Giugno",
        "Luglio", "Agosto", "Settembre", "Ottobre", "Novembre", "Dicembre",
    ],
}

WEEKDAY_NAMES = {
    "en": ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"],
    "it": ["Lun", "Mar", "Mer", "Gio", "Ven", "Sab", "Dom"],
}

VIEW_LABELS = {
    "en": {
        "cont": "Cont.",
        "quarter": "Quarter",
        "cycle": "Cycle",
        "reset": "Reset Week",
        "prep": "Prep Week (Week 0)",
        "first_half": "FIRST HALF",
        "second_half": "SECOND HALF",
    },
    "it": {
        "cont": "Cont.",
        "quarter": "Trimestre",
        "cycle": "Ciclo",
        "reset": "Reset Week",
        "prep": "Prep Week (Settimana 0)",
        "first_half": "PRIMO SEMESTRE",
        "second_half": "SECONDO SEMESTRE",
    },
}

# =============================================================================
# CATEGORIES & SETTINGS DEFAULTS
# =============================================================================

DEFAULT_CATEGORIES = {
    "en": [
        {"id": "work", "label": "Work & Projects", "color": "#ef4444"},
        {"id": "travel", "label": "Travel", "color": "#3b82f6"},
        {"id": "personal", "label": "Personal", "color": "#eab308"},
        {"id": "rest", "label": "Rest & Recovery", "color": "#64748b"},
        {"id": "milestone", "label": "Milestones", "color": "#a855f7"},
        {"id": "other", "label": "Other", "color": "#10b981"},
    ],
    "it": [
        {"id": "work", "label": "Lavoro & Progetti", "color": "#ef4444"},
        {"id": "travel", "label": "Viaggi", "color": "#3b82f6"},
        {"id": "personal", "label": "Personale", "color": "#eab308"},
        {"id": "rest", "label": "Riposo & Recupero", "color": "#64748b"},
        {"id": "milestone", "label": "Traguardi", "color": "#a855f7"},
        {"id": "other", "label": "Altro", "color": "#10b981"},
    ],
}

VIEW_MODES = {"weekday", "numeric"}
LAYOUTS = {"horizontal", "vertical", "cyclic"}

DEFAULT_SETTINGS = {
    "fade_past": True,
    "show_burnout_warnings": True,
    "active_category_ids": [],
    "view_mode": "weekday",
    "layout": "horizontal",
    "is_bird_eye_view": False,
    "language": DEFAULT_LANGUAGE,
}

# =============================================================================
# EXPORT CONFIGURATION
# =============================================================================

EVENT_DETAIL_HEADERS = ["ID", "Title", "Category", "Start", "End", "Days", "Chain", "Notes"]
CYCLIC_HEADERS = ["Week", "Quarter", "Type", "Cycle", "Week in Cycle", "Check-in", "From", "To", "Events"]

# =============================================================================
# MS GRAPH CREDENTIALS & IMPORT (from environment)
# =============================================================================

GRAPH_TENANT_ID = os.environ.get("MICROSOFT_GRAPH_TENANT_ID", "")
GRAPH_APP_ID = os.environ.get("MICROSOFT_GRAPH_APP_ID", "")
GRAPH_CLIENT_SECRET = os.environ.get("MICROSOFT_GRAPH_CLIENT_SECRET", "")

IMPORT_USER_ID = os.environ.get("IMPORT_USER_ID", "")
IMPORT_CALENDAR_NAME = os.environ.get("IMPORT_CALENDAR_NAME", "Calendar")
IMPORT_CATEGORY_ID = "other"
IMPORT_ID_PREFIX = "graph-"
IMPORT_DEFAULT_TITLE = "Imported event"
IMPORT_PAGE_SIZE = 100

# =============================================================================
# API CONFIGURATION
# =============================================================================

HEIMDALL_API_KEY = os.environ.get("HEIMDALL_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.2.0"
