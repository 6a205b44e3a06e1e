"""
Configuration constants and environment setup.
"""

import os
import re
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
OUTPUT_DIR = PROJECT_ROOT / "output"

# =============================================================================
# CALENDAR CONFIGURATION
# =============================================================================

CALENDAR_USER = os.environ.get("CALENDAR_USER", "")
CALENDAR_NAME = os.environ.get("CALENDAR_NAME", "Calendar")

# =============================================================================
# REPORT CONFIGURATION
# =============================================================================

CODE_PATTERN = r"^#(\S+)"  # e.g., "#ACME42 Design review" -> "ACME42"

DEFAULT_TIMEZONE = os.environ.get("REPORT_TIMEZONE", "UTC")

DETAIL_SHEET_NAME = "Report Details"
TOTALS_SHEET_NAME = "Summary"

DETAIL_HEADERS = ["Date", "Code", "Title", "Start", "End", "Hours"]
TOTALS_HEADERS = ["Code", "Total Hours"]
GRAND_TOTAL_LABEL = "GRAND TOTAL"

MIN_TABLE_ROWS = 12  # Minimum rows for better display in Numbers when few events

# =============================================================================
# MS GRAPH CREDENTIALS (from environment)
# =============================================================================

GRAPH_TENANT_ID = os.environ.get("MICROSOFT_GRAPH_TENANT_ID", "")
GRAPH_APP_ID = os.environ.get("MICROSOFT_GRAPH_APP_ID", "")
GRAPH_CLIENT_SECRET = os.environ.get("MICROSOFT_GRAPH_CLIENT_SECRET", "")

# =============================================================================
# API CONFIGURATION
# =============================================================================

HOURS_API_KEY = os.environ.get("HOURS_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
MAX_EVENTS_PER_REQUEST = int(os.environ.get("MAX_EVENTS_PER_REQUEST", "5000"))
API_VERSION = "1.0.0"


# =============================================================================
# PIPELINE CONFIGURATION
# =============================================================================


@dataclass(frozen=True)
class ReportConfig:
    """
    Settings passed explicitly into the report pipeline.

    Defaults come from the module constants above; construct a new instance to
    override any of them (tests, CLI flags, API request bodies).

    Raises:
        ValueError: Unknown timezone or invalid code pattern
    """

    timezone: str = DEFAULT_TIMEZONE
    code_pattern: str = CODE_PATTERN
    detail_sheet_name: str = DETAIL_SHEET_NAME
    totals_sheet_name: str = TOTALS_SHEET_NAME
    grand_total_label: str = GRAND_TOTAL_LABEL

    def __post_init__(self):
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: '{self.timezone}'") from e

        try:
            compiled = re.compile(self.code_pattern)
        except re.error as e:
            raise ValueError(f"Invalid code pattern '{self.code_pattern}': {e}") from e
        if compiled.groups < 1:
            raise ValueError(f"Code pattern must capture the code in a group: '{self.code_pattern}'")

    @property
    def tzinfo(self) -> tzinfo:
        return ZoneInfo(self.timezone)

    @property
    def code_regex(self) -> re.Pattern:
        return re.compile(self.code_pattern)
