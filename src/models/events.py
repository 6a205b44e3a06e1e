"""
Data models for calendar events and hours reports.

All models are frozen dataclasses: raw events come from the calendar and are
never modified, report rows are built once per report run.
"""

from dataclasses import dataclass, field
from datetime import datetime

from core.config import DETAIL_HEADERS, TOTALS_HEADERS


@dataclass(frozen=True)
class CalendarInfo:
    """Calendar lookup result."""
    user_id: str
    calendar_id: str
    calendar_name: str


@dataclass(frozen=True)
class RawEvent:
    """Calendar event as supplied by the calendar source."""
    title: str
    start: datetime
    end: datetime
    all_day: bool = False


@dataclass(frozen=True)
class ReportRow:
    """One line item in the detail sheet."""
    date: str  # YYYY-MM-DD
    code: str
    title: str
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    hours: float

    def as_list(self) -> list:
        return [self.date, self.code, self.title, self.start_time, self.end_time, self.hours]


@dataclass(frozen=True)
class TotalsRow:
    """Hours for one project code, or the grand total."""
    code: str
    hours: float

    def as_list(self) -> list:
        return [self.code, self.hours]


@dataclass(frozen=True)
class HoursReport:
    """Sorted detail rows and totals for one report run."""

    rows: list[ReportRow]
    totals: list[TotalsRow]
    detail_headers: list[str] = field(default_factory=lambda: list(DETAIL_HEADERS))
    totals_headers: list[str] = field(default_factory=lambda: list(TOTALS_HEADERS))
    events_received: int = 0

    @property
    def grand_total(self) -> float:
        return self.totals[-1].hours if self.totals else 0.0

    @property
    def code_totals(self) -> list[TotalsRow]:
        """Totals rows without the trailing grand total."""
        return self.totals[:-1]

    def detail_table(self) -> list[list]:
        """Header plus one row per event: [date, code, title, start, end, hours]."""
        return [list(self.detail_headers)] + [row.as_list() for row in self.rows]

    def totals_table(self) -> list[list]:
        """Header plus one row per code, ending with the grand total row."""
        return [list(self.totals_headers)] + [total.as_list() for total in self.totals]
