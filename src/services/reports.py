"""
Hours report pipeline and spreadsheet output (Excel and Numbers formats).
"""

import logging
from datetime import date
from io import BytesIO
from pathlib import Path

from numbers_parser import Document
from openpyxl import Workbook
from openpyxl.styles import Font

from core.config import MIN_TABLE_ROWS, ReportConfig
from core.hours import compute_hours, localize, round_hours
from core.validation import extract_project_code, filter_events
from models.events import HoursReport, RawEvent, ReportRow, TotalsRow

logger = logging.getLogger(__name__)

HOURS_NUMBER_FORMAT = "0.00"


# =============================================================================
# ROW BUILDING
# =============================================================================


def build_report_row(event: RawEvent, config: ReportConfig) -> ReportRow:
    """Normalize a qualifying event into a detail row."""
    tz = config.tzinfo
    start = localize(event.start, tz)
    end = localize(event.end, tz)

    return ReportRow(
        date=start.strftime("%Y-%m-%d"),
        code=extract_project_code(event.title, config.code_regex),
        title=event.title,
        start_time=start.strftime("%H:%M"),
        end_time=end.strftime("%H:%M"),
        hours=compute_hours(start, end),
    )


def sort_report_rows(rows: list[ReportRow]) -> list[ReportRow]:
    """Order rows by code, then date, then start time (plain string comparison)."""
    return sorted(rows, key=lambda r: (r.code, r.date, r.start_time))


# =============================================================================
# AGGREGATION
# =============================================================================


def aggregate_totals(rows: list[ReportRow], grand_total_label: str) -> list[TotalsRow]:
    """
    Total hours per project code, followed by a grand total row.

    Per-code totals sum the already-rounded row hours and are rounded again.
    The grand total is a separate running sum over the row hours, rounded once
    at the end, so it can differ from the sum of the per-code totals.
    """
    hours_by_code: dict[str, float] = {}
    grand_total = 0.0

    for row in rows:
        hours_by_code[row.code] = hours_by_code.get(row.code, 0.0) + row.hours
        grand_total += row.hours

    totals = [
        TotalsRow(code=code, hours=round_hours(hours_by_code[code]))
        for code in sorted(hours_by_code)
    ]
    totals.append(TotalsRow(code=grand_total_label, hours=round_hours(grand_total)))
    return totals


# =============================================================================
# PIPELINE
# =============================================================================


def build_report(events: list[RawEvent], config: ReportConfig) -> HoursReport | None:
    """
    Turn raw calendar events into a sorted, totalled hours report.

    Returns:
        HoursReport, or None when no event qualifies (caller reports "no events")
    """
    qualifying = filter_events(events, config)
    if not qualifying:
        return None

    rows = sort_report_rows([build_report_row(e, config) for e in qualifying])
    totals = aggregate_totals(rows, config.grand_total_label)

    report = HoursReport(rows=rows, totals=totals, events_received=len(events))
    logger.info(
        "Built report: %d rows, %d codes, %.2f total hours",
        len(rows),
        len(report.code_totals),
        report.grand_total,
    )
    return report


# =============================================================================
# EXCEL OUTPUT
# =============================================================================


def write_excel_table(ws, table: list[list], hours_col: int, bold_last_row: bool = False):
    """
    Write a header + rows table to an Excel worksheet.

    Args:
        ws: openpyxl worksheet
        table: Header row followed by data rows
        hours_col: 1-based column holding hour values (gets 0.00 format)
        bold_last_row: Bold the final row (grand total)
    """
    for row_idx, values in enumerate(table, start=1):
        for col_idx, value in enumerate(values, start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            if row_idx == 1:
                cell.font = Font(bold=True)
            elif col_idx == hours_col:
                cell.number_format = HOURS_NUMBER_FORMAT

    if bold_last_row and len(table) > 1:
        for cell in ws[len(table)]:
            cell.font = Font(bold=True)


def _build_workbook(report: HoursReport, config: ReportConfig) -> Workbook:
    wb = Workbook()

    # Sheet 1: line item detail
    ws_detail = wb.active
    ws_detail.title = config.detail_sheet_name
    write_excel_table(ws_detail, report.detail_table(), hours_col=6)
    column_widths = {"A": 12, "B": 14, "C": 48, "D": 8, "E": 8, "F": 8}
    for col_letter, width in column_widths.items():
        ws_detail.column_dimensions[col_letter].width = width
    ws_detail.freeze_panes = "A2"

    # Sheet 2: totals per code
    ws_totals = wb.create_sheet(title=config.totals_sheet_name)
    write_excel_table(ws_totals, report.totals_table(), hours_col=2, bold_last_row=True)
    ws_totals.column_dimensions["A"].width = 18
    ws_totals.column_dimensions["B"].width = 12

    return wb


def create_excel_report(report: HoursReport, output_path: Path, config: ReportConfig):
    """Create Excel report with detail and totals sheets."""
    wb = _build_workbook(report, config)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(output_path))
    print(f"Saved Excel report to: {output_path}")


def report_to_excel_bytes(report: HoursReport, config: ReportConfig) -> bytes:
    """Render the Excel report in memory (for API usage)."""
    buffer = BytesIO()
    _build_workbook(report, config).save(buffer)
    buffer.seek(0)
    return buffer.getvalue()


# =============================================================================
# NUMBERS OUTPUT
# =============================================================================


def write_numbers_table(table, rows: list[list]):
    """Write header + data rows to a Numbers table."""
    for row_idx, values in enumerate(rows):
        for col_idx, value in enumerate(values):
            table.write(row_idx, col_idx, value)


def create_numbers_report(report: HoursReport, output_path: Path, config: ReportConfig):
    """
    Create Numbers report with detail and totals sheets.

    Sheet 1 - line items, one row per event.
    Sheet 2 - hours per code plus grand total.
    """
    detail = report.detail_table()
    totals = report.totals_table()

    doc = Document(
        sheet_name=config.detail_sheet_name,
        table_name=config.detail_sheet_name,
        num_rows=max(len(detail), MIN_TABLE_ROWS),
        num_cols=len(report.detail_headers),
        num_header_rows=1,
    )
    detail_table = doc.sheets[config.detail_sheet_name].tables[config.detail_sheet_name]
    write_numbers_table(detail_table, detail)

    doc.add_sheet(
        config.totals_sheet_name,
        table_name=config.totals_sheet_name,
        num_rows=len(totals),
        num_cols=len(report.totals_headers),
    )
    totals_table = doc.sheets[config.totals_sheet_name].tables[config.totals_sheet_name]
    write_numbers_table(totals_table, totals)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    doc.save(str(output_path))
    print(f"Saved Numbers report to: {output_path}")


# =============================================================================
# FILE HELPERS
# =============================================================================

REPORT_WRITERS = {
    ".xlsx": create_excel_report,
    ".numbers": create_numbers_report,
}


def write_report(report: HoursReport, output_path: Path, config: ReportConfig):
    """Write the report in the format implied by the file suffix."""
    writer = REPORT_WRITERS.get(output_path.suffix.lower())
    if writer is None:
        supported = ", ".join(sorted(REPORT_WRITERS))
        raise ValueError(f"Unsupported report format '{output_path.suffix}' (supported: {supported})")
    writer(report, output_path, config)


def generate_report_filename(start_date: date, end_date: date, suffix: str = ".xlsx") -> str:
    """
    Build the report filename for a date range.

    Example: hours_report_2025_11_01_to_2025_11_30.xlsx
    """
    return f"hours_report_{start_date.strftime('%Y_%m_%d')}_to_{end_date.strftime('%Y_%m_%d')}{suffix}"
