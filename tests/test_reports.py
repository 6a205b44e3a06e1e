"""Tests for the hours report pipeline: rows, sorting, totals."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from core.config import ReportConfig
from models.events import HoursReport, RawEvent, ReportRow
from services.reports import aggregate_totals, build_report, build_report_row, sort_report_rows


def row(code, hours=1.0, date="2025-11-03", start="09:00", title=None):
    return ReportRow(
        date=date,
        code=code,
        title=title or f"#{code} work",
        start_time=start,
        end_time="10:00",
        hours=hours,
    )


# =============================================================================
# ROW BUILDING
# =============================================================================


def test_build_report_row(config, make_event):
    result = build_report_row(make_event("#T1 x", "09:00", "10:30"), config)
    assert result == ReportRow(
        date="2025-11-03",
        code="T1",
        title="#T1 x",
        start_time="09:00",
        end_time="10:30",
        hours=1.5,
    )


def test_build_report_row_formats_in_report_timezone(make_event):
    config = ReportConfig(timezone="America/New_York")
    # 02:00-03:15 UTC is the previous evening in New York (EST, UTC-5)
    result = build_report_row(make_event("#T1 late", "02:00", "03:15"), config)
    assert result.date == "2025-11-02"
    assert result.start_time == "21:00"
    assert result.end_time == "22:15"
    assert result.hours == 1.25


def test_build_report_row_keeps_title_unmodified(config, make_event):
    title = "#ACME  Design review   "
    assert build_report_row(make_event(title), config).title == title


# =============================================================================
# SORTING
# =============================================================================


def test_sort_by_code_first():
    rows = [row("B", title="b1"), row("A"), row("B", title="b2")]
    assert [r.code for r in sort_report_rows(rows)] == ["A", "B", "B"]


def test_sort_by_date_then_start_time():
    rows = [
        row("A", date="2025-11-04", start="08:00"),
        row("A", date="2025-11-03", start="13:00"),
        row("A", date="2025-11-03", start="09:30"),
    ]
    result = sort_report_rows(rows)
    assert [(r.date, r.start_time) for r in result] == [
        ("2025-11-03", "09:30"),
        ("2025-11-03", "13:00"),
        ("2025-11-04", "08:00"),
    ]


def test_sort_is_ordinal_not_case_insensitive():
    rows = [row("b"), row("B"), row("a"), row("A10"), row("A2")]
    assert [r.code for r in sort_report_rows(rows)] == ["A10", "A2", "B", "a", "b"]


def test_sort_is_stable_for_full_ties_and_returns_new_list():
    rows = [row("A", title="first"), row("A", title="second")]
    result = sort_report_rows(rows)
    assert [r.title for r in result] == ["first", "second"]
    assert result is not rows


# =============================================================================
# AGGREGATION
# =============================================================================


def test_aggregate_totals():
    rows = [row("A", 1.5), row("A", 0.5), row("B", 2.0)]
    totals = aggregate_totals(rows, "GRAND TOTAL")
    assert [t.as_list() for t in totals] == [["A", 2.0], ["B", 2.0], ["GRAND TOTAL", 4.0]]


def test_aggregate_sorts_codes_not_insertion_order():
    rows = [row("ZED", 1.0), row("ALPHA", 1.0), row("MID", 1.0)]
    totals = aggregate_totals(rows, "GRAND TOTAL")
    assert [t.code for t in totals] == ["ALPHA", "MID", "ZED", "GRAND TOTAL"]


def test_aggregate_rounds_summed_row_hours():
    # 0.1 + 0.2 is 0.30000000000000004 in floating point
    rows = [row("A", 0.1), row("A", 0.2), row("B", 0.33), row("B", 0.33), row("B", 0.33)]
    totals = aggregate_totals(rows, "GRAND TOTAL")
    assert [t.as_list() for t in totals] == [["A", 0.3], ["B", 0.99], ["GRAND TOTAL", 1.29]]


def test_aggregate_empty_rows():
    assert [t.as_list() for t in aggregate_totals([], "GRAND TOTAL")] == [["GRAND TOTAL", 0.0]]


def test_aggregate_custom_grand_total_label():
    totals = aggregate_totals([row("A", 1.0)], "Total")
    assert totals[-1].code == "Total"


# =============================================================================
# PIPELINE
# =============================================================================


def test_build_report_end_to_end(config, sample_events):
    report = build_report(sample_events, config)

    assert [r.title for r in report.rows] == [
        "#TEST1 Morning standup",
        "#TEST1 Afternoon review",
        "#TEST2 Client call",
    ]
    assert [t.as_list() for t in report.totals] == [
        ["TEST1", 1.5],
        ["TEST2", 2.0],
        ["GRAND TOTAL", 3.5],
    ]
    assert report.grand_total == 3.5
    assert report.events_received == 5


def test_build_report_tables(config, sample_events):
    report = build_report(sample_events, config)

    assert report.detail_table() == [
        ["Date", "Code", "Title", "Start", "End", "Hours"],
        ["2025-11-03", "TEST1", "#TEST1 Morning standup", "09:00", "09:30", 0.5],
        ["2025-11-03", "TEST1", "#TEST1 Afternoon review", "14:00", "15:00", 1.0],
        ["2025-11-03", "TEST2", "#TEST2 Client call", "10:00", "12:00", 2.0],
    ]
    assert report.totals_table() == [
        ["Code", "Total Hours"],
        ["TEST1", 1.5],
        ["TEST2", 2.0],
        ["GRAND TOTAL", 3.5],
    ]


def test_build_report_returns_none_without_qualifying_events(config, make_event):
    events = [make_event("Lunch"), make_event("#ZERO x", "10:00", "10:00")]
    assert build_report(events, config) is None
    assert build_report([], config) is None


def test_build_report_is_idempotent(config, sample_events):
    first = build_report(sample_events, config)
    second = build_report(sample_events, config)
    assert first == second
    assert first.detail_table() == second.detail_table()


def test_build_report_does_not_mutate_input(config, sample_events):
    snapshot = list(sample_events)
    build_report(sample_events, config)
    assert sample_events == snapshot


def test_build_report_across_days_sorted(config):
    utc = ZoneInfo("UTC")
    events = [
        RawEvent("#B later", datetime(2025, 11, 5, 9, tzinfo=utc), datetime(2025, 11, 5, 10, tzinfo=utc)),
        RawEvent("#A second", datetime(2025, 11, 4, 9, tzinfo=utc), datetime(2025, 11, 4, 11, tzinfo=utc)),
        RawEvent("#A first", datetime(2025, 11, 3, 15, tzinfo=utc), datetime(2025, 11, 3, 15, 45, tzinfo=utc)),
    ]
    report = build_report(events, config)
    assert [r.title for r in report.rows] == ["#A first", "#A second", "#B later"]
    assert [t.as_list() for t in report.totals] == [["A", 2.75], ["B", 1.0], ["GRAND TOTAL", 3.75]]


@pytest.mark.parametrize("timezone", ["UTC", "Europe/Berlin", "Asia/Tokyo"])
def test_build_report_totals_do_not_depend_on_timezone(sample_events, timezone):
    report = build_report(sample_events, ReportConfig(timezone=timezone))
    assert report.grand_total == 3.5


def test_build_report_row_across_dst_change():
    config = ReportConfig(timezone="Europe/Berlin")
    utc = ZoneInfo("UTC")
    event = RawEvent(
        "#T1 overnight",
        datetime(2025, 3, 30, 0, 30, tzinfo=utc),
        datetime(2025, 3, 30, 2, 30, tzinfo=utc),
    )
    result = build_report_row(event, config)
    assert (result.start_time, result.end_time) == ("01:30", "04:30")
    assert result.hours == 2.0


def test_hours_report_default_headers():
    report = HoursReport(rows=[row("A", 1.0)], totals=aggregate_totals([row("A", 1.0)], "GRAND TOTAL"))
    assert report.detail_table()[0] == ["Date", "Code", "Title", "Start", "End", "Hours"]
    assert report.totals_table()[0] == ["Code", "Total Hours"]
