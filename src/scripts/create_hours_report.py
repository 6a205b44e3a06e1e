#!/usr/bin/env python3
"""
Create a project hours report from '#CODE' tagged calendar events.

Fetches events from an MS365 calendar (or a JSON events file), keeps the
timed events whose title starts with '#CODE', and writes a two-sheet report:
line item detail plus total hours per code with a grand total.

Usage:
    uv run python src/scripts/create_hours_report.py --start 2025-11-01 --end 2025-11-30
    uv run python src/scripts/create_hours_report.py --events-file events.json --format numbers
"""

import argparse
import asyncio
import logging
import sys
import traceback
from datetime import date, datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import CALENDAR_NAME, CALENDAR_USER, DEFAULT_TIMEZONE, OUTPUT_DIR, ReportConfig
from services.calendar import events_in_range, fetch_calendar_events, load_events_file
from services.reports import build_report, generate_report_filename, write_report


# =============================================================================
# DATE UTILITIES
# =============================================================================


def parse_date(value: str | None, default: date) -> date:
    """Parse a YYYY-MM-DD string, falling back to default when empty."""
    if not value:
        return default
    return datetime.strptime(value, "%Y-%m-%d").date()


def get_report_date_range(start_str: str | None, end_str: str | None) -> tuple[date, date]:
    """
    Calculate date range for the report.

    Defaults to the 1st of the current month through today.

    Raises:
        ValueError: Bad date format or start after end
    """
    today = date.today()
    end_date = parse_date(end_str, today)
    start_date = parse_date(start_str, end_date.replace(day=1))

    if start_date > end_date:
        raise ValueError(f"Start date {start_date} is after end date {end_date}")

    return start_date, end_date


# =============================================================================
# MAIN
# =============================================================================


async def main(args: argparse.Namespace) -> Path | None:
    """Main entry point. Returns the report path, or None when no events qualified."""
    try:
        # 1. Configuration and date range
        config = ReportConfig(timezone=args.timezone)
        start_date, end_date = get_report_date_range(args.start, args.end)
        print(f"Generating hours report for {start_date} to {end_date} ({config.timezone})")

        # 2. Fetch events
        if args.events_file:
            print(f"Reading events from {args.events_file}...")
            all_events = load_events_file(Path(args.events_file))
            events = events_in_range(all_events, start_date, end_date, config.tzinfo)
            if len(events) < len(all_events):
                print(f"  Skipped {len(all_events) - len(events)} events outside the date range")
        else:
            if not args.user:
                raise ValueError("No calendar user given (use --user or set CALENDAR_USER)")
            print(f"Fetching events from '{args.calendar}' ({args.user})...")
            events = await fetch_calendar_events(
                args.user, args.calendar, start_date, end_date, config.timezone
            )
        print(f"  Found {len(events)} events")

        # 3. Filter, sort and total
        report = build_report(events, config)
        if report is None:
            print("No events found with a project code for this period.")
            return None

        print(f"  {len(report.rows)} events across {len(report.code_totals)} project code(s)")
        for total in report.totals:
            print(f"    {total.code}: {total.hours:.2f}")

        # 4. Write report
        suffix = f".{args.format}"
        if args.output:
            output_path = Path(args.output)
        else:
            output_path = OUTPUT_DIR / "reports" / generate_report_filename(start_date, end_date, suffix)
        write_report(report, output_path, config)

        print("\nDone!")
        return output_path

    except Exception as e:
        print(f"\nError: {e}")
        traceback.print_exc()
        raise


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate project hours report from calendar events")
    parser.add_argument("--start", help="First day (YYYY-MM-DD). Defaults to the 1st of the end month.")
    parser.add_argument("--end", help="Last day, inclusive (YYYY-MM-DD). Defaults to today.")
    parser.add_argument("--user", default=CALENDAR_USER, help="Calendar owner (user id or email).")
    parser.add_argument("--calendar", default=CALENDAR_NAME, help="Calendar name.")
    parser.add_argument("--events-file", help="Read events from a JSON file instead of MS Graph.")
    parser.add_argument("--timezone", default=DEFAULT_TIMEZONE, help="IANA timezone for dates and times.")
    parser.add_argument("--format", choices=["xlsx", "numbers"], default="xlsx", help="Output format.")
    parser.add_argument("--output", help="Output file path. Defaults to output/reports/.")
    parser.add_argument("--verbose", action="store_true", help="Log skipped events and pipeline details.")
    return parser


if __name__ == "__main__":
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        asyncio.run(main(args))
    except Exception:
        sys.exit(1)
