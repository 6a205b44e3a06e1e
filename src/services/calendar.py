"""
Calendar lookup and event fetching from MS Graph, plus JSON event files.
"""

import json
import logging
import re
from datetime import date, datetime, time, timedelta, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from kiota_abstractions.base_request_configuration import RequestConfiguration
from msgraph.generated.users.item.calendars.item.calendar_view.calendar_view_request_builder import (
    CalendarViewRequestBuilder,
)

from core.graph_client import get_graph_client
from core.hours import localize
from models.events import CalendarInfo, RawEvent

logger = logging.getLogger(__name__)

UTC = ZoneInfo("UTC")

# Graph returns 7 fractional digits ("2025-11-03T09:00:00.0000000")
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


class CalendarFetchError(RuntimeError):
    """Events could not be retrieved from the calendar source."""


def report_window(start_date: date, end_date: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """Half-open range from start_date 00:00 to the day after end_date, in tz."""
    start_dt = datetime.combine(start_date, time.min, tzinfo=tz)
    # End date should include the full day
    end_dt = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=tz)
    return start_dt, end_dt


def events_in_range(
    events: list[RawEvent], start_date: date, end_date: date, tz: tzinfo
) -> list[RawEvent]:
    """
    Keep events overlapping the report window, as the calendar view does.

    Naive event times are taken as local to tz.
    """
    start_dt, end_dt = (dt.astimezone(UTC) for dt in report_window(start_date, end_date, tz))
    return [
        e
        for e in events
        if localize(e.end, tz).astimezone(UTC) > start_dt and localize(e.start, tz).astimezone(UTC) < end_dt
    ]


# =============================================================================
# MS GRAPH
# =============================================================================


async def find_calendar(user_id: str, calendar_name: str) -> CalendarInfo:
    """
    Look up a user's calendar by name (case-insensitive).

    Raises:
        CalendarFetchError: Calendar listing failed or no calendar matched
    """
    graph = get_graph_client()

    try:
        calendars_response = await graph.users.by_user_id(user_id).calendars.get()
    except Exception as e:
        raise CalendarFetchError(f"Could not list calendars for {user_id}: {e}") from e

    calendars = calendars_response.value if calendars_response and calendars_response.value else []
    for calendar in calendars:
        if calendar.name and calendar.name.strip().lower() == calendar_name.strip().lower():
            return CalendarInfo(user_id=user_id, calendar_id=calendar.id, calendar_name=calendar.name)

    available = ", ".join(sorted(c.name for c in calendars if c.name)) or "none"
    raise CalendarFetchError(
        f"Calendar '{calendar_name}' not found for {user_id} (available: {available})"
    )


async def fetch_calendar_events(
    user_id: str, calendar_name: str, start_date: date, end_date: date, timezone: str
) -> list[RawEvent]:
    """
    Fetch all event instances from a calendar within a date range.

    Uses the calendar view so recurring events arrive as individual
    occurrences. The range covers start_date 00:00 through the end of end_date
    in the report timezone. Follows pagination links.

    Raises:
        CalendarFetchError: Any failure talking to MS Graph
    """
    calendar = await find_calendar(user_id, calendar_name)
    graph = get_graph_client()
    start_dt, end_dt = report_window(start_date, end_date, ZoneInfo(timezone))

    query_params = CalendarViewRequestBuilder.CalendarViewRequestBuilderGetQueryParameters(
        start_date_time=start_dt.isoformat(),
        end_date_time=end_dt.isoformat(),
        select=["subject", "start", "end", "isAllDay"],
        orderby=["start/dateTime"],
        top=100,
    )
    request_config = RequestConfiguration(query_parameters=query_params)

    calendar_view = (
        graph.users.by_user_id(user_id).calendars.by_calendar_id(calendar.calendar_id).calendar_view
    )

    events = []
    try:
        response = await calendar_view.get(request_configuration=request_config)
        while response:
            for graph_event in response.value or []:
                events.append(parse_graph_event(graph_event))
            if not response.odata_next_link:
                break
            response = await calendar_view.with_url(response.odata_next_link).get()
    except Exception as e:
        raise CalendarFetchError(
            f"Could not fetch events from '{calendar.calendar_name}' ({user_id}): {e}"
        ) from e

    logger.info("Fetched %d events from %s", len(events), calendar.calendar_name)
    return events


def parse_graph_datetime(value: str, time_zone: str | None) -> datetime:
    """Parse a Graph DateTimeTimeZone pair into an aware datetime (UTC if zone unknown)."""
    parsed = datetime.fromisoformat(_FRACTION_RE.sub(r"\1", value).replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        return parsed

    tz = UTC
    if time_zone:
        try:
            tz = ZoneInfo(time_zone)
        except (ZoneInfoNotFoundError, ValueError):
            logger.warning("Unknown Graph time zone %r, assuming UTC", time_zone)
    return parsed.replace(tzinfo=tz)


def parse_graph_event(event) -> RawEvent:
    """Parse MS Graph event into our format."""
    if not (event.start and event.start.date_time and event.end and event.end.date_time):
        raise ValueError(f"Event '{event.subject}' has no start/end time")

    return RawEvent(
        title=event.subject or "",
        start=parse_graph_datetime(event.start.date_time, event.start.time_zone),
        end=parse_graph_datetime(event.end.date_time, event.end.time_zone),
        all_day=bool(event.is_all_day),
    )


# =============================================================================
# JSON EVENT FILES
# =============================================================================


def parse_event_records(records: list[dict]) -> list[RawEvent]:
    """
    Convert plain event dicts into RawEvents.

    Each record needs "title", "start" and "end" (ISO 8601); "allDay" (or
    "all_day") is optional and defaults to False.

    Raises:
        ValueError: A record is missing fields or has unparseable instants
    """
    if not isinstance(records, list):
        raise ValueError("Events must be a list of objects")

    events = []
    errors = []
    for idx, record in enumerate(records):
        if not isinstance(record, dict):
            errors.append(f"Event {idx}: expected an object, got {type(record).__name__}")
            continue

        missing = [key for key in ("title", "start", "end") if record.get(key) is None]
        if missing:
            errors.append(f"Event {idx}: missing {', '.join(missing)}")
            continue

        try:
            start = datetime.fromisoformat(str(record["start"]).replace("Z", "+00:00"))
            end = datetime.fromisoformat(str(record["end"]).replace("Z", "+00:00"))
        except ValueError as e:
            errors.append(f"Event {idx}: {e}")
            continue

        events.append(
            RawEvent(
                title=str(record["title"]),
                start=start,
                end=end,
                all_day=bool(record.get("allDay", record.get("all_day", False))),
            )
        )

    if errors:
        raise ValueError("\n".join(errors))

    return events


def load_events_file(path: Path) -> list[RawEvent]:
    """
    Read events from a JSON file (a list of event objects).

    Raises:
        FileNotFoundError: File doesn't exist
        ValueError: Invalid JSON or invalid event records
    """
    if not path.exists():
        raise FileNotFoundError(f"Events file not found: {path}")

    try:
        records = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Events file is not valid JSON: {e}") from e

    return parse_event_records(records)
