"""
Project code extraction and event filtering.
"""

import logging
import re

from core.config import CODE_PATTERN, ReportConfig
from core.hours import duration_ms, localize
from models.events import RawEvent

logger = logging.getLogger(__name__)

_DEFAULT_CODE_REGEX = re.compile(CODE_PATTERN)


def extract_project_code(title: str, pattern: re.Pattern | str = _DEFAULT_CODE_REGEX) -> str:
    """
    Extract the project code from a title like '#ACME42 Design review'.

    Only a '#' at the very start of the title counts. The code runs up to the
    first whitespace character or the end of the title.

    Returns:
        The code, or "" when the title carries none
    """
    if isinstance(pattern, str):
        pattern = re.compile(pattern)
    match = pattern.match(title or "")
    if not match:
        return ""
    return match.group(1) or ""


def rejection_reason(event: RawEvent, config: ReportConfig) -> str | None:
    """
    Check whether an event qualifies for the report.

    Checks:
    1. Title starts with a project code
    2. Event is not all-day
    3. Duration is strictly positive

    Returns:
        Reason the event is excluded, or None if it qualifies
    """
    if not extract_project_code(event.title, config.code_regex):
        return "no project code"

    if event.all_day:
        return "all-day event"

    tz = config.tzinfo
    if duration_ms(localize(event.start, tz), localize(event.end, tz)) <= 0:
        return "non-positive duration"

    return None


def is_qualifying_event(event: RawEvent, config: ReportConfig) -> bool:
    return rejection_reason(event, config) is None


def filter_events(events: list[RawEvent], config: ReportConfig) -> list[RawEvent]:
    """Keep qualifying events in their original order. Never raises for bad events."""
    qualifying = []
    for event in events:
        reason = rejection_reason(event, config)
        if reason:
            logger.debug("Skipping event %r: %s", event.title, reason)
            continue
        qualifying.append(event)

    logger.info("%d of %d events qualify for the report", len(qualifying), len(events))
    return qualifying
