"""Pydantic request models for API endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from models.events import RawEvent


class EventIn(BaseModel):
    """Calendar event as posted by the client."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    start: datetime
    end: datetime
    all_day: bool = Field(default=False, alias="allDay")

    def to_raw_event(self) -> RawEvent:
        return RawEvent(title=self.title, start=self.start, end=self.end, all_day=self.all_day)


class ReportRequest(BaseModel):
    """Report generation request body."""

    timezone: str | None = None  # server default when omitted
    events: list[EventIn]
