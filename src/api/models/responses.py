"""Pydantic response models for API endpoints."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    timezone: str
    timezone_valid: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    TOO_MANY_EVENTS = "TOO_MANY_EVENTS"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NO_EVENTS_FOUND = "NO_EVENTS_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ReportResponse(BaseModel):
    """Detail and totals tables for a report request."""

    timezone: str
    events_received: int
    events_reported: int
    grand_total: float
    detail: list[list[str | float]]  # header row first
    totals: list[list[str | float]]  # header row first, grand total last
    message: str | None = None
