"""API Pydantic models."""

from .requests import EventIn, ReportRequest
from .responses import ErrorCodes, ErrorResponse, HealthResponse, ReportResponse

__all__ = [
    "EventIn",
    "ReportRequest",
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "ReportResponse",
]
