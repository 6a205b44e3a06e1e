"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from api.models.responses import HealthResponse
from core.config import API_VERSION, DEFAULT_TIMEZONE, ReportConfig

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns 200 if healthy, 503 if the configured report timezone is unusable.
    """
    timestamp = datetime.now(timezone.utc).isoformat()

    try:
        ReportConfig(timezone=DEFAULT_TIMEZONE)
    except ValueError as e:
        return JSONResponse(
            status_code=503,
            content=HealthResponse(
                status="unhealthy",
                version=API_VERSION,
                timezone=DEFAULT_TIMEZONE,
                timezone_valid=False,
                timestamp=timestamp,
                error=str(e),
            ).model_dump(),
        )

    return HealthResponse(
        status="healthy",
        version=API_VERSION,
        timezone=DEFAULT_TIMEZONE,
        timezone_valid=True,
        timestamp=timestamp,
    )
