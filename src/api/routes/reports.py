"""Hours report endpoints."""

import asyncio
import logging
import time
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from api.dependencies import verify_api_key
from api.models.requests import ReportRequest
from api.models.responses import ErrorCodes, ReportResponse
from core.config import DEFAULT_TIMEZONE, DETAIL_HEADERS, MAX_EVENTS_PER_REQUEST, TOTALS_HEADERS, ReportConfig
from models.events import HoursReport
from services.reports import build_report, generate_report_filename, report_to_excel_bytes

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1")

NO_EVENTS_MESSAGE = "No events found with a project code"


def _config_for(body: ReportRequest) -> ReportConfig:
    """Build the pipeline config for a request, mapping bad settings to 422."""
    try:
        return ReportConfig(timezone=body.timezone or DEFAULT_TIMEZONE)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "Invalid report configuration",
                "code": ErrorCodes.VALIDATION_ERROR,
                "details": [str(e)],
            },
        )


def _check_size(body: ReportRequest):
    if len(body.events) > MAX_EVENTS_PER_REQUEST:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail={
                "error": f"Request exceeds maximum of {MAX_EVENTS_PER_REQUEST} events",
                "code": ErrorCodes.TOO_MANY_EVENTS,
                "details": [f"Events received: {len(body.events)}"],
            },
        )


def _build(body: ReportRequest, config: ReportConfig) -> HoursReport | None:
    return build_report([event.to_raw_event() for event in body.events], config)


@router.post("/reports", response_model=ReportResponse)
async def create_report_endpoint(
    body: ReportRequest,
    _api_key: str = Depends(verify_api_key),
):
    """
    Build an hours report from posted calendar events.

    Returns the detail and totals tables as JSON. When no event qualifies the
    tables hold only their headers and `message` says so.
    """
    start_time = time.time()
    _check_size(body)
    config = _config_for(body)

    report = _build(body, config)
    elapsed_ms = int((time.time() - start_time) * 1000)

    if report is None:
        logger.info("POST /v1/reports: %d events, none qualified (%d ms)", len(body.events), elapsed_ms)
        return ReportResponse(
            timezone=config.timezone,
            events_received=len(body.events),
            events_reported=0,
            grand_total=0.0,
            detail=[list(DETAIL_HEADERS)],
            totals=[list(TOTALS_HEADERS)],
            message=NO_EVENTS_MESSAGE,
        )

    logger.info(
        "POST /v1/reports: %d events, %d reported, %.2f hours (%d ms)",
        len(body.events),
        len(report.rows),
        report.grand_total,
        elapsed_ms,
    )
    return ReportResponse(
        timezone=config.timezone,
        events_received=report.events_received,
        events_reported=len(report.rows),
        grand_total=report.grand_total,
        detail=report.detail_table(),
        totals=report.totals_table(),
    )


@router.post("/reports/export")
async def export_report_endpoint(
    body: ReportRequest,
    _api_key: str = Depends(verify_api_key),
):
    """
    Build an hours report and return it as an Excel workbook.

    Responds 422 NO_EVENTS_FOUND when no event qualifies.
    """
    start_time = time.time()
    _check_size(body)
    config = _config_for(body)

    report = _build(body, config)
    if report is None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": NO_EVENTS_MESSAGE,
                "code": ErrorCodes.NO_EVENTS_FOUND,
                "details": [f"Events received: {len(body.events)}"],
            },
        )

    # Use thread pool for workbook rendering
    excel_bytes = await asyncio.to_thread(report_to_excel_bytes, report, config)
    first_date = date.fromisoformat(min(r.date for r in report.rows))
    last_date = date.fromisoformat(max(r.date for r in report.rows))
    filename = generate_report_filename(first_date, last_date)

    logger.info(
        "POST /v1/reports/export: %d rows, %d bytes (%d ms)",
        len(report.rows),
        len(excel_bytes),
        int((time.time() - start_time) * 1000),
    )
    return Response(
        content=excel_bytes,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
