"""FastAPI dependencies for the report endpoints."""

import secrets

from fastapi import Header, HTTPException, status

from api.models.responses import ErrorCodes, ErrorResponse
from core.config import HOURS_API_KEY


def _error(status_code: int, message: str, code: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail=ErrorResponse(error=message, code=code).model_dump(),
    )


async def verify_api_key(x_api_key: str = Header(..., alias="X-API-Key")) -> str:
    """
    Check the X-API-Key header against HOURS_API_KEY.

    Raises:
        HTTPException: 500 when the server has no key configured, 401 on mismatch
    """
    if not HOURS_API_KEY:
        raise _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "API key not configured on server",
            ErrorCodes.INTERNAL_ERROR,
        )

    if not secrets.compare_digest(x_api_key.encode(), HOURS_API_KEY.encode()):
        raise _error(
            status.HTTP_401_UNAUTHORIZED,
            "Invalid or missing API key",
            ErrorCodes.UNAUTHORIZED,
        )

    return x_api_key
