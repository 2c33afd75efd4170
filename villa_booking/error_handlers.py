"""
Render booking errors as structured JSON responses.

Expected outcomes (validation, conflicts, bad coupons) carry enough detail
for the UI to explain what went wrong. Anything unexpected is logged with
its traceback and returned as a bare 500.
"""

from __future__ import annotations

from typing import cast

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from villa_booking.core.errors import (
    BookingError,
    DateConflict,
    Forbidden,
    InvalidTransition,
    NotFound,
    Unauthorized,
)

logger = structlog.get_logger(__name__)

STATUS_CODES: dict[type[BookingError], int] = {
    DateConflict: 409,
    InvalidTransition: 409,
    NotFound: 404,
    Unauthorized: 401,
    Forbidden: 403,
}


def status_code_for(error: BookingError) -> int:
    for cls in type(error).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return 400


async def booking_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = cast(BookingError, exc)
    status_code = status_code_for(error)
    logger.info(
        "request_rejected",
        path=request.url.path,
        error=error.code,
        status_code=status_code,
    )
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(error, Unauthorized) else None
    return JSONResponse(status_code=status_code, content=error.to_dict(), headers=headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request_failed", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "internal_error",
            "message": "Internal server error",
            "details": {},
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookingError, booking_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
