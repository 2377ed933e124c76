# app/logging/exception_handlers.py
"""App-wide handlers for errors that escape an endpoint.

Endpoints build their own error responses; these handlers keep the same
``{"error", "details"}`` shape for everything else (unknown routes, path
validation, unexpected exceptions).
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app.core.exceptions import InsightsAPIError

logger = logging.getLogger(__name__)


def convert_error(error: Any) -> Any:
    """Convert validation error payloads to JSON-safe values."""
    if isinstance(error, dict):
        return {k: convert_error(v) for k, v in error.items()}
    elif isinstance(error, (list, tuple)):
        return [convert_error(item) for item in error]
    elif error is None or isinstance(error, (bool, int, float, str)):
        return error
    return str(error)


async def insights_api_exception_handler(request: Request, exc: InsightsAPIError) -> JSONResponse:
    """Handle taxonomy errors raised outside an endpoint's own boundary."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_response_body())


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions. The traceback goes to the log only."""
    logger.error(
        "Unhandled error on %s %s",
        request.method,
        request.url.path,
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "details": str(exc)},
    )


async def response_validation_exception_handler(
    request: Request, exc: ResponseValidationError
) -> JSONResponse:
    logger.error(
        "Response validation failed on %s %s: %s",
        request.method,
        request.url.path,
        convert_error(exc.errors()),
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Internal Server Error", "details": "Response validation failed."},
    )


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request validation errors as client errors."""
    safe_errors = convert_error(exc.errors())
    logger.info("Invalid request on %s %s: %s", request.method, request.url.path, safe_errors)
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "details": str(safe_errors)},
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions, e.g. unknown routes."""
    if exc.status_code >= 500:
        logger.error("HTTP %s on %s %s: %s", exc.status_code, request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )
