import getpass
import logging
import os
import platform
import socket
import time
from typing import Awaitable, Callable, Optional, Sequence

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger("app.request")

DEFAULT_EXCLUDED_PATHS = ("/api/docs", "/api/redoc", "/api/openapi.json")


def resolve_username() -> str:
    # Try multiple methods to get the username for cross-platform support
    try:
        return (
            os.environ.get("USER")
            or os.environ.get("USERNAME")
            or getpass.getuser()
            or "unknown_user"
        )
    except Exception:
        return "unknown_user"


def resolve_hostname() -> str:
    try:
        return socket.gethostname() or platform.node() or "unknown_host"
    except Exception:
        return "unknown_host"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request with status and processing time."""

    def __init__(
        self,
        app: ASGIApp,
        application_id: str = "Unknown",
        excluded_paths: Optional[Sequence[str]] = None,
    ):
        super().__init__(app)
        self.username = resolve_username()
        self.hostname = resolve_hostname()
        self.application_id = application_id
        self.excluded_paths = tuple(excluded_paths if excluded_paths is not None else DEFAULT_EXCLUDED_PATHS)

        logger.debug(
            "Request logging initialized with username: %s on host: %s, App ID: %s",
            self.username,
            self.hostname,
            self.application_id,
        )

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        # Skip logging for excluded paths
        if any(request.url.path.startswith(path) for path in self.excluded_paths):
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            extra={
                "method": request.method,
                "path": request.url.path,
                "query": request.url.query,
                "status_code": response.status_code,
                "processing_time": duration_ms,
                "client_ip": request.client.host if request.client else None,
                "user_agent": request.headers.get("user-agent"),
                "username": self.username,
                "hostname": self.hostname,
                "application_id": self.application_id,
            },
        )
        return response
