# app/core/exceptions.py
"""Error taxonomy for the insights API.

Each error knows the HTTP status it maps to and the short, stable ``error``
summary that is returned to callers. Anything diagnostic goes in ``details``.
"""

from typing import Any, Dict, Optional


class InsightsAPIError(Exception):
    """Base class for errors that endpoints turn into JSON responses."""

    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, details: Optional[str] = None, error: Optional[str] = None):
        super().__init__(details or error or self.error)
        self.details = details
        if error is not None:
            self.error = error

    def to_response_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidParameterError(InsightsAPIError):
    """A client-supplied parameter is malformed or out of range."""

    status_code = 400
    error = "Invalid query parameter"


class InsightNotFoundError(InsightsAPIError):
    """An id lookup matched no rows."""

    status_code = 404
    error = "Insight not found"


class WarehouseExecutionError(InsightsAPIError):
    """The warehouse call failed: network, auth, quota, bad SQL or timeout."""

    status_code = 500
    error = "Warehouse query failed"


class ResultCoercionError(WarehouseExecutionError):
    """A warehouse value could not be converted into a JSON-safe number."""
