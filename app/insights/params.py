"""Parsing of raw HTTP query parameters into a FilterRequest."""

import re
from typing import Optional

from app.core.exceptions import InvalidParameterError
from app.query.schemas import (
    DEFAULT_LIMIT,
    DEFAULT_MAX_LIMIT,
    DEFAULT_OFFSET,
    FilterRequest,
    InsightFilters,
)

_UNSIGNED_INT = re.compile(r"[0-9]+")


def parse_int_param(name: str, raw: Optional[str], default: int) -> int:
    """Parse a non-negative base-10 integer parameter.

    The default applies only when the parameter is absent. A present value
    that is not plain digits ("", "abc", "1.5", "-1", "1e3") is rejected.
    """
    if raw is None:
        return default
    value = raw.strip()
    if not _UNSIGNED_INT.fullmatch(value):
        raise InvalidParameterError(f"{name} must be a non-negative integer, got {raw!r}")
    return int(value)


def _optional_filter(value: Optional[str]) -> Optional[str]:
    # Empty strings mean "not filtered"
    return value if value else None


def build_filter_request(
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    environment: Optional[str] = None,
    listing_id: Optional[str] = None,
    customer_id: Optional[str] = None,
    max_limit: int = DEFAULT_MAX_LIMIT,
) -> FilterRequest:
    """Validate listing parameters as they arrive on the query string."""
    filters = InsightFilters(
        environment=_optional_filter(environment),
        listing_id=_optional_filter(listing_id),
        customer_id=_optional_filter(customer_id),
    )
    return FilterRequest(
        limit=parse_int_param("limit", limit, DEFAULT_LIMIT),
        offset=parse_int_param("offset", offset, DEFAULT_OFFSET),
        filters=filters,
        max_limit=max_limit,
    )
