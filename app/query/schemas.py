"""
Query building schemas and types for the insights API.

This module defines the request types the InsightQueryBuilder consumes. They
validate themselves on construction so a builder never sees a bad limit or
offset.
"""

from typing import Dict, List, Optional, Any, Tuple
from dataclasses import dataclass, field
from enum import Enum

from app.core.exceptions import InvalidParameterError

DEFAULT_LIMIT = 100
DEFAULT_OFFSET = 0
DEFAULT_MAX_LIMIT = 1000
# Largest OFFSET the warehouse accepts (BigQuery INT64)
MAX_OFFSET = 2**63 - 1


class FilterField(str, Enum):
    """Equality filters accepted by the listing query, in emission order."""

    ENVIRONMENT = "environment"
    LISTING_ID = "listingId"
    CUSTOMER_ID = "customerId"


@dataclass(frozen=True)
class InsightFilters:
    """Optional equality filters. ``None`` means no predicate, not a wildcard."""

    environment: Optional[str] = None
    listing_id: Optional[str] = None
    customer_id: Optional[str] = None

    def items(self) -> List[Tuple[FilterField, str]]:
        """Active filters in deterministic order: environment, listingId, customerId."""
        candidates = [
            (FilterField.ENVIRONMENT, self.environment),
            (FilterField.LISTING_ID, self.listing_id),
            (FilterField.CUSTOMER_ID, self.customer_id),
        ]
        return [(name, value) for name, value in candidates if value is not None]

    def as_dict(self) -> Dict[str, str]:
        """Active filters keyed by their query parameter name, for logging."""
        return {name.value: value for name, value in self.items()}

    def is_empty(self) -> bool:
        return not self.items()


@dataclass(frozen=True)
class FilterRequest:
    """Parameters for building a paginated listing query."""

    limit: int = DEFAULT_LIMIT
    offset: int = DEFAULT_OFFSET
    filters: InsightFilters = field(default_factory=InsightFilters)
    max_limit: int = DEFAULT_MAX_LIMIT

    def __post_init__(self) -> None:
        # bool is an int subclass; True must not pass as limit=1
        if not isinstance(self.limit, int) or isinstance(self.limit, bool):
            raise InvalidParameterError(f"limit must be an integer, got {self.limit!r}")
        if not isinstance(self.offset, int) or isinstance(self.offset, bool):
            raise InvalidParameterError(f"offset must be an integer, got {self.offset!r}")
        if self.limit < 1 or self.limit > self.max_limit:
            raise InvalidParameterError(
                f"limit must be between 1 and {self.max_limit}, got {self.limit}"
            )
        if self.offset < 0 or self.offset > MAX_OFFSET:
            raise InvalidParameterError(
                f"offset must be between 0 and {MAX_OFFSET}, got {self.offset}"
            )


@dataclass
class QueryResult:
    """A compiled statement: SQL text with placeholders plus its bound parameters."""

    sql: str
    parameters: Dict[str, Any]
