"""
Query module for the insights API.

This module owns everything between validated request parameters and the
warehouse:
- InsightQueryBuilder: builds bound-parameter statements for each endpoint
- QueryEngine: executes statements against the warehouse with a timeout
- Schemas: filter and pagination request types
"""

from .builder import InsightQueryBuilder
from .engine import QueryEngine
from .schemas import (
    # Request types
    FilterRequest,
    InsightFilters,
    FilterField,
    # Results
    QueryResult,
    # Defaults
    DEFAULT_LIMIT,
    DEFAULT_OFFSET,
    DEFAULT_MAX_LIMIT,
    MAX_OFFSET,
)

__all__ = [
    # Main classes
    "InsightQueryBuilder",
    "QueryEngine",
    # Request types
    "FilterRequest",
    "InsightFilters",
    "FilterField",
    "QueryResult",
    # Defaults
    "DEFAULT_LIMIT",
    "DEFAULT_OFFSET",
    "DEFAULT_MAX_LIMIT",
    "MAX_OFFSET",
]
