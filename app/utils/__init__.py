# app/utils/__init__.py
"""Utility functions package"""

import math
from decimal import Decimal, InvalidOperation
from typing import Any

from app.core.exceptions import ResultCoercionError

# Largest integer a JSON consumer using IEEE-754 doubles represents exactly
MAX_SAFE_INTEGER = 2**53 - 1


def coerce_count(value: Any, field_name: str = "value") -> int:
    """
    Convert a warehouse integer aggregate to a plain int.

    Warehouses hand back counts and sums as int, Decimal (NUMERIC) or numeric
    strings (INT64 over some transports). NULL, as SUM() returns on an empty
    table, becomes 0.

    Raises:
        ResultCoercionError: the value is not integral, or its magnitude is
            above MAX_SAFE_INTEGER and would lose precision in the client.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ResultCoercionError(f"{field_name} is a boolean, expected an integer")

    try:
        number = Decimal(str(value)) if not isinstance(value, Decimal) else value
    except (InvalidOperation, ValueError) as e:
        raise ResultCoercionError(f"{field_name} is not numeric: {value!r}") from e

    if not number.is_finite() or number != number.to_integral_value():
        raise ResultCoercionError(f"{field_name} is not an integer: {value!r}")

    result = int(number)
    if abs(result) > MAX_SAFE_INTEGER:
        raise ResultCoercionError(
            f"{field_name} {result} exceeds the safe integer limit {MAX_SAFE_INTEGER}"
        )
    return result


def coerce_average(value: Any, field_name: str = "value") -> float:
    """Convert a warehouse average to float. NULL (empty table) becomes 0.0."""
    if value is None:
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError) as e:
        raise ResultCoercionError(f"{field_name} is not numeric: {value!r}") from e
    if not math.isfinite(result):
        raise ResultCoercionError(f"{field_name} is not finite: {value!r}")
    return result
