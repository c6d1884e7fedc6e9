"""Utility functions shared across the invoice engine."""
from __future__ import annotations

import math
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Mapping, Optional

from dateutil import parser

Accessor = Callable[[Any], Any]


def is_blank(value: Any) -> bool:
    """Return True for None and for strings that are empty after stripping."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def to_number(value: Any, default: float = 0.0) -> float:
    """Coerce a loosely typed value to float; blanks and garbage give ``default``.

    Strings may carry thousands separators or a rupee sign. NaN and infinity
    are treated as garbage so they never reach computed output.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, (str, Decimal)):
        cleaned = str(value).replace("₹", "").replace(",", "").strip()
        if not cleaned:
            return default
        try:
            number = float(cleaned)
        except ValueError:
            return default
    else:
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def field(key: str) -> Accessor:
    """Accessor reading ``key`` from a mapping row."""

    def read(row: Any) -> Any:
        if isinstance(row, Mapping):
            return row.get(key)
        return None

    return read


def nested(key: str, inner: str) -> Accessor:
    """Accessor reading ``row[key][inner]`` when ``row[key]`` is itself a mapping."""

    def read(row: Any) -> Any:
        if not isinstance(row, Mapping):
            return None
        child = row.get(key)
        if isinstance(child, Mapping):
            return child.get(inner)
        return None

    return read


def first_of(*accessors: Accessor) -> Accessor:
    """Combine accessors into one that returns the first non-blank result.

    Accessors run in order and evaluation stops at the first hit, so later
    accessors (e.g. an id lookup) are only consulted when needed. Returns None
    when every accessor comes up blank.
    """

    def resolve(row: Any) -> Any:
        for accessor in accessors:
            value = accessor(row)
            if not is_blank(value):
                return value
        return None

    return resolve


def parse_date(value: Any) -> Optional[date]:
    """Parse a date string into a date object; returns None on failure."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if is_blank(value) or not isinstance(value, str):
        return None
    try:
        return parser.isoparse(value).date()
    except (ValueError, OverflowError):
        try:
            return parser.parse(value, dayfirst=True).date()
        except (ValueError, TypeError, OverflowError):
            return None


def safe_decimal(value: Any) -> Optional[Decimal]:
    """Convert to Decimal if possible, else None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = Decimal(str(value).replace(",", "").strip())
    except (InvalidOperation, ValueError):
        return None
    if not result.is_finite():
        return None
    return result


def approx_equal(a: Optional[float], b: Optional[float], tolerance: float = 1e-6) -> bool:
    """Check if two money-like values are equal within an absolute tolerance."""
    if a is None or b is None:
        return False
    return abs(a - b) < tolerance
