"""
Shared helpers for the calculation engine.

Input checks and the output rounding convention used by every calculator.
"""

import math
from typing import Optional

from app.calculations.errors import InvalidInputError

MIN_TERM_YEARS = 1
MAX_TERM_YEARS = 50

# Accepted ranges for percentage inputs (0-100 scale)
MAX_RATE_PERCENT = 30.0
MAX_TAX_RATE_PERCENT = 10.0
MAX_INSURANCE_RATE_PERCENT = 5.0
MIN_GROWTH_PERCENT = -20.0
MAX_GROWTH_PERCENT = 50.0
MAX_RENT_INCREASE_PERCENT = 20.0
MAX_TAX_BRACKET_PERCENT = 50.0

MAX_PROPERTY_PRICE = 100_000_000


def round_currency(value: float) -> float:
    """Round a currency amount to cents for output."""
    return round(value, 2)


def round_percent(value: float) -> float:
    """Round a 0-100 scale percentage for output."""
    return round(value, 2)


def require_finite(field: str, value: float) -> float:
    """Reject NaN and infinite inputs."""
    if value is None or not math.isfinite(value):
        raise InvalidInputError(field, "must be a finite number", value)
    return float(value)


def require_non_negative(field: str, value: float) -> float:
    value = require_finite(field, value)
    if value < 0:
        raise InvalidInputError(field, "must not be negative", value)
    return value


def require_positive(field: str, value: float) -> float:
    value = require_finite(field, value)
    if value <= 0:
        raise InvalidInputError(field, "must be greater than zero", value)
    return value


def require_range(
    field: str,
    value: float,
    low: Optional[float] = None,
    high: Optional[float] = None,
) -> float:
    """Require low <= value <= high (either bound may be omitted)."""
    value = require_finite(field, value)
    if low is not None and value < low:
        raise InvalidInputError(field, f"must be at least {low}", value)
    if high is not None and value > high:
        raise InvalidInputError(field, f"must be at most {high}", value)
    return value


def require_term_years(field: str, value: int) -> int:
    """Loan terms and horizons are whole years in [1, 50]."""
    if isinstance(value, bool) or not isinstance(value, int):
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        else:
            raise InvalidInputError(field, "must be a whole number of years", value)
    if value < MIN_TERM_YEARS or value > MAX_TERM_YEARS:
        raise InvalidInputError(
            field, f"must be between {MIN_TERM_YEARS} and {MAX_TERM_YEARS} years", value
        )
    return value
