"""
Numeric and rate conversion utilities for projection calculations.

This module provides the lenient parsing and standardized rate conversions used
throughout the projection engine.

Conventions:
- All user inputs are strings or numbers; blanks and junk parse to a default
- All user rates are annual percentages (e.g., 5.0 = 5%)
- All calculations use decimal rates (e.g., 0.05 = 5%)
- Monthly rates are derived from annual rates: annual_decimal / 12
- Currency figures are rounded to cents only when a result row is emitted
"""

import math
from typing import Any, Optional, Union

from investisizer.utils.error_utils import error_handler

Number = Union[int, float]


def parse_number(value: Any, default: float = 0.0) -> float:
    """
    Parse a user-supplied numeric input leniently.

    Args:
        value: String, number, bool or None
        default: Value returned for blank, missing or unparseable input

    Returns:
        Parsed float, or ``default``

    Examples:
        >>> parse_number("7.5")
        7.5
        >>> parse_number("")
        0.0
        >>> parse_number(None, 20.0)
        20.0
        >>> parse_number("$1,500")
        1500.0
        >>> parse_number("abc")
        0.0
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        cleaned = str(value).strip().replace(",", "").replace("$", "").rstrip("%")
        if not cleaned:
            return default
        try:
            number = float(cleaned)
        except ValueError:
            return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def parse_int(value: Any, default: int = 0) -> int:
    """Parse an integer input, truncating decimals ("7.9" -> 7)."""
    return int(parse_number(value, float(default)))


def parse_optional_number(value: Any) -> Optional[float]:
    """Like parse_number but keeps the distinction between blank and zero."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    number = parse_number(value, float("nan"))
    return None if math.isnan(number) else number


def parse_bool(value: Any) -> bool:
    """Parse a flag that may arrive as a bool, number or string."""
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


@error_handler
def annual_pct_to_decimal(rate_pct: Union[float, str]) -> float:
    """
    Convert annual percentage rate to decimal format.

    Args:
        rate_pct: Annual rate as percentage (e.g., 5.0 for 5%)

    Returns:
        Annual rate as decimal (e.g., 0.05 for 5%)

    Examples:
        >>> annual_pct_to_decimal(5.0)
        0.05
        >>> annual_pct_to_decimal("7.5")
        0.075
    """
    return parse_number(rate_pct) / PERCENTAGE_TO_DECIMAL


@error_handler
def annual_pct_to_monthly_decimal(rate_pct: Union[float, str]) -> float:
    """
    Convert annual percentage rate directly to monthly decimal rate.

    Args:
        rate_pct: Annual rate as percentage (e.g., 6.0 for 6%)

    Returns:
        Monthly rate as decimal (e.g., 0.005 for 6% annually)

    Examples:
        >>> round(annual_pct_to_monthly_decimal(6.0), 6)
        0.005
        >>> round(annual_pct_to_monthly_decimal("5.0"), 6)
        0.004167
    """
    return annual_pct_to_decimal(rate_pct) / MONTHS_PER_YEAR


@error_handler
def growth_factor(rate_pct: Union[float, str], years: Number) -> float:
    """
    Compound growth factor for an annual percentage rate over whole years.

    Examples:
        >>> growth_factor(10, 2)
        1.2100000000000002
        >>> growth_factor(0, 30)
        1.0
    """
    return (1 + annual_pct_to_decimal(rate_pct)) ** years


@error_handler
def deflate(amount: float, inflation_pct: Union[float, str], years: Number) -> float:
    """
    Express a nominal amount in year-0 purchasing power.

    Args:
        amount: Nominal amount in year ``years``
        inflation_pct: Annual inflation as percentage
        years: Number of years since the start of the projection

    Returns:
        Real (inflation-adjusted) amount
    """
    return amount / growth_factor(inflation_pct, years)


def round_currency(amount: float) -> float:
    """Round a currency figure to cents."""
    return round(float(amount), 2)


@error_handler
def convert_duration_years_to_months(years: Union[float, int]) -> int:
    """
    Convert duration from years to months.

    Examples:
        >>> convert_duration_years_to_months(2.5)
        30
        >>> convert_duration_years_to_months(30)
        360
    """
    return round(float(years) * MONTHS_PER_YEAR)


@error_handler
def validate_rate_range(rate_pct: float, min_pct: float = -50.0, max_pct: float = 100.0) -> bool:
    """
    Validate that a percentage rate is within bounds (inclusive).

    Examples:
        >>> validate_rate_range(5.0)
        True
        >>> validate_rate_range(150.0)
        False
    """
    return min_pct <= rate_pct <= max_pct


# Convenience constants for common conversions
MONTHS_PER_YEAR = 12
PERCENTAGE_TO_DECIMAL = 100.0


# Module metadata
__version__ = "1.0.0"
__author__ = "Investisizer Contributors"
__description__ = "Numeric and rate conversion utilities for Investisizer"
