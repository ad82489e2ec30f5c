"""
Utility modules for Investisizer.

This package contains reusable utility functions for lenient input parsing,
rate conversions, and error handling throughout the application.
"""

from investisizer.utils.rate_utils import (
    parse_number,
    parse_int,
    parse_optional_number,
    parse_bool,
    annual_pct_to_decimal,
    annual_pct_to_monthly_decimal,
    growth_factor,
    deflate,
    round_currency,
    convert_duration_years_to_months,
    validate_rate_range,
    MONTHS_PER_YEAR,
    PERCENTAGE_TO_DECIMAL,
)

from investisizer.utils.error_utils import (
    InvestisizerError,
    error_handler,
    logger,
)

__all__ = [
    # Parsing
    "parse_number",
    "parse_int",
    "parse_optional_number",
    "parse_bool",
    # Rate utilities
    "annual_pct_to_decimal",
    "annual_pct_to_monthly_decimal",
    "growth_factor",
    "deflate",
    "round_currency",
    "convert_duration_years_to_months",
    "validate_rate_range",
    "MONTHS_PER_YEAR",
    "PERCENTAGE_TO_DECIMAL",
    # Error handling
    "InvestisizerError",
    "error_handler",
    "logger",
]

__version__ = "1.0.0"
