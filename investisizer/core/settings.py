"""
Portfolio-wide projection settings.

Every projection call receives a PortfolioSettings instance explicitly; assets
never hold a reference back to the portfolio they belong to.
"""

import logging
from datetime import date
from typing import Any, Dict, Optional

from investisizer.core.constants import (
    DEFAULT_PROJECTION_YEARS,
    DEFAULT_INFLATION_RATE,
    MIN_PROJECTION_YEARS,
)
from investisizer.utils.rate_utils import parse_int, parse_number

logger = logging.getLogger(__name__)


class PortfolioSettings:
    """
    Shared projection parameters.

    Attributes:
        years: Projection length in whole years (clamped to at least 1)
        inflation_rate: Annual inflation as percentage
        starting_year: Calendar year of projection year 0
    """

    def __init__(
        self,
        years: Any = DEFAULT_PROJECTION_YEARS,
        inflation_rate: Any = DEFAULT_INFLATION_RATE,
        starting_year: Optional[Any] = None,
    ):
        self.years = years
        self.inflation_rate = parse_number(inflation_rate)
        self.starting_year = parse_int(starting_year, date.today().year)

    @property
    def years(self) -> int:
        return self._years

    @years.setter
    def years(self, value: Any):
        parsed = parse_int(value, DEFAULT_PROJECTION_YEARS)
        if parsed < MIN_PROJECTION_YEARS:
            logger.debug(f"Projection length {value!r} clamped to {MIN_PROJECTION_YEARS}")
            parsed = MIN_PROJECTION_YEARS
        self._years = parsed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "years": self.years,
            "inflation_rate": self.inflation_rate,
            "starting_year": self.starting_year,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'PortfolioSettings':
        data = data or {}
        return cls(
            years=data.get("years", DEFAULT_PROJECTION_YEARS),
            inflation_rate=data.get("inflation_rate", DEFAULT_INFLATION_RATE),
            starting_year=data.get("starting_year"),
        )

    def __repr__(self) -> str:
        return (
            f"PortfolioSettings(years={self.years}, inflation_rate={self.inflation_rate}, "
            f"starting_year={self.starting_year})"
        )
