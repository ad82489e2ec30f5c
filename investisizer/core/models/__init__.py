"""
Investisizer Core Models Package.

This package contains the asset models and the portfolio that groups them.
Assets own their input records; projections are derived on demand from those
inputs and the portfolio settings.

Modules:
    investment: Investment asset
    property: Property asset with rental and sale configuration
    portfolio: Portfolio collection, serialization and summary figures
"""

from investisizer.core.settings import PortfolioSettings
from investisizer.core.models.investment import Investment
from investisizer.core.models.property import Property
from investisizer.core.models.portfolio import (
    Portfolio,
    asset_from_dict,
)

__all__ = [
    "PortfolioSettings",
    "Investment",
    "Property",
    "Portfolio",
    "asset_from_dict",
]

__version__ = "1.0.0"
__author__ = "Investisizer Contributors"
