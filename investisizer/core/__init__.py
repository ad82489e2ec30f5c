"""
Core modules for Investisizer.

This package contains the asset models, constants, tax tables, validation
rules and the projection engines.
"""

from investisizer.core.constants import (
    EAssetType,
    EGrowthModel,
    FilingStatus,
    DEFAULT_INVESTMENT_INPUTS,
    DEFAULT_PROPERTY_INPUTS,
    DEFAULT_SALE_CONFIG,
)

__all__ = [
    "EAssetType",
    "EGrowthModel",
    "FilingStatus",
    "DEFAULT_INVESTMENT_INPUTS",
    "DEFAULT_PROPERTY_INPUTS",
    "DEFAULT_SALE_CONFIG",
]

__version__ = "1.0.0"
