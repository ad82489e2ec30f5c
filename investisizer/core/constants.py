"""
Core constants and enumerations for Investisizer.

This module defines the asset type tags, enumerations, default input records,
and financial parameters used throughout the projection engine.
"""

from enum import Enum


class EAssetType:
    """Asset type tags used for dispatch and serialization"""
    INVESTMENT = "investment"
    PROPERTY = "property"


class EGrowthModel:
    """How a property's value is grown over the projection"""
    PURCHASE_PRICE = "purchase_price"
    CURRENT_VALUE = "current_value"


class FilingStatus(Enum):
    """
    Federal filing status for capital gains.

    The value is the key used in the input records and the tax tables.
    """
    SINGLE = "single"
    MARRIED_JOINT = "married_joint"
    MARRIED_SEPARATE = "married_separate"
    HEAD_OF_HOUSEHOLD = "head_of_household"

    @classmethod
    def from_value(cls, value) -> 'FilingStatus':
        """Resolve a raw input value, falling back to SINGLE for unknown statuses."""
        if isinstance(value, cls):
            return value
        for status in cls:
            if status.value == value:
                return status
        return cls.SINGLE

    @property
    def label(self) -> str:
        labels = {
            FilingStatus.SINGLE: "Single",
            FilingStatus.MARRIED_JOINT: "Married Filing Jointly",
            FilingStatus.MARRIED_SEPARATE: "Married Filing Separately",
            FilingStatus.HEAD_OF_HOUSEHOLD: "Head of Household",
        }
        return labels[self]


# Portfolio settings defaults
DEFAULT_PROJECTION_YEARS = 10
DEFAULT_INFLATION_RATE = "2.5"
MIN_PROJECTION_YEARS = 1

# Mortgage defaults used when the input is blank
DEFAULT_DOWN_PAYMENT_PCT = 20.0
DEFAULT_LOAN_TERM_YEARS = 30.0

# Listing events per year for each percentage point of vacancy (10% -> 0.8)
LISTING_EVENTS_PER_VACANCY_PCT = 0.08

# Section 121 requirements
SECTION_121_MIN_YEARS = 2
SECTION_121_EXCLUSION_SINGLE = 250000.0
SECTION_121_EXCLUSION_MARRIED_JOINT = 500000.0

# Section 1250 unrecaptured gain rate
DEPRECIATION_RECAPTURE_RATE = 0.25

# Straight-line recovery periods
RESIDENTIAL_RECOVERY_YEARS = 27.5
COMMERCIAL_RECOVERY_YEARS = 39.0


DEFAULT_INVESTMENT_INPUTS = {
    "initial_amount": "10000",
    "rate_of_return": "7",
    "annual_contribution": "5000",
    "inflation_adjusted_contributions": False,
}

DEFAULT_SALE_CONFIG = {
    "is_planned_for_sale": False,
    "sale_year": None,
    "sale_month": 6,
    "use_projected_value": True,
    "expected_sale_price": None,
    "selling_costs_percentage": 7,
    "reinvest_proceeds": True,
    "target_investment_id": None,
    # Basis adjustments
    "capital_improvements": "",
    "original_buying_costs": "",
    # Tax profile
    "filing_status": FilingStatus.SINGLE.value,
    "annual_income": "",
    "state": "",
    "enable_state_tax": True,
    "other_capital_gains": "",
    "carryover_losses": "",
    # Section 121
    "enable_section121": True,
    "is_primary_residence": False,
    "years_owned": "",
    "years_lived": "",
    "has_used_exclusion_in_last_two_years": False,
    # Depreciation recapture
    "enable_depreciation_recapture": False,
    "total_depreciation_taken": "",
    "land_value_percentage": "20",
}

DEFAULT_PROPERTY_INPUTS = {
    "purchase_price": "500000",
    "down_payment_percentage": "20",
    "interest_rate": "7",
    "loan_term": "30",
    "years_bought": "0",
    "property_growth_rate": "3",
    "property_growth_model": EGrowthModel.PURCHASE_PRICE,
    "current_estimated_value": "",
    "monthly_payment": "",
    "linked_investment_id": "",
    # Rental
    "is_rental_property": False,
    "monthly_rent": "2000",
    "rent_growth_rate": "3",
    "vacancy_rate": "5",
    "annual_expenses": "",
    "expense_growth_rate": "",
    "maintenance_rate": "2",
    "property_management_enabled": False,
    "listing_fee_rate": "100",
    "monthly_management_fee_rate": "10",
}


# Module metadata
__version__ = "1.0.0"
__author__ = "Investisizer Contributors"
__description__ = "Core constants and enumerations for Investisizer"
