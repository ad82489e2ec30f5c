"""
Pydantic schemas for API request/response validation.

These schemas provide:
- Request shape validation
- Response serialization
- OpenAPI documentation generation

Asset inputs stay loose (string-or-number values) because the engine parses
them leniently; blank or malformed numbers become 0 instead of a 422.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from investisizer.core.constants import (
    DEFAULT_INFLATION_RATE,
    DEFAULT_PROJECTION_YEARS,
)


# ======================
# Enums
# ======================


class AssetType(str, Enum):
    """Asset type enumeration."""

    INVESTMENT = "investment"
    PROPERTY = "property"


# ======================
# Base Schemas
# ======================


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        validate_assignment=True,
        use_enum_values=True,
    )


NumberLike = Union[float, str]


# ======================
# Settings and Asset Schemas
# ======================


class SettingsSchema(BaseSchema):
    """Portfolio-wide projection settings."""

    years: Union[int, str] = Field(default=DEFAULT_PROJECTION_YEARS, description="Projection length in years (min 1)")
    inflation_rate: NumberLike = Field(default=DEFAULT_INFLATION_RATE, description="Annual inflation as percentage")
    starting_year: Optional[int] = Field(None, description="Calendar year of year 0 (defaults to current year)")


class AssetSchema(BaseSchema):
    """A serialized investment or property."""

    id: Optional[str] = Field(None, description="Asset id; generated when omitted")
    name: Optional[str] = Field(None, max_length=255)
    type: AssetType
    enabled: bool = True
    inputs: Dict[str, Any] = Field(default_factory=dict)


class ValidationSchema(BaseSchema):
    """Advisory validation messages for one asset."""

    errors: List[str] = []
    warnings: List[str] = []
    is_valid: bool = True


# ======================
# Projection Schemas
# ======================


class PortfolioProjectionRequest(BaseSchema):
    """Schema for whole-portfolio projection requests."""

    settings: SettingsSchema = Field(default_factory=SettingsSchema)
    assets: List[AssetSchema] = []


class PortfolioProjectionResponse(BaseSchema):
    """Combined series plus each asset's own rows and linked cash flows."""

    settings: Dict[str, Any]
    combined_results: List[Dict[str, Any]]
    asset_results: Dict[str, List[Dict[str, Any]]]
    linked_cash_flows: Dict[str, List[float]] = Field(
        default_factory=dict, description="Investment id -> net linked property cash flow for years 1..N"
    )
    summary: Dict[str, Any]


class PropertyProjectionRequest(BaseSchema):
    """Schema for a standalone property projection."""

    settings: SettingsSchema = Field(default_factory=SettingsSchema)
    inputs: Dict[str, Any] = Field(default_factory=dict, description="Property inputs with nested sale_config")


class PropertyProjectionResponse(BaseSchema):
    """Property rows with the sale disposition when one falls inside the projection."""

    results: List[Dict[str, Any]]
    monthly_payment: float
    principal_interest_payment: float
    sale_summary: Optional[Dict[str, Any]] = None
    validation: ValidationSchema


class InvestmentProjectionRequest(BaseSchema):
    """Schema for a standalone investment projection."""

    settings: SettingsSchema = Field(default_factory=SettingsSchema)
    inputs: Dict[str, Any] = Field(default_factory=dict)
    property_cash_flows: Optional[List[float]] = Field(
        None, description="Linked property cash flow per year; index 0 is year 1"
    )


class InvestmentProjectionResponse(BaseSchema):
    """Investment rows with projection warnings."""

    results: List[Dict[str, Any]]
    warnings: List[str] = []
    validation: ValidationSchema


class AmortizationRequest(BaseSchema):
    """Schema for a standalone amortization schedule."""

    loan_amount: float = Field(..., ge=0)
    annual_rate_pct: NumberLike = Field(..., description="Annual interest rate as percentage")
    term_years: NumberLike = Field(..., description="Loan term in years")
    years: Optional[int] = Field(None, ge=1, description="Years to emit (defaults to the loan term)")


class AmortizationRow(BaseSchema):
    """One year of an amortization schedule."""

    year: int
    principal_paid: float
    interest_paid: float
    mortgage_balance: float


class AmortizationResponse(BaseSchema):
    """Monthly payment and yearly schedule."""

    monthly_payment: float
    schedule: List[AmortizationRow]


# ======================
# Tax Schemas
# ======================


class StateTaxResponse(BaseSchema):
    """State capital gains tax table entry."""

    code: str
    name: str
    has_capital_gains_tax: bool
    rate: float
    notes: str
    is_simplified: bool = False


class SaleTaxRequest(BaseSchema):
    """Schema for sale tax calculations.

    ``tax_profile`` takes the flat sale configuration keys: filing_status,
    annual_income, state, enable_state_tax, other_capital_gains,
    carryover_losses, the Section 121 keys and the depreciation keys.
    """

    capital_gain: float
    tax_profile: Dict[str, Any] = Field(default_factory=dict)


class SaleTaxResponse(BaseSchema):
    """Breakdown of taxes owed on a sale."""

    capital_gain: float
    taxable_gain: float
    federal_tax: float
    federal_rate: float
    state_tax: float
    state_rate: float
    state_name: str
    state_notes: str
    exclusion: Dict[str, Any]
    recapture_amount: float
    recapture_tax: float
    total_tax: float
