"""
Investisizer Core Engine Package.

This package contains the projection engines. Every function is a pure
computation over input records and PortfolioSettings.

Modules:
    amortization: Mortgage payment and amortization math
    tax_calculator: Capital gains, Section 121, recapture and state tax
    property_projector: Yearly property projection with sale disposition
    investment_projector: Yearly investment projection with linked cash flows
    portfolio_aggregator: Link resolution and combined portfolio results
"""

from investisizer.core.engine.amortization import (
    calculate_monthly_payment,
    build_amortization_schedule,
)
from investisizer.core.engine.tax_calculator import calculate_sale_taxes
from investisizer.core.engine.property_projector import PropertyProjection, project_property
from investisizer.core.engine.investment_projector import project_investment
from investisizer.core.engine.portfolio_aggregator import PortfolioAggregator

__all__ = [
    "calculate_monthly_payment",
    "build_amortization_schedule",
    "calculate_sale_taxes",
    "PropertyProjection",
    "project_property",
    "project_investment",
    "PortfolioAggregator",
]

__version__ = "1.0.0"
__author__ = "Investisizer Contributors"
