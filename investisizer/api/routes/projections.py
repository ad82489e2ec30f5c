"""
Projection API endpoints.

Stateless wrappers over the projection engine: every request builds fresh
models from the posted records, projects them and returns the rows.
"""

import logging
import math

from fastapi import APIRouter

from investisizer.api.schemas import (
    AmortizationRequest,
    AmortizationResponse,
    AmortizationRow,
    InvestmentProjectionRequest,
    InvestmentProjectionResponse,
    PortfolioProjectionRequest,
    PortfolioProjectionResponse,
    PropertyProjectionRequest,
    PropertyProjectionResponse,
)
from investisizer.core.engine.amortization import build_amortization_schedule
from investisizer.core.engine.investment_projector import investment_warnings, project_investment
from investisizer.core.engine.property_projector import project_property
from investisizer.core.models import Portfolio, PortfolioSettings
from investisizer.core.validation import validate_investment, validate_property
from investisizer.utils.rate_utils import parse_number

logger = logging.getLogger(__name__)

router = APIRouter()


def _settings(schema) -> PortfolioSettings:
    return PortfolioSettings.from_dict(schema.model_dump(exclude_none=True))


@router.post("/portfolio", response_model=PortfolioProjectionResponse)
def project_portfolio(request: PortfolioProjectionRequest):
    """
    Project a whole portfolio.

    Returns the combined yearly series, every asset's standalone rows (disabled
    assets included) and the linked cash flow series of each investment.
    """
    portfolio = Portfolio.from_dict(
        {
            "settings": request.settings.model_dump(exclude_none=True),
            "assets": [asset.model_dump(exclude_none=True) for asset in request.assets],
        }
    )
    aggregator = portfolio.aggregator()

    asset_results = {asset.id: aggregator.asset_results(asset) for asset in portfolio.assets_list}
    linked_cash_flows = {
        investment.id: aggregator.get_linked_property_cash_flows(investment.id)
        for investment in portfolio.investments
    }
    logger.debug(f"Projected portfolio with {len(asset_results)} asset(s) over {portfolio.settings.years} years")

    return PortfolioProjectionResponse(
        settings=portfolio.settings.to_dict(),
        combined_results=aggregator.combined_results(),
        asset_results=asset_results,
        linked_cash_flows=linked_cash_flows,
        summary=portfolio.summary(),
    )


@router.post("/property", response_model=PropertyProjectionResponse)
def project_single_property(request: PropertyProjectionRequest):
    settings = _settings(request.settings)
    projection = project_property(request.inputs, settings)
    return PropertyProjectionResponse(
        results=projection.results,
        monthly_payment=round(projection.monthly_payment, 2),
        principal_interest_payment=round(projection.principal_interest_payment, 2),
        sale_summary=projection.disposition,
        validation=validate_property(request.inputs, settings.years).to_dict(),
    )


@router.post("/investment", response_model=InvestmentProjectionResponse)
def project_single_investment(request: InvestmentProjectionRequest):
    settings = _settings(request.settings)
    rows = project_investment(request.inputs, settings, request.property_cash_flows)
    return InvestmentProjectionResponse(
        results=rows,
        warnings=investment_warnings(rows, request.inputs, request.property_cash_flows, settings.years),
        validation=validate_investment(request.inputs).to_dict(),
    )


@router.post("/amortization", response_model=AmortizationResponse)
def amortization_schedule(request: AmortizationRequest):
    """Yearly schedule for a fixed-rate loan; ``years`` defaults to the loan term."""
    years = request.years or max(1, math.ceil(parse_number(request.term_years)))
    schedule = build_amortization_schedule(request.loan_amount, request.annual_rate_pct, request.term_years, years)
    return AmortizationResponse(
        monthly_payment=schedule.attrs["monthly_payment"],
        schedule=[
            AmortizationRow(
                year=int(row.year),
                principal_paid=float(row.principal_paid),
                interest_paid=float(row.interest_paid),
                mortgage_balance=float(row.mortgage_balance),
            )
            for row in schedule.itertuples(index=False)
        ],
    )
