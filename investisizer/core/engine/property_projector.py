"""
Year-by-year projection of a single property.

Combines value growth, mortgage amortization, the rental income and expense
model and, when a sale is planned, a one-time disposition with capital gains
tax. The projection is a pure function of the input record and the portfolio
settings; net sale proceeds are reported on the sale-year row and routed to a
target investment by the portfolio aggregator, never added to the property.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from investisizer.core.constants import (
    DEFAULT_DOWN_PAYMENT_PCT,
    DEFAULT_LOAN_TERM_YEARS,
    DEFAULT_SALE_CONFIG,
    EGrowthModel,
    LISTING_EVENTS_PER_VACANCY_PCT,
)
from investisizer.core.engine.amortization import (
    advance_history,
    amortize_year,
    calculate_monthly_payment,
)
from investisizer.core.engine.tax_calculator import calculate_sale_taxes, calculate_total_depreciation
from investisizer.utils.error_utils import error_handler
from investisizer.utils.rate_utils import (
    annual_pct_to_monthly_decimal,
    deflate,
    growth_factor,
    parse_bool,
    parse_int,
    parse_number,
    parse_optional_number,
    round_currency,
    MONTHS_PER_YEAR,
)

logger = logging.getLogger(__name__)

RESULT_COLUMNS = [
    "year",
    "actual_year",
    "balance",
    "real_balance",
    "mortgage_balance",
    "monthly_payment",
    "principal_interest_payment",
    "other_fees_payment",
    "principal_paid",
    "interest_paid",
    "annual_cash_flow",
    "annual_rental_income",
    "total_rental_expenses",
    "maintenance_expenses",
    "listing_expenses",
    "monthly_management_expenses",
    "is_sale_year",
    "is_post_sale",
    "sale_price",
    "sale_proceeds",
    "pre_sale_mortgage_balance",
]


class PropertyProjection:
    """
    Result of projecting one property.

    Attributes:
        results: One row per year 0..N (see RESULT_COLUMNS)
        disposition: Sale breakdown, or None when no sale falls inside the projection
        monthly_payment: Total monthly payment (override or computed P+I)
        principal_interest_payment: Computed P+I payment
    """

    def __init__(
        self,
        results: List[Dict[str, Any]],
        disposition: Optional[Dict[str, Any]],
        monthly_payment: float,
        principal_interest_payment: float,
    ):
        self.results = results
        self.disposition = disposition
        self.monthly_payment = monthly_payment
        self.principal_interest_payment = principal_interest_payment

    @property
    def sale_year(self) -> Optional[int]:
        return self.disposition["sale_year"] if self.disposition else None

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.results, columns=RESULT_COLUMNS)


def parse_property_inputs(inputs: Mapping[str, Any], default_inflation: float = 0.0) -> Dict[str, Any]:
    """
    Normalize a raw property input record into numbers and flags.

    Blank down payment and loan term fall back to 20% and 30 years; a blank
    inflation rate falls back to the portfolio's.
    """
    return {
        "purchase_price": parse_number(inputs.get("purchase_price")),
        "down_payment_pct": parse_number(inputs.get("down_payment_percentage"), DEFAULT_DOWN_PAYMENT_PCT),
        "interest_rate": parse_number(inputs.get("interest_rate")),
        "loan_term": parse_number(inputs.get("loan_term"), DEFAULT_LOAN_TERM_YEARS),
        "inflation_rate": parse_number(inputs.get("inflation_rate"), default_inflation),
        "years_bought": max(0, parse_int(inputs.get("years_bought"))),
        "growth_rate": parse_number(inputs.get("property_growth_rate")),
        "growth_model": inputs.get("property_growth_model") or EGrowthModel.PURCHASE_PRICE,
        "current_estimated_value": parse_number(inputs.get("current_estimated_value")),
        "payment_override": parse_number(inputs.get("monthly_payment")),
        "is_rental": parse_bool(inputs.get("is_rental_property", False)),
        "monthly_rent": parse_number(inputs.get("monthly_rent")),
        "rent_growth_rate": parse_number(inputs.get("rent_growth_rate")),
        "vacancy_rate": parse_number(inputs.get("vacancy_rate")),
        "annual_expenses": parse_number(inputs.get("annual_expenses")),
        "expense_growth_rate": parse_number(inputs.get("expense_growth_rate")),
        "maintenance_rate": parse_number(inputs.get("maintenance_rate")),
        "management_enabled": parse_bool(inputs.get("property_management_enabled", False)),
        "listing_fee_rate": parse_number(inputs.get("listing_fee_rate")),
        "management_fee_rate": parse_number(inputs.get("monthly_management_fee_rate")),
    }


def loan_amount(parsed: Mapping[str, Any]) -> float:
    return parsed["purchase_price"] * (1 - parsed["down_payment_pct"] / 100.0)


def property_value(parsed: Mapping[str, Any], year: int) -> float:
    """Market value at projection year ``year`` under the selected growth model."""
    if parsed["growth_model"] == EGrowthModel.CURRENT_VALUE and parsed["current_estimated_value"] > 0:
        return parsed["current_estimated_value"] * growth_factor(parsed["growth_rate"], year)
    return parsed["purchase_price"] * growth_factor(parsed["growth_rate"], parsed["years_bought"] + year)


def calculate_rental_figures(parsed: Mapping[str, Any], year: int, value: float) -> Dict[str, float]:
    """
    Rental income and expenses for one projection year.

    Listing costs assume 0.08 tenant turnovers per year for each point of
    vacancy, each costing ``listing_fee_rate`` percent of a month's rent.
    Listing and monthly management fees only apply with management enabled.
    """
    monthly_rent = parsed["monthly_rent"] * growth_factor(parsed["rent_growth_rate"], year)
    income = monthly_rent * MONTHS_PER_YEAR * (1 - parsed["vacancy_rate"] / 100.0)

    maintenance = value * parsed["maintenance_rate"] / 100.0
    other_expenses = parsed["annual_expenses"] * growth_factor(parsed["expense_growth_rate"], year)

    listing = 0.0
    management = 0.0
    if parsed["management_enabled"]:
        listings_per_year = LISTING_EVENTS_PER_VACANCY_PCT * parsed["vacancy_rate"]
        listing = listings_per_year * monthly_rent * parsed["listing_fee_rate"] / 100.0
        management = income * parsed["management_fee_rate"] / 100.0

    return {
        "annual_rental_income": income,
        "total_rental_expenses": other_expenses + maintenance + listing + management,
        "maintenance_expenses": maintenance,
        "listing_expenses": listing,
        "monthly_management_expenses": management,
    }


def resolve_sale_config(inputs: Mapping[str, Any]) -> Dict[str, Any]:
    """Sale configuration with defaults filled in for missing keys."""
    sale_config = dict(DEFAULT_SALE_CONFIG)
    sale_config.update(inputs.get("sale_config") or {})
    return sale_config


def planned_sale_year(sale_config: Mapping[str, Any], years: int) -> Optional[int]:
    """Sale year if a sale is planned inside [1, years], else None."""
    if not parse_bool(sale_config.get("is_planned_for_sale", False)):
        return None
    sale_year = parse_int(sale_config.get("sale_year"), 0)
    if sale_year < 1 or sale_year > years:
        logger.debug(f"Sale year {sale_config.get('sale_year')!r} outside 1..{years}, sale ignored")
        return None
    return sale_year


@error_handler
def calculate_disposition(
    parsed: Mapping[str, Any],
    sale_config: Mapping[str, Any],
    sale_year: int,
    projected_price: float,
    mortgage_balance: float,
) -> Dict[str, Any]:
    """
    One-time sale computation.

    Args:
        parsed: Normalized property inputs
        sale_config: Full sale configuration (tax profile included)
        sale_year: Projection year of the sale
        projected_price: Value from the growth formula at the sale year
        mortgage_balance: Amortized balance at the end of the sale year

    Returns:
        Dict with sale price, selling costs, mortgage payoff, basis, capital
        gain, tax breakdown and net after-tax proceeds
    """
    custom_price = parse_optional_number(sale_config.get("expected_sale_price"))
    use_projected = parse_bool(sale_config.get("use_projected_value", True))
    if use_projected or custom_price is None or custom_price <= 0:
        sale_price = projected_price
    else:
        sale_price = custom_price

    selling_costs = sale_price * parse_number(sale_config.get("selling_costs_percentage")) / 100.0
    net_sale_proceeds = sale_price - selling_costs - mortgage_balance

    adjusted_cost_basis = (
        parsed["purchase_price"]
        + parse_number(sale_config.get("capital_improvements"))
        + parse_number(sale_config.get("original_buying_costs"))
    )
    capital_gain = max(0.0, sale_price - selling_costs - adjusted_cost_basis)

    depreciation = sale_config
    if parse_bool(sale_config.get("enable_depreciation_recapture", False)) and (
        parse_optional_number(sale_config.get("total_depreciation_taken")) is None
    ):
        # Estimate straight-line depreciation over the whole holding period
        estimated = calculate_total_depreciation(
            parsed["purchase_price"],
            parse_number(sale_config.get("land_value_percentage"), 20.0),
            parsed["years_bought"] + sale_year,
        )
        depreciation = dict(sale_config, total_depreciation_taken=estimated)

    taxes = calculate_sale_taxes(capital_gain, sale_config, depreciation=depreciation)
    net_after_tax_proceeds = net_sale_proceeds - taxes["federal_tax"] - taxes["state_tax"]

    target = sale_config.get("target_investment_id") or None
    logger.debug(
        f"Sale in year {sale_year}: price={sale_price:.2f} gain={capital_gain:.2f} "
        f"tax={taxes['total_tax']:.2f} net={net_after_tax_proceeds:.2f} target={target}"
    )

    return {
        "sale_year": sale_year,
        "sale_month": parse_int(sale_config.get("sale_month"), 6),
        "sale_price": sale_price,
        "selling_costs": selling_costs,
        "pre_sale_mortgage_balance": mortgage_balance,
        "net_sale_proceeds": net_sale_proceeds,
        "adjusted_cost_basis": adjusted_cost_basis,
        "capital_gain": capital_gain,
        "taxes": taxes,
        "section121_exclusion": taxes["exclusion"]["applied_exclusion"],
        "federal_tax_amount": taxes["federal_tax"],
        "state_tax_amount": taxes["state_tax"],
        "net_after_tax_proceeds": net_after_tax_proceeds,
        "reinvest_proceeds": parse_bool(sale_config.get("reinvest_proceeds", False)),
        "target_investment_id": target,
    }


@error_handler
def project_property(inputs: Mapping[str, Any], settings) -> PropertyProjection:
    """
    Project a property over ``settings.years`` years.

    Args:
        inputs: Property input record (strings or numbers; blanks allowed)
        settings: PortfolioSettings with years, inflation_rate, starting_year

    Returns:
        PropertyProjection with rows for years 0..N
    """
    parsed = parse_property_inputs(inputs, settings.inflation_rate)
    sale_config = resolve_sale_config(inputs)
    years = settings.years
    sale_year = planned_sale_year(sale_config, years)

    principal = loan_amount(parsed)
    principal_interest = calculate_monthly_payment(principal, parsed["interest_rate"], parsed["loan_term"])
    has_override = parsed["payment_override"] > 0
    total_payment = parsed["payment_override"] if has_override else principal_interest
    other_fees = max(0.0, total_payment - principal_interest)

    # Amortization always runs on the computed P+I, never the override
    monthly_rate = annual_pct_to_monthly_decimal(parsed["interest_rate"])
    balance = advance_history(max(0.0, principal), principal_interest, monthly_rate, parsed["years_bought"])

    def payment_fields(mortgage_balance: float) -> Dict[str, float]:
        if round_currency(mortgage_balance) > 0:
            return {
                "monthly_payment": total_payment,
                "principal_interest_payment": principal_interest,
                "other_fees_payment": other_fees,
            }
        # Paid off: an override keeps covering taxes, insurance and fees
        if has_override:
            return {
                "monthly_payment": parsed["payment_override"],
                "principal_interest_payment": 0.0,
                "other_fees_payment": parsed["payment_override"],
            }
        return {"monthly_payment": 0.0, "principal_interest_payment": 0.0, "other_fees_payment": 0.0}

    value = property_value(parsed, 0)
    rows = [
        _row(
            0,
            settings.starting_year,
            balance=value,
            real_balance=value,
            mortgage_balance=balance,
            **payment_fields(balance),
        )
    ]

    disposition = None
    for year in range(1, years + 1):
        actual_year = settings.starting_year + year

        if sale_year is not None and year > sale_year:
            rows.append(_row(year, actual_year, is_post_sale=True))
            continue

        amortized = amortize_year(balance, principal_interest, monthly_rate)
        balance = amortized.ending_balance
        value = property_value(parsed, year)

        if year == sale_year:
            disposition = calculate_disposition(parsed, sale_config, year, value, balance)
            rows.append(
                _row(
                    year,
                    actual_year,
                    principal_paid=amortized.principal_paid,
                    interest_paid=amortized.interest_paid,
                    is_sale_year=True,
                    sale_price=disposition["sale_price"],
                    sale_proceeds=disposition["net_after_tax_proceeds"],
                    pre_sale_mortgage_balance=balance,
                )
            )
            continue

        payments = payment_fields(balance)
        annual_payments = payments["monthly_payment"] * MONTHS_PER_YEAR
        rental = {}
        if parsed["is_rental"]:
            rental = calculate_rental_figures(parsed, year, value)
            cash_flow = rental["annual_rental_income"] - rental["total_rental_expenses"] - annual_payments
        else:
            cash_flow = -annual_payments

        rows.append(
            _row(
                year,
                actual_year,
                balance=value,
                real_balance=deflate(value, parsed["inflation_rate"], year),
                mortgage_balance=balance,
                principal_paid=amortized.principal_paid,
                interest_paid=amortized.interest_paid,
                annual_cash_flow=cash_flow,
                **payments,
                **rental,
            )
        )

    return PropertyProjection(rows, disposition, total_payment, principal_interest)


def _row(year: int, actual_year: int, is_sale_year: bool = False, is_post_sale: bool = False, **amounts) -> Dict[str, Any]:
    """Emit a result row; every currency figure is rounded here and only here."""
    row = {"year": year, "actual_year": actual_year}
    for column in RESULT_COLUMNS[2:]:
        if column == "is_sale_year":
            row[column] = is_sale_year
        elif column == "is_post_sale":
            row[column] = is_post_sale
        else:
            row[column] = round_currency(amounts.get(column, 0.0))
    return row
