"""
Year-by-year projection of a single investment.

Linked property cash flows (signed: negative = withdrawal, positive = deposit)
are applied before growth; the investment's own contribution arrives after
growth, at year end. Earnings are reported growth-only so linked flows never
show up as investment performance. Real figures are the nominal ones deflated
by cumulative inflation.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from investisizer.utils.error_utils import error_handler
from investisizer.utils.rate_utils import (
    annual_pct_to_decimal,
    deflate,
    growth_factor,
    parse_bool,
    parse_number,
    round_currency,
)

RESULT_COLUMNS = [
    "year",
    "actual_year",
    "balance",
    "real_balance",
    "annual_contribution",
    "real_annual_contribution",
    "property_cash_flow",
    "real_property_cash_flow",
    "total_earnings",
    "real_total_earnings",
    "yearly_gain",
    "real_yearly_gain",
    "annual_investment_gain",
    "real_annual_investment_gain",
]


def parse_investment_inputs(inputs: Mapping[str, Any], default_inflation: float = 0.0) -> Dict[str, Any]:
    return {
        "initial_amount": parse_number(inputs.get("initial_amount")),
        "rate_of_return": parse_number(inputs.get("rate_of_return")),
        "inflation_rate": parse_number(inputs.get("inflation_rate"), default_inflation),
        "annual_contribution": parse_number(inputs.get("annual_contribution")),
        "inflation_adjusted": parse_bool(inputs.get("inflation_adjusted_contributions", False)),
    }


@error_handler
def project_investment(
    inputs: Mapping[str, Any],
    settings,
    property_cash_flows: Optional[Sequence[float]] = None,
) -> List[Dict[str, Any]]:
    """
    Project an investment over ``settings.years`` years.

    Args:
        inputs: Investment input record
        settings: PortfolioSettings with years, inflation_rate, starting_year
        property_cash_flows: Linked cash flow for years 1..N (index 0 is year 1);
            missing entries count as 0

    Returns:
        List of result rows for years 0..N
    """
    parsed = parse_investment_inputs(inputs, settings.inflation_rate)
    cash_flows = list(property_cash_flows or [])

    initial = parsed["initial_amount"]
    base_contribution = parsed["annual_contribution"]
    inflation = parsed["inflation_rate"]
    return_factor = 1 + annual_pct_to_decimal(parsed["rate_of_return"])

    balance = initial
    real_balance = initial
    net_contributed = 0.0

    rows = [_row(0, settings.starting_year, balance=balance, real_balance=real_balance)]

    for year in range(1, settings.years + 1):
        previous_balance = balance
        previous_real_balance = real_balance
        inflation_factor = growth_factor(inflation, year)

        contribution = base_contribution
        if parsed["inflation_adjusted"]:
            contribution = base_contribution * inflation_factor

        property_cash_flow = cash_flows[year - 1] if year - 1 < len(cash_flows) else 0.0

        # Withdrawals shrink the growth base; contributions arrive after growth
        balance = (balance + property_cash_flow) * return_factor + contribution

        real_property_cash_flow = property_cash_flow / inflation_factor
        real_contribution = base_contribution if parsed["inflation_adjusted"] else contribution / inflation_factor
        real_balance = deflate(balance, inflation, year)

        net_contributed += contribution + property_cash_flow
        total_earnings = balance - initial - net_contributed
        yearly_gain = balance - previous_balance
        real_yearly_gain = real_balance - previous_real_balance

        rows.append(
            _row(
                year,
                settings.starting_year + year,
                balance=balance,
                real_balance=real_balance,
                annual_contribution=contribution,
                real_annual_contribution=real_contribution,
                property_cash_flow=property_cash_flow,
                real_property_cash_flow=real_property_cash_flow,
                total_earnings=total_earnings,
                real_total_earnings=total_earnings / inflation_factor,
                yearly_gain=yearly_gain,
                real_yearly_gain=real_yearly_gain,
                annual_investment_gain=yearly_gain - contribution - property_cash_flow,
                real_annual_investment_gain=real_yearly_gain - real_contribution - real_property_cash_flow,
            )
        )

    return rows


def investment_warnings(
    rows: Sequence[Mapping[str, Any]],
    inputs: Mapping[str, Any],
    property_cash_flows: Optional[Sequence[float]],
    years: int,
) -> List[str]:
    """Human-readable warnings about linked property flows draining an investment."""
    warnings = []
    negative = [row for row in rows if row["balance"] < 0]
    if negative:
        warnings.append(
            f"Investment balance goes negative starting in year {negative[0]['year']} due to property cash flows"
        )

    total_withdrawals = sum(-flow for flow in (property_cash_flows or []) if flow < 0)
    total_contributions = parse_number(inputs.get("annual_contribution")) * years
    if total_withdrawals > total_contributions * 2:
        warnings.append(
            f"Property cash outflows (${total_withdrawals:,.0f}) significantly exceed "
            f"investment contributions (${total_contributions:,.0f})"
        )
    return warnings


def to_dataframe(rows: Sequence[Mapping[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(list(rows), columns=RESULT_COLUMNS)


def _row(year: int, actual_year: int, **amounts) -> Dict[str, Any]:
    row = {"year": year, "actual_year": actual_year}
    for column in RESULT_COLUMNS[2:]:
        row[column] = round_currency(amounts.get(column, 0.0))
    return row
