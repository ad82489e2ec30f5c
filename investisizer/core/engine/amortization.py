"""
Mortgage amortization math.

Payment formula, month-by-month principal/interest split and payoff detection.
Values are kept unrounded while a schedule runs; callers round at emission.
"""

from typing import Dict, NamedTuple, Tuple, Union

import numpy_financial as npf
import pandas as pd

from investisizer.utils.error_utils import error_handler
from investisizer.utils.rate_utils import (
    annual_pct_to_monthly_decimal,
    convert_duration_years_to_months,
    parse_number,
    round_currency,
    MONTHS_PER_YEAR,
)


class AmortizationYear(NamedTuple):
    """Totals for one year of monthly amortization."""
    principal_paid: float
    interest_paid: float
    ending_balance: float


@error_handler
def calculate_monthly_payment(
    loan_amount: float,
    annual_rate_pct: Union[float, str],
    term_years: Union[float, str],
) -> float:
    """
    Calculate the principal-and-interest monthly payment.

    Uses the standard annuity formula ``L*r*(1+r)^n / ((1+r)^n - 1)``.

    Args:
        loan_amount: Amount borrowed
        annual_rate_pct: Annual interest rate as percentage
        term_years: Loan term in years

    Returns:
        Monthly P+I payment; 0 when there is nothing to amortize
    """
    num_payments = convert_duration_years_to_months(parse_number(term_years))
    if loan_amount <= 0 or num_payments <= 0:
        return 0.0
    monthly_rate = annual_pct_to_monthly_decimal(annual_rate_pct)
    # pmt treats a zero rate as straight-line repayment
    return float(-npf.pmt(monthly_rate, num_payments, loan_amount))


def amortize_month(balance: float, payment: float, monthly_rate: float) -> Tuple[float, float, float]:
    """
    Apply one monthly payment.

    Returns:
        Tuple of (new_balance, principal, interest)
    """
    if balance <= 0:
        return 0.0, 0.0, 0.0
    interest = balance * monthly_rate
    principal = min(payment - interest, balance)
    return max(0.0, balance - principal), principal, interest


def amortize_year(
    balance: float,
    payment: float,
    monthly_rate: float,
    months: int = MONTHS_PER_YEAR,
) -> AmortizationYear:
    """Run ``months`` payments and total the principal and interest paid."""
    principal_paid = 0.0
    interest_paid = 0.0
    for _ in range(months):
        if balance <= 0:
            break
        balance, principal, interest = amortize_month(balance, payment, monthly_rate)
        principal_paid += principal
        interest_paid += interest
    return AmortizationYear(principal_paid, interest_paid, balance)


def advance_history(balance: float, payment: float, monthly_rate: float, years: int) -> float:
    """Consume ``years`` of payments made before the projection starts."""
    for _ in range(max(0, int(years))):
        balance = amortize_year(balance, payment, monthly_rate).ending_balance
    return balance


@error_handler
def build_amortization_schedule(
    loan_amount: float,
    annual_rate_pct: Union[float, str],
    term_years: Union[float, str],
    years: int,
) -> pd.DataFrame:
    """
    Build a yearly amortization schedule.

    Args:
        loan_amount: Amount borrowed
        annual_rate_pct: Annual interest rate as percentage
        term_years: Loan term in years
        years: Number of years to emit (year 0 is the opening balance)

    Returns:
        DataFrame with columns: year, principal_paid, interest_paid, mortgage_balance
    """
    payment = calculate_monthly_payment(loan_amount, annual_rate_pct, term_years)
    monthly_rate = annual_pct_to_monthly_decimal(annual_rate_pct)
    balance = max(0.0, float(loan_amount))

    rows = [_schedule_row(0, 0.0, 0.0, balance)]
    for year in range(1, int(years) + 1):
        amortized = amortize_year(balance, payment, monthly_rate)
        balance = amortized.ending_balance
        rows.append(_schedule_row(year, amortized.principal_paid, amortized.interest_paid, balance))

    df = pd.DataFrame(rows, columns=["year", "principal_paid", "interest_paid", "mortgage_balance"])
    df.attrs["monthly_payment"] = round_currency(payment)
    return df


def _schedule_row(year: int, principal: float, interest: float, balance: float) -> Dict[str, float]:
    return {
        "year": year,
        "principal_paid": round_currency(principal),
        "interest_paid": round_currency(interest),
        "mortgage_balance": round_currency(balance),
    }
