"""
Tests for mortgage amortization math.
"""

import pytest

from investisizer.core.engine.amortization import (
    advance_history,
    amortize_month,
    amortize_year,
    build_amortization_schedule,
    calculate_monthly_payment,
)


class TestMonthlyPayment:
    """Test the annuity payment formula."""

    def test_standard_thirty_year_loan(self):
        """400k at 7% over 30 years."""
        payment = calculate_monthly_payment(400000, 7, 30)
        assert payment == pytest.approx(2661.21, abs=0.01)

    def test_string_inputs(self):
        """Rates and terms may arrive as strings."""
        assert calculate_monthly_payment(400000, "7", "30") == pytest.approx(
            calculate_monthly_payment(400000, 7.0, 30.0)
        )

    def test_zero_rate_is_straight_line(self):
        """A zero rate repays L/n per month."""
        assert calculate_monthly_payment(120000, 0, 10) == pytest.approx(1000.0)

    def test_nothing_to_amortize(self):
        """Zero loan or zero term yields a zero payment."""
        assert calculate_monthly_payment(0, 7, 30) == 0.0
        assert calculate_monthly_payment(-1000, 7, 30) == 0.0
        assert calculate_monthly_payment(100000, 7, 0) == 0.0
        assert calculate_monthly_payment(100000, 7, "") == 0.0


class TestAmortizationSchedule:
    """Test month-by-month amortization."""

    def test_single_month_split(self):
        """Interest is balance times the monthly rate."""
        balance, principal, interest = amortize_month(100000, 1000, 0.005)
        assert interest == pytest.approx(500.0)
        assert principal == pytest.approx(500.0)
        assert balance == pytest.approx(99500.0)

    def test_final_payment_caps_at_balance(self):
        """The last payment never overshoots the balance."""
        balance, principal, interest = amortize_month(300, 1000, 0.005)
        assert balance == 0.0
        assert principal == pytest.approx(300.0)

    def test_paid_off_balance_stays_zero(self):
        assert amortize_month(0.0, 1000, 0.005) == (0.0, 0.0, 0.0)

    def test_principal_conservation_over_full_term(self):
        """Principal paid over the whole term equals the loan amount."""
        schedule = build_amortization_schedule(400000, 7, 30, 30)
        assert schedule["principal_paid"].sum() == pytest.approx(400000, abs=1.0)
        assert schedule["mortgage_balance"].iloc[-1] == pytest.approx(0.0, abs=0.01)

    def test_balance_monotonically_non_increasing(self):
        schedule = build_amortization_schedule(250000, 6.5, 15, 20)
        balances = schedule["mortgage_balance"].tolist()
        assert all(later <= earlier for earlier, later in zip(balances, balances[1:]))
        assert balances[-1] == 0.0

    def test_interest_plus_principal_equals_payments(self):
        """Each full year pays exactly twelve payments."""
        schedule = build_amortization_schedule(400000, 7, 30, 5)
        payment = schedule.attrs["monthly_payment"]
        year_one = schedule.iloc[1]
        assert year_one["principal_paid"] + year_one["interest_paid"] == pytest.approx(payment * 12, abs=0.1)

    def test_schedule_shape(self):
        """Year 0 carries the opening balance."""
        schedule = build_amortization_schedule(100000, 5, 30, 3)
        assert list(schedule.columns) == ["year", "principal_paid", "interest_paid", "mortgage_balance"]
        assert len(schedule) == 4
        assert schedule.iloc[0]["mortgage_balance"] == 100000.0
        assert schedule.iloc[0]["principal_paid"] == 0.0

    def test_amortize_year_stops_at_payoff(self):
        """Months after payoff contribute nothing."""
        year = amortize_year(1500, 1000, 0.0)
        assert year.principal_paid == pytest.approx(1500.0)
        assert year.interest_paid == 0.0
        assert year.ending_balance == 0.0

    def test_advance_history_matches_schedule(self):
        """Pre-projection years consume the same payments as a schedule."""
        payment = calculate_monthly_payment(400000, 7, 30)
        balance = advance_history(400000, payment, 0.07 / 12, 5)
        schedule = build_amortization_schedule(400000, 7, 30, 5)
        assert round(balance, 2) == schedule["mortgage_balance"].iloc[-1]
        assert advance_history(400000, payment, 0.07 / 12, 0) == 400000
