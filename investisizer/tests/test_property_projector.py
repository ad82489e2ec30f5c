"""
Tests for the yearly property projection.

Covers value growth, mortgage payments and payoff, rental income and
expenses, and the sale disposition with its zeroed post-sale rows.
"""

import pytest

from investisizer.core.engine.amortization import calculate_monthly_payment
from investisizer.core.engine.property_projector import (
    RESULT_COLUMNS,
    calculate_rental_figures,
    parse_property_inputs,
    planned_sale_year,
    project_property,
    property_value,
)
from investisizer.core.settings import PortfolioSettings


def _inputs(**overrides):
    inputs = {
        "purchase_price": "500000",
        "down_payment_percentage": "20",
        "interest_rate": "7",
        "loan_term": "30",
        "inflation_rate": "2.5",
        "years_bought": "0",
        "property_growth_rate": "3",
        "monthly_payment": "",
    }
    inputs.update(overrides)
    return inputs


def _sale(**overrides):
    sale_config = {
        "is_planned_for_sale": True,
        "sale_year": 5,
        "selling_costs_percentage": 7,
        "reinvest_proceeds": False,
    }
    sale_config.update(overrides)
    return sale_config


@pytest.fixture
def settings():
    return PortfolioSettings(years=10, inflation_rate="2.5", starting_year=2025)


class TestPropertyBasics:
    """Value growth, payments and row layout."""

    def test_row_layout(self, settings):
        """One row per year 0..N with every result column."""
        results = project_property(_inputs(), settings).results
        assert len(results) == 11
        assert list(results[0].keys()) == RESULT_COLUMNS
        assert results[0]["actual_year"] == 2025
        assert results[10]["actual_year"] == 2035

    def test_year_zero(self, settings):
        """Year 0 holds the purchase price and the full loan."""
        row = project_property(_inputs(), settings).results[0]
        assert row["balance"] == 500000.0
        assert row["real_balance"] == 500000.0
        assert row["mortgage_balance"] == 400000.0
        assert row["monthly_payment"] == pytest.approx(2661.21, abs=0.01)
        assert row["annual_cash_flow"] == 0.0

    def test_purchase_price_growth(self, settings):
        results = project_property(_inputs(), settings).results
        assert results[1]["balance"] == pytest.approx(515000.0)
        assert results[10]["balance"] == pytest.approx(500000 * 1.03 ** 10, abs=0.01)

    def test_real_balance_deflated(self, settings):
        row = project_property(_inputs(), settings).results[4]
        assert row["real_balance"] == pytest.approx(500000 * 1.03 ** 4 / 1.025 ** 4, abs=0.01)

    def test_current_value_growth_model(self, settings):
        """Growth compounds from the current estimate instead of the purchase price."""
        inputs = _inputs(property_growth_model="current_value", current_estimated_value="600000", years_bought="3")
        results = project_property(inputs, settings).results
        assert results[0]["balance"] == 600000.0
        assert results[2]["balance"] == pytest.approx(600000 * 1.03 ** 2, abs=0.01)

    def test_current_value_model_without_estimate_falls_back(self):
        parsed = parse_property_inputs(_inputs(property_growth_model="current_value", current_estimated_value=""))
        assert property_value(parsed, 1) == pytest.approx(515000.0)

    def test_years_bought_advances_value_and_mortgage(self, settings):
        """A property bought earlier starts with history already applied."""
        results = project_property(_inputs(years_bought="5"), settings).results
        fresh = project_property(_inputs(), settings).results
        assert results[0]["balance"] == pytest.approx(500000 * 1.03 ** 5, abs=0.01)
        assert results[0]["mortgage_balance"] == fresh[5]["mortgage_balance"]

    def test_blank_down_payment_defaults_to_twenty_percent(self, settings):
        results = project_property(_inputs(down_payment_percentage=""), settings).results
        assert results[0]["mortgage_balance"] == 400000.0

    def test_non_rental_cash_flow_is_payments(self, settings):
        projection = project_property(_inputs(), settings)
        row = projection.results[1]
        assert row["annual_cash_flow"] == pytest.approx(-projection.monthly_payment * 12, abs=0.01)
        assert row["annual_rental_income"] == 0.0

    def test_override_payment_splits_fees(self, settings):
        """An override above P+I reports the difference as other fees."""
        projection = project_property(_inputs(monthly_payment="3000"), settings)
        row = projection.results[1]
        assert row["monthly_payment"] == 3000.0
        assert row["principal_interest_payment"] == pytest.approx(2661.21, abs=0.01)
        assert row["other_fees_payment"] == pytest.approx(338.79, abs=0.01)
        assert row["annual_cash_flow"] == -36000.0

    def test_override_does_not_change_amortization(self, settings):
        with_override = project_property(_inputs(monthly_payment="3000"), settings).results
        without = project_property(_inputs(), settings).results
        assert [r["mortgage_balance"] for r in with_override] == [r["mortgage_balance"] for r in without]

    def test_idempotent(self, settings):
        inputs = _inputs(is_rental_property=True, monthly_rent="2500", sale_config=_sale())
        assert project_property(inputs, settings).results == project_property(inputs, settings).results


class TestPayoff:
    """Mortgage payoff inside the projection."""

    def test_payoff_freezes_principal_and_interest(self, settings):
        results = project_property(_inputs(loan_term="5"), settings).results
        assert results[5]["mortgage_balance"] == 0.0
        for row in results[6:]:
            assert row["mortgage_balance"] == 0.0
            assert row["principal_interest_payment"] == 0.0
            assert row["monthly_payment"] == 0.0
            assert row["principal_paid"] == 0.0
            assert row["annual_cash_flow"] == 0.0

    def test_principal_conservation(self, settings):
        results = project_property(_inputs(loan_term="5"), settings).results
        assert sum(row["principal_paid"] for row in results) == pytest.approx(400000, abs=1.0)

    def test_mortgage_balance_non_increasing(self, settings):
        balances = [row["mortgage_balance"] for row in project_property(_inputs(), settings).results]
        assert all(later <= earlier for earlier, later in zip(balances, balances[1:]))

    def test_override_survives_payoff(self, settings):
        """After payoff the override keeps paying taxes, insurance and fees."""
        results = project_property(_inputs(loan_term="5", monthly_payment="3000"), settings).results
        for row in results[6:]:
            assert row["monthly_payment"] == 3000.0
            assert row["principal_interest_payment"] == 0.0
            assert row["other_fees_payment"] == 3000.0
            assert row["annual_cash_flow"] == -36000.0

    def test_zero_rate_loan(self, settings):
        projection = project_property(_inputs(interest_rate="0", loan_term="10"), settings)
        assert projection.principal_interest_payment == pytest.approx(400000 / 120)
        assert projection.results[10]["mortgage_balance"] == 0.0
        assert all(row["interest_paid"] == 0.0 for row in projection.results)


class TestRental:
    """Rental income and expense model."""

    RENTAL = {
        "is_rental_property": True,
        "monthly_rent": "2500",
        "rent_growth_rate": "0",
        "vacancy_rate": "5",
        "maintenance_rate": "2",
        "property_management_enabled": True,
        "listing_fee_rate": "100",
        "monthly_management_fee_rate": "10",
        "property_growth_rate": "0",
    }

    def test_first_year_figures(self, settings):
        row = project_property(_inputs(**self.RENTAL), settings).results[1]
        assert row["annual_rental_income"] == 28500.0
        assert row["maintenance_expenses"] == 10000.0
        assert row["listing_expenses"] == 1000.0
        assert row["monthly_management_expenses"] == 2850.0
        assert row["total_rental_expenses"] == 13850.0

    def test_cash_flow_nets_income_expenses_and_payments(self, settings):
        projection = project_property(_inputs(**self.RENTAL), settings)
        row = projection.results[1]
        expected = 28500 - 13850 - projection.monthly_payment * 12
        assert row["annual_cash_flow"] == pytest.approx(expected, abs=0.01)

    def test_management_disabled_skips_fees(self, settings):
        inputs = _inputs(**dict(self.RENTAL, property_management_enabled=False))
        row = project_property(inputs, settings).results[1]
        assert row["listing_expenses"] == 0.0
        assert row["monthly_management_expenses"] == 0.0
        assert row["total_rental_expenses"] == 10000.0

    def test_rent_and_expense_growth(self):
        parsed = parse_property_inputs(
            _inputs(
                **dict(self.RENTAL, rent_growth_rate="10", annual_expenses="1000", expense_growth_rate="10",
                       property_management_enabled=False, maintenance_rate="0")
            )
        )
        figures = calculate_rental_figures(parsed, 2, 500000)
        assert figures["annual_rental_income"] == pytest.approx(2500 * 1.21 * 12 * 0.95)
        assert figures["total_rental_expenses"] == pytest.approx(1210.0)

    def test_year_zero_has_no_rental_figures(self, settings):
        row = project_property(_inputs(**self.RENTAL), settings).results[0]
        assert row["annual_rental_income"] == 0.0


class TestSale:
    """Planned sale and disposition."""

    def test_sale_zeroes_sale_and_post_sale_rows(self, settings):
        results = project_property(_inputs(sale_config=_sale()), settings).results
        for row in results[:5]:
            assert row["balance"] > 0
        for row in results[5:]:
            assert row["balance"] == 0.0
            assert row["mortgage_balance"] == 0.0
            assert row["monthly_payment"] == 0.0
            assert row["annual_cash_flow"] == 0.0
        assert results[5]["is_sale_year"] is True
        assert all(row["is_post_sale"] for row in results[6:])
        assert not any(row["is_sale_year"] for row in results[6:])

    def test_sale_year_row_records_disposition(self, settings):
        projection = project_property(_inputs(sale_config=_sale()), settings)
        row = projection.results[5]
        disposition = projection.disposition
        price = 500000 * 1.03 ** 5
        assert row["sale_price"] == pytest.approx(price, abs=0.01)
        assert disposition["selling_costs"] == pytest.approx(price * 0.07)
        assert row["pre_sale_mortgage_balance"] == pytest.approx(disposition["pre_sale_mortgage_balance"], abs=0.01)
        assert row["sale_proceeds"] == pytest.approx(disposition["net_after_tax_proceeds"], abs=0.01)
        assert row["principal_paid"] > 0
        assert projection.sale_year == 5

    def test_net_proceeds(self, settings):
        """Net proceeds subtract selling costs and the mortgage payoff."""
        disposition = project_property(_inputs(sale_config=_sale()), settings).disposition
        expected = disposition["sale_price"] - disposition["selling_costs"] - disposition["pre_sale_mortgage_balance"]
        assert disposition["net_sale_proceeds"] == pytest.approx(expected)
        # No income and no state configured: no tax
        assert disposition["net_after_tax_proceeds"] == pytest.approx(expected)

    def test_capital_gain_uses_adjusted_basis(self, settings):
        sale = _sale(capital_improvements="20000", original_buying_costs="5000")
        disposition = project_property(_inputs(sale_config=sale), settings).disposition
        assert disposition["adjusted_cost_basis"] == 525000.0
        expected = disposition["sale_price"] - disposition["selling_costs"] - 525000
        assert disposition["capital_gain"] == pytest.approx(expected)

    def test_capital_gain_floored_at_zero(self, settings):
        inputs = _inputs(property_growth_rate="0", sale_config=_sale())
        disposition = project_property(inputs, settings).disposition
        assert disposition["capital_gain"] == 0.0

    def test_custom_sale_price_and_taxes(self, settings):
        """The California example: 128k gain at 15% federal and 13.3% state."""
        sale = _sale(
            use_projected_value=False,
            expected_sale_price="700000",
            selling_costs_percentage=6,
            capital_improvements="30000",
            annual_income="120000",
            state="CA",
        )
        disposition = project_property(_inputs(sale_config=sale), settings).disposition
        assert disposition["sale_price"] == 700000.0
        assert disposition["capital_gain"] == pytest.approx(128000.0)
        assert disposition["federal_tax_amount"] == pytest.approx(19200.0)
        assert disposition["state_tax_amount"] == pytest.approx(17024.0)
        assert disposition["net_after_tax_proceeds"] == pytest.approx(
            disposition["net_sale_proceeds"] - 19200.0 - 17024.0
        )

    def test_blank_custom_price_uses_projection(self, settings):
        sale = _sale(use_projected_value=False, expected_sale_price="")
        disposition = project_property(_inputs(sale_config=sale), settings).disposition
        assert disposition["sale_price"] == pytest.approx(500000 * 1.03 ** 5)

    def test_sale_outside_projection_ignored(self, settings):
        for sale_year in (0, 11, ""):
            projection = project_property(_inputs(sale_config=_sale(sale_year=sale_year)), settings)
            assert projection.disposition is None
            assert projection.results[10]["balance"] > 0

    def test_unplanned_sale_ignored(self, settings):
        projection = project_property(_inputs(sale_config=_sale(is_planned_for_sale=False)), settings)
        assert projection.disposition is None
        assert not any(row["is_sale_year"] for row in projection.results)

    def test_planned_sale_year(self):
        assert planned_sale_year({"is_planned_for_sale": True, "sale_year": "3"}, 10) == 3
        assert planned_sale_year({"is_planned_for_sale": True, "sale_year": 10}, 10) == 10
        assert planned_sale_year({"is_planned_for_sale": True, "sale_year": 12}, 10) is None
        assert planned_sale_year({"is_planned_for_sale": False, "sale_year": 3}, 10) is None

    def test_to_dataframe(self, settings):
        df = project_property(_inputs(sale_config=_sale()), settings).to_dataframe()
        assert list(df.columns) == RESULT_COLUMNS
        assert len(df) == 11
        assert df["is_sale_year"].sum() == 1

    def test_recapture_estimates_blank_depreciation(self, settings):
        """Blank depreciation with recapture on is estimated straight-line over the holding period."""
        sale = _sale(
            use_projected_value=False,
            expected_sale_price="700000",
            selling_costs_percentage=6,
            capital_improvements="30000",
            enable_depreciation_recapture=True,
            total_depreciation_taken="",
            land_value_percentage="20",
        )
        taxes = project_property(_inputs(sale_config=sale), settings).disposition["taxes"]
        estimated = 500000 * 0.8 / 27.5 * 5
        assert taxes["recapture_amount"] == pytest.approx(estimated)
        assert taxes["recapture_tax"] == pytest.approx(estimated * 0.25)

    def test_recapture_uses_explicit_depreciation(self, settings):
        sale = _sale(
            use_projected_value=False,
            expected_sale_price="700000",
            selling_costs_percentage=6,
            enable_depreciation_recapture=True,
            total_depreciation_taken="40000",
        )
        taxes = project_property(_inputs(sale_config=sale), settings).disposition["taxes"]
        assert taxes["recapture_amount"] == pytest.approx(40000.0)
