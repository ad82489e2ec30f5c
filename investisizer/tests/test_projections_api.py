"""
Projection and tax endpoint tests.

Posts asset records to the stateless API and checks the projected rows.

Run: python -m pytest investisizer/tests/test_projections_api.py -v
"""

import pytest
from fastapi.testclient import TestClient

from investisizer.api.main import app

client = TestClient(app)

SETTINGS = {"years": 10, "inflation_rate": "2.5", "starting_year": 2025}


def _portfolio_payload():
    return {
        "settings": SETTINGS,
        "assets": [
            {
                "id": "inv-1",
                "name": "Brokerage",
                "type": "investment",
                "inputs": {"initial_amount": "100000", "rate_of_return": "7", "annual_contribution": "10000"},
            },
            {
                "id": "prop-1",
                "name": "Rental",
                "type": "property",
                "inputs": {
                    "purchase_price": "400000",
                    "down_payment_percentage": "20",
                    "interest_rate": "7",
                    "loan_term": "30",
                    "linked_investment_id": "inv-1",
                    "sale_config": {
                        "is_planned_for_sale": True,
                        "sale_year": 5,
                        "reinvest_proceeds": True,
                        "target_investment_id": "inv-1",
                    },
                },
            },
        ],
    }


class TestPortfolioEndpoint:
    """POST /api/projections/portfolio"""

    def test_combined_results(self):
        response = client.post("/api/projections/portfolio", json=_portfolio_payload())
        assert response.status_code == 200
        data = response.json()

        combined = data["combined_results"]
        assert len(combined) == 11
        assert combined[0]["actual_year"] == 2025
        assert combined[4]["total_property_value"] > 0
        assert combined[6]["total_property_value"] == 0.0
        assert combined[6]["total_investment_balance"] > combined[4]["total_investment_balance"]

    def test_asset_results_and_links(self):
        data = client.post("/api/projections/portfolio", json=_portfolio_payload()).json()
        assert set(data["asset_results"]) == {"inv-1", "prop-1"}
        flows = data["linked_cash_flows"]["inv-1"]
        assert len(flows) == 10
        assert flows[0] < 0
        assert flows[4] > 100000
        assert data["asset_results"]["prop-1"][5]["is_sale_year"] is True

    def test_summary_included(self):
        data = client.post("/api/projections/portfolio", json=_portfolio_payload()).json()
        assert data["summary"]["asset_count"] == 2
        assert data["settings"]["years"] == 10

    def test_empty_portfolio(self):
        response = client.post("/api/projections/portfolio", json={"settings": SETTINGS, "assets": []})
        assert response.status_code == 200
        assert response.json()["combined_results"] == []

    def test_generated_ids(self):
        payload = {"settings": SETTINGS, "assets": [{"type": "investment", "inputs": {}}]}
        data = client.post("/api/projections/portfolio", json=payload).json()
        assert len(data["asset_results"]) == 1

    def test_unknown_asset_type_rejected(self):
        payload = {"settings": SETTINGS, "assets": [{"type": "crypto", "inputs": {}}]}
        assert client.post("/api/projections/portfolio", json=payload).status_code == 422


class TestSingleAssetEndpoints:
    """Property, investment and amortization endpoints."""

    def test_property_projection(self):
        payload = {
            "settings": SETTINGS,
            "inputs": {"purchase_price": "500000", "interest_rate": "7", "loan_term": "30", "monthly_payment": "3000"},
        }
        response = client.post("/api/projections/property", json=payload)
        assert response.status_code == 200
        data = response.json()
        assert data["monthly_payment"] == 3000.0
        assert data["principal_interest_payment"] == pytest.approx(2661.21, abs=0.01)
        assert data["results"][1]["annual_cash_flow"] == -36000.0
        assert data["sale_summary"] is None
        assert data["validation"]["is_valid"] is True

    def test_property_validation_reported(self):
        payload = {"settings": SETTINGS, "inputs": {"purchase_price": "0"}}
        data = client.post("/api/projections/property", json=payload).json()
        assert "Purchase price must be greater than $0" in data["validation"]["errors"]

    def test_investment_projection(self):
        payload = {
            "settings": SETTINGS,
            "inputs": {"initial_amount": "10000", "rate_of_return": "10", "annual_contribution": "1000"},
            "property_cash_flows": [-2000],
        }
        response = client.post("/api/projections/investment", json=payload)
        assert response.status_code == 200
        data = response.json()
        assert data["results"][1]["balance"] == pytest.approx(9800.0)
        assert data["warnings"] == []

    def test_amortization(self):
        payload = {"loan_amount": 400000, "annual_rate_pct": "7", "term_years": "30"}
        data = client.post("/api/projections/amortization", json=payload).json()
        assert data["monthly_payment"] == pytest.approx(2661.21, abs=0.01)
        assert len(data["schedule"]) == 31
        assert data["schedule"][-1]["mortgage_balance"] == pytest.approx(0.0, abs=0.01)

    def test_amortization_negative_loan_rejected(self):
        payload = {"loan_amount": -1, "annual_rate_pct": 7, "term_years": 30}
        assert client.post("/api/projections/amortization", json=payload).status_code == 422


class TestTaxEndpoints:
    """State table and sale tax endpoints."""

    def test_list_states(self):
        data = client.get("/api/tax/states").json()
        assert len(data) == 51
        assert data[0]["name"] == "Alabama"

    def test_no_tax_states(self):
        data = client.get("/api/tax/states", params={"no_tax_only": True}).json()
        assert all(state["has_capital_gains_tax"] is False for state in data)
        assert "TX" in {state["code"] for state in data}

    def test_get_state(self):
        response = client.get("/api/tax/states/ca")
        assert response.status_code == 200
        assert response.json()["rate"] == 0.133

    def test_unknown_state_404(self):
        response = client.get("/api/tax/states/ZZ")
        assert response.status_code == 404

    def test_sale_taxes(self):
        payload = {"capital_gain": 128000, "tax_profile": {"annual_income": "120000", "state": "CA"}}
        data = client.post("/api/tax/sale", json=payload).json()
        assert data["federal_tax"] == pytest.approx(19200.0)
        assert data["state_tax"] == pytest.approx(17024.0)
        assert data["state_name"] == "California"

    def test_states_sorted_by_rate(self):
        data = client.get("/api/tax/states", params={"sort": "rate"}).json()
        rates = [state["rate"] for state in data]
        assert rates == sorted(rates)
        assert data[-1]["code"] == "CA"

    def test_invalid_sort_rejected(self):
        response = client.get("/api/tax/states", params={"sort": "population"})
        assert response.status_code == 422

    def test_state_choices(self):
        data = client.get("/api/tax/choices").json()
        assert len(data) == 51
        texas = next(choice for choice in data if choice["value"] == "TX")
        assert texas["label"] == "Texas (No Tax)"

    def test_compare_states(self):
        params = {"taxable_gain": 100000, "states": "CA, TX,WA"}
        data = client.get("/api/tax/compare", params=params).json()
        assert [row["state_code"] for row in data] == ["TX", "WA", "CA"]
        assert data[-1]["tax_amount"] == pytest.approx(13300.0)
