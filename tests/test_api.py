"""
Tests for the calculator API endpoints.
"""

import pytest

from app.config import get_settings


@pytest.fixture
def mortgage_payload():
    return {
        "property_price": 375000,
        "down_payment": 75000,
        "annual_rate_percent": 6.0,
        "term_years": 30,
        "property_tax": 3600,
        "home_insurance": 1200,
    }


class TestHealth:
    """Test service endpoints."""

    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestMortgageAPI:
    """Test mortgage endpoint."""

    def test_calculate_mortgage(self, client, mortgage_payload):
        response = client.post("/api/calculate/mortgage", json=mortgage_payload)
        assert response.status_code == 200
        data = response.json()
        assert data["breakdown"]["principal_and_interest"] == 1798.65
        assert data["breakdown"]["total_monthly"] == 2198.65
        assert data["breakdown"]["totals_over_term"]["total_interest"] == 347514.57
        assert data["inputs"]["down_payment_percent"] == 20.0
        # Truncated schedule by default
        assert len(data["schedule"]) == 41
        assert data["schedule"][-1]["remaining_balance"] == 0

    def test_full_schedule_requested(self, client, mortgage_payload):
        payload = dict(mortgage_payload, full_schedule=True)
        response = client.post("/api/calculate/mortgage", json=payload)
        assert len(response.json()["schedule"]) == 360

    def test_schedule_mode_setting(self, client, mortgage_payload):
        """The configured schedule mode applies when the request is silent."""
        settings = get_settings().model_copy(update={"schedule_mode": "full"})
        client.app.dependency_overrides[get_settings] = lambda: settings
        try:
            response = client.post("/api/calculate/mortgage", json=mortgage_payload)
        finally:
            client.app.dependency_overrides.pop(get_settings, None)
        assert len(response.json()["schedule"]) == 360

    def test_dated_schedule(self, client, mortgage_payload):
        payload = dict(mortgage_payload, start_date="2025-03-01")
        data = client.post("/api/calculate/mortgage", json=payload).json()
        assert data["schedule"][0]["payment_date"] == "2025-03-01"
        assert data["schedule"][12]["payment_date"] == "2027-02-01"

    def test_down_payment_covers_price(self, client, mortgage_payload):
        """Nothing to finance is rejected by the engine."""
        payload = dict(mortgage_payload, down_payment=375000)
        response = client.post("/api/calculate/mortgage", json=payload)
        assert response.status_code == 400
        assert "down_payment" in response.json()["detail"]

    def test_rate_out_of_bounds(self, client, mortgage_payload):
        payload = dict(mortgage_payload, annual_rate_percent=31)
        response = client.post("/api/calculate/mortgage", json=payload)
        assert response.status_code == 422


class TestAffordabilityAPI:
    """Test affordability endpoint."""

    def test_calculate_affordability(self, client):
        response = client.post(
            "/api/calculate/affordability",
            json={
                "annual_income": 96000,
                "monthly_debts": 500,
                "down_payment": 40000,
                "annual_rate_percent": 6.0,
                "term_years": 30,
                "property_tax_rate_percent": 1.2,
                "insurance_rate_percent": 0.5,
                "max_dti_ratio": 36,
            },
        )
        assert response.status_code == 200
        results = response.json()["results"]
        assert results["status"] == "ok"
        assert 353348 <= results["max_home_price"] <= 353449
        assert results["estimated_payment"] <= results["monthly_budget"]

    def test_debts_exceed_dti(self, client):
        """An unaffordable budget is a normal response, not an error."""
        response = client.post(
            "/api/calculate/affordability",
            json={
                "annual_income": 40000,
                "monthly_debts": 2000,
                "down_payment": 10000,
                "annual_rate_percent": 6.0,
            },
        )
        assert response.status_code == 200
        results = response.json()["results"]
        assert results["status"] == "debts_exceed_dti"
        assert results["max_home_price"] == 0

    def test_defaults_applied(self, client):
        response = client.post(
            "/api/calculate/affordability",
            json={"annual_income": 120000, "down_payment": 50000, "annual_rate_percent": 6.5},
        )
        inputs = response.json()["inputs"]
        assert inputs["max_dti_ratio"] == 43
        assert inputs["term_years"] == 30

    def test_dti_out_of_bounds(self, client):
        response = client.post(
            "/api/calculate/affordability",
            json={
                "annual_income": 96000,
                "down_payment": 40000,
                "annual_rate_percent": 6.0,
                "max_dti_ratio": 120,
            },
        )
        assert response.status_code == 422


class TestROIAPI:
    """Test rental ROI endpoint."""

    def test_cash_purchase(self, client):
        response = client.post(
            "/api/calculate/roi",
            json={
                "purchase_price": 200000,
                "down_payment": 200000,
                "monthly_rent": 2000,
                "property_tax": 2400,
                "insurance": 1200,
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["is_financed"] is False
        assert data["monthly"]["mortgage"] == 0
        assert data["returns"]["cash_on_cash_percent"] == 7.8
        assert data["returns"]["cap_rate_percent"] == 7.8

    def test_financed_purchase(self, client):
        response = client.post(
            "/api/calculate/roi",
            json={
                "purchase_price": 200000,
                "down_payment": 50000,
                "monthly_rent": 2000,
                "property_tax": 2400,
                "insurance": 1200,
                "annual_rate_percent": 6.0,
                "term_years": 30,
            },
        )
        data = response.json()
        assert data["monthly"]["mortgage"] == 899.33
        assert data["loan_amount"] == 150000

    def test_zero_holding_period(self, client):
        response = client.post(
            "/api/calculate/roi",
            json={
                "purchase_price": 200000,
                "down_payment": 50000,
                "monthly_rent": 2000,
                "property_tax": 2400,
                "insurance": 1200,
                "holding_period": 0,
            },
        )
        assert response.status_code == 422


class TestRentVsBuyAPI:
    """Test rent vs buy endpoint."""

    def test_calculate_rent_vs_buy(self, client, rent_vs_buy_inputs):
        response = client.post("/api/calculate/rent-vs-buy", json=rent_vs_buy_inputs)
        assert response.status_code == 200
        data = response.json()
        assert [row["year"] for row in data["years"]] == list(range(1, 11))
        assert data["summary"]["advantage"] in ("buying", "renting")
        assert data["inputs"]["time_horizon"] == 10

    def test_down_payment_exceeds_price(self, client, rent_vs_buy_inputs):
        payload = dict(rent_vs_buy_inputs, down_payment=500000)
        response = client.post("/api/calculate/rent-vs-buy", json=payload)
        assert response.status_code == 400


class TestAmortizationAPI:
    """Test amortization endpoint."""

    def test_calculate_amortization(self, client):
        response = client.post(
            "/api/calculate/amortization",
            json={"principal": 300000, "annual_rate_percent": 6.0, "term_years": 30},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["monthly_payment"] == 1798.65
        assert data["total_interest"] == 347514.57
        assert len(data["schedule"]) == 360

    def test_truncated(self, client):
        response = client.post(
            "/api/calculate/amortization",
            json={
                "principal": 300000,
                "annual_rate_percent": 6.0,
                "term_years": 30,
                "truncated": True,
            },
        )
        assert len(response.json()["schedule"]) == 41
