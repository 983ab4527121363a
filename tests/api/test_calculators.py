from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from src.api.app import app
from src.api.deps import get_settings
from src.config import Settings


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


class TestHealth:
    def test_ok(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestDefaults:
    def test_from_settings(self, client):
        resp = client.get("/api/v1/calculators/defaults")
        assert resp.status_code == 200
        assert resp.json()["term_months"] == 360

    def test_overridden_settings(self, client):
        app.dependency_overrides[get_settings] = lambda: Settings(default_principal=Decimal("100000"))
        try:
            resp = client.get("/api/v1/calculators/defaults")
        finally:
            app.dependency_overrides.clear()
        assert Decimal(resp.json()["principal"]) == Decimal("100000")


class TestPayment:
    def test_standard_mortgage(self, client):
        resp = client.post(
            "/api/v1/calculators/payment",
            json={"principal": "250000", "annual_rate_percent": "6.5", "term_months": 360},
        )
        assert resp.status_code == 200
        assert Decimal(resp.json()["payment_amount"]) in (Decimal("1580.17"), Decimal("1580.18"))

    def test_negative_principal_is_bad_request(self, client):
        resp = client.post(
            "/api/v1/calculators/payment",
            json={"principal": "-5", "annual_rate_percent": "6.5", "term_months": 360},
        )
        assert resp.status_code == 400
        assert "negative" in resp.json()["detail"]


class TestTerm:
    def test_term(self, client):
        resp = client.post(
            "/api/v1/calculators/term",
            json={"principal": "300000", "annual_rate_percent": "5", "payment_amount": "2000"},
        )
        body = resp.json()
        assert body["months"] == 236
        assert body["years"] == 19
        assert body["remaining_months"] == 8
        assert body["never_amortizes"] is False

    def test_never_amortizes_flagged(self, client):
        resp = client.post(
            "/api/v1/calculators/term",
            json={"principal": "300000", "annual_rate_percent": "5", "payment_amount": "1000"},
        )
        assert resp.status_code == 200
        assert resp.json()["never_amortizes"] is True


class TestSchedule:
    def test_fixed_term(self, client):
        resp = client.post(
            "/api/v1/calculators/schedule",
            json={"principal": "250000", "annual_rate_percent": "6.5", "term_months": 360},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["periods"] == 360
        assert body["years"] == 30
        assert len(body["payments"]) == 360
        assert len(body["yearly"]) == 30
        assert Decimal(body["interest_saved"]) == 0
        assert body["periods_saved"] == 0

    def test_lump_sum_savings(self, client):
        resp = client.post(
            "/api/v1/calculators/schedule",
            json={
                "principal": "500000",
                "annual_rate_percent": "6.5",
                "term_months": 360,
                "lump_sums": [{"amount": "50000", "timing": "end_of_year", "year": 5}],
            },
        )
        body = resp.json()
        assert body["periods"] < 360
        assert Decimal(body["interest_saved"]) > 0
        assert body["periods_saved"] == 360 - body["periods"]

    def test_planned_date_resolved_to_period(self, client):
        resp = client.post(
            "/api/v1/calculators/schedule",
            json={
                "principal": "200000",
                "annual_rate_percent": "6",
                "term_months": 360,
                "lump_sums": [{"amount": "10000", "planned_date": "2021-01-01"}],
                "mortgage_start_date": "2020-01-01",
                "payment_day_of_month": 1,
            },
        )
        payments = resp.json()["payments"]
        assert Decimal(payments[11]["prepaid"]) == Decimal("10000")
        assert Decimal(payments[0]["prepaid"]) == 0

    def test_payment_driven(self, client):
        resp = client.post(
            "/api/v1/calculators/schedule",
            json={"principal": "300000", "annual_rate_percent": "5", "payment_amount": "2000"},
        )
        assert resp.status_code == 200
        assert Decimal(resp.json()["payment_amount"]) == Decimal("2000")

    def test_payment_too_low_is_422(self, client):
        resp = client.post(
            "/api/v1/calculators/schedule",
            json={"principal": "300000", "annual_rate_percent": "5", "payment_amount": "1000"},
        )
        assert resp.status_code == 422
        assert "Increase your payment" in resp.json()["detail"]

    def test_missing_term_and_payment(self, client):
        resp = client.post(
            "/api/v1/calculators/schedule",
            json={"principal": "300000", "annual_rate_percent": "5"},
        )
        assert resp.status_code == 400

    def test_rate_out_of_range(self, client):
        resp = client.post(
            "/api/v1/calculators/schedule",
            json={"principal": "300000", "annual_rate_percent": "120", "term_months": 360},
        )
        assert resp.status_code == 400


class TestPrepaymentImpact:
    def test_impact(self, client):
        resp = client.post(
            "/api/v1/calculators/prepayment-impact",
            json={
                "principal": "200000",
                "annual_rate_percent": "6",
                "periodic_payment": "1199.11",
                "lump_sum_amount": "20000",
                "period_of_lump_sum": 1,
                "original_term_months": 360,
                "as_of": "2025-01-15",
            },
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["time_saved_periods"] > 0
        assert Decimal(body["interest_saved"]) > 0
        assert Decimal(body["interest_saved"]) - Decimal(body["net_interest_saved"]) == Decimal("20000")
        assert body["payoff_date_original"] == "2055-01-15"

    def test_period_outside_term(self, client):
        resp = client.post(
            "/api/v1/calculators/prepayment-impact",
            json={
                "principal": "200000",
                "annual_rate_percent": "6",
                "periodic_payment": "1199.11",
                "lump_sum_amount": "20000",
                "period_of_lump_sum": 400,
                "original_term_months": 360,
            },
        )
        assert resp.status_code == 400


class TestLumpSumImpacts:
    def test_marginal_and_cumulative(self, client):
        resp = client.post(
            "/api/v1/calculators/lump-sum-impacts",
            json={
                "principal": "200000",
                "annual_rate_percent": "6",
                "payment_amount": "1199.11",
                "lump_sums": [
                    {"amount": "10000", "timing": "end_of_year", "year": 1, "description": "Bonus"},
                    {"amount": "10000", "timing": "end_of_year", "year": 2},
                ],
            },
        )
        assert resp.status_code == 200
        body = resp.json()
        assert [i["period"] for i in body] == [12, 24]
        assert body[0]["description"] == "Bonus"
        total = sum(Decimal(i["interest_saved"]) for i in body)
        assert Decimal(body[-1]["cumulative_interest_saved"]) == total
