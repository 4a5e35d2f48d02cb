"""HTTP tests for carbon_api.main."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from carbon_api import models
from carbon_api.database import get_db
from carbon_api.main import app


def _broken_db():
    broken = MagicMock()
    broken.query.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))
    yield broken


class TestCalculate:
    def test_shipping_example(self, client):
        body = {"activity": "shipping", "weight": 500, "from": "NYC", "to": "London", "mode": "air"}
        r = client.post("/api/v1/calculate", json=body)
        assert r.status_code == 200
        data = r.json()
        assert data["carbon_footprint"] == 2781.33
        assert data["unit"] == "kg_co2e"
        assert data["breakdown"]["origin"] == "NYC"
        assert data["breakdown"]["destination"] == "London"
        assert data["calculation"]["values"] == data["breakdown"]
        assert len(data["suggestions"]) == 3
        assert isinstance(data["timestamp"], str)

    def test_transport_is_accepted_for_mode(self, client):
        r = client.post("/api/v1/calculate", json={"activity": "fuel", "amount": 50, "transport": "diesel"})
        assert r.status_code == 200
        assert r.json()["carbon_footprint"] == 134.0
        assert r.json()["breakdown"]["fuel_type"] == "diesel"

    def test_unknown_activity(self, client):
        r = client.post("/api/v1/calculate", json={"activity": "commute", "amount": 10})
        assert r.status_code == 200
        assert r.json()["carbon_footprint"] == 10.0
        assert r.json()["suggestions"] == []

    def test_missing_activity(self, client, session_factory):
        r = client.post("/api/v1/calculate", json={"amount": 10})
        assert r.status_code == 400
        assert r.json() == {"error": True, "message": "Activity is required"}
        db = session_factory()
        assert db.query(models.Calculation).count() == 0
        db.close()

    def test_blank_activity(self, client):
        r = client.post("/api/v1/calculate", json={"activity": "  ", "amount": 10})
        assert r.status_code == 400

    def test_malformed_body(self, client):
        r = client.post("/api/v1/calculate", content="not json", headers={"Content-Type": "application/json"})
        assert r.status_code == 400
        assert r.json() == {"error": True, "message": "Invalid request format"}

    def test_negative_quantity_rejected(self, client):
        r = client.post("/api/v1/calculate", json={"activity": "fuel", "amount": -5, "mode": "diesel"})
        assert r.status_code == 400

    def test_huge_shipping_request(self, client):
        body = {"activity": "shipping", "weight": 1e20, "distance": 1e10, "mode": "air"}
        r = client.post("/api/v1/calculate", json=body)
        assert r.status_code == 200
        assert r.json()["carbon_footprint"] == pytest.approx(9.96e26)

    def test_overflowing_footprint_is_rejected(self, client):
        body = {"activity": "shipping", "weight": 1e300, "distance": 1e300, "mode": "air"}
        r = client.post("/api/v1/calculate", json=body)
        assert r.status_code == 400
        assert r.json() == {"error": True, "message": "Footprint is out of range"}

    def test_metadata_passes_through(self, client):
        body = {"activity": "electricity", "amount": 100, "mode": "grid", "metadata": {"site": "plant-7"}}
        r = client.post("/api/v1/calculate", json=body)
        assert r.status_code == 200
        assert r.json()["carbon_footprint"] == 52.5

    def test_result_and_usage_are_recorded(self, client, session_factory):
        r = client.post(
            "/api/v1/calculate",
            json={"activity": "electricity", "amount": 100, "mode": "grid"},
            headers={"User-ID": "acme"},
        )
        assert r.status_code == 200

        db = session_factory()
        calc = db.query(models.Calculation).one()
        assert calc.activity == "electricity"
        assert calc.carbon_footprint == 52.5
        assert calc.unit == "kg_co2e"
        assert calc.user_id == "acme"
        assert '"amount": 100' in calc.input_data
        usage = db.query(models.ApiUsage).one()
        assert usage.endpoint == "calculate"
        assert usage.user_id == "acme"
        assert usage.response_time_ms >= 0
        db.close()

    def test_anonymous_user_by_default(self, client, session_factory):
        client.post("/api/v1/calculate", json={"activity": "fuel", "amount": 1, "mode": "diesel"})
        db = session_factory()
        assert db.query(models.Calculation).one().user_id == "anonymous"
        db.close()

    def test_database_down_still_calculates(self, client):
        app.dependency_overrides[get_db] = _broken_db
        r = client.post("/api/v1/calculate", json={"activity": "fuel", "amount": 50, "mode": "diesel"})
        assert r.status_code == 200
        assert r.json()["carbon_footprint"] == 134.0

    def test_failed_background_write_does_not_reach_client(self, client):
        from carbon_api.main import get_session_factory

        failing = MagicMock()
        failing.commit.side_effect = OperationalError("INSERT", {}, Exception("disk full"))
        app.dependency_overrides[get_session_factory] = lambda: (lambda: failing)
        r = client.post("/api/v1/calculate", json={"activity": "commute", "amount": 2})
        assert r.status_code == 200
        assert r.json()["carbon_footprint"] == 2.0


class TestReferenceEndpoints:
    def test_activities(self, client):
        data = client.get("/api/v1/activities").json()
        assert data["total"] == 3
        assert set(data["activities"]) == {"shipping", "electricity", "fuel"}
        assert data["activities"]["shipping"]["transport_modes"] == ["air", "sea", "road", "rail"]

    def test_factors(self, client):
        r = client.get("/api/v1/factors")
        assert r.status_code == 200
        data = r.json()
        assert data["total"] == 10
        assert data["source"] == "IPCC 2023, IEA 2023, EPA 2023"
        first = data["emission_factors"][0]
        assert (first["activity"], first["mode"]) == ("electricity", "grid")

    def test_factors_database_down(self, client):
        app.dependency_overrides[get_db] = _broken_db
        r = client.get("/api/v1/factors")
        assert r.status_code == 500
        assert r.json() == {"error": True, "message": "Failed to fetch emission factors"}

    def test_index(self, client):
        data = client.get("/api/v1/index").json()
        assert "POST /api/v1/calculate" in data["endpoints"]
        assert data["example"]["body"]["activity"] == "shipping"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy", "service": "CarbonAPI", "version": "1.0.0"}

    def test_unknown_route_uses_error_shape(self, client):
        r = client.get("/api/v1/nope")
        assert r.status_code == 404
        assert r.json()["error"] is True


class TestAnalytics:
    def test_empty(self, client):
        stats = client.get("/api/v1/analytics").json()["analytics"]
        assert stats == {
            "total_calculations": 0,
            "avg_response_time_ms": 0.0,
            "total_carbon_calculated": 0.0,
            "top_activities": {},
        }

    def test_after_calculations(self, client):
        client.post("/api/v1/calculate", json={"activity": "fuel", "amount": 50, "mode": "diesel"})
        client.post("/api/v1/calculate", json={"activity": "fuel", "amount": 10, "mode": "gasoline"})
        client.post("/api/v1/calculate", json={"activity": "electricity", "amount": 100, "mode": "grid"})
        data = client.get("/api/v1/analytics").json()
        stats = data["analytics"]
        assert stats["total_calculations"] == 3
        assert stats["total_carbon_calculated"] == 209.6
        assert stats["top_activities"] == {"fuel": 2, "electricity": 1}
        assert "timestamp" in data

    def test_database_down(self, client):
        app.dependency_overrides[get_db] = _broken_db
        r = client.get("/api/v1/analytics")
        assert r.status_code == 500
        assert r.json()["error"] is True
