"""
Tests for the calculated-shipping webhook.
"""
import pytest
from fastapi.testclient import TestClient

from custom_shipping.api.routes.shipping import get_rate_rules
from custom_shipping.core.config import settings
from custom_shipping.main import create_app
from custom_shipping.services.rate_rules import load_rules


@pytest.fixture
def app():
    app = create_app()
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    return TestClient(app)


def use_rules(app, rules):
    app.dependency_overrides[get_rate_rules] = lambda: load_rules(rules)


class TestShippingRatesEndpoint:
    """Test POST /shipping/rates."""

    def test_returns_embedded_rates(self, client, cart_payload):
        response = client.post("/shipping/rates", json=cart_payload)

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert [r["service_id"] for r in body["data"]["shipping_results"]] == [3, 2, 92, 1]
        assert body["data"]["shipping_results"][3]["price"] == 9.1

    def test_applies_rules(self, app, client, cart_payload):
        use_rules(app, [
            {"action": "add", "service_id": 50, "price": 4, "method": "Local",
             "service_name": "Pickup", "add_flat_rate": False, "add_handling": False},
            {"action": "update", "selector": "ups", "modifier": "*2"},
            {"action": "hide", "selector": "fedex ground"},
        ])

        body = client.post("/shipping/rates", json=cart_payload).json()

        results = body["data"]["shipping_results"]
        assert [r["service_id"] for r in results] == [3, 2, 1, 10050]
        assert [r["price"] for r in results] == [25.0, 50.0, 9.1, 4.0]
        assert all("hidden" not in r for r in results)

    def test_error_rule(self, app, client, cart_payload):
        use_rules(app, [{"action": "error", "message": "We do not ship to this address"}])

        response = client.post("/shipping/rates", json=cart_payload)

        assert response.status_code == 200
        assert response.json() == {"ok": False, "details": "We do not ship to this address"}

    def test_failing_rule_reports_error(self, app, client, cart_payload):
        use_rules(app, [{"action": "update", "selector": "all", "modifier": "half off"}])

        response = client.post("/shipping/rates", json=cart_payload)

        assert response.status_code == 200
        assert response.json() == {"ok": False, "details": settings.SHIPPING_RULES_ERROR_MESSAGE}

    def test_misconfigured_rules_report_error(self, client, cart_payload, monkeypatch):
        monkeypatch.setattr(settings, "SHIPPING_RATE_RULES", [{"action": "update"}])

        response = client.post("/shipping/rates", json=cart_payload)

        assert response.status_code == 200
        assert response.json() == {"ok": False, "details": settings.SHIPPING_RULES_ERROR_MESSAGE}

    def test_rules_from_settings(self, client, cart_payload, monkeypatch):
        monkeypatch.setattr(settings, "SHIPPING_RATE_RULES", [{"action": "remove", "selector": [1, 2]}])

        body = client.post("/shipping/rates", json=cart_payload).json()

        assert [r["service_id"] for r in body["data"]["shipping_results"]] == [3, 92]

    def test_cart_without_rates(self, client):
        body = client.post("/shipping/rates", json={"_embedded": {}}).json()
        assert body == {"ok": True, "data": {"shipping_results": []}}

    def test_invalid_json(self, client):
        response = client.post(
            "/shipping/rates",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

    def test_null_payload(self, client):
        response = client.post(
            "/shipping/rates",
            content=b"null",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

    def test_payload_not_a_cart(self, client):
        response = client.post("/shipping/rates", json=["not", "a", "cart"])
        assert response.status_code == 400


class TestHealthEndpoint:
    """Test GET /health."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestServe:
    """Test the custom-shipping console script entry point."""

    def test_runs_uvicorn_with_settings(self, monkeypatch):
        import uvicorn

        from custom_shipping import main

        calls = []
        monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
        monkeypatch.setattr(settings, "PORT", 9090)

        main.serve()

        assert calls == [("custom_shipping.main:app", {"host": settings.HOST, "port": 9090})]
