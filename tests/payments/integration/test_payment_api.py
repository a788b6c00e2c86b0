"""Integration tests for the payment intent endpoints via TestClient."""

import pytest
from app import app
from fastapi.testclient import TestClient
from shared.config import get_settings


@pytest.fixture()
def client():
    return TestClient(app)


def _create(client, amount="25.20"):
    response = client.post("/payments/intents", json={"amount": amount})
    assert response.status_code == 201
    return response.json()


class TestIntentsAPI:
    def test_create(self, client):
        intent = _create(client)

        assert intent["amount"] == 2520
        assert intent["currency"] == "eur"
        assert intent["status"] == "requires_payment_method"

    def test_negative_amount_is_rejected(self, client):
        assert client.post("/payments/intents", json={"amount": "-5"}).status_code == 422

    def test_card_confirmation(self, client):
        intent = _create(client)

        response = client.post(
            "/payments/intents/confirm",
            json={"client_secret": intent["client_secret"], "payment_method": "card"},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "succeeded"
        assert client.get(f"/payments/intents/{intent['client_secret']}").json()["status"] == "succeeded"

    def test_ideal_answers_with_a_redirect(self, client):
        intent = _create(client)

        body = client.post(
            "/payments/intents/confirm",
            json={
                "client_secret": intent["client_secret"],
                "payment_method": "ideal",
                "return_url": "https://shop.example/payment/callback",
            },
        ).json()

        assert body["status"] == "requires_action"
        assert body["redirect_url"].startswith("https://shop.example/payment/callback?")

    def test_unsupported_method_is_400(self, client):
        intent = _create(client)

        response = client.post(
            "/payments/intents/confirm",
            json={"client_secret": intent["client_secret"], "payment_method": "cheque"},
        )

        assert response.status_code == 400
        assert "payment_method" in response.json()["messages"]

    def test_unknown_intent_is_502(self, client):
        assert client.get("/payments/intents/pi_missing_secret_abc").status_code == 502


class TestGatewayConfigurationAPI:
    def test_decline_next_confirmation(self, client):
        configured = client.post(
            "/payments/gateway/configure",
            json={"should_succeed": False, "failure_reason": "Insufficient funds"},
        ).json()
        assert configured == {"gateway": "FakeGateway", "should_succeed": False, "failure_reason": "Insufficient funds"}

        intent = _create(client)
        body = client.post(
            "/payments/intents/confirm",
            json={"client_secret": intent["client_secret"], "payment_method": "card"},
        ).json()

        assert body["status"] == "requires_payment_method"
        assert body["failure_reason"] == "Insufficient funds"

    def test_forbidden_in_production(self, client, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        get_settings.cache_clear()

        assert client.post("/payments/gateway/configure", json={"should_succeed": False}).status_code == 403
