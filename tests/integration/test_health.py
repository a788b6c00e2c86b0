from app import app
from fastapi.testclient import TestClient


def test_health():
    response = TestClient(app).get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "environment": "test", "payment_gateway": "fake"}
