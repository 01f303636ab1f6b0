from fastapi.testclient import TestClient

from admin_panel.main import app


client = TestClient(app)


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_ready():
    response = client.get("/ready")
    assert response.status_code == 200
    assert response.json()["status"] in {"ready", "not_ready"}


def test_metrics():
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "admin_panel_liveness" in response.text


def test_api_status():
    response = client.get("/api/v1/status")
    assert response.status_code == 200
    assert response.json() == {"service": "admin-panel", "status": "ok"}
