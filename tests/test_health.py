"""Health endpoint validation for the workflow service."""

from fastapi.testclient import TestClient

from app.main import create_app


def test_health_returns_service_status() -> None:
    """/health should surface the service identifier."""

    client = TestClient(create_app())
    response = client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["service"] == "workflow-engine"
    assert payload["status"] == "ok"


def test_root_reports_running() -> None:
    client = TestClient(create_app())
    response = client.get("/")

    assert response.status_code == 200
    assert "running" in response.text
