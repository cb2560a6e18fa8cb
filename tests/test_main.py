"""Tests for the workflow service application factory."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.config import WorkflowSettings
from app.main import create_app
from app.workflows.engine import WorkflowEngine
from app.workflows.errors import DefinitionValidationError


SEED_YAML = """
definitions:
  - id: doc
    states:
      - {id: draft, isInitial: true}
      - {id: review}
      - {id: done, isFinal: true}
    actions:
      - {id: submit, fromStates: [draft], toState: review}
      - {id: approve, fromStates: [review], toState: done}
"""


class TestWorkflowApp:
    """Test the workflow service FastAPI application."""

    def test_creates_fastapi_instance(self):
        """Test that create_app returns a FastAPI instance."""
        app = create_app()
        assert isinstance(app, FastAPI)

    def test_app_title_comes_from_settings(self, test_settings):
        app = create_app(test_settings)
        assert app.title == test_settings.app_name

    def test_health_endpoint_returns_correct_service_name(self, client, test_settings):
        """Test health endpoint returns configured service name."""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["service"] == test_settings.app_name

    def test_each_app_owns_its_engine(self, test_settings):
        first = create_app(test_settings)
        second = create_app(test_settings)

        assert isinstance(first.state.workflow_engine, WorkflowEngine)
        assert first.state.workflow_engine is not second.state.workflow_engine

    def test_injected_engine_is_used(self, test_settings, engine):
        app = create_app(test_settings, engine=engine)
        assert app.state.workflow_engine is engine

    def test_cors_configuration(self, client):
        """Test CORS configuration allows requests."""
        response = client.options("/health", headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "GET"
        })

        # Should handle preflight request
        assert response.status_code in [200, 204]

    def test_error_handling(self, client):
        """Test that the app handles unknown routes."""
        response = client.get("/nonexistent-endpoint")
        assert response.status_code == 404

    def test_seed_definitions_loaded_at_startup(self, tmp_path):
        seed_file = tmp_path / "workflows.yaml"
        seed_file.write_text(SEED_YAML)
        settings = WorkflowSettings(seed_definitions_file=str(seed_file))

        client = TestClient(create_app(settings))
        response = client.get("/definition/doc")

        assert response.status_code == 200
        assert [s["id"] for s in response.json()["states"]] == ["draft", "review", "done"]

    def test_invalid_seed_aborts_startup(self, tmp_path):
        seed_file = tmp_path / "workflows.yaml"
        seed_file.write_text("- id: broken\n  states: []\n")
        settings = WorkflowSettings(seed_definitions_file=str(seed_file))

        with pytest.raises(DefinitionValidationError):
            create_app(settings)

    def test_settings_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("WORKFLOW_APP_NAME", "from-env")

        assert WorkflowSettings().app_name == "from-env"
