"""Local test configuration for the workflow engine service."""

from __future__ import annotations

import itertools
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict

import pytest
from fastapi.testclient import TestClient

# -- Path management ------------------------------------------------------
# The service uses a classic ``app/`` package layout, so the repository root
# is not on ``sys.path`` when pytest runs without an editable install. Adding
# it as the first entry makes ``import app`` resolve in every environment.
SERVICE_ROOT = Path(__file__).resolve().parent.parent
if str(SERVICE_ROOT) not in sys.path:
    sys.path.insert(0, str(SERVICE_ROOT))

from app.config import WorkflowSettings
from app.main import create_app
from app.models.workflow import WorkflowDefinition
from app.workflows.engine import WorkflowEngine


class SteppingClock:
    """Deterministic clock advancing one second per reading."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)):
        self.current = start
        self.readings = 0

    def now(self) -> datetime:
        self.readings += 1
        self.current = self.current + timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock() -> SteppingClock:
    """Provide a controllable clock."""
    return SteppingClock()


@pytest.fixture
def id_factory():
    """Provide sequential instance ids: inst-1, inst-2, ..."""
    counter = itertools.count(1)
    return lambda: f"inst-{next(counter)}"


@pytest.fixture
def engine(clock, id_factory) -> WorkflowEngine:
    """Provide an engine with deterministic time and ids."""
    return WorkflowEngine(clock=clock, id_factory=id_factory)


@pytest.fixture
def doc_definition_dict() -> Dict[str, Any]:
    """Document review workflow: draft -> review -> done."""
    return {
        "id": "doc",
        "states": [
            {"id": "draft", "isInitial": True, "enabled": True},
            {"id": "review", "enabled": True},
            {"id": "done", "isFinal": True, "enabled": True},
        ],
        "actions": [
            {"id": "submit", "fromStates": ["draft"], "toState": "review", "enabled": True},
            {"id": "approve", "fromStates": ["review"], "toState": "done", "enabled": True},
        ],
    }


@pytest.fixture
def doc_definition(doc_definition_dict) -> WorkflowDefinition:
    """The document review workflow as a model."""
    return WorkflowDefinition.model_validate(doc_definition_dict)


@pytest.fixture
def test_settings() -> WorkflowSettings:
    """Provide test-specific settings."""
    return WorkflowSettings(
        app_name="workflow-engine-test",
        cors_origins=["http://localhost:3000", "http://localhost:8000"],
    )


@pytest.fixture
def app(test_settings, engine):
    """Create FastAPI app with test settings and the deterministic engine."""
    return create_app(test_settings, engine=engine)


@pytest.fixture
def client(app):
    """Provide TestClient for the workflow service."""
    return TestClient(app)
