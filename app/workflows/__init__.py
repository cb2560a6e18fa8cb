"""Workflow engine package for state machine-based workflow definitions."""

from .clock import SystemClock
from .engine import WorkflowEngine
from .errors import WorkflowEngineError
from .store import EntityStore, InMemoryEntityStore

__all__ = [
    "WorkflowEngine",
    "WorkflowEngineError",
    "EntityStore",
    "InMemoryEntityStore",
    "SystemClock",
]
