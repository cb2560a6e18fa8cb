"""Data models package."""

from .workflow import (
    DefinitionCreatedResponse,
    DefinitionListResponse,
    HistoryEntry,
    InstanceListResponse,
    WorkflowAction,
    WorkflowDefinition,
    WorkflowInstance,
    WorkflowState,
)

__all__ = [
    "WorkflowState",
    "WorkflowAction",
    "WorkflowDefinition",
    "HistoryEntry",
    "WorkflowInstance",
    "DefinitionCreatedResponse",
    "DefinitionListResponse",
    "InstanceListResponse",
]
