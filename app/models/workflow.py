"""Workflow models and schemas for the state machine definition engine."""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exposing camelCase field names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WorkflowState(CamelModel):
    """A node in a workflow definition's graph."""

    id: str = Field(default="", description="State identifier, unique within its definition")
    is_initial: bool = False
    is_final: bool = False
    enabled: bool = True


class WorkflowAction(CamelModel):
    """A labeled edge: one or more source states, exactly one target."""

    id: str = Field(default="", description="Action identifier, unique within its definition")
    enabled: bool = True
    from_states: Optional[List[str]] = Field(default_factory=list)
    to_state: Optional[str] = None

    @field_validator("from_states", mode="before")
    @classmethod
    def null_from_states_as_empty(cls, v: Any) -> Any:
        """Treat an explicit null as no source states."""
        return [] if v is None else v


class WorkflowDefinition(CamelModel):
    """Immutable template describing the states and actions of a workflow.

    Structural soundness is not enforced here: the engine validates a
    definition atomically at creation so that every broken invariant is
    reported as a typed engine error rather than a request parsing error.
    """

    id: Optional[str] = Field(default=None, description="Caller-assigned workflow identifier")
    states: Optional[List[WorkflowState]] = Field(default_factory=list)
    actions: Optional[List[WorkflowAction]] = Field(default_factory=list)

    @field_validator("states", "actions", mode="before")
    @classmethod
    def null_list_as_empty(cls, v: Any) -> Any:
        """Treat an explicit null as an empty list; validation reports what it breaks."""
        return [] if v is None else v

    def find_state(self, state_id: Optional[str]) -> Optional[WorkflowState]:
        """Find a state by ID in this definition."""
        for state in self.states:
            if state.id == state_id:
                return state
        return None

    def find_action(self, action_id: str) -> Optional[WorkflowAction]:
        """Find an action by ID in this definition."""
        for action in self.actions:
            if action.id == action_id:
                return action
        return None


class HistoryEntry(CamelModel):
    """One successful action execution."""

    action_id: str
    timestamp: datetime


class WorkflowInstance(CamelModel):
    """Runtime token following one definition's graph."""

    id: str = Field(..., description="Engine-generated instance identifier")
    definition_id: str = Field(..., description="Reference to workflow definition")
    current_state_id: str
    history: List[HistoryEntry] = Field(default_factory=list)


class DefinitionCreatedResponse(CamelModel):
    """API response for a created definition."""

    definition_id: str


class DefinitionListResponse(CamelModel):
    """API response listing stored definitions."""

    total: int
    definitions: List[WorkflowDefinition]


class InstanceListResponse(CamelModel):
    """API response listing running instances."""

    total: int
    instances: List[WorkflowInstance]
