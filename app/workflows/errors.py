"""Typed failures raised by the workflow engine."""

from enum import Enum
from typing import Any, Dict, Optional


class EntityKind(str, Enum):
    """Kinds of entity an operation can fail to resolve."""

    DEFINITION = "definition"
    INSTANCE = "instance"
    ACTION = "action"


class ValidationRule(str, Enum):
    """Structural invariants checked when a definition is created."""

    STATES_REQUIRED = "states_required"
    STATE_ID_REQUIRED = "state_id_required"
    STATE_IDS_UNIQUE = "state_ids_unique"
    SINGLE_INITIAL_STATE = "single_initial_state"
    ACTION_ID_REQUIRED = "action_id_required"
    ACTION_IDS_UNIQUE = "action_ids_unique"
    TARGET_STATE_EXISTS = "target_state_exists"
    SOURCE_STATES_REQUIRED = "source_states_required"
    SOURCE_STATES_EXIST = "source_states_exist"


class WorkflowEngineError(Exception):
    """Base class for workflow engine failures."""

    code = "workflow_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the failure for a transport layer."""
        return {"code": self.code, "message": self.message}


class InvalidInputError(WorkflowEngineError):
    """Raised when a required field of a write operation is missing or blank."""

    code = "invalid_input"


class AlreadyExistsError(WorkflowEngineError):
    """Raised when creating an entity whose identifier is taken."""

    code = "already_exists"

    def __init__(self, entity_id: str) -> None:
        super().__init__(f"Definition '{entity_id}' already exists.")
        self.entity_id = entity_id


class DefinitionValidationError(WorkflowEngineError):
    """Raised when a definition breaks a structural invariant."""

    code = "validation_error"

    def __init__(self, rule: ValidationRule, message: str) -> None:
        super().__init__(message)
        self.rule = rule

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "rule": self.rule.value}


class NotFoundError(WorkflowEngineError):
    """Raised when a referenced entity cannot be resolved."""

    code = "not_found"

    def __init__(
        self, entity: EntityKind, entity_id: str, message: Optional[str] = None
    ) -> None:
        super().__init__(
            message or f"{entity.value.capitalize()} '{entity_id}' not found."
        )
        self.entity = entity
        self.entity_id = entity_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "entity": self.entity.value,
            "entityId": self.entity_id,
        }


class ActionDisabledError(WorkflowEngineError):
    """Raised when an existing action is administratively disabled."""

    code = "action_disabled"

    def __init__(self, action_id: str) -> None:
        super().__init__(f"Action '{action_id}' is disabled.")
        self.action_id = action_id


class IllegalTransitionError(WorkflowEngineError):
    """Raised when an enabled action may not run from the current state."""

    code = "illegal_transition"


class InvalidStateError(WorkflowEngineError):
    """Raised when a required state is missing or disabled."""

    code = "invalid_state"


class InternalInconsistencyError(WorkflowEngineError):
    """Raised when stored data violates an invariant validation should guarantee."""

    code = "internal_inconsistency"
