"""Structural validation of workflow definitions."""

from typing import Set

from ..models.workflow import WorkflowDefinition
from .errors import DefinitionValidationError, ValidationRule


def _is_blank(value: object) -> bool:
    return not isinstance(value, str) or not value.strip()


def validate_definition(definition: WorkflowDefinition) -> None:
    """
    Check every structural invariant of a definition.

    Rules, checked in order (the first violation wins):
    - at least one state, each with a non-blank id
    - state ids unique, exactly one initial state
    - each action has a non-blank, unique id
    - each action's target references an existing state
    - each action has at least one source state, all existing

    Raises:
        DefinitionValidationError: carrying the broken rule
    """
    if not definition.states:
        raise DefinitionValidationError(
            ValidationRule.STATES_REQUIRED,
            "Workflow must contain at least one state.",
        )

    state_ids: Set[str] = set()
    for state in definition.states:
        if _is_blank(state.id):
            raise DefinitionValidationError(
                ValidationRule.STATE_ID_REQUIRED, "State id is required."
            )
        if state.id in state_ids:
            raise DefinitionValidationError(
                ValidationRule.STATE_IDS_UNIQUE, f"Duplicate state id '{state.id}'."
            )
        state_ids.add(state.id)

    initial_count = sum(1 for state in definition.states if state.is_initial)
    if initial_count != 1:
        raise DefinitionValidationError(
            ValidationRule.SINGLE_INITIAL_STATE,
            f"Workflow must have exactly one initial state (found {initial_count}).",
        )

    # An empty action list is valid
    action_ids: Set[str] = set()
    for action in definition.actions or []:
        if _is_blank(action.id):
            raise DefinitionValidationError(
                ValidationRule.ACTION_ID_REQUIRED, "Action id is required."
            )
        if action.id in action_ids:
            raise DefinitionValidationError(
                ValidationRule.ACTION_IDS_UNIQUE,
                f"Duplicate action id '{action.id}'.",
            )
        action_ids.add(action.id)

        if _is_blank(action.to_state) or action.to_state not in state_ids:
            raise DefinitionValidationError(
                ValidationRule.TARGET_STATE_EXISTS,
                f"Action '{action.id}' references unknown target state "
                f"'{action.to_state}'.",
            )

        if not action.from_states:
            raise DefinitionValidationError(
                ValidationRule.SOURCE_STATES_REQUIRED,
                f"Action '{action.id}' must have at least one source state.",
            )

        for source in action.from_states:
            if source not in state_ids:
                raise DefinitionValidationError(
                    ValidationRule.SOURCE_STATES_EXIST,
                    f"Action '{action.id}' references unknown source state "
                    f"'{source}'.",
                )
