"""Workflow engine owning definition and instance storage."""

import threading
from typing import Callable, Dict, List, Optional

from loguru import logger

from ..models.workflow import HistoryEntry, WorkflowDefinition, WorkflowInstance
from .clock import Clock, SystemClock, new_instance_id
from .errors import (
    ActionDisabledError,
    AlreadyExistsError,
    EntityKind,
    IllegalTransitionError,
    InternalInconsistencyError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    WorkflowEngineError,
)
from .store import EntityStore, InMemoryEntityStore
from .validation import validate_definition


class WorkflowEngine:
    """
    State machine engine for workflow definitions and their instances.

    Features:
    - Definitions validated atomically at creation, immutable afterwards
    - Instances start in the definition's enabled initial state
    - Action execution checked step by step, all-or-nothing
    - Per-instance locking so executions on one instance are serialized
    - Injectable stores, clock and id source for deterministic tests
    """

    def __init__(
        self,
        definitions: Optional[EntityStore[WorkflowDefinition]] = None,
        instances: Optional[EntityStore[WorkflowInstance]] = None,
        clock: Optional[Clock] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        """Initialize workflow engine with its stores and runtime sources."""
        self.definitions = (
            definitions if definitions is not None else InMemoryEntityStore("definition")
        )
        self.instances = (
            instances if instances is not None else InMemoryEntityStore("instance")
        )
        self.clock = clock or SystemClock()
        self.id_factory = id_factory or new_instance_id
        self._instance_locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    # -- Definitions ---------------------------------------------------------

    def create_definition(self, definition: WorkflowDefinition) -> str:
        """Validate and store a workflow definition, returning its id."""
        if definition is None or not (definition.id or "").strip():
            raise InvalidInputError("Workflow definition id is required.")

        if definition.id in self.definitions:
            logger.warning(f"Rejected duplicate workflow definition: {definition.id}")
            raise AlreadyExistsError(definition.id)

        try:
            validate_definition(definition)
        except WorkflowEngineError as e:
            logger.warning(f"Invalid workflow definition {definition.id}: {e}")
            raise

        # Compare-and-insert: a concurrent create may have won since the check
        if not self.definitions.add(definition.id, definition.model_copy(deep=True)):
            logger.warning(f"Rejected duplicate workflow definition: {definition.id}")
            raise AlreadyExistsError(definition.id)

        logger.info(
            f"Registered workflow definition: {definition.id} "
            f"({len(definition.states)} states, {len(definition.actions)} actions)"
        )
        return definition.id

    def get_definition(self, definition_id: str) -> WorkflowDefinition:
        """Return a stored definition."""
        return self._require_definition(definition_id).model_copy(deep=True)

    def list_definitions(self) -> List[WorkflowDefinition]:
        """Return every stored definition."""
        return [d.model_copy(deep=True) for d in self.definitions.list()]

    # -- Instances -----------------------------------------------------------

    def start_instance(self, definition_id: str) -> WorkflowInstance:
        """Start a new instance in the definition's enabled initial state."""
        definition = self._require_definition(definition_id)

        initial = next(
            (s for s in definition.states if s.is_initial and s.enabled), None
        )
        if initial is None:
            logger.warning(f"No enabled initial state in workflow: {definition_id}")
            raise InvalidStateError(
                f"Workflow '{definition_id}' has no enabled initial state."
            )

        instance = WorkflowInstance(
            id=self.id_factory(),
            definition_id=definition_id,
            current_state_id=initial.id,
        )
        if not self.instances.add(instance.id, instance):
            raise InternalInconsistencyError(
                f"Generated instance id '{instance.id}' is already in use."
            )

        logger.info(
            f"Started workflow instance: {instance.id} "
            f"(workflow: {definition_id}, state: {initial.id})"
        )
        return instance.model_copy(deep=True)

    def get_instance(self, instance_id: str) -> WorkflowInstance:
        """Return an instance with its current state and full history."""
        return self._require_instance(instance_id).model_copy(deep=True)

    def list_instances(self) -> List[WorkflowInstance]:
        """Return every stored instance."""
        return [i.model_copy(deep=True) for i in self.instances.list()]

    # -- Runtime transition --------------------------------------------------

    def execute_action(self, instance_id: str, action_id: str) -> WorkflowInstance:
        """
        Move an instance along an action's edge.

        Checks run in a fixed order and the first failure aborts the call
        with the instance untouched.

        Returns:
            The updated instance

        Raises:
            NotFoundError: instance, definition or action unknown
            ActionDisabledError: action is disabled
            IllegalTransitionError: current state is final or not a source
            InvalidStateError: target state missing or disabled
            InternalInconsistencyError: current state does not resolve
        """
        self._require_instance(instance_id)

        with self._lock_for(instance_id):
            instance = self._require_instance(instance_id)
            try:
                target_id = self._check_transition(instance, action_id)
            except WorkflowEngineError as e:
                logger.warning(
                    f"Rejected action {action_id} on instance {instance_id}: {e}"
                )
                raise

            updated = instance.model_copy(deep=True)
            updated.current_state_id = target_id
            updated.history.append(
                HistoryEntry(action_id=action_id, timestamp=self.clock.now())
            )
            self.instances.save(instance_id, updated)

        logger.info(
            f"Instance {instance_id} transitioned "
            f"{instance.current_state_id} -> {target_id} via {action_id}"
        )
        return updated.model_copy(deep=True)

    def _check_transition(self, instance: WorkflowInstance, action_id: str) -> str:
        """Run every transition check and return the target state id."""
        definition = self.definitions.get(instance.definition_id)
        if definition is None:
            logger.error(
                f"Instance {instance.id} references missing workflow "
                f"{instance.definition_id}"
            )
            raise NotFoundError(EntityKind.DEFINITION, instance.definition_id)

        action = definition.find_action(action_id)
        if action is None:
            raise NotFoundError(
                EntityKind.ACTION,
                action_id,
                f"Action '{action_id}' not found in workflow '{definition.id}'.",
            )
        if not action.enabled:
            raise ActionDisabledError(action_id)

        current = definition.find_state(instance.current_state_id)
        if current is None:
            logger.error(
                f"Instance {instance.id} is in state {instance.current_state_id} "
                f"unknown to workflow {definition.id}"
            )
            raise InternalInconsistencyError(
                f"Current state '{instance.current_state_id}' not found in "
                f"workflow '{definition.id}'."
            )

        if current.is_final:
            raise IllegalTransitionError("Cannot execute actions from a final state.")
        if current.id not in action.from_states:
            raise IllegalTransitionError(
                f"Action '{action_id}' cannot be run from state '{current.id}'."
            )

        target = definition.find_state(action.to_state)
        if target is None:
            raise InvalidStateError(f"Target state '{action.to_state}' not found.")
        if not target.enabled:
            raise InvalidStateError(f"Target state '{target.id}' is disabled.")

        return target.id

    # -- Helpers -------------------------------------------------------------

    def _require_definition(self, definition_id: str) -> WorkflowDefinition:
        definition = self.definitions.get(definition_id)
        if definition is None:
            raise NotFoundError(EntityKind.DEFINITION, definition_id)
        return definition

    def _require_instance(self, instance_id: str) -> WorkflowInstance:
        instance = self.instances.get(instance_id)
        if instance is None:
            raise NotFoundError(EntityKind.INSTANCE, instance_id)
        return instance

    def _lock_for(self, instance_id: str) -> threading.Lock:
        """Return the lock serializing executions on one instance."""
        with self._registry_lock:
            lock = self._instance_locks.get(instance_id)
            if lock is None:
                lock = threading.Lock()
                self._instance_locks[instance_id] = lock
            return lock
