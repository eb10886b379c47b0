"""Local in-memory transition engine.

This module provides the engine that admits workflow definitions, starts
instances of them and drives instances forward by executing actions, enforcing
that every transition is legal.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING
from uuid import uuid4

from litestar_fsm.core.graph import DefinitionGraph
from litestar_fsm.core.models import HistoryEntry, WorkflowInstance
from litestar_fsm.engine.instances import InstanceStore
from litestar_fsm.engine.registry import DefinitionStore
from litestar_fsm.exceptions import (
    ActionNotFoundError,
    DefinitionError,
    IllegalTransitionError,
    InternalConsistencyError,
    InvalidInitialStateCountError,
    InvalidTerminalTransitionError,
)

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from litestar_fsm.core.models import Action, WorkflowDefinition

__all__ = ["TransitionEngine"]

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TransitionEngine:
    """In-memory engine for finite-state-machine workflows.

    The engine keeps no state of its own beyond its two stores. Definitions are
    read-only once admitted; executing an action only ever mutates the target
    instance, under that instance's lock.

    Attributes:
        definitions: The definition store.
        instances: The instance store.
        strict_validation: Whether definitions with dangling state references
            or duplicate identifiers are rejected.
        clock: Callable returning the timestamp recorded in instance history.
    """

    def __init__(
        self,
        definitions: DefinitionStore | None = None,
        instances: InstanceStore | None = None,
        *,
        strict_validation: bool = True,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            definitions: Optional pre-populated definition store.
            instances: Optional pre-populated instance store.
            strict_validation: Whether to reject structurally unsound definitions.
            clock: Optional timestamp source, defaults to the current UTC time.
        """
        self.definitions = definitions if definitions is not None else DefinitionStore()
        self.instances = instances if instances is not None else InstanceStore()
        self.strict_validation = strict_validation
        self.clock = clock or _utcnow

    def create_definition(self, definition: WorkflowDefinition) -> WorkflowDefinition:
        """Validate a definition and store it.

        Args:
            definition: The candidate definition.

        Returns:
            The stored definition.

        Raises:
            DefinitionError: If the definition is rejected. Nothing is stored.

        Example:
            >>> engine = TransitionEngine()
            >>> engine.create_definition(doc_approval)
        """
        try:
            stored = self.definitions.add(definition, strict=self.strict_validation)
        except DefinitionError as e:
            logger.debug("Rejected workflow definition %r: %s", definition.id, e)
            raise

        logger.info(
            "Created workflow definition %r with %d states and %d actions",
            stored.id,
            len(stored.states),
            len(stored.actions),
        )

        unreachable = DefinitionGraph(stored).get_unreachable_states()
        if unreachable:
            logger.warning(
                "Workflow definition %r has states unreachable from its initial state: %s",
                stored.id,
                ", ".join(unreachable),
            )
        return stored

    def create_instance(self, definition_id: str) -> WorkflowInstance:
        """Start a new instance of a stored definition.

        The instance begins in the definition's initial state with an empty
        history and a freshly generated identifier.

        Args:
            definition_id: Identifier of the definition to instantiate.

        Returns:
            A snapshot of the new instance.

        Raises:
            DefinitionNotFoundError: If the definition does not exist.
            InvalidInitialStateCountError: If the stored definition does not
                declare exactly one initial state.

        Example:
            >>> instance = engine.create_instance("doc-approval")
            >>> instance.current_state_id
            'draft'
        """
        definition = self.definitions.get(definition_id)

        initial_states = definition.initial_states
        if len(initial_states) != 1:
            logger.error("Stored workflow definition %r has no unique initial state", definition.id)
            raise InvalidInitialStateCountError(definition.id, len(initial_states))
        initial_state = initial_states[0]

        instance = WorkflowInstance(
            id=uuid4(),
            definition_id=definition.id,
            current_state_id=initial_state.id,
        )
        snapshot = self.instances.add(instance)
        logger.info(
            "Created instance %s of workflow %r in state %r",
            snapshot.id,
            definition.id,
            snapshot.current_state_id,
        )
        return snapshot

    def execute_action(self, instance_id: UUID | str, action_id: str) -> WorkflowInstance:
        """Execute an action against an instance.

        Checks run in order and the first failure wins; a failed call leaves
        the instance's state and history unchanged. The ``enabled`` flags of
        states and actions are not consulted.

        Args:
            instance_id: Identifier of the instance.
            action_id: Identifier of the action to execute.

        Returns:
            A snapshot of the updated instance.

        Raises:
            InstanceNotFoundError: If the instance does not exist.
            InternalConsistencyError: If the instance's definition is missing.
            InvalidTerminalTransitionError: If the current state is final or unknown.
            ActionNotFoundError: If the definition does not declare the action.
            IllegalTransitionError: If the action is not allowed from the current state.

        Example:
            >>> instance = engine.execute_action(instance.id, "submit-for-review")
            >>> instance.current_state_id
            'in-review'
        """
        with self.instances.locked(instance_id) as instance:
            definition = self._resolve_definition(instance)

            current_state = definition.get_state(instance.current_state_id)
            if current_state is None or current_state.is_final:
                logger.debug(
                    "Refused action %r on instance %s: state %r is final or unknown",
                    action_id,
                    instance.id,
                    instance.current_state_id,
                )
                raise InvalidTerminalTransitionError(instance.id, instance.current_state_id, action_id)

            action = definition.get_action(action_id)
            if action is None:
                logger.debug("Refused action %r on instance %s: action not found", action_id, instance.id)
                raise ActionNotFoundError(definition.id, action_id)

            if not action.allows(current_state.id):
                logger.debug(
                    "Refused action %r on instance %s: not allowed from state %r",
                    action_id,
                    instance.id,
                    current_state.id,
                )
                raise IllegalTransitionError(instance.id, current_state.id, action_id)

            instance.current_state_id = action.to_state
            instance.history.append(HistoryEntry(action_id=action.id, timestamp=self.clock()))
            logger.info(
                "Instance %s moved from %r to %r via %r",
                instance.id,
                current_state.id,
                action.to_state,
                action.id,
            )
            return instance.snapshot()

    def get_instance(self, instance_id: UUID | str) -> WorkflowInstance:
        """Retrieve a snapshot of an instance, including its full history.

        Raises:
            InstanceNotFoundError: If the instance does not exist.
        """
        return self.instances.get(instance_id)

    def get_definition(self, definition_id: str) -> WorkflowDefinition:
        """Retrieve a stored definition.

        Raises:
            DefinitionNotFoundError: If the definition does not exist.
        """
        return self.definitions.get(definition_id)

    def list_definitions(self) -> list[WorkflowDefinition]:
        return self.definitions.list_definitions()

    def list_instances(self, definition_id: str | None = None) -> list[WorkflowInstance]:
        """List instance snapshots, optionally filtered by definition."""
        return self.instances.list_instances(definition_id)

    def available_actions(self, instance_id: UUID | str) -> list[Action]:
        """List the actions that are currently legal for an instance.

        Args:
            instance_id: Identifier of the instance.

        Returns:
            Actions whose source states include the current state, in definition
            order. Empty when the current state is final or unknown.

        Raises:
            InstanceNotFoundError: If the instance does not exist.
            InternalConsistencyError: If the instance's definition is missing.
        """
        with self.instances.locked(instance_id) as instance:
            definition = self._resolve_definition(instance)
            return DefinitionGraph(definition).get_outgoing_actions(instance.current_state_id)

    def get_instance_graph(self, instance_id: UUID | str) -> tuple[DefinitionGraph, str]:
        """Build the graph of an instance's definition.

        Args:
            instance_id: Identifier of the instance.

        Returns:
            The definition graph and the instance's current state id, read
            under the instance lock so the two agree.

        Raises:
            InstanceNotFoundError: If the instance does not exist.
            InternalConsistencyError: If the instance's definition is missing.
        """
        with self.instances.locked(instance_id) as instance:
            definition = self._resolve_definition(instance)
            return DefinitionGraph.from_definition(definition), instance.current_state_id

    def _resolve_definition(self, instance: WorkflowInstance) -> WorkflowDefinition:
        definition = self.definitions.find(instance.definition_id)
        if definition is None:
            logger.error(
                "Instance %s references missing workflow definition %r",
                instance.id,
                instance.definition_id,
            )
            raise InternalConsistencyError(instance.id, instance.definition_id)
        return definition
