"""Exception hierarchy for litestar-fsm."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID

__all__ = (
    "ActionNotFoundError",
    "DefinitionError",
    "DefinitionNotFoundError",
    "DuplicateDefinitionError",
    "IllegalTransitionError",
    "InstanceNotFoundError",
    "InternalConsistencyError",
    "InvalidInitialStateCountError",
    "InvalidTerminalTransitionError",
    "TransitionError",
    "WorkflowValidationError",
    "WorkflowsError",
)


class WorkflowsError(Exception):
    """Base exception for all litestar-fsm errors.

    All exceptions raised by litestar-fsm inherit from this class, so callers
    can catch every workflow-related error with a single except clause.
    """


class DefinitionError(WorkflowsError):
    """Base exception for a workflow definition rejected at creation time.

    Attributes:
        definition_id: The identifier of the rejected definition.
    """

    def __init__(self, definition_id: str, message: str) -> None:
        self.definition_id = definition_id
        super().__init__(message)


class DuplicateDefinitionError(DefinitionError):
    """Raised when a definition identifier is already taken.

    Definition identifiers are globally unique and write-once.
    """

    def __init__(self, definition_id: str) -> None:
        """Initialize the exception with the duplicated identifier.

        Args:
            definition_id: The identifier that is already in use.
        """
        super().__init__(definition_id, f"Workflow definition with ID '{definition_id}' already exists")


class InvalidInitialStateCountError(DefinitionError):
    """Raised when a definition does not declare exactly one initial state.

    Attributes:
        definition_id: The identifier of the rejected definition.
        count: The number of initial states that were declared.
    """

    def __init__(self, definition_id: str, count: int) -> None:
        """Initialize the exception with the offending count.

        Args:
            definition_id: The identifier of the rejected definition.
            count: The number of states flagged as initial.
        """
        self.count = count
        super().__init__(
            definition_id,
            f"A workflow definition must have exactly one initial state, '{definition_id}' declares {count}",
        )


class WorkflowValidationError(DefinitionError):
    """Raised when a definition is structurally unsound.

    This covers duplicate state or action identifiers, actions without source
    states and actions that reference states the definition never declares.

    Attributes:
        errors: List of validation error messages.
    """

    def __init__(self, errors: list[str], definition_id: str = "") -> None:
        """Initialize the exception with validation errors.

        Args:
            errors: List of validation error messages.
            definition_id: The identifier of the rejected definition.
        """
        self.errors = errors
        super().__init__(definition_id, f"Workflow validation failed: {'; '.join(errors)}")


class DefinitionNotFoundError(WorkflowsError):
    """Raised when a workflow definition is not found.

    Attributes:
        definition_id: The identifier that could not be resolved.
    """

    def __init__(self, definition_id: str) -> None:
        self.definition_id = definition_id
        super().__init__(f"Workflow definition with ID '{definition_id}' not found")


class InstanceNotFoundError(WorkflowsError):
    """Raised when a workflow instance is not found.

    Attributes:
        instance_id: The identifier that could not be resolved.
    """

    def __init__(self, instance_id: str | UUID) -> None:
        self.instance_id = instance_id
        super().__init__(f"Workflow instance with ID '{instance_id}' not found")


class ActionNotFoundError(WorkflowsError):
    """Raised when an action is not declared by the instance's definition.

    Attributes:
        definition_id: The definition that was searched.
        action_id: The action that could not be resolved.
    """

    def __init__(self, definition_id: str, action_id: str) -> None:
        self.definition_id = definition_id
        self.action_id = action_id
        super().__init__(f"Action '{action_id}' not found in the workflow definition '{definition_id}'")


class TransitionError(WorkflowsError):
    """Base exception for an action refused by the transition rule.

    Attributes:
        instance_id: The instance the action was requested on.
        state_id: The instance's current state identifier.
        action_id: The requested action.
    """

    def __init__(self, instance_id: str | UUID, state_id: str, action_id: str, message: str) -> None:
        self.instance_id = instance_id
        self.state_id = state_id
        self.action_id = action_id
        super().__init__(message)


class InvalidTerminalTransitionError(TransitionError):
    """Raised when an action is requested on an instance that cannot move.

    This occurs once the instance sits in a final state, or when its current
    state is not declared by its definition.
    """

    def __init__(self, instance_id: str | UUID, state_id: str, action_id: str) -> None:
        super().__init__(
            instance_id,
            state_id,
            action_id,
            f"Cannot execute action '{action_id}' on instance '{instance_id}': "
            f"state '{state_id}' is final or unknown",
        )


class IllegalTransitionError(TransitionError):
    """Raised when an action does not list the current state among its sources."""

    def __init__(self, instance_id: str | UUID, state_id: str, action_id: str) -> None:
        super().__init__(
            instance_id,
            state_id,
            action_id,
            f"Action '{action_id}' cannot be executed from the current state '{state_id}'",
        )


class InternalConsistencyError(WorkflowsError):
    """Raised when an instance references a definition that cannot be resolved.

    Definitions are write-once and never deleted, so this indicates a bug in
    the engine rather than a caller mistake.

    Attributes:
        instance_id: The affected instance.
        definition_id: The dangling definition reference.
    """

    def __init__(self, instance_id: str | UUID, definition_id: str) -> None:
        self.instance_id = instance_id
        self.definition_id = definition_id
        super().__init__(
            f"Could not find definition '{definition_id}' referenced by instance '{instance_id}'",
        )
