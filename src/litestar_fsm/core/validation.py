"""Structural validation of workflow definitions.

Definitions are checked once, when they are submitted, and rejected with the
first failing rule:

1. the identifier must not be empty, contain a slash, or be already taken,
2. exactly one state must be flagged as initial,
3. (strict mode) state and action identifiers must be unique, every action
   needs at least one source state, and every referenced state must exist.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from litestar_fsm.exceptions import (
    DuplicateDefinitionError,
    InvalidInitialStateCountError,
    WorkflowValidationError,
)

if TYPE_CHECKING:
    from collections.abc import Container

    from litestar_fsm.core.models import WorkflowDefinition

__all__ = ["collect_structural_errors", "validate_definition"]


def collect_structural_errors(definition: WorkflowDefinition) -> list[str]:
    """Collect reference and uniqueness problems in a definition.

    Args:
        definition: The definition to inspect.

    Returns:
        List of validation error messages. Empty list if valid.

    Example:
        >>> errors = collect_structural_errors(definition)
        >>> if errors:
        ...     print("Validation errors:", errors)
    """
    errors: list[str] = []

    state_counts = Counter(state.id for state in definition.states)
    for state_id, count in state_counts.items():
        if count > 1:
            errors.append(f"State '{state_id}' is declared {count} times")

    action_counts = Counter(action.id for action in definition.actions)
    for action_id, count in action_counts.items():
        if count > 1:
            errors.append(f"Action '{action_id}' is declared {count} times")

    for action in definition.actions:
        if not action.from_states:
            errors.append(f"Action '{action.id}' has no source states")

        for source in action.from_states:
            if source not in state_counts:
                errors.append(f"Action '{action.id}': source state '{source}' not found")

        if action.to_state not in state_counts:
            errors.append(f"Action '{action.id}': target state '{action.to_state}' not found")

    return errors


def validate_definition(
    definition: WorkflowDefinition,
    *,
    existing_ids: Container[str] = (),
    strict: bool = True,
) -> None:
    """Check a candidate definition before it is admitted to a store.

    Args:
        definition: The candidate definition.
        existing_ids: Identifiers that are already taken.
        strict: Whether to reject dangling state references and duplicate
            identifiers. When False, such definitions are accepted and only
            fail once an instance actually traverses the broken action.

    Raises:
        WorkflowValidationError: If the identifier is empty or contains a
            slash, or in strict mode if the definition is structurally unsound.
        DuplicateDefinitionError: If the identifier is already taken.
        InvalidInitialStateCountError: If zero or several initial states are declared.
    """
    if not definition.id:
        raise WorkflowValidationError(["Workflow definition identifier must not be empty"])

    # Identifiers are used as a single URL path segment.
    if "/" in definition.id:
        raise WorkflowValidationError(
            [f"Workflow definition identifier '{definition.id}' must not contain '/'"],
            definition_id=definition.id,
        )

    if definition.id in existing_ids:
        raise DuplicateDefinitionError(definition.id)

    initial_count = len(definition.initial_states)
    if initial_count != 1:
        raise InvalidInitialStateCountError(definition.id, initial_count)

    if strict:
        errors = collect_structural_errors(definition)
        if errors:
            raise WorkflowValidationError(errors, definition_id=definition.id)
