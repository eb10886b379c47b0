"""Definition store for admitted workflow definitions.

This module provides the process-wide registry of validated, immutable
workflow definitions keyed by identifier.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from litestar_fsm.core.validation import validate_definition
from litestar_fsm.exceptions import DefinitionNotFoundError

if TYPE_CHECKING:
    from litestar_fsm.core.models import WorkflowDefinition

__all__ = ["DefinitionStore"]


class DefinitionStore:
    """Registry for storing and retrieving workflow definitions.

    Definitions are validated on the way in and stored exactly once; there is
    no update or delete operation, so a stored definition never changes.

    Attributes:
        _definitions: Map of definition ids to definitions, in insertion order.
        _lock: Serializes check-then-insert against concurrent submissions.
    """

    def __init__(self) -> None:
        """Initialize an empty definition store."""
        self._definitions: dict[str, WorkflowDefinition] = {}
        self._lock = threading.Lock()

    def add(self, definition: WorkflowDefinition, *, strict: bool = True) -> WorkflowDefinition:
        """Validate a definition and admit it to the store.

        Args:
            definition: The candidate definition.
            strict: Whether to reject dangling state references and duplicate
                state or action identifiers.

        Returns:
            The stored definition.

        Raises:
            DefinitionError: If validation fails. Nothing is stored in that case.

        Example:
            >>> store = DefinitionStore()
            >>> store.add(doc_approval)
        """
        with self._lock:
            validate_definition(definition, existing_ids=self._definitions.keys(), strict=strict)
            self._definitions[definition.id] = definition
        return definition

    def get(self, definition_id: str) -> WorkflowDefinition:
        """Retrieve a definition by identifier.

        Args:
            definition_id: The definition identifier.

        Returns:
            The stored WorkflowDefinition.

        Raises:
            DefinitionNotFoundError: If no definition has that identifier.
        """
        definition = self.find(definition_id)
        if definition is None:
            raise DefinitionNotFoundError(definition_id)
        return definition

    def find(self, definition_id: str) -> WorkflowDefinition | None:
        """Retrieve a definition by identifier, or None if it is unknown."""
        with self._lock:
            return self._definitions.get(definition_id)

    def list_definitions(self) -> list[WorkflowDefinition]:
        """List all stored definitions in submission order."""
        with self._lock:
            return list(self._definitions.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._definitions)
