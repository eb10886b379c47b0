"""Instance store for running workflow instances.

Instances are owned by the store. Readers receive snapshots; the only way to
mutate a stored instance is through :meth:`InstanceStore.locked`, which holds
that instance's lock for the duration of the block.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING
from uuid import UUID

from litestar_fsm.exceptions import InstanceNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from litestar_fsm.core.models import WorkflowInstance

__all__ = ["InstanceStore"]


class InstanceStore:
    """In-memory storage of workflow instances keyed by instance id.

    Attributes:
        _instances: Map of instance ids to live instances.
        _locks: One lock per instance, serializing reads and transitions.
        _lock: Guards the two maps themselves.
    """

    def __init__(self) -> None:
        """Initialize an empty instance store."""
        self._instances: dict[UUID, WorkflowInstance] = {}
        self._locks: dict[UUID, threading.Lock] = {}
        self._lock = threading.Lock()

    def add(self, instance: WorkflowInstance) -> WorkflowInstance:
        """Store a new instance.

        Args:
            instance: The instance to store. Its id must be unused.

        Returns:
            A snapshot of the stored instance.
        """
        with self._lock:
            if instance.id in self._instances:
                msg = f"Workflow instance '{instance.id}' is already stored"
                raise ValueError(msg)
            self._instances[instance.id] = instance
            self._locks[instance.id] = threading.Lock()
            return instance.snapshot()

    def get(self, instance_id: UUID | str) -> WorkflowInstance:
        """Retrieve a snapshot of an instance.

        Args:
            instance_id: The instance id, as a UUID or its string form.

        Returns:
            A copy of the instance, including its full history.

        Raises:
            InstanceNotFoundError: If the instance does not exist.
        """
        with self.locked(instance_id) as instance:
            return instance.snapshot()

    @contextmanager
    def locked(self, instance_id: UUID | str) -> Iterator[WorkflowInstance]:
        """Hold an instance's lock and yield the live instance.

        Mutations made inside the block are visible to later readers once the
        block exits. Concurrent callers on the same instance wait for each
        other; different instances never contend.

        Args:
            instance_id: The instance id, as a UUID or its string form.

        Raises:
            InstanceNotFoundError: If the instance does not exist.
        """
        key = self._coerce_id(instance_id)
        with self._lock:
            instance = self._instances.get(key)
            instance_lock = self._locks.get(key)
        if instance is None or instance_lock is None:
            raise InstanceNotFoundError(instance_id)
        with instance_lock:
            yield instance

    def list_instances(self, definition_id: str | None = None) -> list[WorkflowInstance]:
        """List snapshots of stored instances in creation order.

        Args:
            definition_id: Only include instances of this definition.
        """
        with self._lock:
            keys = [
                key
                for key, instance in self._instances.items()
                if definition_id is None or instance.definition_id == definition_id
            ]
        return [self.get(key) for key in keys]

    def __len__(self) -> int:
        with self._lock:
            return len(self._instances)

    @staticmethod
    def _coerce_id(instance_id: UUID | str) -> UUID:
        if isinstance(instance_id, UUID):
            return instance_id
        try:
            return UUID(instance_id)
        except (TypeError, ValueError) as e:
            raise InstanceNotFoundError(instance_id) from e
