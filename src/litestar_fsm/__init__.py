"""Litestar FSM - finite-state-machine workflows for Litestar.

This package lets callers define workflows as named states connected by named
actions, start independent instances of them and drive each instance forward
by executing actions, with the engine enforcing that every transition is legal.

Key Features:
    - Definitions validated once at creation and immutable afterwards
    - Instances that reference their definition, never copy it
    - Append-only transition history per instance
    - Per-instance locking for concurrent callers
    - REST API and MermaidJS state diagrams via a Litestar plugin

Example:
    >>> from litestar_fsm import Action, State, TransitionEngine, WorkflowDefinition
    >>>
    >>> engine = TransitionEngine()
    >>> engine.create_definition(
    ...     WorkflowDefinition(
    ...         id="doc-approval",
    ...         states=[State(id="draft", is_initial=True), State(id="approved", is_final=True)],
    ...         actions=[Action(id="approve", from_states=["draft"], to_state="approved")],
    ...     )
    ... )
    >>> instance = engine.create_instance("doc-approval")
    >>> engine.execute_action(instance.id, "approve").current_state_id
    'approved'
"""

from __future__ import annotations

from litestar_fsm.__metadata__ import __project__, __version__
from litestar_fsm.core.graph import DefinitionGraph
from litestar_fsm.core.models import Action, HistoryEntry, State, WorkflowDefinition, WorkflowInstance
from litestar_fsm.engine.instances import InstanceStore
from litestar_fsm.engine.local import TransitionEngine
from litestar_fsm.engine.registry import DefinitionStore
from litestar_fsm.exceptions import (
    ActionNotFoundError,
    DefinitionError,
    DefinitionNotFoundError,
    DuplicateDefinitionError,
    IllegalTransitionError,
    InstanceNotFoundError,
    InternalConsistencyError,
    InvalidInitialStateCountError,
    InvalidTerminalTransitionError,
    TransitionError,
    WorkflowsError,
    WorkflowValidationError,
)
from litestar_fsm.plugin import WorkflowPlugin, WorkflowPluginConfig

__all__ = (
    "Action",
    "ActionNotFoundError",
    "DefinitionError",
    "DefinitionGraph",
    "DefinitionNotFoundError",
    "DefinitionStore",
    "DuplicateDefinitionError",
    "HistoryEntry",
    "IllegalTransitionError",
    "InstanceNotFoundError",
    "InstanceStore",
    "InternalConsistencyError",
    "InvalidInitialStateCountError",
    "InvalidTerminalTransitionError",
    "State",
    "TransitionEngine",
    "TransitionError",
    "WorkflowDefinition",
    "WorkflowInstance",
    "WorkflowPlugin",
    "WorkflowPluginConfig",
    "WorkflowValidationError",
    "WorkflowsError",
    "__project__",
    "__version__",
)
