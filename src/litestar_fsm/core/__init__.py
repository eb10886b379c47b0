"""Core domain module for litestar-fsm.

This module exports the building blocks of workflow definitions: the data
models, the definition validator and graph helpers.
"""

from __future__ import annotations

from litestar_fsm.core.graph import DefinitionGraph
from litestar_fsm.core.models import Action, HistoryEntry, State, WorkflowDefinition, WorkflowInstance
from litestar_fsm.core.validation import collect_structural_errors, validate_definition

__all__ = [
    "Action",
    "DefinitionGraph",
    "HistoryEntry",
    "State",
    "WorkflowDefinition",
    "WorkflowInstance",
    "collect_structural_errors",
    "validate_definition",
]
