"""Workflow engine implementations.

This module provides the stores holding definitions and instances and the
engine that validates definitions and applies transitions.
"""

from __future__ import annotations

from litestar_fsm.engine.instances import InstanceStore
from litestar_fsm.engine.local import TransitionEngine
from litestar_fsm.engine.registry import DefinitionStore

__all__ = [
    "DefinitionStore",
    "InstanceStore",
    "TransitionEngine",
]
