"""Web layer for litestar-fsm.

This module provides the REST API controllers and DTOs for managing workflow
definitions and instances over HTTP. The API is registered automatically by
WorkflowPlugin when ``enable_api=True`` (the default).

Example:
    Basic usage with WorkflowPlugin::

        from litestar import Litestar
        from litestar_fsm import WorkflowPlugin, WorkflowPluginConfig

        app = Litestar(plugins=[WorkflowPlugin(config=WorkflowPluginConfig())])

    Mounting the API under a prefix, with authentication guards::

        config = WorkflowPluginConfig(
            api_path_prefix="/api/v1",
            api_guards=[require_auth_guard],
        )
"""

from __future__ import annotations

from litestar_fsm.web.controllers import WorkflowDefinitionController, WorkflowInstanceController
from litestar_fsm.web.dto import (
    ActionDTO,
    GraphDTO,
    GraphEdgeDTO,
    GraphNodeDTO,
    HistoryEntryDTO,
    StateDTO,
    WorkflowDefinitionDTO,
    WorkflowInstanceDTO,
)
from litestar_fsm.web.exceptions import ConflictException, to_http_exception

__all__ = [
    "ActionDTO",
    "ConflictException",
    "GraphDTO",
    "GraphEdgeDTO",
    "GraphNodeDTO",
    "HistoryEntryDTO",
    "StateDTO",
    "WorkflowDefinitionController",
    "WorkflowDefinitionDTO",
    "WorkflowInstanceController",
    "WorkflowInstanceDTO",
    "to_http_exception",
]
