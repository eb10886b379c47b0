"""Litestar plugin for workflow integration.

This module provides the WorkflowPlugin for integrating the litestar-fsm
transition engine with Litestar applications.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from litestar.di import Provide
from litestar.plugins import InitPluginProtocol

from litestar_fsm.engine.local import TransitionEngine

if TYPE_CHECKING:
    from litestar.config.app import AppConfig

    from litestar_fsm.core.models import WorkflowDefinition

__all__ = ["WorkflowPlugin", "WorkflowPluginConfig"]

logger = logging.getLogger(__name__)


@dataclass
class WorkflowPluginConfig:
    """Configuration for the WorkflowPlugin.

    Attributes:
        engine: Optional pre-configured TransitionEngine. If not provided, a new
            one with empty stores is created.
        strict_validation: Whether a newly created engine rejects definitions
            with dangling state references or duplicate identifiers. Ignored
            when ``engine`` is given.
        seed_definitions: Definitions to create on app startup.
        dependency_key_engine: The key used for dependency injection of the
            TransitionEngine. Defaults to "workflow_engine".
        enable_api: Whether to enable the REST API endpoints. Defaults to True.
        api_path_prefix: URL path prefix for all workflow API endpoints.
            Defaults to "/".
        api_guards: List of Litestar guards to apply to all workflow API endpoints.
        api_tags: OpenAPI tags to apply to workflow API endpoints.
        include_api_in_schema: Whether to include API endpoints in OpenAPI schema.
            Defaults to True.
    """

    engine: TransitionEngine | None = None
    strict_validation: bool = True
    seed_definitions: list[WorkflowDefinition] = field(default_factory=list)
    dependency_key_engine: str = "workflow_engine"
    enable_api: bool = True
    api_path_prefix: str = "/"
    api_guards: list[Any] = field(default_factory=list)
    api_tags: list[str] = field(default_factory=lambda: ["Workflows"])
    include_api_in_schema: bool = True


class WorkflowPlugin(InitPluginProtocol):
    """Litestar plugin for workflow management.

    This plugin integrates litestar-fsm with a Litestar application, providing
    dependency injection for the TransitionEngine and registering the REST API.

    Example:
        Basic usage with seeded definitions::

            from litestar import Litestar
            from litestar_fsm import WorkflowPlugin, WorkflowPluginConfig

            app = Litestar(
                plugins=[
                    WorkflowPlugin(
                        config=WorkflowPluginConfig(seed_definitions=[doc_approval])
                    )
                ]
            )

        Using the engine in a route handler::

            from litestar import post
            from litestar_fsm import TransitionEngine


            @post("/documents/{document_id:str}/submit")
            async def submit(document_id: str, workflow_engine: TransitionEngine) -> dict:
                instance = workflow_engine.execute_action(document_id, "submit-for-review")
                return {"state": instance.current_state_id}
    """

    __slots__ = ("_config", "_engine")

    def __init__(self, config: WorkflowPluginConfig | None = None) -> None:
        """Initialize the plugin.

        Args:
            config: Optional configuration for the plugin.
        """
        self._config = config or WorkflowPluginConfig()
        self._engine: TransitionEngine | None = None

    @property
    def engine(self) -> TransitionEngine:
        """Get the transition engine.

        Raises:
            RuntimeError: If accessed before plugin initialization.
        """
        if self._engine is None:
            msg = "WorkflowPlugin has not been initialized. Access engine after app startup."
            raise RuntimeError(msg)
        return self._engine

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Initialize the plugin when the Litestar app starts.

        This method:
        1. Creates or uses the provided TransitionEngine
        2. Creates any seed definitions
        3. Adds the engine dependency provider to the app config
        4. Optionally registers REST API controllers if enable_api=True

        Args:
            app_config: The Litestar application configuration.

        Returns:
            The modified application configuration.
        """
        self._engine = self._config.engine or TransitionEngine(strict_validation=self._config.strict_validation)

        for definition in self._config.seed_definitions:
            self._engine.create_definition(definition)

        def provide_engine() -> TransitionEngine:
            return self._engine  # type: ignore[return-value]

        app_config.dependencies[self._config.dependency_key_engine] = Provide(
            provide_engine,
            sync_to_thread=False,
        )

        if self._config.enable_api:
            from litestar import Router

            from litestar_fsm.web.controllers import WorkflowDefinitionController, WorkflowInstanceController

            workflow_router = Router(
                path=self._config.api_path_prefix,
                route_handlers=[WorkflowDefinitionController, WorkflowInstanceController],
                guards=self._config.api_guards,
                tags=self._config.api_tags,
                include_in_schema=self._config.include_api_in_schema,
            )
            app_config.route_handlers.append(workflow_router)

        logger.debug(
            "Workflow plugin initialized (api=%s, seeded=%d)",
            self._config.enable_api,
            len(self._config.seed_definitions),
        )
        return app_config
