"""Application factory for the litestar-fsm service.

Run with:
    python -m litestar_fsm

Or:
    uvicorn litestar_fsm.app:create_app --factory --reload
"""

from __future__ import annotations

from litestar import Litestar, get
from litestar.logging import LoggingConfig
from litestar.openapi.config import OpenAPIConfig
from litestar.openapi.plugins import SwaggerRenderPlugin

from litestar_fsm.__metadata__ import __version__
from litestar_fsm.config import ServerSettings, get_settings
from litestar_fsm.plugin import WorkflowPlugin, WorkflowPluginConfig

__all__ = ["create_app", "health_check"]


@get("/health", tags=["health"], include_in_schema=False)
async def health_check() -> dict[str, str]:
    """Report service status."""
    return {"status": "ok"}


def create_logging_config(settings: ServerSettings) -> LoggingConfig:
    """Build the logging configuration for the service loggers."""
    return LoggingConfig(
        root={"level": settings.log_level, "handlers": ["queue_listener"]},
        formatters={"standard": {"format": "%(asctime)s %(levelname)s %(name)s - %(message)s"}},
        loggers={"litestar_fsm": {"level": settings.log_level, "propagate": True}},
    )


def create_app(
    settings: ServerSettings | None = None,
    plugin_config: WorkflowPluginConfig | None = None,
) -> Litestar:
    """Create the Litestar application serving the workflow API.

    Args:
        settings: Optional settings, read from the environment when omitted.
        plugin_config: Optional plugin configuration. When omitted, the
            plugin is built from ``settings``.

    Returns:
        The configured application. Its stores start empty.
    """
    resolved_settings = settings or get_settings()
    config = plugin_config or WorkflowPluginConfig(strict_validation=resolved_settings.strict_validation)

    openapi_config = None
    if resolved_settings.enable_docs:
        openapi_config = OpenAPIConfig(
            title=resolved_settings.app_name,
            version=__version__,
            path="/schema",
            render_plugins=[SwaggerRenderPlugin()],
        )

    return Litestar(
        route_handlers=[health_check],
        plugins=[WorkflowPlugin(config=config)],
        openapi_config=openapi_config,
        logging_config=create_logging_config(resolved_settings),
        debug=resolved_settings.debug,
    )
