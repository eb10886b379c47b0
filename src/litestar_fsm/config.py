"""Process settings for the litestar-fsm service."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

__all__ = ["ServerSettings", "get_settings"]


class ServerSettings(BaseSettings):
    """Settings read from ``FSM_``-prefixed environment variables or a ``.env`` file.

    Attributes:
        app_name: Title shown in the OpenAPI documentation.
        host: Interface the server binds to.
        port: Port the server listens on.
        debug: Enables Litestar debug mode (tracebacks in error responses).
        log_level: Level for the root and ``litestar_fsm`` loggers.
        strict_validation: Reject definitions with dangling state references
            or duplicate state/action identifiers.
        enable_docs: Serve the interactive API documentation under ``/schema``.
    """

    model_config = SettingsConfigDict(env_prefix="FSM_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "litestar-fsm"
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    strict_validation: bool = True
    enable_docs: bool = True


@lru_cache
def get_settings() -> ServerSettings:
    """Return cached ServerSettings to avoid repeated environment parsing."""
    return ServerSettings()
