"""Exception handling for workflow web endpoints.

This module maps engine exceptions onto Litestar HTTP exceptions. Controllers
catch the engine's errors and re-raise the translated exception, so the status
code of a failure is decided next to the route that produced it.
"""

from __future__ import annotations

from litestar.exceptions import ClientException, HTTPException, InternalServerException, NotFoundException
from litestar.status_codes import HTTP_409_CONFLICT

from litestar_fsm.exceptions import (
    ActionNotFoundError,
    DefinitionError,
    DefinitionNotFoundError,
    IllegalTransitionError,
    InstanceNotFoundError,
    InvalidTerminalTransitionError,
    WorkflowsError,
)

__all__ = [
    "ConflictException",
    "to_http_exception",
]


class ConflictException(ClientException):
    """Request conflicts with the current state of the target resource."""

    status_code = HTTP_409_CONFLICT


def to_http_exception(exc: WorkflowsError, *, instance_not_found_status: int = 404) -> HTTPException:
    """Translate an engine exception into the HTTP exception to raise.

    Args:
        exc: The engine exception.
        instance_not_found_status: Status code for an unknown instance. Action
            execution reports it as a bad request, lookups as not found.

    Returns:
        The Litestar exception carrying the engine's message as detail.
    """
    detail = str(exc)
    if isinstance(exc, DefinitionError):
        return ClientException(detail=detail)
    if isinstance(exc, DefinitionNotFoundError):
        return NotFoundException(detail=detail)
    if isinstance(exc, InstanceNotFoundError):
        if instance_not_found_status == 404:
            return NotFoundException(detail=detail)
        return ClientException(detail=detail, status_code=instance_not_found_status)
    if isinstance(exc, ActionNotFoundError):
        return ClientException(detail=detail)
    if isinstance(exc, (InvalidTerminalTransitionError, IllegalTransitionError)):
        return ConflictException(detail=detail)
    # InternalConsistencyError and anything unforeseen is a server fault.
    return InternalServerException(detail=detail)
