"""Minimal example of litestar-fsm integration.

This example seeds a document approval workflow through the WorkflowPlugin and
adds a small domain controller that tracks documents by driving one workflow
instance per document.

Run with:
    cd examples/minimal
    litestar run

Or:
    uvicorn app:app --reload
"""

from __future__ import annotations

from typing import Any, ClassVar

from litestar import Controller, Litestar, get, post
from litestar.exceptions import ClientException, NotFoundException

from litestar_fsm import (
    Action,
    State,
    TransitionEngine,
    WorkflowDefinition,
    WorkflowPlugin,
    WorkflowPluginConfig,
    WorkflowsError,
)

# =============================================================================
# Workflow Definition
# =============================================================================

DOC_APPROVAL = WorkflowDefinition(
    id="doc-approval",
    states=[
        State(id="draft", is_initial=True),
        State(id="in-review"),
        State(id="approved", is_final=True),
        State(id="rejected", is_final=True),
    ],
    actions=[
        Action(id="submit-for-review", from_states=["draft"], to_state="in-review"),
        Action(id="approve", from_states=["in-review"], to_state="approved"),
        Action(id="reject", from_states=["in-review"], to_state="rejected"),
    ],
)


# =============================================================================
# API Controller
# =============================================================================


class DocumentController(Controller):
    """Documents whose lifecycle is a doc-approval workflow instance."""

    path = "/documents"
    tags = ["Documents"]

    _instances: ClassVar[dict[str, str]] = {}

    @post("/{document_id:str}")
    async def open_document(self, document_id: str, workflow_engine: TransitionEngine) -> dict[str, Any]:
        """Start tracking a document in the draft state."""
        if document_id in self._instances:
            raise ClientException(detail=f"Document '{document_id}' is already tracked")

        instance = workflow_engine.create_instance(DOC_APPROVAL.id)
        self._instances[document_id] = str(instance.id)
        return {"document_id": document_id, "instance_id": str(instance.id), "state": instance.current_state_id}

    @get("/{document_id:str}")
    async def get_document(self, document_id: str, workflow_engine: TransitionEngine) -> dict[str, Any]:
        """Show the document's state and the actions it currently allows."""
        instance_id = self._lookup(document_id)
        instance = workflow_engine.get_instance(instance_id)
        return {
            "document_id": document_id,
            "state": instance.current_state_id,
            "allowed": [action.id for action in workflow_engine.available_actions(instance_id)],
            "history": [entry.action_id for entry in instance.history],
        }

    @post("/{document_id:str}/{action_id:str}", status_code=200)
    async def act(self, document_id: str, action_id: str, workflow_engine: TransitionEngine) -> dict[str, Any]:
        """Apply an action to the document."""
        try:
            instance = workflow_engine.execute_action(self._lookup(document_id), action_id)
        except WorkflowsError as e:
            raise ClientException(detail=str(e)) from e
        return {"document_id": document_id, "state": instance.current_state_id}

    def _lookup(self, document_id: str) -> str:
        try:
            return self._instances[document_id]
        except KeyError as e:
            raise NotFoundException(detail=f"Document '{document_id}' not found") from e


@get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


# =============================================================================
# Application
# =============================================================================

app = Litestar(
    route_handlers=[DocumentController, health_check],
    plugins=[
        WorkflowPlugin(config=WorkflowPluginConfig(seed_definitions=[DOC_APPROVAL])),
    ],
    debug=True,
)
