"""Shared test fixtures for litestar-fsm test suite."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import pytest

from litestar_fsm.core.models import Action, State, WorkflowDefinition

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from litestar.testing import TestClient

    from litestar_fsm.engine.local import TransitionEngine


def make_doc_approval(definition_id: str = "doc-approval") -> WorkflowDefinition:
    """Build the document approval workflow used throughout the tests.

    Args:
        definition_id: Identifier to give the definition.

    Returns:
        WorkflowDefinition with a draft -> in-review -> approved/rejected flow.
    """
    return WorkflowDefinition(
        id=definition_id,
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


def make_counter_workflow(definition_id: str = "counter") -> WorkflowDefinition:
    """Build a workflow with a self-loop, so one action can be repeated."""
    return WorkflowDefinition(
        id=definition_id,
        states=[
            State(id="open", is_initial=True),
            State(id="closed", is_final=True),
        ],
        actions=[
            Action(id="tick", from_states=["open"], to_state="open"),
            Action(id="close", from_states=["open"], to_state="closed"),
        ],
    )


DOC_APPROVAL_PAYLOAD = {
    "id": "doc-approval",
    "states": [
        {"id": "draft", "isInitial": True},
        {"id": "in-review"},
        {"id": "approved", "isFinal": True},
        {"id": "rejected", "isFinal": True},
    ],
    "actions": [
        {"id": "submit-for-review", "fromStates": ["draft"], "toState": "in-review"},
        {"id": "approve", "fromStates": ["in-review"], "toState": "approved"},
        {"id": "reject", "fromStates": ["in-review"], "toState": "rejected"},
    ],
}


@pytest.fixture
def doc_approval() -> WorkflowDefinition:
    """Document approval workflow definition."""
    return make_doc_approval()


@pytest.fixture
def counter_workflow() -> WorkflowDefinition:
    """Self-looping workflow definition."""
    return make_counter_workflow()


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock returning strictly increasing UTC timestamps, one second apart."""
    start = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    ticks = iter(range(10_000))

    def clock() -> datetime:
        return start + timedelta(seconds=next(ticks))

    return clock


@pytest.fixture
def engine(fixed_clock: Callable[[], datetime]) -> TransitionEngine:
    """Create an empty transition engine with a deterministic clock.

    Returns:
        TransitionEngine instance
    """
    from litestar_fsm.engine.local import TransitionEngine

    return TransitionEngine(clock=fixed_clock)


@pytest.fixture
def doc_engine(engine: TransitionEngine, doc_approval: WorkflowDefinition) -> TransitionEngine:
    """Transition engine with the document approval workflow already created."""
    engine.create_definition(doc_approval)
    return engine


@pytest.fixture
def client() -> Iterator[TestClient]:
    """Test client for a freshly created application with empty stores."""
    from litestar.testing import TestClient

    from litestar_fsm.app import create_app
    from litestar_fsm.config import ServerSettings

    app = create_app(ServerSettings(log_level="DEBUG"))
    with TestClient(app=app) as test_client:
        yield test_client
