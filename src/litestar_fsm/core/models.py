"""Concrete data models for litestar-fsm.

This module provides the dataclasses describing a workflow blueprint (states,
actions and the definition grouping them) and the runtime data of a workflow
instance.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from uuid import UUID

__all__ = ["Action", "HistoryEntry", "State", "WorkflowDefinition", "WorkflowInstance"]


@dataclass(frozen=True)
class State:
    """A node in a workflow's graph.

    Attributes:
        id: Identifier, unique within its definition.
        is_initial: Whether new instances start in this state.
        is_final: Whether no further actions may be executed from this state.
        enabled: Informational flag, not consulted by the transition rule.
    """

    id: str
    is_initial: bool = False
    is_final: bool = False
    enabled: bool = True


@dataclass(frozen=True)
class Action:
    """A named, directed transition with one or more source states.

    Attributes:
        id: Identifier, unique within its definition.
        from_states: State identifiers the action may be executed from.
        to_state: State identifier the instance moves to.
        enabled: Informational flag, not consulted by the transition rule.

    Example:
        >>> submit = Action(id="submit", from_states=["draft"], to_state="in-review")
        >>> submit.allows("draft")
        True
    """

    id: str
    from_states: tuple[str, ...]
    to_state: str
    enabled: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "from_states", tuple(self.from_states))

    def allows(self, state_id: str) -> bool:
        """Check whether the action may be executed from ``state_id``."""
        return state_id in self.from_states


@dataclass(frozen=True)
class WorkflowDefinition:
    """Immutable workflow blueprint.

    A definition is validated once when it is admitted to the definition store
    and never changes afterwards; instances refer to it by ``id``.

    Attributes:
        id: Globally unique identifier.
        states: Ordered states of the workflow.
        actions: Ordered actions of the workflow.

    Example:
        >>> definition = WorkflowDefinition(
        ...     id="doc-approval",
        ...     states=[State(id="draft", is_initial=True), State(id="approved", is_final=True)],
        ...     actions=[Action(id="approve", from_states=["draft"], to_state="approved")],
        ... )
    """

    id: str
    states: tuple[State, ...] = ()
    actions: tuple[Action, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "states", tuple(self.states))
        object.__setattr__(self, "actions", tuple(self.actions))

    @property
    def initial_states(self) -> list[State]:
        """All states flagged as initial. A valid definition has exactly one."""
        return [state for state in self.states if state.is_initial]

    @property
    def initial_state(self) -> State | None:
        """The first state flagged as initial, if any."""
        return next((state for state in self.states if state.is_initial), None)

    @property
    def final_states(self) -> list[State]:
        return [state for state in self.states if state.is_final]

    def get_state(self, state_id: str) -> State | None:
        """Look up a state by identifier.

        Args:
            state_id: The state identifier.

        Returns:
            The first state with that identifier, or None.
        """
        return next((state for state in self.states if state.id == state_id), None)

    def get_action(self, action_id: str) -> Action | None:
        """Look up an action by identifier.

        Args:
            action_id: The action identifier.

        Returns:
            The first action with that identifier, or None.
        """
        return next((action for action in self.actions if action.id == action_id), None)


@dataclass(frozen=True)
class HistoryEntry:
    """One executed action in an instance's history.

    Attributes:
        action_id: The executed action.
        timestamp: When the action was applied (timezone-aware UTC).
    """

    action_id: str
    timestamp: datetime


@dataclass
class WorkflowInstance:
    """Runtime state of one execution of a workflow definition.

    Attributes:
        id: Engine-generated unique identifier.
        definition_id: Identifier of the definition this instance runs.
        current_state_id: Identifier of the state the instance is in.
        history: Append-only record of executed actions, oldest first.
    """

    id: UUID
    definition_id: str
    current_state_id: str
    history: list[HistoryEntry] = field(default_factory=list)

    def snapshot(self) -> WorkflowInstance:
        """Return a copy that shares no mutable state with this instance."""
        return replace(self, history=list(self.history))
