"""Data Transfer Objects for the workflow web API.

This module defines DTOs for serializing and deserializing workflow data in
REST API requests and responses. Field names are camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

import msgspec

from litestar_fsm.core.models import Action, State, WorkflowDefinition

if TYPE_CHECKING:
    from litestar_fsm.core.models import HistoryEntry, WorkflowInstance

__all__ = [
    "ActionDTO",
    "GraphDTO",
    "GraphEdgeDTO",
    "GraphNodeDTO",
    "HistoryEntryDTO",
    "StateDTO",
    "WorkflowDefinitionDTO",
    "WorkflowInstanceDTO",
]


class StateDTO(msgspec.Struct, kw_only=True, rename="camel"):
    """DTO for a workflow state.

    Attributes:
        id: State identifier.
        is_initial: Whether new instances start here.
        is_final: Whether the state ends the workflow.
        enabled: Informational flag.
    """

    id: str
    is_initial: bool = False
    is_final: bool = False
    enabled: bool = True

    @classmethod
    def from_model(cls, state: State) -> StateDTO:
        return cls(id=state.id, is_initial=state.is_initial, is_final=state.is_final, enabled=state.enabled)

    def to_model(self) -> State:
        return State(id=self.id, is_initial=self.is_initial, is_final=self.is_final, enabled=self.enabled)


class ActionDTO(msgspec.Struct, kw_only=True, rename="camel"):
    """DTO for a workflow action.

    Attributes:
        id: Action identifier.
        from_states: State identifiers the action may be executed from.
        to_state: State identifier the action leads to.
        enabled: Informational flag.
    """

    id: str
    from_states: list[str]
    to_state: str
    enabled: bool = True

    @classmethod
    def from_model(cls, action: Action) -> ActionDTO:
        return cls(
            id=action.id,
            from_states=list(action.from_states),
            to_state=action.to_state,
            enabled=action.enabled,
        )

    def to_model(self) -> Action:
        return Action(id=self.id, from_states=tuple(self.from_states), to_state=self.to_state, enabled=self.enabled)


class WorkflowDefinitionDTO(msgspec.Struct, kw_only=True, rename="camel"):
    """DTO for a workflow definition, used for both requests and responses.

    Attributes:
        id: Definition identifier.
        states: Ordered states.
        actions: Ordered actions.
    """

    id: str
    states: list[StateDTO] = msgspec.field(default_factory=list)
    actions: list[ActionDTO] = msgspec.field(default_factory=list)

    @classmethod
    def from_model(cls, definition: WorkflowDefinition) -> WorkflowDefinitionDTO:
        return cls(
            id=definition.id,
            states=[StateDTO.from_model(state) for state in definition.states],
            actions=[ActionDTO.from_model(action) for action in definition.actions],
        )

    def to_model(self) -> WorkflowDefinition:
        return WorkflowDefinition(
            id=self.id,
            states=tuple(state.to_model() for state in self.states),
            actions=tuple(action.to_model() for action in self.actions),
        )


class HistoryEntryDTO(msgspec.Struct, kw_only=True, rename="camel"):
    """DTO for one executed action.

    Attributes:
        action_id: The executed action.
        timestamp: When it was applied.
    """

    action_id: str
    timestamp: datetime

    @classmethod
    def from_model(cls, entry: HistoryEntry) -> HistoryEntryDTO:
        return cls(action_id=entry.action_id, timestamp=entry.timestamp)


class WorkflowInstanceDTO(msgspec.Struct, kw_only=True, rename="camel"):
    """DTO for a workflow instance.

    Attributes:
        id: Instance ID.
        definition_id: Identifier of the definition the instance runs.
        current_state_id: The state the instance is in.
        history: Executed actions, oldest first.
    """

    id: UUID
    definition_id: str
    current_state_id: str
    history: list[HistoryEntryDTO]

    @classmethod
    def from_model(cls, instance: WorkflowInstance) -> WorkflowInstanceDTO:
        return cls(
            id=instance.id,
            definition_id=instance.definition_id,
            current_state_id=instance.current_state_id,
            history=[HistoryEntryDTO.from_model(entry) for entry in instance.history],
        )


class GraphNodeDTO(msgspec.Struct, kw_only=True, rename="camel"):
    """DTO for a state node in a graph visualization."""

    id: str
    is_initial: bool
    is_final: bool
    enabled: bool
    reachable: bool


class GraphEdgeDTO(msgspec.Struct, kw_only=True, rename="camel"):
    """DTO for a (source state, action) edge in a graph visualization."""

    source: str
    target: str
    action: str


class GraphDTO(msgspec.Struct, kw_only=True, rename="camel"):
    """DTO for workflow graph visualization.

    Attributes:
        mermaid_source: MermaidJS state diagram definition.
        nodes: List of node definitions.
        edges: List of edge definitions.
    """

    mermaid_source: str
    nodes: list[GraphNodeDTO]
    edges: list[GraphEdgeDTO]

    @classmethod
    def from_graph_dict(cls, mermaid_source: str, graph: dict[str, Any]) -> GraphDTO:
        return cls(
            mermaid_source=mermaid_source,
            nodes=[GraphNodeDTO(**node) for node in graph["nodes"]],
            edges=[GraphEdgeDTO(**edge) for edge in graph["edges"]],
        )
