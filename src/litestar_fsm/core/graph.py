"""Graph operations and visualization for workflow definitions.

This module provides navigation over a definition's states and actions
(outgoing actions, reachability) and renders definitions as MermaidJS state
diagrams, optionally highlighting an instance's current state.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from litestar_fsm.core.models import Action, WorkflowDefinition

__all__ = ["DefinitionGraph"]


class DefinitionGraph:
    """Graph representation of a workflow definition.

    States are nodes and each (source state, action) pair is an edge towards
    the action's target state.

    Attributes:
        definition: The workflow definition this graph represents.
        _adjacency: Adjacency list mapping state ids to outgoing actions.
    """

    def __init__(self, definition: WorkflowDefinition) -> None:
        """Initialize a graph from a definition.

        Args:
            definition: The workflow definition to represent as a graph.
        """
        self.definition = definition
        self._adjacency: dict[str, list[Action]] = {}
        self._build_adjacency()

    def _build_adjacency(self) -> None:
        for state in self.definition.states:
            self._adjacency.setdefault(state.id, [])

        # Dangling references only exist for definitions admitted in permissive
        # mode; they still get adjacency entries so traversal stays total.
        for action in self.definition.actions:
            for source in action.from_states:
                self._adjacency.setdefault(source, []).append(action)

    @classmethod
    def from_definition(cls, definition: WorkflowDefinition) -> DefinitionGraph:
        """Create a graph from a definition.

        Example:
            >>> graph = DefinitionGraph.from_definition(my_definition)
        """
        return cls(definition)

    def get_outgoing_actions(self, state_id: str) -> list[Action]:
        """Get the actions that may be executed from a state.

        Final states have no outgoing actions, whatever the actions declare.

        Args:
            state_id: Identifier of the state.

        Returns:
            Actions in definition order. Empty list for final or unknown states.
        """
        state = self.definition.get_state(state_id)
        if state is None or state.is_final:
            return []
        return list(self._adjacency.get(state_id, []))

    def get_reachable_states(self) -> set[str]:
        """Get every state reachable from the initial state.

        Returns:
            Set of reachable state ids, including the initial state. Empty when
            the definition has no initial state.
        """
        initial = self.definition.initial_state
        if initial is None:
            return set()

        reachable = {initial.id}
        frontier = [initial.id]
        while frontier:
            current = frontier.pop()
            for action in self.get_outgoing_actions(current):
                if action.to_state not in reachable:
                    reachable.add(action.to_state)
                    frontier.append(action.to_state)
        return reachable

    def get_unreachable_states(self) -> list[str]:
        """Get declared states that no sequence of actions can reach."""
        reachable = self.get_reachable_states()
        return [state.id for state in self.definition.states if state.id not in reachable]

    def to_mermaid(self, current_state: str | None = None) -> str:
        """Generate a MermaidJS state diagram of the definition.

        Args:
            current_state: Optional state id to highlight.

        Returns:
            MermaidJS ``stateDiagram-v2`` source.

        Example:
            >>> print(graph.to_mermaid(current_state="in-review"))
            stateDiagram-v2
                state "draft" as s0
                state "in-review" as s1
                [*] --> s0
                s0 --> s1 : submit-for-review
                ...
        """
        # State ids may contain characters Mermaid rejects, so nodes get aliases.
        aliases: dict[str, str] = {}

        def alias(state_id: str) -> str:
            if state_id not in aliases:
                aliases[state_id] = f"s{len(aliases)}"
            return aliases[state_id]

        lines = ["stateDiagram-v2"]
        for state in self.definition.states:
            lines.append(f'    state "{_escape(state.id)}" as {alias(state.id)}')

        edge_lines = []
        for action in self.definition.actions:
            for source in action.from_states:
                edge_lines.append(f"    {alias(source)} --> {alias(action.to_state)} : {_escape(action.id)}")

        declared = {state.id for state in self.definition.states}
        for state_id, node in aliases.items():
            if state_id not in declared:
                lines.append(f'    state "{_escape(state_id)}" as {node}')

        for state in self.definition.states:
            if state.is_initial:
                lines.append(f"    [*] --> {alias(state.id)}")

        lines.extend(edge_lines)

        for state in self.definition.states:
            if state.is_final:
                lines.append(f"    {alias(state.id)} --> [*]")

        if current_state is not None and current_state in aliases:
            lines.append("    classDef current fill:#FFD700,stroke:#FFA500,stroke-width:3px")
            lines.append(f"    class {aliases[current_state]} current")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Parse the definition into a JSON-friendly nodes/edges structure.

        Returns:
            A dictionary containing ``nodes`` and ``edges`` lists.
        """
        reachable = self.get_reachable_states()
        nodes = [
            {
                "id": state.id,
                "is_initial": state.is_initial,
                "is_final": state.is_final,
                "enabled": state.enabled,
                "reachable": state.id in reachable,
            }
            for state in self.definition.states
        ]
        edges = [
            {"source": source, "target": action.to_state, "action": action.id}
            for action in self.definition.actions
            for source in action.from_states
        ]
        return {"nodes": nodes, "edges": edges}


def _escape(text: str) -> str:
    return text.replace('"', "'")
