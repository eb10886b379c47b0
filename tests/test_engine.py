"""Tests for the TransitionEngine."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from litestar_fsm.core.models import Action, State, WorkflowDefinition, WorkflowInstance
from litestar_fsm.exceptions import (
    ActionNotFoundError,
    DefinitionNotFoundError,
    DuplicateDefinitionError,
    IllegalTransitionError,
    InstanceNotFoundError,
    InternalConsistencyError,
    InvalidInitialStateCountError,
    InvalidTerminalTransitionError,
    WorkflowValidationError,
)

if TYPE_CHECKING:
    from litestar_fsm.engine.local import TransitionEngine


@pytest.mark.unit
class TestCreateDefinition:
    """Tests for TransitionEngine.create_definition."""

    def test_create_definition(self, engine: TransitionEngine, doc_approval: WorkflowDefinition) -> None:
        stored = engine.create_definition(doc_approval)

        assert stored is doc_approval
        assert engine.get_definition("doc-approval") is doc_approval
        assert engine.list_definitions() == [doc_approval]

    @pytest.mark.parametrize("initial_count", [0, 2])
    def test_invalid_initial_count_leaves_store_unchanged(self, engine: TransitionEngine, initial_count: int) -> None:
        definition = WorkflowDefinition(
            id="broken",
            states=[State(id=f"s{i}", is_initial=i < initial_count) for i in range(3)],
        )

        with pytest.raises(InvalidInitialStateCountError):
            engine.create_definition(definition)

        with pytest.raises(DefinitionNotFoundError):
            engine.get_definition("broken")
        assert engine.list_definitions() == []

    def test_duplicate_identifier_keeps_first(self, engine: TransitionEngine, doc_approval: WorkflowDefinition) -> None:
        engine.create_definition(doc_approval)
        impostor = WorkflowDefinition(id="doc-approval", states=[State(id="only", is_initial=True)])

        with pytest.raises(DuplicateDefinitionError):
            engine.create_definition(impostor)

        assert engine.get_definition("doc-approval") is doc_approval

    def test_strict_engine_rejects_dangling_reference(self, engine: TransitionEngine) -> None:
        definition = WorkflowDefinition(
            id="dangling",
            states=[State(id="a", is_initial=True)],
            actions=[Action(id="go", from_states=["a"], to_state="nowhere")],
        )

        with pytest.raises(WorkflowValidationError):
            engine.create_definition(definition)

        assert engine.list_definitions() == []

    def test_unreachable_states_are_reported(self, engine: TransitionEngine, caplog: pytest.LogCaptureFixture) -> None:
        definition = WorkflowDefinition(
            id="islands",
            states=[State(id="start", is_initial=True), State(id="island"), State(id="end", is_final=True)],
            actions=[Action(id="finish", from_states=["start"], to_state="end")],
        )

        with caplog.at_level(logging.WARNING, logger="litestar_fsm.engine.local"):
            engine.create_definition(definition)

        assert engine.get_definition("islands") is definition
        assert any("unreachable" in r.message and "island" in r.message for r in caplog.records)

    def test_concurrent_duplicate_submissions_admit_one(self, engine: TransitionEngine) -> None:
        from tests.conftest import make_doc_approval

        barrier = threading.Barrier(8)

        def submit() -> bool:
            barrier.wait()
            try:
                engine.create_definition(make_doc_approval())
            except DuplicateDefinitionError:
                return False
            return True

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: submit(), range(8)))

        assert results.count(True) == 1
        assert len(engine.list_definitions()) == 1


@pytest.mark.unit
class TestCreateInstance:
    """Tests for TransitionEngine.create_instance."""

    def test_instance_starts_in_initial_state(self, doc_engine: TransitionEngine) -> None:
        instance = doc_engine.create_instance("doc-approval")

        assert instance.definition_id == "doc-approval"
        assert instance.current_state_id == "draft"
        assert instance.history == []

    def test_initial_state_need_not_be_first(self, engine: TransitionEngine) -> None:
        engine.create_definition(
            WorkflowDefinition(id="wf", states=[State(id="a"), State(id="b", is_initial=True)]),
        )

        assert engine.create_instance("wf").current_state_id == "b"

    def test_instances_get_unique_ids(self, doc_engine: TransitionEngine) -> None:
        first = doc_engine.create_instance("doc-approval")
        second = doc_engine.create_instance("doc-approval")

        assert first.id != second.id
        assert {i.id for i in doc_engine.list_instances()} == {first.id, second.id}

    def test_unknown_definition(self, engine: TransitionEngine) -> None:
        with pytest.raises(DefinitionNotFoundError) as exc_info:
            engine.create_instance("missing")

        assert exc_info.value.definition_id == "missing"
        assert engine.list_instances() == []

    @pytest.mark.parametrize("initial_count", [0, 2])
    def test_stored_definition_without_unique_initial_state(
        self, engine: TransitionEngine, initial_count: int
    ) -> None:
        # Bypasses validation to simulate a corrupted store.
        engine.definitions._definitions["corrupt"] = WorkflowDefinition(
            id="corrupt",
            states=[State(id=f"s{i}", is_initial=i < initial_count) for i in range(3)],
        )

        with pytest.raises(InvalidInitialStateCountError) as exc_info:
            engine.create_instance("corrupt")

        assert exc_info.value.count == initial_count
        assert engine.list_instances() == []


@pytest.mark.unit
class TestExecuteAction:
    """Tests for TransitionEngine.execute_action."""

    def test_doc_approval_scenario(self, doc_engine: TransitionEngine) -> None:
        instance = doc_engine.create_instance("doc-approval")
        assert instance.current_state_id == "draft"

        instance = doc_engine.execute_action(instance.id, "submit-for-review")
        assert instance.current_state_id == "in-review"
        assert len(instance.history) == 1

        instance = doc_engine.execute_action(instance.id, "approve")
        assert instance.current_state_id == "approved"
        assert [entry.action_id for entry in instance.history] == ["submit-for-review", "approve"]

        with pytest.raises(InvalidTerminalTransitionError):
            doc_engine.execute_action(instance.id, "submit-for-review")

    def test_history_records_clock_timestamps(self, doc_engine: TransitionEngine) -> None:
        instance = doc_engine.create_instance("doc-approval")
        doc_engine.execute_action(instance.id, "submit-for-review")
        instance = doc_engine.execute_action(instance.id, "reject")

        first, second = instance.history
        assert first.timestamp == datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        assert second.timestamp > first.timestamp

    def test_accepts_string_instance_id(self, doc_engine: TransitionEngine) -> None:
        instance = doc_engine.create_instance("doc-approval")

        updated = doc_engine.execute_action(str(instance.id), "submit-for-review")

        assert updated.id == instance.id
        assert updated.current_state_id == "in-review"

    def test_illegal_transition_leaves_instance_unchanged(self, doc_engine: TransitionEngine) -> None:
        instance = doc_engine.create_instance("doc-approval")

        with pytest.raises(IllegalTransitionError) as exc_info:
            doc_engine.execute_action(instance.id, "approve")

        assert exc_info.value.state_id == "draft"
        assert exc_info.value.action_id == "approve"
        after = doc_engine.get_instance(instance.id)
        assert after.current_state_id == "draft"
        assert after.history == []

    def test_unknown_action(self, doc_engine: TransitionEngine) -> None:
        instance = doc_engine.create_instance("doc-approval")

        with pytest.raises(ActionNotFoundError):
            doc_engine.execute_action(instance.id, "publish")

        assert doc_engine.get_instance(instance.id).history == []

    @pytest.mark.parametrize("instance_id", ["not-a-uuid", str(uuid4())])
    def test_unknown_instance(self, doc_engine: TransitionEngine, instance_id: str) -> None:
        with pytest.raises(InstanceNotFoundError):
            doc_engine.execute_action(instance_id, "approve")

    @pytest.mark.parametrize("action_id", ["submit-for-review", "approve", "reject", "publish"])
    def test_final_state_refuses_every_action(self, doc_engine: TransitionEngine, action_id: str) -> None:
        instance = doc_engine.create_instance("doc-approval")
        doc_engine.execute_action(instance.id, "submit-for-review")
        doc_engine.execute_action(instance.id, "reject")

        with pytest.raises(InvalidTerminalTransitionError):
            doc_engine.execute_action(instance.id, action_id)

        assert len(doc_engine.get_instance(instance.id).history) == 2

    def test_final_check_precedes_action_lookup(self, engine: TransitionEngine) -> None:
        engine.create_definition(
            WorkflowDefinition(id="done", states=[State(id="end", is_initial=True, is_final=True)]),
        )
        instance = engine.create_instance("done")

        with pytest.raises(InvalidTerminalTransitionError):
            engine.execute_action(instance.id, "anything")

    def test_repeated_self_loop_appends_each_time(
        self, engine: TransitionEngine, counter_workflow: WorkflowDefinition
    ) -> None:
        engine.create_definition(counter_workflow)
        instance = engine.create_instance("counter")

        engine.execute_action(instance.id, "tick")
        instance = engine.execute_action(instance.id, "tick")

        assert instance.current_state_id == "open"
        assert [entry.action_id for entry in instance.history] == ["tick", "tick"]

    def test_multi_source_action(self, engine: TransitionEngine) -> None:
        engine.create_definition(
            WorkflowDefinition(
                id="ticket",
                states=[State(id="new", is_initial=True), State(id="triaged"), State(id="closed", is_final=True)],
                actions=[
                    Action(id="triage", from_states=["new"], to_state="triaged"),
                    Action(id="close", from_states=["new", "triaged"], to_state="closed"),
                ],
            )
        )
        direct = engine.create_instance("ticket")
        via_triage = engine.create_instance("ticket")
        engine.execute_action(via_triage.id, "triage")

        assert engine.execute_action(direct.id, "close").current_state_id == "closed"
        assert engine.execute_action(via_triage.id, "close").current_state_id == "closed"

    def test_enabled_flags_are_not_consulted(self, engine: TransitionEngine) -> None:
        engine.create_definition(
            WorkflowDefinition(
                id="flags",
                states=[State(id="a", is_initial=True, enabled=False), State(id="b", enabled=False)],
                actions=[Action(id="go", from_states=["a"], to_state="b", enabled=False)],
            )
        )
        instance = engine.create_instance("flags")

        assert engine.execute_action(instance.id, "go").current_state_id == "b"

    def test_instances_evolve_independently(self, doc_engine: TransitionEngine) -> None:
        first = doc_engine.create_instance("doc-approval")
        second = doc_engine.create_instance("doc-approval")

        doc_engine.execute_action(first.id, "submit-for-review")

        assert doc_engine.get_instance(first.id).current_state_id == "in-review"
        assert doc_engine.get_instance(second.id).current_state_id == "draft"

    def test_returned_snapshot_cannot_mutate_store(self, doc_engine: TransitionEngine) -> None:
        instance = doc_engine.create_instance("doc-approval")
        snapshot = doc_engine.execute_action(instance.id, "submit-for-review")

        snapshot.current_state_id = "approved"
        snapshot.history.clear()

        stored = doc_engine.get_instance(instance.id)
        assert stored.current_state_id == "in-review"
        assert len(stored.history) == 1

    def test_concurrent_actions_apply_once(self, doc_engine: TransitionEngine) -> None:
        instance = doc_engine.create_instance("doc-approval")
        barrier = threading.Barrier(16)

        def submit() -> bool:
            barrier.wait()
            try:
                doc_engine.execute_action(instance.id, "submit-for-review")
            except IllegalTransitionError:
                return False
            return True

        with ThreadPoolExecutor(max_workers=16) as pool:
            results = list(pool.map(lambda _: submit(), range(16)))

        assert results.count(True) == 1
        assert len(doc_engine.get_instance(instance.id).history) == 1

    def test_missing_definition_is_internal_fault(self, engine: TransitionEngine) -> None:
        orphan = WorkflowInstance(id=uuid4(), definition_id="vanished", current_state_id="draft")
        engine.instances.add(orphan)

        with pytest.raises(InternalConsistencyError) as exc_info:
            engine.execute_action(orphan.id, "approve")

        assert exc_info.value.definition_id == "vanished"


@pytest.mark.unit
class TestPermissiveEngine:
    """Tests for an engine that accepts dangling state references."""

    @pytest.fixture
    def permissive_engine(self) -> TransitionEngine:
        from litestar_fsm.engine.local import TransitionEngine

        engine = TransitionEngine(strict_validation=False)
        engine.create_definition(
            WorkflowDefinition(
                id="leaky",
                states=[State(id="a", is_initial=True)],
                actions=[
                    Action(id="escape", from_states=["a"], to_state="limbo"),
                    Action(id="return", from_states=["limbo"], to_state="a"),
                ],
            )
        )
        return engine

    def test_transition_onto_undeclared_state(self, permissive_engine: TransitionEngine) -> None:
        instance = permissive_engine.create_instance("leaky")

        instance = permissive_engine.execute_action(instance.id, "escape")

        assert instance.current_state_id == "limbo"

    def test_undeclared_state_refuses_every_action(self, permissive_engine: TransitionEngine) -> None:
        instance = permissive_engine.create_instance("leaky")
        permissive_engine.execute_action(instance.id, "escape")

        with pytest.raises(InvalidTerminalTransitionError):
            permissive_engine.execute_action(instance.id, "return")

        assert permissive_engine.available_actions(instance.id) == []


@pytest.mark.unit
class TestQueries:
    """Tests for the read-only queries."""

    def test_get_instance_unknown(self, engine: TransitionEngine) -> None:
        with pytest.raises(InstanceNotFoundError):
            engine.get_instance(uuid4())

    def test_get_definition_unknown(self, engine: TransitionEngine) -> None:
        with pytest.raises(DefinitionNotFoundError):
            engine.get_definition("missing")

    def test_list_instances_by_definition(
        self, doc_engine: TransitionEngine, counter_workflow: WorkflowDefinition
    ) -> None:
        doc_engine.create_definition(counter_workflow)
        doc = doc_engine.create_instance("doc-approval")
        counter = doc_engine.create_instance("counter")

        assert [i.id for i in doc_engine.list_instances("doc-approval")] == [doc.id]
        assert [i.id for i in doc_engine.list_instances("counter")] == [counter.id]
        assert doc_engine.list_instances("missing") == []

    def test_available_actions(self, doc_engine: TransitionEngine) -> None:
        instance = doc_engine.create_instance("doc-approval")
        assert [a.id for a in doc_engine.available_actions(instance.id)] == ["submit-for-review"]

        doc_engine.execute_action(instance.id, "submit-for-review")
        assert [a.id for a in doc_engine.available_actions(instance.id)] == ["approve", "reject"]

        doc_engine.execute_action(instance.id, "approve")
        assert doc_engine.available_actions(instance.id) == []

    def test_instance_graph(self, doc_engine: TransitionEngine) -> None:
        instance = doc_engine.create_instance("doc-approval")
        doc_engine.execute_action(instance.id, "submit-for-review")

        graph, current_state = doc_engine.get_instance_graph(instance.id)

        assert graph.definition.id == "doc-approval"
        assert current_state == "in-review"

    def test_instance_graph_unknown_instance(self, engine: TransitionEngine) -> None:
        with pytest.raises(InstanceNotFoundError):
            engine.get_instance_graph(uuid4())

    def test_get_instance_has_no_side_effects(self, doc_engine: TransitionEngine) -> None:
        instance = doc_engine.create_instance("doc-approval")

        first = doc_engine.get_instance(instance.id)
        second = doc_engine.get_instance(instance.id)

        assert first == second
        assert first is not second
