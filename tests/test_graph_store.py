"""Tests for GraphStore mutation semantics."""

import pytest
from pydantic import ValidationError

from tritan.workflow.changes import NodePositionChange, NodeRemoveChange
from tritan.workflow.graph_store import GraphStore, MutationOutcome
from tritan.workflow.node_types import (
    DEFAULT_LLM_MODEL,
    DEFAULT_LLM_PROVIDER,
    DEFAULT_TEMPERATURE,
    NodeKind,
)
from tritan.workflow.workflow_model import Position, WorkflowDefinition


class TestAddNode:

    def test_ids_are_unique(self, store):
        ids = [store.add_node(kind, {"x": i, "y": 0}) for i, kind in enumerate(NodeKind)]
        ids += [store.add_node("action", {"x": 0, "y": 0}) for _ in range(50)]
        assert len(ids) == len(set(ids))
        assert len({n.id for n in store.nodes}) == len(store.nodes)

    def test_llm_defaults(self, store):
        node = store.get_node(store.add_node("llm", {"x": 10, "y": 20}))
        assert node.kind == NodeKind.LLM
        assert node.label == "LLM"
        assert node.provider == DEFAULT_LLM_PROVIDER == "groq"
        assert node.model == DEFAULT_LLM_MODEL
        assert node.prompt == ""
        assert node.temperature == DEFAULT_TEMPERATURE == 0.7
        assert node.position == Position(x=10, y=20)

    def test_other_kinds_have_empty_config_and_no_llm_fields(self, store):
        node = store.get_node(store.add_node(NodeKind.HTTP, Position(x=1, y=2)))
        assert node.label == "HTTP"
        assert node.icon == "🌐"
        assert node.config == {}
        assert node.provider is None
        assert node.model is None
        assert node.prompt is None
        assert node.temperature is None

    def test_unknown_kind_is_rejected(self, store):
        with pytest.raises(ValueError):
            store.add_node("webhook", {"x": 0, "y": 0})
        assert store.nodes == []

    def test_id_and_kind_are_immutable(self, store):
        node = store.get_node(store.add_node("code", {"x": 0, "y": 0}))
        with pytest.raises(ValidationError):
            node.kind = NodeKind.LLM
        with pytest.raises(ValidationError):
            node.id = "other"


class TestConnect:

    def test_edge_matches_arguments(self, store):
        edge_id = store.connect("a", "b", "true", None)
        edge = store.get_edge(edge_id)
        assert (edge.source, edge.target) == ("a", "b")
        assert edge.source_handle == "true"
        assert edge.target_handle is None

    def test_self_loops_and_parallel_edges_are_allowed(self, store):
        n = store.add_node("loop", {"x": 0, "y": 0})
        first = store.connect(n, n)
        second = store.connect(n, n)
        assert first != second
        assert len(store.edges) == 2

    def test_dangling_endpoints_are_accepted(self, store):
        store.connect("missing-1", "missing-2")
        assert len(store.edges) == 1


class TestUpdateNodeData:

    def test_only_supplied_keys_change(self, store):
        a = store.add_node("llm", {"x": 0, "y": 0})
        b = store.add_node("http", {"x": 5, "y": 5})
        before_a = store.get_node(a).model_dump()
        before_b = store.get_node(b).model_dump()

        outcome = store.update_node_data(a, {"prompt": "Summarize the input"})

        assert outcome == MutationOutcome.FOUND
        after_a = store.get_node(a).model_dump()
        assert after_a.pop("prompt") == "Summarize the input"
        before_a.pop("prompt")
        assert after_a == before_a
        assert store.get_node(b).model_dump() == before_b

    def test_config_is_replaced_not_merged(self, store):
        n = store.add_node("http", {"x": 0, "y": 0})
        store.update_node_data(n, {"config": {"method": "GET"}})
        store.update_node_data(n, {"config": {"url": "https://example.com"}})
        assert store.get_node(n).config == {"url": "https://example.com"}

    def test_unknown_node_is_not_found(self, store):
        assert store.update_node_data("ghost", {"label": "x"}) == MutationOutcome.NOT_FOUND

    def test_immutable_keys_are_ignored(self, store):
        n = store.add_node("action", {"x": 0, "y": 0})
        store.update_node_data(n, {"id": "hijack", "kind": "llm", "label": "Send"})
        node = store.get_node(n)
        assert node.kind == NodeKind.ACTION
        assert node.label == "Send"
        assert store.get_node("hijack") is None

    def test_invalid_provider_model_combination_is_tolerated(self, store):
        n = store.add_node("llm", {"x": 0, "y": 0})
        store.update_node_data(n, {"provider": "gemini", "model": "mixtral-8x7b-32768"})
        node = store.get_node(n)
        assert (node.provider, node.model) == ("gemini", "mixtral-8x7b-32768")


class TestNodeChanges:

    def test_position_select_and_remove(self, store):
        a = store.add_node("trigger", {"x": 0, "y": 0})
        b = store.add_node("action", {"x": 0, "y": 0})

        store.apply_node_changes([
            {"type": "position", "id": a, "position": {"x": 40, "y": 60}},
            {"type": "select", "id": b, "selected": True},
        ])
        assert store.get_node(a).position == Position(x=40, y=60)
        assert store.get_node(b).selected is True

        store.apply_node_changes([NodeRemoveChange(id=a)])
        assert store.get_node(a) is None
        assert [n.id for n in store.nodes] == [b]

    def test_change_after_remove_is_noop(self, store):
        a = store.add_node("action", {"x": 0, "y": 0})
        outcomes = store.apply_node_changes([
            {"type": "remove", "id": a},
            {"type": "position", "id": a, "position": {"x": 1, "y": 1}},
            {"type": "select", "id": a, "selected": True},
        ])
        assert outcomes == [
            MutationOutcome.FOUND,
            MutationOutcome.NOT_FOUND,
            MutationOutcome.NOT_FOUND,
        ]
        assert store.nodes == []

    def test_later_changes_override_earlier(self, store):
        a = store.add_node("action", {"x": 0, "y": 0})
        store.apply_node_changes([
            NodePositionChange(id=a, position=Position(x=1, y=1)),
            NodePositionChange(id=a, position=Position(x=2, y=3)),
        ])
        assert store.get_node(a).position == Position(x=2, y=3)

    def test_position_is_copied_from_change(self, store):
        a = store.add_node("action", {"x": 0, "y": 0})
        dropped_at = Position(x=7, y=8)
        store.apply_node_changes([{"type": "position", "id": a, "position": dropped_at}])

        dropped_at.x = 999
        assert store.get_node(a).position == Position(x=7, y=8)

    def test_unrecognized_kinds_and_empty_positions_are_ignored(self, store):
        a = store.add_node("action", {"x": 5, "y": 5})
        outcomes = store.apply_node_changes([
            {"type": "dimensions", "id": a, "dimensions": {"width": 10}},
            {"type": "position", "id": a, "dragging": True},
        ])
        assert outcomes == [MutationOutcome.FOUND]
        assert store.get_node(a).position == Position(x=5, y=5)

    def test_removing_selected_node_clears_selection(self, store):
        a = store.add_node("action", {"x": 0, "y": 0})
        store.select_node(a)
        store.apply_node_changes([{"type": "remove", "id": a}])
        assert store.selected_node_id is None


class TestEdgeChanges:

    def test_remove(self, store):
        e1 = store.connect("a", "b")
        e2 = store.connect("b", "c")
        outcomes = store.apply_edge_changes([
            {"type": "remove", "id": e1},
            {"type": "remove", "id": "ghost"},
            {"type": "select", "id": e2, "selected": True},
        ])
        assert outcomes == [MutationOutcome.FOUND, MutationOutcome.NOT_FOUND]
        assert [e.id for e in store.edges] == [e2]


class TestLifecycle:

    def test_set_workflow_name(self, store):
        store.set_workflow_name("Daily digest")
        assert store.workflow.name == "Daily digest"

    def test_save_stamps_and_returns_snapshot(self, store):
        n = store.add_node("trigger", {"x": 0, "y": 0})
        saved = store.save()
        assert saved.updated_at is not None
        assert [node.id for node in saved.nodes] == [n]
        assert store.workflow.updated_at == saved.updated_at
        assert saved.id == store.workflow.id

    def test_save_then_load_round_trips(self, store):
        t = store.add_node("trigger", {"x": 0, "y": 0})
        c = store.add_node("condition", {"x": 100, "y": 0})
        store.update_node_data(c, {"config": {"condition": "x > 1"}})
        store.connect(t, c)
        store.connect(c, t, source_handle="false")
        nodes_before = [n.model_dump() for n in store.nodes]
        edges_before = [e.model_dump() for e in store.edges]

        saved = store.save()
        other = GraphStore()
        other.load(saved)

        assert [n.model_dump() for n in other.nodes] == nodes_before
        assert [e.model_dump() for e in other.edges] == edges_before

    def test_saved_snapshot_lookups(self, store):
        t = store.add_node("trigger", {"x": 0, "y": 0})
        c = store.add_node("condition", {"x": 100, "y": 0})
        e1 = store.connect(t, c)
        e2 = store.connect(c, t, source_handle="false")

        saved = store.save()

        assert saved.get_node(c).kind == NodeKind.CONDITION
        assert saved.get_node("ghost") is None
        assert [e.id for e in saved.get_edges_from(c)] == [e2]
        assert [e.id for e in saved.get_edges_to(c)] == [e1]
        assert saved.get_edges_from("ghost") == []

    def test_load_tolerates_missing_collections(self, store):
        store.add_node("action", {"x": 0, "y": 0})
        store.load({"id": "workflow-x", "name": "Imported"})
        assert store.nodes == []
        assert store.edges == []
        assert store.workflow.name == "Imported"

    def test_loaded_graph_is_independent_of_snapshot(self, store):
        snapshot = WorkflowDefinition(name="Shared")
        store.load(snapshot)
        store.add_node("action", {"x": 0, "y": 0})
        assert snapshot.nodes == []

    def test_clear_assigns_fresh_id(self, store):
        store.add_node("trigger", {"x": 0, "y": 0})
        store.connect("a", "b")
        store.select_node(store.nodes[0].id)
        old_id = store.workflow.id

        store.clear()
        saved = store.save()

        assert saved.id != old_id
        assert saved.nodes == []
        assert saved.edges == []
        assert store.selected_node_id is None
        assert store.execution_result is None


class TestListeners:

    def test_mutations_notify_and_unsubscribe_stops(self, store):
        calls = []
        unsubscribe = store.subscribe(lambda s: calls.append(len(s.nodes)))
        n = store.add_node("action", {"x": 0, "y": 0})
        store.update_node_data(n, {"label": "Renamed"})
        store.connect(n, n)
        assert calls == [1, 1, 1]

        unsubscribe()
        store.add_node("action", {"x": 0, "y": 0})
        assert calls == [1, 1, 1]

    def test_wholesale_setters_notify(self, store):
        calls = []
        store.subscribe(lambda s: calls.append((len(s.nodes), len(s.edges))))
        other = GraphStore()
        n = other.add_node("trigger", {"x": 0, "y": 0})
        other.connect(n, n)

        store.set_nodes(other.nodes)
        store.set_edges(other.edges)

        assert calls == [(1, 0), (1, 1)]
