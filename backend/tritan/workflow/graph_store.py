"""
Graph Store — the live, mutable owner of a workflow graph.

Holds the working node/edge collections, the workflow metadata
(last saved snapshot), the current selection, and the latest
validation / execution outcomes written by the orchestrators.

All mutations are tolerant of stale IDs: an operation that targets
a node or edge which no longer exists is a no-op reported as
``MutationOutcome.NOT_FOUND``, never an exception, because canvas
events can race with removals.
"""

from __future__ import annotations

from enum import Enum
from logging import getLogger
from typing import Any, Callable, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel, Field

from tritan.workflow.changes import (
    EdgeRemoveChange,
    NodePositionChange,
    NodeRemoveChange,
    NodeSelectChange,
    parse_edge_changes,
    parse_node_changes,
)
from tritan.workflow.node_types import (
    DEFAULT_LLM_MODEL,
    DEFAULT_LLM_PROVIDER,
    DEFAULT_TEMPERATURE,
    NodeKind,
    get_node_type,
)
from tritan.workflow.workflow_model import (
    ExecutionResult,
    Position,
    ValidationResult,
    WorkflowDefinition,
    WorkflowEdge,
    WorkflowNode,
    new_id,
)

logger = getLogger(__name__)

# Fields a caller may overwrite through ``update_node_data``.
MUTABLE_NODE_FIELDS = frozenset({
    "label", "icon", "color", "config",
    "provider", "model", "prompt", "temperature",
})


class MutationOutcome(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"


class PersistedState(BaseModel):
    """What survives a session: metadata, nodes, and edges. No UI state."""

    workflow: WorkflowDefinition
    nodes: List[WorkflowNode] = Field(default_factory=list)
    edges: List[WorkflowEdge] = Field(default_factory=list)


StoreListener = Callable[["GraphStore"], None]


class GraphStore:
    """Sole mutable owner of the live workflow graph."""

    def __init__(self, workflow: Optional[WorkflowDefinition] = None) -> None:
        self.workflow: WorkflowDefinition = workflow or WorkflowDefinition()
        self.nodes: List[WorkflowNode] = [
            n.model_copy(deep=True) for n in self.workflow.nodes
        ]
        self.edges: List[WorkflowEdge] = [
            e.model_copy(deep=True) for e in self.workflow.edges
        ]
        self.selected_node_id: Optional[str] = None

        # Orchestrator state
        self.validation_result: Optional[ValidationResult] = None
        self.execution_result: Optional[ExecutionResult] = None
        self.is_executing: bool = False

        self._listeners: List[StoreListener] = []

    # ── Listeners ──

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Call ``listener`` after every graph/metadata mutation.

        Returns an unsubscribe callable.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ── Lookup ──

    def get_node(self, node_id: str) -> Optional[WorkflowNode]:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def get_edge(self, edge_id: str) -> Optional[WorkflowEdge]:
        for e in self.edges:
            if e.id == edge_id:
                return e
        return None

    def _unique_id(self, prefix: str, taken: Iterable[str]) -> str:
        taken = set(taken)
        candidate = new_id(prefix)
        while candidate in taken:
            candidate = new_id(prefix)
        return candidate

    # ── Graph mutations ──

    def add_node(
        self,
        kind: Union[NodeKind, str],
        position: Union[Position, Mapping[str, float], None] = None,
    ) -> str:
        """Place a new node of ``kind`` at ``position`` and return its ID.

        Raises ``ValueError`` for a kind outside the catalog.
        """
        node_type = get_node_type(kind)
        is_llm = node_type.kind == NodeKind.LLM
        node = WorkflowNode(
            id=self._unique_id("node", (n.id for n in self.nodes)),
            kind=node_type.kind,
            position=position if position is not None else Position(),
            label=node_type.label,
            icon=node_type.icon,
            color=node_type.color,
            config={},
            provider=DEFAULT_LLM_PROVIDER if is_llm else None,
            model=DEFAULT_LLM_MODEL if is_llm else None,
            prompt="" if is_llm else None,
            temperature=DEFAULT_TEMPERATURE if is_llm else None,
        )
        self.nodes.append(node)
        logger.debug(f"Node added: {node.kind.value} ({node.id})")
        self._changed()
        return node.id

    def update_node_data(self, node_id: str, data: Mapping[str, Any]) -> MutationOutcome:
        """Shallow-merge ``data`` into a node's mutable fields.

        Only the supplied keys change. Keys outside
        ``MUTABLE_NODE_FIELDS`` (``id``, ``kind``, ``position``, ...)
        are ignored.
        """
        node = self.get_node(node_id)
        if node is None:
            logger.debug(f"update_node_data: node {node_id} not found")
            return MutationOutcome.NOT_FOUND

        updates = {k: v for k, v in data.items() if k in MUTABLE_NODE_FIELDS}
        ignored = set(data) - set(updates)
        if ignored:
            logger.debug(f"update_node_data: ignoring {sorted(ignored)} on {node_id}")

        # Validate on a copy so a bad value leaves the node untouched.
        merged = node.model_dump()
        merged.update(updates)
        replacement = WorkflowNode.model_validate(merged)
        replacement.selected = node.selected
        self.nodes[self.nodes.index(node)] = replacement
        self._changed()
        return MutationOutcome.FOUND

    def connect(
        self,
        source: str,
        target: str,
        source_handle: Optional[str] = None,
        target_handle: Optional[str] = None,
    ) -> str:
        """Append an edge and return its ID.

        Dangling endpoints, self-loops and parallel edges are all
        accepted here; validation reports on them.
        """
        edge = WorkflowEdge(
            id=self._unique_id("edge", (e.id for e in self.edges)),
            source=source,
            target=target,
            source_handle=source_handle,
            target_handle=target_handle,
        )
        self.edges.append(edge)
        logger.debug(f"Edge added: {source} -> {target} ({edge.id})")
        self._changed()
        return edge.id

    def apply_node_changes(self, changes: Iterable[Any]) -> List[MutationOutcome]:
        """Apply an ordered batch of node changes.

        Accepts change models or raw ``{"type": ...}`` dicts;
        unrecognized kinds are skipped. Returns one outcome per
        applied change.
        """
        outcomes: List[MutationOutcome] = []
        for change in parse_node_changes(changes):
            node = self.get_node(change.id)
            if node is None:
                outcomes.append(MutationOutcome.NOT_FOUND)
                continue

            if isinstance(change, NodePositionChange):
                if change.position is not None:
                    node.position = change.position.model_copy()
            elif isinstance(change, NodeRemoveChange):
                self.nodes.remove(node)
                if self.selected_node_id == node.id:
                    self.selected_node_id = None
            elif isinstance(change, NodeSelectChange):
                node.selected = change.selected
            else:
                raise TypeError(f"Unhandled node change: {type(change).__name__}")
            outcomes.append(MutationOutcome.FOUND)

        if outcomes:
            self._changed()
        return outcomes

    def apply_edge_changes(self, changes: Iterable[Any]) -> List[MutationOutcome]:
        """Apply an ordered batch of edge changes (only ``remove``)."""
        outcomes: List[MutationOutcome] = []
        for change in parse_edge_changes(changes):
            if not isinstance(change, EdgeRemoveChange):
                raise TypeError(f"Unhandled edge change: {type(change).__name__}")
            edge = self.get_edge(change.id)
            if edge is None:
                outcomes.append(MutationOutcome.NOT_FOUND)
                continue
            self.edges.remove(edge)
            outcomes.append(MutationOutcome.FOUND)

        if outcomes:
            self._changed()
        return outcomes

    def set_nodes(self, nodes: Iterable[WorkflowNode]) -> None:
        self.nodes = list(nodes)
        self._changed()

    def set_edges(self, edges: Iterable[WorkflowEdge]) -> None:
        self.edges = list(edges)
        self._changed()

    def select_node(self, node_id: Optional[str]) -> None:
        """Set the inspector's focused node (UI state, not persisted)."""
        self.selected_node_id = node_id

    # ── Workflow lifecycle ──

    def set_workflow_name(self, name: str) -> None:
        self.workflow = self.workflow.model_copy(update={"name": name})
        self._changed()

    def snapshot(self) -> WorkflowDefinition:
        """Current metadata + live graph, without stamping a save."""
        return self.workflow.model_copy(update={
            "nodes": [n.model_copy(deep=True) for n in self.nodes],
            "edges": [e.model_copy(deep=True) for e in self.edges],
        })

    def save(self) -> WorkflowDefinition:
        """Stamp ``updated_at`` and make the live graph the saved workflow."""
        saved = self.snapshot()
        saved.touch()
        self.workflow = saved
        logger.info(f"Workflow saved: {saved.name} ({saved.id})")
        self._changed()
        return saved.model_copy(deep=True)

    def load(self, snapshot: Union[WorkflowDefinition, Mapping[str, Any]]) -> None:
        """Replace metadata, nodes and edges wholesale.

        Raises pydantic ``ValidationError`` if a mapping does not
        describe a workflow; state is untouched in that case.
        """
        if not isinstance(snapshot, WorkflowDefinition):
            snapshot = WorkflowDefinition.model_validate(dict(snapshot))
        workflow = snapshot.model_copy(deep=True)
        self.workflow = workflow
        self.nodes = [n.model_copy(deep=True) for n in workflow.nodes]
        self.edges = [e.model_copy(deep=True) for e in workflow.edges]
        self.selected_node_id = None
        logger.info(f"Workflow loaded: {workflow.name} ({workflow.id})")
        self._changed()

    def clear(self) -> None:
        """Start a fresh empty workflow with a new ID."""
        self.workflow = WorkflowDefinition(
            id=self._unique_id("workflow", (self.workflow.id,)),
        )
        self.nodes = []
        self.edges = []
        self.selected_node_id = None
        self.execution_result = None
        self.validation_result = None
        logger.info(f"Workflow cleared, new id {self.workflow.id}")
        self._changed()

    # ── Persistence view ──

    def persisted_state(self) -> PersistedState:
        return PersistedState(
            workflow=self.workflow.model_copy(deep=True),
            nodes=[n.model_copy(deep=True) for n in self.nodes],
            edges=[e.model_copy(deep=True) for e in self.edges],
        )

    def restore(self, state: PersistedState) -> None:
        """Rehydrate from a persisted session (no listener notification)."""
        self.workflow = state.workflow.model_copy(deep=True)
        self.nodes = [n.model_copy(deep=True) for n in state.nodes]
        self.edges = [e.model_copy(deep=True) for e in state.edges]
        self.selected_node_id = None
