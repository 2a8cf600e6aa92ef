"""
Workflow Data Models — nodes, edges, definitions, and engine results.

These are the serializable data structures that describe
a user-designed workflow graph. They are held live by
``GraphStore``, persisted by ``JsonFileSnapshotStore`` and
sent to the remote engine by the orchestrators.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tritan.workflow.node_types import NodeKind


def new_id(prefix: str) -> str:
    """Opaque identifier such as ``node-1a2b3c4d``."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ============================================================================
# Graph
# ============================================================================


class Position(BaseModel):
    x: float = 0.0
    y: float = 0.0


class WorkflowNode(BaseModel):
    """A single node placed on the workflow canvas.

    ``id`` and ``kind`` are fixed at creation. ``config`` holds
    kind-specific options (``{method, url}`` for http, ``{condition}``
    for condition, ...); its shape is advisory. The LLM fields are
    only meaningful for ``kind == llm``. ``selected`` is UI state and
    never serialized.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=lambda: new_id("node"), frozen=True)
    kind: NodeKind = Field(frozen=True)
    position: Position = Field(default_factory=Position)
    label: str = ""
    icon: str = ""
    color: str = ""
    config: Dict[str, Any] = Field(default_factory=dict)
    provider: Optional[str] = None
    model: Optional[str] = None
    prompt: Optional[str] = None
    temperature: Optional[float] = None
    selected: bool = Field(default=False, exclude=True)

    @model_validator(mode="before")
    @classmethod
    def _flatten_canvas_shape(cls, data: Any) -> Any:
        # Canvas exports nest fields under ``data`` and keep the kind in
        # ``data.nodeType`` (``type`` is the renderer name, e.g. "custom").
        if not isinstance(data, dict) or "kind" in data:
            return data
        flat = {k: v for k, v in data.items() if k not in ("data", "type")}
        inner = data.get("data")
        if isinstance(inner, dict):
            flat.update({k: v for k, v in inner.items() if k != "nodeType"})
            kind = inner.get("nodeType") or data.get("type")
        else:
            kind = data.get("type")
        if flat.get("config") is None:
            flat.pop("config", None)
        if flat.get("label") is None:
            flat.pop("label", None)
        flat["kind"] = kind
        return flat


class WorkflowEdge(BaseModel):
    """A directed edge between two node instances.

    ``source_handle`` / ``target_handle`` name a port on the node
    (condition nodes expose ``"true"`` and ``"false"``); ``None`` is
    the node's single default port. Edges may dangle or loop; that
    is for validation to report.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=lambda: new_id("edge"))
    source: str  # source node ID
    target: str  # target node ID
    source_handle: Optional[str] = Field(default=None, alias="sourceHandle")
    target_handle: Optional[str] = Field(default=None, alias="targetHandle")


class WorkflowDefinition(BaseModel):
    """A complete workflow graph definition — the save/export snapshot.

    Missing ``nodes`` / ``edges`` load as empty collections.
    """

    id: str = Field(default_factory=lambda: new_id("workflow"))
    name: str = "New Workflow"
    description: str = ""
    nodes: List[WorkflowNode] = Field(default_factory=list)
    edges: List[WorkflowEdge] = Field(default_factory=list)
    created_at: str = Field(default_factory=utc_now)
    updated_at: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _drop_null_collections(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = {
                k: v for k, v in data.items()
                if not (k in ("nodes", "edges", "description") and v is None)
            }
        return data

    def get_node(self, node_id: str) -> Optional[WorkflowNode]:
        """Find a node by ID."""
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def get_edges_from(self, node_id: str) -> List[WorkflowEdge]:
        """Get all edges originating from a node."""
        return [e for e in self.edges if e.source == node_id]

    def get_edges_to(self, node_id: str) -> List[WorkflowEdge]:
        """Get all edges pointing to a node."""
        return [e for e in self.edges if e.target == node_id]

    def touch(self) -> None:
        """Update the ``updated_at`` timestamp."""
        self.updated_at = utc_now()


# ============================================================================
# Guardian (validation) results
# ============================================================================


class ValidationIssue(BaseModel):
    model_config = ConfigDict(extra="allow")

    message: str
    suggestion: Optional[str] = None


class ValidationSuggestion(BaseModel):
    message: str


class ValidationResult(BaseModel):
    """Outcome of a validation pass.

    Same shape whether it came from the remote engine or the
    local fallback.
    """

    model_config = ConfigDict(extra="allow")

    valid: bool
    errors: List[ValidationIssue] = Field(default_factory=list)
    warnings: List[ValidationIssue] = Field(default_factory=list)
    suggestions: List[ValidationSuggestion] = Field(default_factory=list)


# ============================================================================
# Execution results
# ============================================================================


class ExecutionStatus(str, Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class NodeResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    node_id: str
    status: str
    duration_ms: Optional[float] = None
    output: Any = None
    error: Optional[str] = None


class ExecutionResult(BaseModel):
    """Structured engine response, or a synthesized failure record.

    Fields the engine adds beyond these (``outputs``, ``workflow_id``,
    ...) are kept as extras. A status outside ``ExecutionStatus`` is
    kept as the engine's own string.
    """

    model_config = ConfigDict(extra="allow")

    status: Union[ExecutionStatus, str] = Field(union_mode="left_to_right")
    total_duration_ms: Optional[float] = None
    error: Optional[str] = None
    node_results: List[NodeResult] = Field(default_factory=list)

    @property
    def status_label(self) -> str:
        if isinstance(self.status, ExecutionStatus):
            return self.status.value
        return self.status

    @property
    def failed(self) -> bool:
        return self.status == ExecutionStatus.FAILED
