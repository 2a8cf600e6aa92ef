"""
Workflow Core — graph state, validation, and execution orchestration.

Architecture:
    node_types        — closed catalog of node kinds + LLM providers
    workflow_model    — Node / Edge / WorkflowDefinition + engine results
    changes           — canvas change-set variants
    graph_store       — GraphStore, the live mutable graph
    wire              — engine request payloads
    engine_client     — async HTTP client for the remote engine
    guardian          — validation with offline fallback
    workflow_executor — remote execution with failure recording
    workflow_store    — session persistence + import/export
    session           — EditorSession wiring it all together
"""

from tritan.workflow.changes import (
    EdgeRemoveChange,
    NodePositionChange,
    NodeRemoveChange,
    NodeSelectChange,
)
from tritan.workflow.engine_client import EngineClient, EngineError
from tritan.workflow.graph_store import GraphStore, MutationOutcome, PersistedState
from tritan.workflow.guardian import WorkflowGuardian, run_local_checks
from tritan.workflow.node_types import (
    LLM_PROVIDERS,
    NODE_TYPES,
    NodeKind,
)
from tritan.workflow.session import EditorSession
from tritan.workflow.workflow_executor import WorkflowExecutor
from tritan.workflow.workflow_model import (
    ExecutionResult,
    ExecutionStatus,
    NodeResult,
    Position,
    ValidationIssue,
    ValidationResult,
    WorkflowDefinition,
    WorkflowEdge,
    WorkflowNode,
)
from tritan.workflow.workflow_store import (
    ImportResult,
    JsonFileSnapshotStore,
    SnapshotStore,
    export_workflow,
    import_workflow,
    import_workflow_file,
)

__all__ = [
    "EdgeRemoveChange",
    "NodePositionChange",
    "NodeRemoveChange",
    "NodeSelectChange",
    "EngineClient",
    "EngineError",
    "GraphStore",
    "MutationOutcome",
    "PersistedState",
    "WorkflowGuardian",
    "run_local_checks",
    "LLM_PROVIDERS",
    "NODE_TYPES",
    "NodeKind",
    "EditorSession",
    "WorkflowExecutor",
    "ExecutionResult",
    "ExecutionStatus",
    "NodeResult",
    "Position",
    "ValidationIssue",
    "ValidationResult",
    "WorkflowDefinition",
    "WorkflowEdge",
    "WorkflowNode",
    "ImportResult",
    "JsonFileSnapshotStore",
    "SnapshotStore",
    "export_workflow",
    "import_workflow",
    "import_workflow_file",
]
