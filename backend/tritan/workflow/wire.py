"""
Engine wire shapes.

Builds the JSON request bodies the remote engine expects from
a snapshot of the live graph. The snapshot is taken when the
request starts; later edits do not affect an in-flight call.
"""

from __future__ import annotations

from typing import Any, Dict, List

from tritan.workflow.workflow_model import WorkflowDefinition, WorkflowNode


def _node_payload(node: WorkflowNode, include_temperature: bool) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "label": node.label,
        "config": dict(node.config or {}),
        "provider": node.provider,
        "model": node.model,
        "prompt": node.prompt,
    }
    if include_temperature:
        data["temperature"] = node.temperature
    return {
        "id": node.id,
        "type": node.kind.value,
        "position": {"x": node.position.x, "y": node.position.y},
        "data": data,
    }


def _edges_payload(workflow: WorkflowDefinition) -> List[Dict[str, Any]]:
    return [
        {
            "id": e.id,
            "source": e.source,
            "target": e.target,
            "sourceHandle": e.source_handle,
            "targetHandle": e.target_handle,
        }
        for e in workflow.edges
    ]


def build_validate_payload(workflow: WorkflowDefinition) -> Dict[str, Any]:
    """Body for ``POST /api/workflows/validate``."""
    return {
        "id": workflow.id,
        "name": workflow.name,
        "nodes": [_node_payload(n, include_temperature=False) for n in workflow.nodes],
        "edges": _edges_payload(workflow),
    }


def build_execute_payload(workflow: WorkflowDefinition) -> Dict[str, Any]:
    """Body for ``POST /api/execute/``; nodes also carry ``temperature``."""
    return {
        "id": workflow.id,
        "name": workflow.name,
        "nodes": [_node_payload(n, include_temperature=True) for n in workflow.nodes],
        "edges": _edges_payload(workflow),
    }
