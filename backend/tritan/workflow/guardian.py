"""
Guardian — workflow validation with an offline fallback.

Validation is a two-step pipeline: ask the remote engine; if that
fails for any reason, derive a result locally from the in-memory
graph. The remote call is never retried. Either way the result is
stored on the ``GraphStore`` and returned; nothing is raised.
"""

from __future__ import annotations

from logging import getLogger
from typing import List, Sequence

from pydantic import ValidationError

from tritan.workflow.engine_client import EngineClient, EngineError
from tritan.workflow.graph_store import GraphStore
from tritan.workflow.node_types import NodeKind
from tritan.workflow.wire import build_validate_payload
from tritan.workflow.workflow_model import (
    ValidationIssue,
    ValidationResult,
    WorkflowNode,
)

logger = getLogger(__name__)

MISSING_TRIGGER_MESSAGE = "Workflow must have at least one trigger node"
EMPTY_WORKFLOW_MESSAGE = "Workflow has no nodes"


def run_local_checks(nodes: Sequence[WorkflowNode]) -> ValidationResult:
    """Structural checks that need no engine.

    Only errors are produced; warnings and suggestions come from the
    remote engine alone. An empty graph trips both rules.
    """
    errors: List[ValidationIssue] = []

    if not any(n.kind == NodeKind.TRIGGER for n in nodes):
        errors.append(ValidationIssue(message=MISSING_TRIGGER_MESSAGE))

    if not nodes:
        errors.append(ValidationIssue(message=EMPTY_WORKFLOW_MESSAGE))

    return ValidationResult(valid=not errors, errors=errors)


class WorkflowGuardian:
    """Validation orchestrator bound to one store and one engine client."""

    def __init__(self, store: GraphStore, client: EngineClient) -> None:
        self._store = store
        self._client = client

    async def validate(self) -> ValidationResult:
        snapshot = self._store.snapshot()
        payload = build_validate_payload(snapshot)

        try:
            body = await self._client.validate(payload)
            result = ValidationResult.model_validate(body)
        except EngineError as e:
            logger.info(f"Guardian offline ({e.message}); using local checks")
            result = run_local_checks(snapshot.nodes)
        except ValidationError as e:
            logger.warning(
                f"Guardian returned a malformed result ({e.error_count()} errors); "
                f"using local checks"
            )
            result = run_local_checks(snapshot.nodes)

        self._store.validation_result = result
        if not result.valid:
            logger.debug(f"Validation found {len(result.errors)} error(s)")
        return result
