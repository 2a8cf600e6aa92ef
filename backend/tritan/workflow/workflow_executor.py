"""
Workflow Executor — submit the live graph to the remote engine.

Execution has no offline substitute: a failed call is recorded as a
``failed`` ``ExecutionResult`` on the store and then re-raised so the
caller can tell "result stored" apart from "call failed".

State per attempt: idle -> running -> completed | failed.
Overlapping ``execute`` calls are not serialized; whichever
response resolves last overwrites ``execution_result``.
"""

from __future__ import annotations

import time
from logging import getLogger

from pydantic import ValidationError

from tritan.workflow.engine_client import EngineClient, EngineError
from tritan.workflow.graph_store import GraphStore
from tritan.workflow.wire import build_execute_payload
from tritan.workflow.workflow_model import ExecutionResult, ExecutionStatus

logger = getLogger(__name__)


class WorkflowExecutor:
    """Execution orchestrator bound to one store and one engine client.

    Usage::

        executor = WorkflowExecutor(store, client)
        result = await executor.execute()
    """

    def __init__(self, store: GraphStore, client: EngineClient) -> None:
        self._store = store
        self._client = client

    async def execute(self) -> ExecutionResult:
        """Run the workflow remotely.

        Raises:
            EngineError: If the engine is unreachable, answers non-2xx,
                or returns a body that is not an execution result.
        """
        store = self._store
        store.is_executing = True
        store.execution_result = None

        snapshot = store.snapshot()
        payload = build_execute_payload(snapshot)
        logger.info(
            f"Executing workflow {snapshot.name} ({snapshot.id}): "
            f"{len(snapshot.nodes)} nodes, {len(snapshot.edges)} edges"
        )
        started = time.monotonic()

        try:
            body = await self._client.execute(payload)
            try:
                result = ExecutionResult.model_validate(body)
            except ValidationError as e:
                raise EngineError(
                    f"Execution failed: malformed engine response ({e.error_count()} errors)"
                ) from e
        except EngineError as e:
            logger.error(f"Execution error: {e.message}")
            store.execution_result = ExecutionResult(
                status=ExecutionStatus.FAILED,
                error=e.message,
            )
            raise
        else:
            store.execution_result = result
            elapsed = (time.monotonic() - started) * 1000
            logger.info(
                f"Execution {result.status_label} in {elapsed:.0f}ms "
                f"({len(result.node_results)} node results)"
            )
            return result
        finally:
            store.is_executing = False
