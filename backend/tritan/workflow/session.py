"""
Editor Session — explicit lifecycle for one editing session.

Constructs the ``GraphStore``, rehydrates it from the snapshot store,
wires write-through persistence, and owns the Guardian and executor
that act on it. Collaborators receive the session (or its store)
by reference; there is no module-level singleton.
"""

from __future__ import annotations

from logging import getLogger
from typing import Callable, Optional

from tritan.config import EditorConfig
from tritan.workflow.engine_client import EngineClient
from tritan.workflow.graph_store import GraphStore
from tritan.workflow.guardian import WorkflowGuardian
from tritan.workflow.workflow_executor import WorkflowExecutor
from tritan.workflow.workflow_model import ExecutionResult, ValidationResult
from tritan.workflow.workflow_store import JsonFileSnapshotStore, SnapshotStore

logger = getLogger(__name__)


class EditorSession:
    """Construct at session start, ``close()`` at session end."""

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        snapshot_store: Optional[SnapshotStore] = None,
        client: Optional[EngineClient] = None,
    ) -> None:
        self.config = config or EditorConfig.get_default_instance()
        self.snapshot_store: SnapshotStore = snapshot_store or JsonFileSnapshotStore(
            self.config.storage_path, self.config.storage_key,
        )
        self.client = client or EngineClient(
            self.config.api_url, timeout=self.config.request_timeout,
        )

        self.store = GraphStore()
        persisted = self.snapshot_store.load()
        if persisted is not None:
            self.store.restore(persisted)
            logger.info(
                f"Session restored: {self.store.workflow.name} "
                f"({len(self.store.nodes)} nodes, {len(self.store.edges)} edges)"
            )

        self.guardian = WorkflowGuardian(self.store, self.client)
        self.executor = WorkflowExecutor(self.store, self.client)
        self._unsubscribe: Optional[Callable[[], None]] = self.store.subscribe(
            self._persist,
        )

    # ── Persistence ──

    def _persist(self, store: GraphStore) -> None:
        self.snapshot_store.save(store.persisted_state())

    def close(self) -> None:
        """Persist a final time and stop write-through."""
        if self._unsubscribe is None:
            return
        self._unsubscribe()
        self._unsubscribe = None
        self._persist(self.store)
        logger.info(f"Session closed: {self.store.workflow.name}")

    def __enter__(self) -> "EditorSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ── Orchestration ──

    async def validate(self) -> ValidationResult:
        return await self.guardian.validate()

    async def execute(self) -> ExecutionResult:
        return await self.executor.execute()

    async def run(self) -> Optional[ExecutionResult]:
        """Validate, then execute only if the workflow is valid.

        Returns ``None`` when validation blocks the run. Execution
        failures propagate as ``EngineError``.
        """
        validation = await self.validate()
        if not validation.valid:
            logger.warning(
                "Workflow has errors, not executing: "
                + "; ".join(e.message for e in validation.errors)
            )
            return None
        return await self.execute()
