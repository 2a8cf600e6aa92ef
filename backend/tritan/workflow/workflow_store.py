"""
Workflow Store — JSON-file persistence and import/export.

``JsonFileSnapshotStore`` keeps the working session (workflow
metadata, nodes, edges) under a fixed storage key so the editor
resumes where it left off. Export/import move a single saved
workflow in and out as a standalone JSON document.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import Optional, Protocol, Union

from pydantic import ValidationError

from tritan.config import DEFAULT_STORAGE_KEY
from tritan.workflow.graph_store import GraphStore, PersistedState
from tritan.workflow.workflow_model import WorkflowDefinition

logger = getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


class SnapshotStore(Protocol):
    """Durable home for one editor session."""

    def load(self) -> Optional[PersistedState]:
        ...

    def save(self, state: PersistedState) -> None:
        ...


class JsonFileSnapshotStore:
    """Persist the editor session as ``<storage_dir>/<key>.json``."""

    def __init__(self, storage_dir: Path, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._dir = Path(storage_dir)
        self._dir.mkdir(parents=True, exist_ok=True)
        self._key = key
        logger.info(f"JsonFileSnapshotStore initialized at {self.path}")

    @property
    def path(self) -> Path:
        # Sanitize key for filesystem
        safe_key = "".join(c for c in self._key if c.isalnum() or c in "-_")
        return self._dir / f"{safe_key}.json"

    def save(self, state: PersistedState) -> None:
        tmp = self.path.with_suffix(".json.tmp")
        tmp.write_text(
            state.model_dump_json(indent=2, by_alias=True),
            encoding="utf-8",
        )
        tmp.replace(self.path)
        logger.debug(f"Session persisted: {state.workflow.name} ({state.workflow.id})")

    def load(self) -> Optional[PersistedState]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return PersistedState.model_validate(data)
        except (OSError, ValueError, ValidationError) as e:
            logger.error(f"Failed to load persisted session {self.path.name}: {e}")
            return None


# ============================================================================
# Import / export
# ============================================================================


@dataclass
class ImportResult:
    success: bool
    workflow_id: Optional[str] = None
    error: Optional[str] = None


def export_filename(name: str) -> str:
    """``"My flow v2"`` -> ``"My_flow_v2.json"``."""
    return _WHITESPACE.sub("_", name) + ".json"


def export_workflow(store: GraphStore, directory: Union[str, Path]) -> Path:
    """Save the store and write the snapshot as a JSON document."""
    saved = store.save()
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(saved.name)
    path.write_text(saved.model_dump_json(indent=2, by_alias=True), encoding="utf-8")
    logger.info(f"Workflow exported: {path}")
    return path


def import_workflow(store: GraphStore, text: str) -> ImportResult:
    """Parse ``text`` as a workflow document and load it.

    A malformed document is reported in the result; the store is
    only touched when parsing succeeded.
    """
    try:
        data = json.loads(text)
    except ValueError as e:
        logger.warning(f"Invalid workflow file: {e}")
        return ImportResult(success=False, error=f"Invalid workflow file: {e}")

    if not isinstance(data, dict):
        return ImportResult(
            success=False,
            error="Invalid workflow file: expected a JSON object",
        )

    try:
        workflow = WorkflowDefinition.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Invalid workflow document: {e.error_count()} errors")
        return ImportResult(success=False, error=f"Invalid workflow document: {e}")

    store.load(workflow)
    return ImportResult(success=True, workflow_id=workflow.id)


def import_workflow_file(store: GraphStore, path: Union[str, Path]) -> ImportResult:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return ImportResult(success=False, error=f"Could not read {path}: {e}")
    return import_workflow(store, text)
