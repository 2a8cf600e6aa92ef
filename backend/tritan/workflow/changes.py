"""
Change-sets — batched node/edge mutations from the canvas.

The presentation layer reports drags, deletions, and selection
clicks as ordered batches of change records. Each record is one
variant of a tagged union discriminated by ``type``.
"""

from __future__ import annotations

from logging import getLogger
from typing import Annotated, Any, Iterable, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from tritan.workflow.workflow_model import Position

logger = getLogger(__name__)


class NodePositionChange(BaseModel):
    type: Literal["position"] = "position"
    id: str
    position: Optional[Position] = None  # None while a drag has no coordinates yet


class NodeRemoveChange(BaseModel):
    type: Literal["remove"] = "remove"
    id: str


class NodeSelectChange(BaseModel):
    type: Literal["select"] = "select"
    id: str
    selected: bool


class EdgeRemoveChange(BaseModel):
    type: Literal["remove"] = "remove"
    id: str


NodeChange = Annotated[
    Union[NodePositionChange, NodeRemoveChange, NodeSelectChange],
    Field(discriminator="type"),
]
EdgeChange = EdgeRemoveChange

_node_change_adapter: TypeAdapter = TypeAdapter(NodeChange)
_edge_change_adapter: TypeAdapter = TypeAdapter(EdgeChange)


def _parse(adapter: TypeAdapter, changes: Iterable[Any], what: str) -> List[Any]:
    parsed = []
    for change in changes:
        if isinstance(change, BaseModel):
            change = change.model_dump()
        if not isinstance(change, Mapping):
            logger.debug(f"Ignoring non-mapping {what} change: {change!r}")
            continue
        try:
            parsed.append(adapter.validate_python(dict(change)))
        except ValidationError:
            # Unrecognized kinds (dimensions, add, reset, ...) are not ours.
            logger.debug(f"Ignoring unrecognized {what} change: {change.get('type')!r}")
    return parsed


def parse_node_changes(changes: Iterable[Any]) -> List[Any]:
    """Parse raw change records into node change variants, in order."""
    return _parse(_node_change_adapter, changes, "node")


def parse_edge_changes(changes: Iterable[Any]) -> List[EdgeRemoveChange]:
    """Parse raw change records into edge change variants, in order."""
    return _parse(_edge_change_adapter, changes, "edge")
