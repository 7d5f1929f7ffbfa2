"""Graph models handed to the rendering layer."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


class Position(BaseModel):
    """Top-left corner of a node box."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class GraphNode(BaseModel):
    """A node in the structure graph, one per Entry."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    kind: Literal["file", "directory"]
    position: Position | None = None


class GraphEdge(BaseModel):
    """A directed parent -> child edge."""

    model_config = ConfigDict(frozen=True)

    id: str
    source: str
    target: str
