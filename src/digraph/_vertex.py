"""Vertex record stored by the directed graph."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Any


class VertexNotFoundError(KeyError):
    """Raised when an operation requires a vertex that is not registered."""

    def __init__(self, vertex_id: Hashable) -> None:
        self.vertex_id = vertex_id
        super().__init__(f"Vertex '{vertex_id}' is not registered in the graph")

    def __str__(self) -> str:
        # KeyError would otherwise quote the whole message
        return str(self.args[0])


@dataclass(slots=True)
class Vertex[T: Hashable]:
    """A node of the graph.

    Attributes:
        id: Caller-chosen identifier, unique within a graph.
        adjacent_to: Ids of the vertices this one points to (its dependencies),
            in edge-creation order.
        payload: Caller-defined data, opaque to the graph.

    """

    id: T
    adjacent_to: list[T] = field(default_factory=list)
    payload: dict[str, Any] = field(default_factory=dict)

    def copy(self) -> Vertex[T]:
        """Return a copy with its own adjacency list and payload dict."""
        return Vertex(id=self.id, adjacent_to=list(self.adjacent_to), payload=dict(self.payload))

    def to_dict(self) -> dict[str, Any]:
        """Return a structural snapshot of the vertex."""
        return {
            "id": self.id,
            "adjacent_to": list(self.adjacent_to),
            "payload": dict(self.payload),
        }


type VertexRef[T: Hashable] = Vertex[T] | T
"""A vertex record or its bare id."""


def vertex_key[T: Hashable](ref: VertexRef[T]) -> T:
    """Return the id of a vertex reference."""
    if isinstance(ref, Vertex):
        return ref.id
    return ref
