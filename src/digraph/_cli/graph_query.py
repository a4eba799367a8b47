"""Graph query functions for CLI commands.

Pure functions over a loaded graph: no I/O, no Rich rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from digraph._vertex import VertexNotFoundError

if TYPE_CHECKING:
    from digraph._graph import DiGraph


@dataclass(frozen=True, slots=True)
class VertexSummary:
    """Basic information about a vertex for listing."""

    id: str
    dependency_count: int
    dependent_count: int
    payload_keys: tuple[str, ...]


def summarize_vertices(graph: DiGraph[str]) -> list[VertexSummary]:
    """Summarize every vertex of the graph, in insertion order."""
    return [
        VertexSummary(
            id=vertex.id,
            dependency_count=len(graph.get_adjacent_to(vertex)),
            dependent_count=len(graph.get_adjacent_from(vertex)),
            payload_keys=tuple(vertex.payload),
        )
        for vertex in graph
    ]


def get_neighbours(graph: DiGraph[str], vertex_id: str, *, reverse: bool = False) -> list[str]:
    """Get the direct dependencies of a vertex, or its dependents if ``reverse``.

    Raises:
        VertexNotFoundError: If the vertex is not in the graph.

    """
    if vertex_id not in graph:
        raise VertexNotFoundError(vertex_id)
    neighbours = graph.get_adjacent_from(vertex_id) if reverse else graph.get_adjacent_to(vertex_id)
    return [v.id for v in neighbours]
