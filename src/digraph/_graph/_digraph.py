"""In-memory directed graph of vertices with opaque payloads."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from digraph._vertex import Vertex, VertexNotFoundError, VertexRef, vertex_key

from ._cycles import CycleReport, find_cycles

if TYPE_CHECKING:
    from collections.abc import Hashable, Iterable, Iterator, Mapping

logger = logging.getLogger(__name__)


class DiGraph[T: Hashable]:
    """A directed graph modelling "depends on" relationships.

    The graph owns its vertices: :meth:`insert` stores copies, and edges are
    kept as ids resolved through the graph on every query. An edge
    ``a -> b`` means "a depends on b", i.e. ``b`` is adjacent to ``a``.

    Operations that would break an invariant (duplicate vertex, edge to an
    unregistered vertex, self-loop, duplicate edge) are silently ignored.

    Every method taking a vertex accepts either a :class:`Vertex` or its id.

    Example:
        >>> graph = DiGraph[str]()
        >>> graph.insert(Vertex("app"), Vertex("lib"))
        >>> graph.add_edge("app", "lib")
        >>> [v.id for v in graph.get_adjacent_to("app")]
        ['lib']

    """

    __slots__ = ("_vertices",)

    def __init__(self) -> None:
        self._vertices: dict[T, Vertex[T]] = {}

    @classmethod
    def from_vertices(cls, vertices: Iterable[Vertex[T]]) -> DiGraph[T]:
        """Build a graph by inserting ``vertices`` in order."""
        graph = cls()
        graph.insert(*vertices)
        return graph

    @property
    def vertices(self) -> list[Vertex[T]]:
        """All stored vertices, in insertion order."""
        return list(self._vertices.values())

    def get(self, vertex: VertexRef[T]) -> Vertex[T] | None:
        """Return the stored vertex with the same id, or None."""
        return self._vertices.get(vertex_key(vertex))

    def insert(self, *vertices: Vertex[T]) -> None:
        """Add vertices whose id is not registered yet.

        The first insertion of an id wins: later vertices with the same id are
        ignored, whatever their edges or payload.
        """
        for vertex in vertices:
            if vertex.id in self._vertices:
                logger.debug(f"Ignoring duplicate vertex '{vertex.id}'")
                continue
            self._vertices[vertex.id] = vertex.copy()

    def add_edge(self, from_: VertexRef[T], to: VertexRef[T]) -> None:
        """Record that ``from_`` depends on ``to``.

        The edge is dropped if either vertex is unregistered, if it is a
        self-loop, or if it already exists. Edges keep their creation order.
        """
        source_id = vertex_key(from_)
        target_id = vertex_key(to)
        source = self._vertices.get(source_id)

        if source is None or target_id not in self._vertices:
            logger.debug(f"Ignoring edge '{source_id}' -> '{target_id}': unregistered vertex")
            return
        if source_id == target_id:
            logger.debug(f"Ignoring self-loop on '{source_id}'")
            return
        if target_id in source.adjacent_to:
            return

        source.adjacent_to.append(target_id)

    def get_adjacent_to(self, vertex: VertexRef[T]) -> list[Vertex[T]]:
        """Return the vertices ``vertex`` points to (its dependencies).

        Returns an empty list when ``vertex`` is not registered.
        """
        stored = self.get(vertex)
        if stored is None:
            return []
        return [self._vertices[v] for v in stored.adjacent_to if v in self._vertices]

    def get_adjacent_from(self, vertex: VertexRef[T]) -> list[Vertex[T]]:
        """Return the vertices pointing to ``vertex`` (its dependents), in insertion order."""
        key = vertex_key(vertex)
        return [v for v in self._vertices.values() if key in v.adjacent_to]

    def mutate(self, vertex: VertexRef[T], data: Mapping[str, Any]) -> Vertex[T]:
        """Shallow-merge ``data`` into the payload of a stored vertex.

        Keys in ``data`` overwrite existing keys; other keys are kept.

        Args:
            vertex: The vertex (or id) to update.
            data: Partial payload to merge.

        Returns:
            The updated stored vertex.

        Raises:
            VertexNotFoundError: If the vertex is not registered.

        """
        stored = self.get(vertex)
        if stored is None:
            raise VertexNotFoundError(vertex_key(vertex))
        stored.payload.update(data)
        logger.debug(f"Mutated payload of '{stored.id}': {sorted(data)}")
        return stored

    def adjacency(self) -> dict[T, list[T]]:
        """Return a mapping from every vertex id to the ids it points to."""
        return {key: list(v.adjacent_to) for key, v in self._vertices.items()}

    def find_cycles(self, *, max_depth: int | None = None) -> CycleReport[T]:
        """Find the distinct elementary cycles of the graph.

        Args:
            max_depth: Maximum number of edges of a reported cycle. ``None``
                means unbounded and ``0`` disables detection.

        Returns:
            A CycleReport listing each cycle once.

        Raises:
            ValueError: If ``max_depth`` is negative.

        """
        return find_cycles(self.adjacency(), max_depth=max_depth)

    def has_cycles(self, *, max_depth: int | None = None) -> bool:
        """Check whether the graph contains a cycle of at most ``max_depth`` edges."""
        return self.find_cycles(max_depth=max_depth).has_cycles

    def as_dict(self) -> dict[T, dict[str, Any]]:
        """Return a snapshot mapping each id to ``{id, adjacent_to, payload}``."""
        return {key: v.to_dict() for key, v in self._vertices.items()}

    def __len__(self) -> int:
        """Return the number of vertices."""
        return len(self._vertices)

    def __contains__(self, vertex: object) -> bool:
        """Check if a vertex (or id) is registered."""
        key = vertex.id if isinstance(vertex, Vertex) else vertex
        try:
            return key in self._vertices
        except TypeError:
            return False

    def __iter__(self) -> Iterator[Vertex[T]]:
        """Iterate over stored vertices in insertion order."""
        return iter(self._vertices.values())

    def __repr__(self) -> str:
        return f"{type(self).__name__}({len(self)} vertices)"
