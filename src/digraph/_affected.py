"""Affected-build detection on top of a dependency graph.

A vertex is *affected* when its own payload changed since it was last built,
or when one of its dependencies had to be rebuilt. Payloads are compared
through checksums kept in a cache, so unchanged vertices are skipped.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ._graph import iter_dependencies_first
from ._vertex import VertexNotFoundError, vertex_key

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable

    from ._graph import DiGraph
    from ._vertex import Vertex, VertexRef

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BuildReport[T]:
    """Outcome of an affected build.

    Attributes:
        root: The vertex the build was requested for.
        rebuilt: Ids that were (re)built, in build order.
        cached: Ids whose cached build was reused, in walk order.

    """

    root: T
    rebuilt: list[T] = field(default_factory=list)
    cached: list[T] = field(default_factory=list)

    @property
    def root_rebuilt(self) -> bool:
        """Whether the root itself was rebuilt."""
        return self.root in self.rebuilt


def _encode_content(content: Any) -> bytes:
    if isinstance(content, bytes):
        return content
    if isinstance(content, str):
        return content.encode()
    return json.dumps(content, sort_keys=True, default=str).encode()


class AffectedBuilder[T: Hashable]:
    """Rebuild only the vertices affected by payload changes.

    Args:
        graph: The dependency graph. An edge ``a -> b`` means ``a`` is built
            from ``b``.
        build: Called with each vertex that must be rebuilt. Exceptions
            propagate and leave the cache entry of that vertex untouched.
        cache: Mapping from vertex id to the build key of its last build.
            Updated in place after every successful build.
        payload_key: Hash only ``payload[payload_key]`` instead of the whole
            payload.

    Example:
        >>> graph = DiGraph[str]()
        >>> graph.insert(Vertex("app", payload={"src": "a"}), Vertex("lib", payload={"src": "l"}))
        >>> graph.add_edge("app", "lib")
        >>> builder = AffectedBuilder(graph)
        >>> builder.build_affected("app").rebuilt
        ['lib', 'app']
        >>> builder.build_affected("app").rebuilt
        []

    """

    def __init__(
        self,
        graph: DiGraph[T],
        build: Callable[[Vertex[T]], None] | None = None,
        *,
        cache: dict[T, str] | None = None,
        payload_key: str | None = None,
    ) -> None:
        self.graph = graph
        self.cache: dict[T, str] = cache if cache is not None else {}
        self.payload_key = payload_key
        self._build = build

    def _require(self, vertex: VertexRef[T]) -> Vertex[T]:
        stored = self.graph.get(vertex)
        if stored is None:
            raise VertexNotFoundError(vertex_key(vertex))
        return stored

    def checksum(self, vertex: VertexRef[T]) -> str:
        """Compute the checksum of a vertex's payload.

        Returns:
            Checksum in ``"sha256:<hexdigest>"`` form.

        Raises:
            VertexNotFoundError: If the vertex is not registered.

        """
        stored = self._require(vertex)
        content = stored.payload if self.payload_key is None else stored.payload.get(self.payload_key)
        return f"sha256:{hashlib.sha256(_encode_content(content)).hexdigest()}"

    def _build_keys(self, root_id: T) -> dict[T, str]:
        """Compute the build key of every vertex in the dependency closure of ``root_id``.

        A build key hashes the vertex checksum together with the build keys of
        its direct dependencies, so it changes whenever anything the vertex is
        transitively built from changes. A dependency closing a cycle back onto
        the current path contributes nothing.
        """
        keys: dict[T, str] = {}
        for vertex_id in iter_dependencies_first(self.graph.adjacency(), root_id):
            vertex = self._require(vertex_id)
            h = hashlib.sha256(self.checksum(vertex).encode())
            for dep in vertex.adjacent_to:
                h.update(keys.get(dep, "").encode())
            keys[vertex_id] = f"sha256:{h.hexdigest()}"
        return keys

    def build_key(self, vertex: VertexRef[T]) -> str:
        """Compute the key stored in the cache after building ``vertex``.

        Raises:
            VertexNotFoundError: If the vertex is not registered.

        """
        vertex_id = self._require(vertex).id
        return self._build_keys(vertex_id)[vertex_id]

    def has_changed(self, vertex: VertexRef[T]) -> bool:
        """Check whether the vertex or anything it depends on changed since its last build."""
        key = vertex_key(vertex)
        return self.cache.get(key) != self.build_key(key)

    def build_affected(self, root: VertexRef[T], *, dry_run: bool = False) -> BuildReport[T]:
        """Build ``root`` and its dependencies, skipping unaffected vertices.

        Dependencies are visited deepest first, so every vertex is built after
        the vertices it depends on. A vertex is rebuilt when its build key
        differs from the cached one, which covers changes to its own payload
        and to any transitive dependency, including dependencies rebuilt by
        an earlier run for another root.

        Args:
            root: The vertex (or id) to build.
            dry_run: Report what would be rebuilt without calling the build
                function or touching the cache.

        Returns:
            A BuildReport listing rebuilt and cached vertices.

        Raises:
            VertexNotFoundError: If ``root`` is not registered.

        """
        root_id = self._require(root).id
        report = BuildReport(root=root_id)
        rebuilt: set[T] = set()
        keys = self._build_keys(root_id)

        for vertex_id, key in keys.items():
            vertex = self._require(vertex_id)
            dependency_rebuilt = any(dep in rebuilt for dep in vertex.adjacent_to)

            if not dependency_rebuilt and self.cache.get(vertex_id) == key:
                logger.debug(f"Using cached build of '{vertex_id}'")
                report.cached.append(vertex_id)
                continue

            if not dry_run:
                logger.info(f"Building '{vertex_id}'")
                if self._build is not None:
                    self._build(vertex)
                self.cache[vertex_id] = key
            rebuilt.add(vertex_id)
            report.rebuilt.append(vertex_id)

        return report
