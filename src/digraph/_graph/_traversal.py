"""Dependency-first traversal."""

from __future__ import annotations

from typing import TYPE_CHECKING

from digraph._vertex import VertexNotFoundError

if TYPE_CHECKING:
    from collections.abc import Hashable, Iterator, Mapping, Sequence


def iter_dependencies_first[T: Hashable](
    adjacency: Mapping[T, Sequence[T]],
    root: T,
    *,
    include_root: bool = True,
) -> Iterator[T]:
    """Walk the dependencies of ``root``, deepest first.

    Each vertex is yielded once, after all of its own dependencies, so the
    order is a valid build order for the dependency closure of ``root``.
    Vertices already on the current path are not re-entered, which keeps a
    cyclic graph from looping forever.

    Args:
        adjacency: Mapping from vertex id to the ids it depends on.
        root: Vertex to start from.
        include_root: Whether to yield ``root`` itself as the last item.

    Returns:
        Iterator over vertex ids.

    Raises:
        VertexNotFoundError: If ``root`` is not in ``adjacency``.

    Example:
        >>> list(iter_dependencies_first({"app": ["lib"], "lib": ["core"], "core": []}, "app"))
        ['core', 'lib', 'app']

    """
    if root not in adjacency:
        raise VertexNotFoundError(root)
    return _walk(adjacency, root, include_root=include_root)


def _walk[T: Hashable](
    adjacency: Mapping[T, Sequence[T]],
    root: T,
    *,
    include_root: bool,
) -> Iterator[T]:
    done: set[T] = set()
    on_path = {root}
    stack = [(root, iter(adjacency[root]))]

    while stack:
        node, dependencies = stack[-1]
        for dep in dependencies:
            if dep in done or dep in on_path or dep not in adjacency:
                continue
            on_path.add(dep)
            stack.append((dep, iter(adjacency[dep])))
            break
        else:
            stack.pop()
            on_path.discard(node)
            done.add(node)
            if node != root or include_root:
                yield node
