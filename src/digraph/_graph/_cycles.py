"""Cycle detection over an adjacency mapping."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Hashable, Iterator, Mapping, Sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CycleReport[T]:
    """Result of a cycle search.

    Attributes:
        cycles: Distinct elementary cycles. Each cycle lists the vertices
            visited after leaving its origin, ending with the origin itself,
            so ``a -> b -> c -> a`` is reported as ``[b, c, a]``.

    """

    cycles: list[list[T]] = field(default_factory=list)

    @property
    def has_cycles(self) -> bool:
        """Whether at least one cycle was found."""
        return len(self.cycles) > 0


def _cycle_key[T: Hashable](cycle: Sequence[T]) -> frozenset[tuple[T, T]]:
    """Return a key shared by every rotation of the same cycle."""
    return frozenset(zip(cycle, [*cycle[1:], cycle[0]], strict=True))


def _iter_cycles_from[T: Hashable](
    adjacency: Mapping[T, Sequence[T]],
    origin: T,
    max_depth: int | None,
) -> Iterator[list[T]]:
    """Yield every cycle through ``origin`` reachable within ``max_depth`` edges.

    The search keeps one neighbour iterator per vertex of the current path,
    which visits neighbours in the same order as a recursive depth-first search.
    """
    path = [origin]
    on_path = {origin}
    stack = [iter(adjacency.get(origin, ()))]

    while stack:
        for neighbour in stack[-1]:
            if neighbour == origin:
                # len(path) is the edge count of the closed cycle
                if max_depth is None or len(path) <= max_depth:
                    yield [*path[1:], origin]
                continue
            if neighbour in on_path:
                continue
            if max_depth is not None and len(path) >= max_depth:
                continue
            path.append(neighbour)
            on_path.add(neighbour)
            stack.append(iter(adjacency.get(neighbour, ())))
            break
        else:
            stack.pop()
            on_path.discard(path.pop())


def _iter_unique_cycles[T: Hashable](
    adjacency: Mapping[T, Sequence[T]],
    max_depth: int | None,
) -> Iterator[list[T]]:
    seen: set[frozenset[tuple[T, T]]] = set()
    for origin in adjacency:
        for cycle in _iter_cycles_from(adjacency, origin, max_depth):
            key = _cycle_key(cycle)
            if key in seen:
                continue
            seen.add(key)
            logger.debug(f"Found cycle: {cycle}")
            yield cycle


def iter_cycles[T: Hashable](
    adjacency: Mapping[T, Sequence[T]],
    *,
    max_depth: int | None = None,
) -> Iterator[list[T]]:
    """Lazily yield the distinct elementary cycles of a graph.

    Every vertex is used in turn as the origin of a depth-first search.
    A cycle found again from another origin (a rotation of an earlier one)
    is skipped, so the rotation discovered first is the one reported.

    Args:
        adjacency: Mapping from vertex id to the ids it points to, in edge order.
            Ids missing from the mapping are treated as having no outgoing edges.
        max_depth: Maximum number of edges of a reported cycle. ``None`` means
            unbounded and ``0`` disables detection.

    Returns:
        Iterator over cycles, in discovery order.

    Raises:
        ValueError: If ``max_depth`` is negative.

    Example:
        >>> list(iter_cycles({"a": ["b"], "b": ["c"], "c": ["a"]}))
        [['b', 'c', 'a']]

    """
    if max_depth is not None and max_depth < 0:
        msg = f"max_depth must be a non-negative integer, got {max_depth}"
        raise ValueError(msg)
    return _iter_unique_cycles(adjacency, max_depth)


def find_cycles[T: Hashable](
    adjacency: Mapping[T, Sequence[T]],
    *,
    max_depth: int | None = None,
) -> CycleReport[T]:
    """Collect the distinct elementary cycles of a graph.

    See :func:`iter_cycles` for the search rules.

    Example:
        >>> report = find_cycles({"a": ["b"], "b": ["a"]})
        >>> report.has_cycles, report.cycles
        (True, [['b', 'a']])

    """
    return CycleReport(cycles=list(iter_cycles(adjacency, max_depth=max_depth)))
