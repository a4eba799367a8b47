"""Graph module providing the directed graph and its algorithms.

This module contains:
- DiGraph[T]: A mutable directed graph owning its vertices
- find_cycles / iter_cycles: Bounded-depth detection of distinct cycles
- iter_dependencies_first: Dependency-first walk for build ordering
"""

from ._cycles import CycleReport, find_cycles, iter_cycles
from ._digraph import DiGraph
from ._traversal import iter_dependencies_first

__all__ = ["CycleReport", "DiGraph", "find_cycles", "iter_cycles", "iter_dependencies_first"]
