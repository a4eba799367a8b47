"""Directed dependency graph with cycle detection."""

__all__ = [
    "AffectedBuilder",
    "BuildReport",
    "CycleReport",
    "DiGraph",
    "GraphDocument",
    "GraphFileError",
    "Vertex",
    "VertexNotFoundError",
    "export_graph_to_toml",
    "find_cycles",
    "graph_from_document",
    "graph_to_toml_dict",
    "iter_cycles",
    "iter_dependencies_first",
    "load_cache",
    "load_graph_from_toml",
    "save_cache",
]

from ._affected import AffectedBuilder, BuildReport
from ._graph import CycleReport, DiGraph, find_cycles, iter_cycles, iter_dependencies_first
from ._io import (
    GraphDocument,
    GraphFileError,
    export_graph_to_toml,
    graph_from_document,
    graph_to_toml_dict,
    load_cache,
    load_graph_from_toml,
    save_cache,
)
from ._vertex import Vertex, VertexNotFoundError
