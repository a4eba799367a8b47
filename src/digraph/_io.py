"""Loading and exporting graphs and build caches as TOML."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ._graph import DiGraph
from ._vertex import Vertex

if TYPE_CHECKING:
    from collections.abc import Hashable, Mapping

logger = logging.getLogger(__name__)


class GraphFileError(Exception):
    """Error reading or validating a graph or cache file."""


class VertexEntry(BaseModel):
    """One ``[vertices.<id>]`` table of a graph document."""

    model_config = ConfigDict(extra="forbid")

    adjacent_to: list[str] = Field(default_factory=list)
    payload: dict[str, Any] = Field(default_factory=dict)


class GraphDocument(BaseModel):
    """Schema of a graph TOML document.

    Example:
        [vertices.lib1]
        adjacent_to = ["lib3"]

        [vertices.lib1.payload]
        component = "<lib3.MyLib3Component/>"

    """

    model_config = ConfigDict(extra="forbid")

    vertices: dict[str, VertexEntry] = Field(default_factory=dict)


class CacheDocument(BaseModel):
    """Schema of a build cache TOML document."""

    model_config = ConfigDict(extra="forbid")

    checksums: dict[str, str] = Field(default_factory=dict)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise GraphFileError(msg) from e
    except OSError as e:
        msg = f"Cannot read {path}: {e}"
        raise GraphFileError(msg) from e


def graph_from_document(document: GraphDocument) -> DiGraph[str]:
    """Build a graph from a validated document.

    All vertices are inserted before any edge, so an edge may refer to a
    vertex declared later in the file. Edges to undeclared vertices and
    self-loops are dropped with a warning.
    """
    graph = DiGraph[str]()
    graph.insert(*(Vertex(vertex_id, payload=dict(entry.payload)) for vertex_id, entry in document.vertices.items()))

    for vertex_id, entry in document.vertices.items():
        for target in entry.adjacent_to:
            if target not in document.vertices:
                logger.warning(f"Dropping edge '{vertex_id}' -> '{target}': '{target}' is not declared")
                continue
            if target == vertex_id:
                logger.warning(f"Dropping self-loop on '{vertex_id}'")
                continue
            graph.add_edge(vertex_id, target)

    return graph


def load_graph_from_toml(path: Path) -> DiGraph[str]:
    """Load a graph from a TOML file.

    Args:
        path: Path to the graph document.

    Returns:
        The loaded graph.

    Raises:
        GraphFileError: If the file cannot be read, is not valid TOML, or does
            not match the graph document schema.

    """
    data = _read_toml(path)
    try:
        document = GraphDocument.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid graph document {path}:\n{e}"
        raise GraphFileError(msg) from e

    graph = graph_from_document(document)
    logger.debug(f"Loaded {len(graph)} vertices from {path}")
    return graph


def graph_to_toml_dict[T: Hashable](graph: DiGraph[T]) -> dict[str, Any]:
    """Convert a graph to the TOML document structure.

    Ids are converted with ``str``.
    """
    return {
        "vertices": {
            str(vertex.id): {
                "adjacent_to": [str(v) for v in vertex.adjacent_to],
                "payload": dict(vertex.payload),
            }
            for vertex in graph
        },
    }


def export_graph_to_toml[T: Hashable](graph: DiGraph[T], path: Path) -> None:
    """Write a graph to a TOML file.

    Raises:
        TypeError: If a payload holds a value TOML cannot represent (e.g. None).

    """
    with path.open("wb") as f:
        tomli_w.dump(graph_to_toml_dict(graph), f)
    logger.debug(f"Exported {len(graph)} vertices to {path}")


def load_cache(path: Path) -> dict[str, str]:
    """Load build checksums from a cache file.

    A missing file is an empty cache.

    Raises:
        GraphFileError: If the file exists but is not a valid cache document.

    """
    if not path.exists():
        logger.debug(f"No cache at {path}, starting empty")
        return {}
    data = _read_toml(path)
    try:
        return dict(CacheDocument.model_validate(data).checksums)
    except ValidationError as e:
        msg = f"Invalid cache file {path}:\n{e}"
        raise GraphFileError(msg) from e


def save_cache(cache: Mapping[str, str], path: Path) -> None:
    """Write build checksums to a cache file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        tomli_w.dump({"checksums": dict(cache)}, f)
