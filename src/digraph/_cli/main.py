import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from digraph._affected import AffectedBuilder
from digraph._graph import DiGraph
from digraph._io import GraphFileError, load_cache, load_graph_from_toml, save_cache
from digraph._vertex import VertexNotFoundError

from .config import ConfigError, DigraphConfig, get_config
from .graph_query import get_neighbours, summarize_vertices
from .graph_render import render_build_report, render_cycles, render_vertex_table

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()

# Exit code 1 is reserved for "cycles found"
ERROR_EXIT_CODE = 2

GraphOption = Annotated[
    Path | None,
    typer.Option("-g", "--graph", help="Path to graph TOML file (default: [tool.digraph].graph)"),
]


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Digraph CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(code=ERROR_EXIT_CODE)


def _load_config() -> DigraphConfig:
    try:
        return get_config()
    except ConfigError as e:
        raise _fail(str(e)) from e


def _load_graph(graph_path: Path | None, config: DigraphConfig) -> DiGraph[str]:
    """Load the graph from the given path, falling back to the configured one."""
    path = graph_path or config.graph
    if path is None:
        msg = "No graph file given. Pass --graph or set [tool.digraph].graph in pyproject.toml"
        raise _fail(msg)

    err_console.print(f"[cyan]Loading graph from:[/cyan] {path}")
    try:
        return load_graph_from_toml(path)
    except GraphFileError as e:
        raise _fail(str(e)) from e


@app.command()
def show(graph: GraphOption = None) -> None:
    """List the vertices of a graph with their dependency counts."""
    config = _load_config()
    loaded = _load_graph(graph, config)
    render_vertex_table(summarize_vertices(loaded), out_console)


@app.command()
def deps(
    vertex: Annotated[str, typer.Argument(help="Id of the vertex to inspect")],
    graph: GraphOption = None,
    *,
    reverse: Annotated[
        bool,
        typer.Option("--reverse", "-r", help="Show dependents instead of dependencies"),
    ] = False,
) -> None:
    """Show the direct dependencies (or dependents) of a vertex."""
    config = _load_config()
    loaded = _load_graph(graph, config)

    try:
        neighbours = get_neighbours(loaded, vertex, reverse=reverse)
    except VertexNotFoundError as e:
        raise _fail(str(e)) from e

    if not neighbours:
        kind = "dependents" if reverse else "dependencies"
        err_console.print(f"[dim]'{escape(vertex)}' has no {kind}[/dim]")
        return
    for vertex_id in neighbours:
        out_console.print(escape(vertex_id))


@app.command()
def cycles(
    graph: GraphOption = None,
    *,
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", min=0, help="Only report cycles of at most this many edges"),
    ] = None,
) -> None:
    """Detect cycles in a graph (exit code 1 if any is found, 2 on errors)."""
    config = _load_config()
    loaded = _load_graph(graph, config)
    depth = max_depth if max_depth is not None else config.max_depth

    report = loaded.find_cycles(max_depth=depth)
    render_cycles(report, out_console)
    if report.has_cycles:
        raise typer.Exit(code=1)


@app.command()
def affected(
    root: Annotated[str, typer.Argument(help="Id of the vertex to build")],
    graph: GraphOption = None,
    *,
    cache: Annotated[
        Path | None,
        typer.Option("--cache", help="Path to the build cache (default: [tool.digraph].cache)"),
    ] = None,
    payload_key: Annotated[
        str | None,
        typer.Option("--payload-key", help="Hash only this payload field"),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Only report what would be rebuilt"),
    ] = False,
) -> None:
    """Determine which vertices must be rebuilt and record their checksums."""
    config = _load_config()
    loaded = _load_graph(graph, config)
    cache_path = cache or config.cache
    if cache_path is None:
        msg = "No cache file given. Pass --cache or set [tool.digraph].cache in pyproject.toml"
        raise _fail(msg)

    try:
        checksums = load_cache(cache_path)
    except GraphFileError as e:
        raise _fail(str(e)) from e

    builder = AffectedBuilder(
        loaded,
        cache=checksums,
        payload_key=payload_key or config.payload_key,
    )
    try:
        report = builder.build_affected(root, dry_run=dry_run)
    except VertexNotFoundError as e:
        raise _fail(str(e)) from e

    render_build_report(report, out_console, dry_run=dry_run)

    if not dry_run:
        save_cache(builder.cache, cache_path)
        err_console.print(f"[cyan]Cache written to:[/cyan] {cache_path}")


@app.command()
def export(
    graph: GraphOption = None,
    *,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Path to output JSON file (default: stdout)"),
    ] = None,
) -> None:
    """Export the graph as JSON."""
    config = _load_config()
    loaded = _load_graph(graph, config)
    text = json.dumps(loaded.as_dict(), indent=2, default=str)

    if output is None:
        typer.echo(text)
        return
    output.write_text(text + "\n")
    err_console.print(f"[green]Graph exported to:[/green] {output}")


def main() -> None:
    app()
