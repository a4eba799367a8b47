"""Rich rendering utilities for graph commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from rich.console import Console

    from digraph._affected import BuildReport
    from digraph._graph import CycleReport

    from .graph_query import VertexSummary


def render_vertex_table(summaries: list[VertexSummary], console: Console) -> None:
    """Render vertex summaries as a Rich table.

    Args:
        summaries: List of VertexSummary to render.
        console: Rich Console to output to.

    """
    if not summaries:
        console.print("[dim]Graph has no vertices[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Vertex", style="bold")
    table.add_column("Deps", justify="right")
    table.add_column("Dependents", justify="right")
    table.add_column("Payload")

    for summary in summaries:
        table.add_row(
            escape(summary.id),
            str(summary.dependency_count),
            str(summary.dependent_count),
            escape(", ".join(summary.payload_keys)),
        )

    console.print(table)


def format_cycle(cycle: list[str]) -> str:
    """Format a cycle as a closed path, e.g. ``b -> c -> a -> b``."""
    return " -> ".join([*cycle, cycle[0]])


def render_cycles(report: CycleReport[str], console: Console) -> None:
    """Render the cycles of a CycleReport, one per line."""
    if not report.has_cycles:
        console.print("[green]No cycles found[/green]")
        return

    console.print(f"[red]Found {len(report.cycles)} cycle(s):[/red]")
    for cycle in report.cycles:
        console.print(f"  {escape(format_cycle(cycle))}")


def render_build_report(report: BuildReport[str], console: Console, *, dry_run: bool = False) -> None:
    """Render which vertices were rebuilt and which were cached."""
    verb = "Would rebuild" if dry_run else "Rebuilt"
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Vertex", style="bold")
    table.add_column("Status")

    for vertex_id in report.rebuilt:
        table.add_row(escape(vertex_id), f"[yellow]{verb}[/yellow]")
    for vertex_id in report.cached:
        table.add_row(escape(vertex_id), "[dim]Cached[/dim]")

    console.print(table)
