"""Shared console helpers for the archetype engine.

Rich-based progress and summary output used by the generation driver and the
engine when verbose output is enabled.  Resolution code never prints.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from rich.console import Console
from rich.table import Table

console = Console()


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_step(message: str) -> None:
    """Print a dim progress line."""
    console.print(f"  [dim]{message}[/dim]")


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_plan_table(plan: Mapping[str, Sequence[Any]], title: str = "Plan") -> None:
    """Print a resource plan as a two-column table.

    Args:
        plan: Mapping of resource path -> pipeline of transformations.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Resource", style="dim", no_wrap=True)
    table.add_column("Transformations")

    for path in sorted(plan):
        pipeline = plan[path]
        table.add_row(path, ", ".join(getattr(t, "id", str(t)) for t in pipeline) or "-")

    console.print(table)
    console.print()
