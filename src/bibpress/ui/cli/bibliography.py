"""Bibliography-related CLI helpers."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from bibpress.core.bibliography import BibliographyDatabase, BibliographyEntry, sort_by_year

from .state import get_cli_state


if TYPE_CHECKING:
    from rich.panel import Panel


_LEADING_FIELDS = (("title", "Title"), ("author", "Authors"), ("year", "Year"), ("url", "URL"))


def build_entry_panel(entry: BibliographyEntry) -> Panel:
    """Create a Rich panel that visualises a single bibliography entry."""
    from rich import box
    from rich.panel import Panel
    from rich.table import Table

    grid = Table.grid(padding=(0, 1))
    grid.add_column(style="bold green", no_wrap=True)
    grid.add_column()

    def _add_field(label: str, value: str) -> None:
        if value.strip():
            grid.add_row(label, value)

    shown = set()
    for name, label in _LEADING_FIELDS:
        _add_field(label, entry.get(name))
        shown.add(name)

    for name, value in sorted(entry.fields.items()):
        if name not in shown:
            _add_field(name.title(), value)

    return Panel(grid, title=f"{entry.key} ({entry.entry_type})", box=box.SIMPLE)


def print_bibliography_overview(database: BibliographyDatabase) -> None:
    """Render the entries of *database* in year order, then issues and a summary."""
    from rich import box
    from rich.table import Table

    console = get_cli_state().console

    if database.issues:
        issue_table = Table(
            title="Warnings",
            box=box.SQUARE,
            header_style="bold cyan",
            show_edge=True,
        )
        issue_table.add_column("Key", style="yellow", no_wrap=True)
        issue_table.add_column("Message", style="yellow")
        issue_table.add_column("Line", style="yellow", justify="right")
        for issue in database.issues:
            issue_table.add_row(
                issue.key or "-",
                issue.message,
                str(issue.line) if issue.line is not None else "-",
            )
        console.print(issue_table)

    if not database:
        console.print("[dim]No references found.[/]")

    for entry in sort_by_year(database):
        console.print(build_entry_panel(entry))

    per_type = Counter(entry.entry_type for entry in database)
    summary_table = Table(
        title="Bibliography Summary",
        box=box.SQUARE,
        header_style="bold cyan",
        show_edge=True,
    )
    summary_table.add_column("Category", style="bold")
    summary_table.add_column("Count", justify="right")
    summary_table.add_row("Total entries", str(len(database)))
    for entry_type, count in per_type.most_common():
        summary_table.add_row(f"Type {entry_type}", str(count))
    summary_table.add_row("Without year", str(sum(1 for e in database if not e.has_field("year"))))
    console.print(summary_table)


__all__ = ["build_entry_panel", "print_bibliography_overview"]
