"""Rich-aware presenters for CLI output and diagnostics."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from bibpress.core.exceptions import exception_hint
from bibpress.handler import InvocationReport, SourceStatus

from .state import CLIState


def _format_path(path: Path) -> str:
    """Format a path relative to the current working directory for display."""
    resolved = path.resolve()
    try:
        return str(resolved.relative_to(Path.cwd()))
    except ValueError:
        return str(resolved)


def _size_details(size: int) -> str:
    if size >= 1024 * 1024:
        return f"{size / (1024 * 1024):.2f} MiB"
    if size >= 1024:
        return f"{size / 1024:.1f} KiB"
    return f"{size} B"


_FORMAT_STYLES = {"html": "bright_cyan", "markdown": "yellow", "pdf": "bright_green"}


def present_render_summary(
    state: CLIState,
    rows: Sequence[tuple[str, Path, int]],
    failures: Sequence[tuple[str, str]] = (),
) -> None:
    """Display the documents written by ``bibpress render``.

    *rows* holds ``(format, path, size)`` triples; *failures* holds
    ``(format, reason)`` pairs for renderers that produced nothing.
    """
    from rich import box
    from rich.table import Table
    from rich.text import Text

    table = Table(title="Rendered Documents", box=box.SQUARE, header_style="bold cyan")
    table.add_column("Format", style="cyan")
    table.add_column("Location")
    table.add_column("Filesize", style="magenta", justify="right", no_wrap=True)
    for fmt, path, size in rows:
        table.add_row(
            fmt,
            Text(_format_path(path), style=_FORMAT_STYLES.get(fmt)),
            _size_details(size),
        )
    for fmt, reason in failures:
        table.add_row(fmt, Text(f"failed: {reason}", style="red"), "")
    state.console.print(table)


def present_invocation_report(state: CLIState, report: InvocationReport) -> None:
    """Display one row per notification handled by ``bibpress invoke``."""
    from rich import box
    from rich.table import Table
    from rich.text import Text

    styles = {
        SourceStatus.PROCESSED: "green",
        SourceStatus.SKIPPED: "dim",
        SourceStatus.FAILED: "red",
    }
    table = Table(title="Invocation Report", box=box.SQUARE, header_style="bold cyan")
    table.add_column("Source", overflow="fold")
    table.add_column("Status")
    table.add_column("Details", overflow="fold")
    for outcome in report.outcomes:
        details: list[str] = [f"uploaded {key}" for key in outcome.uploaded]
        details.extend(
            f"{fmt.value} failed: {exception_hint(error)}"
            for fmt, error in outcome.render_failures.items()
        )
        details.extend(f"upload failed: {error}" for error in outcome.upload_failures)
        if outcome.error is not None:
            details.append(str(outcome.error))
        table.add_row(
            str(outcome.notification),
            Text(outcome.status.value, style=styles[outcome.status]),
            "\n".join(details),
        )
    state.console.print(table)
    verdict = "[green]succeeded[/]" if report.succeeded else "[red]failed[/]"
    state.console.print(f"Invocation {verdict}: {report.processed} source(s) processed.")


__all__ = ["present_invocation_report", "present_render_summary"]
