"""Plain-text list rendered with Markdown link syntax."""

from __future__ import annotations

from collections.abc import Sequence

from bibpress.core.bibliography import BibliographyEntry, EntryProjection, project_entry


# Same ordinal on every line.
LIST_MARKER = "1."


def format_line(projection: EntryProjection) -> str:
    author, title, url, year = projection
    return f"{LIST_MARKER} {author} [{title}]({url}) {year}"


def render_markdown(entries: Sequence[BibliographyEntry]) -> bytes:
    """Render one line per entry in the given order, joined by newlines."""
    lines = [format_line(project_entry(entry, missing_year="")) for entry in entries]
    return "\n".join(lines).encode("utf-8")


__all__ = ["LIST_MARKER", "format_line", "render_markdown"]
