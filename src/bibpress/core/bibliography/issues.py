"""Shared data structures for bibliography processing."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BibliographyIssue:
    """Represents a non-fatal problem encountered while parsing a source."""

    message: str
    key: str | None = None
    source: str | None = None
    line: int | None = None
