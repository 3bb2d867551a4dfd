"""In-memory representation of parsed bibliography records."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import NamedTuple

from .issues import BibliographyIssue


MISSING_YEAR = "No year"


def _freeze_fields(fields: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType({str(name).lower(): str(value) for name, value in fields.items()})


@dataclass(frozen=True, slots=True)
class BibliographyEntry:
    """A single bibliographic record.

    Field names are stored lower-cased and lookups are case-insensitive. Absent
    fields read as an empty string so rendering never fails on sparse records.
    """

    key: str
    entry_type: str = "misc"
    fields: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", _freeze_fields(self.fields))
        object.__setattr__(self, "entry_type", self.entry_type.lower())

    def get(self, name: str) -> str:
        """Return the raw value of *name*, or an empty string when unset."""
        return self.fields.get(name.lower(), "")

    def has_field(self, name: str) -> bool:
        return name.lower() in self.fields

    @property
    def author(self) -> str:
        return self.get("author")

    @property
    def title(self) -> str:
        return self.get("title")

    @property
    def url(self) -> str:
        return self.get("url")

    @property
    def year(self) -> str:
        return self.fields.get("year", MISSING_YEAR)


class EntryProjection(NamedTuple):
    """The four values every renderer displays for an entry."""

    author: str
    title: str
    url: str
    year: str


def project_entry(entry: BibliographyEntry, *, missing_year: str = MISSING_YEAR) -> EntryProjection:
    """Project an entry onto the ``(author, title, url, year)`` tuple used by renderers."""
    return EntryProjection(
        author=entry.author,
        title=entry.title,
        url=entry.url,
        year=entry.fields.get("year", missing_year),
    )


class BibliographyDatabase:
    """Ordered, read-only collection of entries produced by one parse."""

    __slots__ = ("_entries", "_index", "_issues", "source_name")

    def __init__(
        self,
        entries: Iterable[BibliographyEntry] = (),
        *,
        issues: Iterable[BibliographyIssue] = (),
        source_name: str | None = None,
    ) -> None:
        self._entries = tuple(entries)
        self._index = {entry.key.lower(): entry for entry in self._entries}
        self._issues = tuple(issues)
        self.source_name = source_name

    @property
    def entries(self) -> tuple[BibliographyEntry, ...]:
        """Return entries in parse order."""
        return self._entries

    @property
    def issues(self) -> tuple[BibliographyIssue, ...]:
        """Return non-fatal problems detected while parsing."""
        return self._issues

    def find(self, key: str) -> BibliographyEntry | None:
        """Return the entry registered under *key* (case-insensitive)."""
        return self._index.get(key.lower())

    def keys(self) -> list[str]:
        return [entry.key for entry in self._entries]

    def __iter__(self) -> Iterator[BibliographyEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def __repr__(self) -> str:
        return f"BibliographyDatabase(entries={len(self._entries)}, source={self.source_name!r})"


__all__ = [
    "MISSING_YEAR",
    "BibliographyDatabase",
    "BibliographyEntry",
    "EntryProjection",
    "project_entry",
]
