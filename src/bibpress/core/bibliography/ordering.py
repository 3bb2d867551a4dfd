"""Year-based ordering applied before rendering the linked-list document."""

from __future__ import annotations

from collections.abc import Iterable
import re

from .models import BibliographyEntry


UNKNOWN_YEAR = 2**31 - 1

_INTEGER = re.compile(r"[+-]?[0-9]+")


def year_sort_key(entry: BibliographyEntry) -> int:
    """Return the numeric year of *entry*, or :data:`UNKNOWN_YEAR`.

    Absent years, non-numeric values and values outside the signed 32-bit range
    all map to :data:`UNKNOWN_YEAR` so they sort after every dated entry.
    """
    raw = entry.fields.get("year")
    if raw is None or not _INTEGER.fullmatch(raw):
        return UNKNOWN_YEAR
    value = int(raw)
    if not -(2**31) <= value <= UNKNOWN_YEAR:
        return UNKNOWN_YEAR
    return value


def sort_by_year(entries: Iterable[BibliographyEntry]) -> list[BibliographyEntry]:
    """Sort entries ascending by year, keeping parse order among equal years.

    Entries sharing a numeric key but spelling the year differently (``n/a``
    and a missing year both sort last) are grouped by their displayed year in
    order of first appearance, so each year label forms one contiguous run.
    """
    groups: dict[tuple[int, str], int] = {}

    def _key(entry: BibliographyEntry) -> tuple[int, int]:
        numeric = year_sort_key(entry)
        group = groups.setdefault((numeric, entry.year), len(groups))
        return numeric, group

    return sorted(entries, key=_key)


__all__ = ["UNKNOWN_YEAR", "sort_by_year", "year_sort_key"]
