"""Parsing helpers turning BibTeX payloads into bibliography databases."""

from __future__ import annotations

import logging
from typing import Any

from pybtex.database.input import bibtex
from pybtex.database.input.bibtex import DuplicateField, UndefinedMacro
from pybtex.exceptions import PybtexError

from bibpress.core.exceptions import ParseError

from .filtering import decode_source
from .issues import BibliographyIssue
from .models import BibliographyDatabase, BibliographyEntry


logger = logging.getLogger(__name__)

DEFAULT_SOURCE_NAME = "<input>"


class _LastWinsParser(bibtex.Parser):
    """BibTeX parser that keeps names verbatim and lets repeated keys replace earlier ones.

    ``person_fields`` is emptied so ``author`` and ``editor`` stay literal field
    strings instead of being split into pybtex ``Person`` objects.
    """

    def __init__(self, source_name: str) -> None:
        super().__init__(person_fields=())
        self.filename = source_name
        self.issues: list[BibliographyIssue] = []
        self._current_key: str | None = None

    def process_entry(self, entry_type: str, key: str | None, fields: Any) -> None:
        self._current_key = key
        if key is not None and key in self.data.entries:
            self.issues.append(
                BibliographyIssue(
                    message=(
                        "Duplicate entry key; the later definition replaces the earlier one."
                    ),
                    key=key,
                    source=self.filename,
                )
            )
            del self.data.entries[key]
        super().process_entry(entry_type, key, fields)
        self._current_key = None

    def handle_error(self, error: Exception) -> None:
        if isinstance(error, DuplicateField):
            self.issues.append(
                BibliographyIssue(
                    message=f"{error}; keeping the first value.",
                    key=self._current_key,
                    source=self.filename,
                )
            )
            return
        if isinstance(error, UndefinedMacro):
            self.issues.append(
                BibliographyIssue(
                    message=f"Undefined macro '{error.args[0]}'; the value is left empty.",
                    key=self._current_key,
                    source=self.filename,
                    line=error.lineno,
                )
            )
            return
        raise error


def parse_database(
    source: bytes | str,
    *,
    source_name: str | None = None,
) -> BibliographyDatabase:
    """Parse a BibTeX payload into an ordered :class:`BibliographyDatabase`.

    The payload goes through the character filter first. Field values are the
    literal user-visible strings: delimiters removed, macros and ``#``
    concatenations expanded, cross-references left untouched.

    Raises:
        ParseError: when the payload is not a sequence of well-formed records.
    """
    name = source_name or DEFAULT_SOURCE_NAME
    text = decode_source(source)
    parser = _LastWinsParser(name)
    try:
        data = parser.parse_string(text)
    except PybtexError as exc:
        raise ParseError(
            f"Failed to parse bibliography '{name}': {exc}",
            line=getattr(exc, "lineno", None),
        ) from exc

    entries = [
        BibliographyEntry(
            key=entry.key or key,
            entry_type=entry.type,
            fields=dict(entry.fields.items()),
        )
        for key, entry in data.entries.items()
    ]
    for issue in parser.issues:
        logger.warning("%s: [%s] %s", name, issue.key or "-", issue.message)

    return BibliographyDatabase(entries, issues=parser.issues, source_name=source_name)


__all__ = ["DEFAULT_SOURCE_NAME", "parse_database"]
