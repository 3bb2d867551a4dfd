"""Bibliography facade exposed through the bibpress public API.

Architecture
: `parse_database` runs the character filter over the raw payload and hands
  the text to pybtex's BibTeX parser. The result is a `BibliographyDatabase`,
  an immutable, ordered collection of `BibliographyEntry` records that the
  renderers share without copying.
: `BibliographyEntry` exposes typed accessors (`author`, `title`, `url`,
  `year`) with explicit defaults so renderers never deal with missing keys.
  `project_entry` reduces an entry to the `(author, title, url, year)` tuple
  every output format displays.
: `sort_by_year` is the ordering policy applied before the linked-list
  rendering: ascending numeric years, unknown years last, stable otherwise.

Usage Example

```pycon
>>> from bibpress.core.bibliography import parse_database, sort_by_year
>>> payload = b\"\"\"@article{late, title = {Later}, year = {2021}}
... @article{early, title = {Earlier}, year = {1999}}\"\"\"
>>> database = parse_database(payload, source_name="demo.bib")
>>> [entry.key for entry in sort_by_year(database)]
['early', 'late']
>>> database.find("late").title
'Later'
```
"""

from __future__ import annotations

from .filtering import decode_source, filter_characters
from .issues import BibliographyIssue
from .models import (
    MISSING_YEAR,
    BibliographyDatabase,
    BibliographyEntry,
    EntryProjection,
    project_entry,
)
from .ordering import UNKNOWN_YEAR, sort_by_year, year_sort_key
from .parsing import parse_database


__all__ = [
    "MISSING_YEAR",
    "UNKNOWN_YEAR",
    "BibliographyDatabase",
    "BibliographyEntry",
    "BibliographyIssue",
    "EntryProjection",
    "decode_source",
    "filter_characters",
    "parse_database",
    "project_entry",
    "sort_by_year",
    "year_sort_key",
]
