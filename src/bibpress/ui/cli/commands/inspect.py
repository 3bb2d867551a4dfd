"""Implementation of the ``bibpress inspect`` command."""

from __future__ import annotations

import typer

from bibpress.core.bibliography import parse_database
from bibpress.core.exceptions import ParseError

from .._options import SourceArgument
from ..bibliography import print_bibliography_overview
from ..state import emit_error


def inspect(source: SourceArgument) -> None:
    """Show the entries of a BibTeX file in year order."""
    try:
        database = parse_database(source.read_bytes(), source_name=source.name)
    except ParseError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc
    print_bibliography_overview(database)


__all__ = ["inspect"]
