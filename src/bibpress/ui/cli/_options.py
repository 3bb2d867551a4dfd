"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
RENDERING_PANEL = "Rendering"
OUTPUT_PANEL = "Output"

SourceArgument = Annotated[
    Path,
    typer.Argument(
        metavar="SOURCE",
        help="BibTeX source file (.bib).",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        help="YAML configuration file. Defaults to $BIBPRESS_CONFIG when set.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

OutputDirOption = Annotated[
    Path | None,
    typer.Option(
        "--output-dir",
        "-o",
        help="Directory receiving the rendered documents (defaults to the source directory).",
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

FormatOption = Annotated[
    list[str] | None,
    typer.Option(
        "--format",
        "-f",
        help="Output format to produce (html, markdown, pdf). Repeat to select several.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

SortAllOption = Annotated[
    bool,
    typer.Option(
        "--sort-all/--no-sort-all",
        help="Order the Markdown and PDF documents by year as well.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

SequentialOption = Annotated[
    bool,
    typer.Option(
        "--sequential",
        help="Run the renderers one after the other instead of on a thread pool.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

EventArgument = Annotated[
    Path,
    typer.Argument(
        metavar="EVENT",
        help="JSON file holding an S3 notification event.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

StoreRootOption = Annotated[
    Path,
    typer.Option(
        "--store-root",
        help="Directory standing in for the object store; each bucket is a subdirectory.",
        file_okay=False,
        dir_okay=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]


__all__ = [
    "INPUTS_PANEL",
    "OUTPUT_PANEL",
    "RENDERING_PANEL",
    "ConfigOption",
    "EventArgument",
    "FormatOption",
    "OutputDirOption",
    "SequentialOption",
    "SortAllOption",
    "SourceArgument",
    "StoreRootOption",
]
