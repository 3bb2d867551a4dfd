"""Implementation of the ``bibpress render`` command."""

from __future__ import annotations

from click.core import ParameterSource
import typer

from bibpress.core.exceptions import ConfigurationError, ParseError, exception_hint
from bibpress.core.pipeline import BibliographyPipeline

from .._options import (
    ConfigOption,
    FormatOption,
    OutputDirOption,
    SequentialOption,
    SortAllOption,
    SourceArgument,
)
from ..diagnostics import CliEmitter
from ..presenter import present_render_summary
from ..state import emit_error, get_cli_state
from ..utils import normalise_formats, resolve_config, write_output_file


def render(
    ctx: typer.Context,
    source: SourceArgument,
    output_dir: OutputDirOption = None,
    formats: FormatOption = None,
    sort_all: SortAllOption = False,
    sequential: SequentialOption = False,
    config_path: ConfigOption = None,
) -> None:
    """Convert a BibTeX file into HTML, Markdown and PDF documents."""
    state = get_cli_state(ctx)
    sort_all_override = (
        None
        if ctx.get_parameter_source("sort_all") in {None, ParameterSource.DEFAULT}
        else sort_all
    )
    try:
        config = resolve_config(
            config_path,
            formats=normalise_formats(formats),
            sort_all_formats=sort_all_override,
            parallel_renderers=False if sequential else None,
        )
    except ConfigurationError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    pipeline = BibliographyPipeline(config, emitter=CliEmitter(state))
    try:
        result = pipeline.process(source.read_bytes(), source_name=source.name)
    except ParseError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    target_dir = output_dir or source.parent
    rows = []
    for fmt, document in result.documents.items():
        target = target_dir / document.name
        try:
            write_output_file(target, document.payload)
        except OSError as exc:
            emit_error(str(exc), exception=exc)
            raise typer.Exit(code=1) from exc
        rows.append((fmt.value, target, len(document)))

    failures = [
        (fmt.value, exception_hint(error) or str(error)) for fmt, error in result.failures.items()
    ]
    present_render_summary(state, rows, failures)


__all__ = ["render"]
