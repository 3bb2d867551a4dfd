"""Typer application wiring for the bibpress CLI."""

from __future__ import annotations

import typer

from .commands import inspect, invoke, render
from .state import debug_enabled, emit_error, get_cli_state, set_cli_state


app = typer.Typer(
    help="Convert BibTeX bibliographies into HTML, Markdown and PDF documents.",
    context_settings={"help_option_names": ["--help"]},
    no_args_is_help=True,
)


@app.callback()
def configure(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase diagnostic output (repeat for more detail).",
    ),
    debug: bool = typer.Option(
        False,
        "--debug/--no-debug",
        help="Show full tracebacks on unexpected errors.",
    ),
) -> None:
    """Apply global diagnostic settings."""
    set_cli_state(ctx=ctx, verbosity=verbose, debug=debug)


app.command()(render)
app.command()(inspect)
app.command()(invoke)


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - catch-all for the console script
        state = get_cli_state()
        if state.show_tracebacks:
            from rich.traceback import Traceback

            tb = Traceback.from_exception(
                type(exc),
                exc,
                exc.__traceback__,
                show_locals=state.verbosity >= 2,
            )
            state.err_console.print(tb)
        else:
            emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
