"""Implementation of the ``bibpress invoke`` command.

Replays an S3 notification event against a directory tree so the handler can
be exercised without AWS credentials.
"""

from __future__ import annotations

import json

import typer

from bibpress.adapters.events import parse_event
from bibpress.adapters.storage import LocalObjectStore
from bibpress.core.exceptions import ConfigurationError
from bibpress.handler import InvocationHandler

from .._options import ConfigOption, EventArgument, StoreRootOption
from ..diagnostics import CliEmitter
from ..presenter import present_invocation_report
from ..state import emit_error, emit_warning, get_cli_state
from ..utils import resolve_config


def invoke(
    event_path: EventArgument,
    store_root: StoreRootOption,
    config_path: ConfigOption = None,
) -> None:
    """Run the invocation handler on a recorded event using a local store."""
    state = get_cli_state()
    try:
        event = json.loads(event_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        emit_error(f"Unable to read event '{event_path}': {exc}", exception=exc)
        raise typer.Exit(code=1) from exc
    if not isinstance(event, dict):
        emit_error(f"Event '{event_path}' must contain a JSON object.")
        raise typer.Exit(code=1)

    try:
        config = resolve_config(config_path)
    except ConfigurationError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    notifications = parse_event(event)
    if not notifications:
        emit_warning("No records found")
        raise typer.Exit(code=1)

    handler = InvocationHandler(
        LocalObjectStore(store_root),
        config=config,
        emitter=CliEmitter(state),
    )
    report = handler.handle(notifications)
    present_invocation_report(state, report)
    if not report.succeeded:
        raise typer.Exit(code=1)


__all__ = ["invoke"]
