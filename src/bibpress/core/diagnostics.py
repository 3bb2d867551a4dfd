"""Diagnostic abstractions shared across the conversion pipeline."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Interface used to surface warnings, errors, and structured events."""

    debug_enabled: bool

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullEmitter:
    """Emitter that ignores every diagnostic."""

    debug_enabled: bool = False

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        return


class LoggingEmitter:
    """Emitter that forwards diagnostics to the standard logging module."""

    def __init__(
        self, *, logger_obj: logging.Logger | None = None, debug_enabled: bool = False
    ) -> None:
        self._logger = logger_obj or logger
        self.debug_enabled = debug_enabled

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None and self.debug_enabled:
            self._logger.warning(message, exc_info=exc)
        else:
            self._logger.warning(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.error(message, exc_info=exc)
        else:
            self._logger.error(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            self._logger.info(message)
            return
        self._logger.debug("diagnostic event %s: %s", name, dict(payload))


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a human-friendly summary for selected diagnostic events."""
    data = dict(payload)

    if name == "parse_completed":
        source = data.get("source") or "<unknown>"
        count = data.get("entries", 0)
        issues = data.get("issues") or 0
        suffix = f" ({issues} issue{'s' if issues != 1 else ''})" if issues else ""
        return f"Parsed {count} entr{'y' if count == 1 else 'ies'} from {source}{suffix}"

    if name == "render_failed":
        fmt = data.get("format") or "<unknown>"
        source = data.get("source") or "<unknown>"
        reason = data.get("reason")
        detail = f": {reason}" if reason else ""
        return f"Rendering {fmt} for {source} failed{detail}"

    if name == "document_uploaded":
        bucket = data.get("bucket") or "<unknown>"
        key = data.get("key") or "<unknown>"
        size = data.get("size")
        suffix = f" ({size} bytes)" if size is not None else ""
        return f"Uploaded s3://{bucket}/{key}{suffix}"

    if name == "source_skipped":
        key = data.get("key") or "<unknown>"
        return f"Skipping {key}: not a bibliography source"

    return None


__all__ = [
    "DiagnosticEmitter",
    "LoggingEmitter",
    "NullEmitter",
    "format_event_message",
]
