"""Custom exception hierarchy for the bibliography conversion pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:  # pragma: no cover - typing only
    from bibpress.core.rendering.documents import DocumentFormat


class BibpressError(RuntimeError):
    """Base exception for bibliography conversion failures."""


class ConfigurationError(BibpressError):
    """Raised when the configuration file or environment is invalid."""


class FetchError(BibpressError):
    """Raised when a source object cannot be read from storage."""

    def __init__(self, message: str, *, bucket: str, key: str) -> None:
        super().__init__(message)
        self.bucket = bucket
        self.key = key


class ParseError(BibpressError):
    """Raised when a bibliography source is not a sequence of well-formed records."""

    def __init__(self, message: str, *, line: int | None = None) -> None:
        super().__init__(message)
        self.line = line


class RenderError(BibpressError):
    """Raised when a single output format fails to render."""

    def __init__(self, message: str, *, format: DocumentFormat) -> None:
        super().__init__(message)
        self.format = format


class UploadError(BibpressError):
    """Raised when the storage sink rejects a rendered document."""

    def __init__(self, message: str, *, bucket: str, key: str) -> None:
        super().__init__(message)
        self.bucket = bucket
        self.key = key


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "BibpressError",
    "ConfigurationError",
    "FetchError",
    "ParseError",
    "RenderError",
    "UploadError",
    "exception_hint",
    "exception_messages",
]
