"""Output formats and rendered document containers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath


class DocumentFormat(str, Enum):
    """Output formats produced for every bibliography source."""

    HTML = "html"
    MARKDOWN = "markdown"
    PDF = "pdf"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]

    @property
    def content_type(self) -> str:
        return _CONTENT_TYPES[self]

    @classmethod
    def parse(cls, value: str | DocumentFormat) -> DocumentFormat:
        """Resolve a format from its name or file extension."""
        if isinstance(value, DocumentFormat):
            return value
        candidate = value.strip().lower().lstrip(".")
        for member in cls:
            if candidate in (member.value, member.extension):
                return member
        choices = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown document format '{value}' (expected one of: {choices}).")


_EXTENSIONS = {
    DocumentFormat.HTML: "html",
    DocumentFormat.MARKDOWN: "md",
    DocumentFormat.PDF: "pdf",
}

_CONTENT_TYPES = {
    DocumentFormat.HTML: "text/html; charset=utf-8",
    DocumentFormat.MARKDOWN: "text/markdown; charset=utf-8",
    DocumentFormat.PDF: "application/pdf",
}


def strip_extension(name: str) -> str:
    """Remove the extension of the last path segment of *name*."""
    suffix = PurePosixPath(name).suffix
    return name[: -len(suffix)] if suffix else name


def derive_output_name(source_name: str, fmt: DocumentFormat) -> str:
    """Return ``<source-name-without-extension>.<format-extension>``."""
    return f"{strip_extension(source_name)}.{fmt.extension}"


@dataclass(frozen=True, slots=True)
class RenderedDocument:
    """Immutable rendering result handed to the upload collaborator."""

    format: DocumentFormat
    payload: bytes
    name: str

    @property
    def content_type(self) -> str:
        return self.format.content_type

    def __len__(self) -> int:
        return len(self.payload)


__all__ = [
    "DocumentFormat",
    "RenderedDocument",
    "derive_output_name",
    "strip_extension",
]
