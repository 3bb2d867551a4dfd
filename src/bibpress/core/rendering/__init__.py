"""Output renderers keyed by document format."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from bibpress.core.bibliography import BibliographyEntry

from .documents import DocumentFormat, RenderedDocument, derive_output_name, strip_extension
from .html import render_html
from .markdown import render_markdown
from .pdf import render_pdf


Renderer = Callable[[Sequence[BibliographyEntry], str], bytes]


def _html(entries: Sequence[BibliographyEntry], source_name: str) -> bytes:
    return render_html(entries, title=strip_extension(source_name))


def _markdown(entries: Sequence[BibliographyEntry], source_name: str) -> bytes:
    return render_markdown(entries)


def _pdf(entries: Sequence[BibliographyEntry], source_name: str) -> bytes:
    return render_pdf(entries)


RENDERERS: dict[DocumentFormat, Renderer] = {
    DocumentFormat.HTML: _html,
    DocumentFormat.MARKDOWN: _markdown,
    DocumentFormat.PDF: _pdf,
}


def render_document(
    fmt: DocumentFormat,
    entries: Sequence[BibliographyEntry],
    *,
    source_name: str,
) -> RenderedDocument:
    """Render *entries* with the renderer registered for *fmt*."""
    payload = RENDERERS[fmt](entries, source_name)
    return RenderedDocument(
        format=fmt,
        payload=payload,
        name=derive_output_name(source_name, fmt),
    )


__all__ = [
    "RENDERERS",
    "DocumentFormat",
    "RenderedDocument",
    "Renderer",
    "derive_output_name",
    "render_document",
    "render_html",
    "render_markdown",
    "render_pdf",
    "strip_extension",
]
