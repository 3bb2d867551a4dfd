"""Paginated PDF document with one hyperlinked paragraph per entry."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from functools import cache
import re

import pymupdf

from bibpress.core.bibliography import BibliographyEntry, EntryProjection, project_entry


PAGE_WIDTH, PAGE_HEIGHT = 595, 842  # A4 in points
MARGIN = 36
FONT_NAME = "cour"
FONT_SIZE = 12
LEADING = 18
TEXT_COLOR = (0, 0, 0)
LINK_COLOR = (0, 0, 1)

_TOKEN = re.compile(r"\S+\s*|\s+")


@dataclass(frozen=True, slots=True)
class Run:
    """A span of text sharing one style; ``uri`` marks a hyperlink run."""

    text: str
    uri: str | None = None

    @property
    def is_link(self) -> bool:
        return self.uri is not None


def paragraph_runs(number: int, projection: EntryProjection) -> list[Run]:
    """Return the monospaced/link/monospaced runs of one entry paragraph."""
    author, title, url, year = projection
    return [Run(f"{number}. {author} "), Run(title, uri=url), Run(f" {year}")]


@cache
def _font() -> pymupdf.Font:
    # Glyphs missing from Courier are taken from MuPDF's fallback fonts.
    return pymupdf.Font(FONT_NAME)


def _measure(text: str) -> float:
    return _font().text_length(text, fontsize=FONT_SIZE)


def _escape_uri(uri: str) -> str:
    # Link annotations embed the target as a literal PDF string.
    return uri.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def _split_to_width(fragment: str, width: float) -> Iterator[str]:
    """Hard-break a fragment wider than a full line."""
    chunk = ""
    for char in fragment:
        if chunk and _measure(chunk + char) > width:
            yield chunk
            chunk = ""
        chunk += char
    if chunk:
        yield chunk


@dataclass(slots=True)
class _LinkSpan:
    """Horizontal extent of one link run on the current line."""

    run: Run
    x0: float
    x1: float


class _PageLayout:
    """Flow paragraphs top to bottom, starting new pages at the bottom margin.

    Text is collected per colour in :class:`pymupdf.TextWriter` objects and
    written when the page is finished. Adjacent fragments of one link run on
    the same line share a single link annotation.
    """

    def __init__(self, document: pymupdf.Document) -> None:
        self._document = document
        self._line_width = PAGE_WIDTH - 2 * MARGIN
        self._page: pymupdf.Page | None = None
        self._writers: dict[tuple[int, int, int], pymupdf.TextWriter] = {}
        self._link: _LinkSpan | None = None
        self._x = float(MARGIN)
        self._y = 0.0
        self._new_page()

    def _new_page(self) -> None:
        self._page = self._document.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
        self._y = float(MARGIN + FONT_SIZE)

    def _finish_page(self) -> None:
        if self._page is None:
            return
        for color, writer in self._writers.items():
            writer.write_text(self._page, color=color)
        self._writers.clear()
        self._page = None

    def _writer(self, color: tuple[int, int, int]) -> pymupdf.TextWriter:
        assert self._page is not None
        writer = self._writers.get(color)
        if writer is None:
            writer = self._writers[color] = pymupdf.TextWriter(self._page.rect)
        return writer

    def _flush_link(self) -> None:
        span, self._link = self._link, None
        if span is None or self._page is None:
            return
        self._page.draw_line(
            (span.x0, self._y + 1.5),
            (span.x1, self._y + 1.5),
            color=LINK_COLOR,
            width=0.5,
        )
        area = pymupdf.Rect(span.x0, self._y - FONT_SIZE, span.x1, self._y + FONT_SIZE * 0.3)
        self._page.insert_link(
            {"kind": pymupdf.LINK_URI, "from": area, "uri": _escape_uri(span.run.uri or "")}
        )

    def _extend_link(self, run: Run, x0: float, x1: float) -> None:
        if self._link is not None and self._link.run is run:
            self._link.x1 = x1
            return
        self._flush_link()
        self._link = _LinkSpan(run, x0, x1)

    def _new_line(self) -> None:
        self._flush_link()
        self._x = float(MARGIN)
        self._y += LEADING
        if self._y > PAGE_HEIGHT - MARGIN:
            # The next page is opened lazily by _draw.
            self._finish_page()

    def _fragments(self, run: Run) -> Iterator[str]:
        for token in _TOKEN.findall(run.text):
            if _measure(token.rstrip()) > self._line_width:
                yield from _split_to_width(token, self._line_width)
            else:
                yield token

    def _draw(self, fragment: str, run: Run) -> None:
        if self._page is None:
            self._new_page()
        visible = fragment.rstrip()
        if visible:
            color = LINK_COLOR if run.is_link else TEXT_COLOR
            self._writer(color).append(
                (self._x, self._y), visible, font=_font(), fontsize=FONT_SIZE
            )
            if run.is_link:
                self._extend_link(run, self._x, self._x + _measure(visible))
            else:
                self._flush_link()
        self._x += _measure(fragment)

    def write_paragraph(self, runs: Sequence[Run]) -> None:
        right_edge = MARGIN + self._line_width
        for run in runs:
            for fragment in self._fragments(run):
                if self._x > MARGIN and self._x + _measure(fragment.rstrip()) > right_edge:
                    self._new_line()
                if self._x == MARGIN and not fragment.strip():
                    continue
                self._draw(fragment, run)
        self._new_line()

    def close(self) -> None:
        self._flush_link()
        self._finish_page()


def render_pdf(entries: Sequence[BibliographyEntry]) -> bytes:
    """Render *entries* in the given order and return the finished PDF bytes.

    The document is closed before the bytes are returned. Metadata and the
    file identifier are left out so identical input yields identical output.
    """
    with pymupdf.open() as document:
        layout = _PageLayout(document)
        for number, entry in enumerate(entries, start=1):
            layout.write_paragraph(paragraph_runs(number, project_entry(entry, missing_year="")))
        layout.close()
        document.set_metadata({})
        payload = document.tobytes(garbage=3, deflate=True, no_new_id=True)
    return payload


__all__ = ["Run", "paragraph_runs", "render_pdf"]
