"""Parse once, render every configured format, isolate renderer failures."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
import logging

from .bibliography import BibliographyDatabase, BibliographyEntry, parse_database, sort_by_year
from .config import PipelineConfig
from .diagnostics import DiagnosticEmitter, NullEmitter
from .exceptions import RenderError, exception_hint
from .rendering import DocumentFormat, RenderedDocument, render_document


logger = logging.getLogger(__name__)

DEFAULT_SOURCE_NAME = "bibliography.bib"


@dataclass(slots=True)
class PipelineResult:
    """Documents produced for one source, plus the formats that failed."""

    source_name: str
    database: BibliographyDatabase
    documents: dict[DocumentFormat, RenderedDocument] = field(default_factory=dict)
    failures: dict[DocumentFormat, RenderError] = field(default_factory=dict)

    @property
    def complete(self) -> bool:
        """Return ``True`` when no renderer failed."""
        return not self.failures

    def __getitem__(self, fmt: DocumentFormat | str) -> RenderedDocument:
        return self.documents[DocumentFormat.parse(fmt)]

    def __contains__(self, fmt: object) -> bool:
        if isinstance(fmt, (str, DocumentFormat)):
            try:
                return DocumentFormat.parse(fmt) in self.documents
            except ValueError:
                return False
        return False


class BibliographyPipeline:
    """Compose parsing, ordering and the renderers for one source payload."""

    def __init__(
        self,
        config: PipelineConfig | None = None,
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.config = config or PipelineConfig()
        self.emitter = emitter or NullEmitter()

    def process(
        self,
        source: bytes | str,
        *,
        source_name: str = DEFAULT_SOURCE_NAME,
    ) -> PipelineResult:
        """Parse *source* and render every configured format.

        ``ParseError`` propagates untouched so no partial output exists for a
        malformed source. A failing renderer is recorded in
        :attr:`PipelineResult.failures` and never withholds the other formats.
        """
        database = parse_database(source, source_name=source_name)
        self.emitter.event(
            "parse_completed",
            {"source": source_name, "entries": len(database), "issues": len(database.issues)},
        )
        result = PipelineResult(source_name=source_name, database=database)

        formats = self.config.ordered_formats()
        ordered = self._ordered_entries(database, formats)
        outcomes = self._render_all(formats, ordered, source_name)

        for fmt in formats:
            outcome = outcomes[fmt]
            if isinstance(outcome, RenderError):
                result.failures[fmt] = outcome
                self.emitter.event(
                    "render_failed",
                    {"format": fmt.value, "source": source_name, "reason": exception_hint(outcome)},
                )
                self.emitter.warning(str(outcome), outcome)
            else:
                result.documents[fmt] = outcome
        return result

    def entries_for(
        self, fmt: DocumentFormat, database: BibliographyDatabase
    ) -> Sequence[BibliographyEntry]:
        """Return the entry order used for *fmt*."""
        if fmt is DocumentFormat.HTML or self.config.sort_all_formats:
            return sort_by_year(database)
        return database.entries

    def _ordered_entries(
        self, database: BibliographyDatabase, formats: Sequence[DocumentFormat]
    ) -> Mapping[DocumentFormat, Sequence[BibliographyEntry]]:
        return {fmt: self.entries_for(fmt, database) for fmt in formats}

    def _render_all(
        self,
        formats: Sequence[DocumentFormat],
        ordered: Mapping[DocumentFormat, Sequence[BibliographyEntry]],
        source_name: str,
    ) -> dict[DocumentFormat, RenderedDocument | RenderError]:
        if not self.config.parallel_renderers or len(formats) < 2:
            return {fmt: _render_isolated(fmt, ordered[fmt], source_name) for fmt in formats}

        with ThreadPoolExecutor(
            max_workers=len(formats), thread_name_prefix="bibpress-render"
        ) as executor:
            futures: dict[DocumentFormat, Future[RenderedDocument | RenderError]] = {
                fmt: executor.submit(_render_isolated, fmt, ordered[fmt], source_name)
                for fmt in formats
            }
            return {fmt: future.result() for fmt, future in futures.items()}


def _render_isolated(
    fmt: DocumentFormat,
    entries: Sequence[BibliographyEntry],
    source_name: str,
) -> RenderedDocument | RenderError:
    logger.info("Creating %s START", fmt.value.upper())
    try:
        document = render_document(fmt, entries, source_name=source_name)
    except Exception as exc:  # noqa: BLE001
        logger.error("Creating %s FAILED: %s", fmt.value.upper(), exc)
        error = RenderError(f"Failed to render {fmt.value} for '{source_name}': {exc}", format=fmt)
        error.__cause__ = exc
        return error
    logger.info("Creating %s END (%d bytes)", fmt.value.upper(), len(document))
    return document


def process(
    source: bytes | str,
    *,
    source_name: str = DEFAULT_SOURCE_NAME,
    config: PipelineConfig | None = None,
) -> PipelineResult:
    """Run the default pipeline over *source*."""
    return BibliographyPipeline(config).process(source, source_name=source_name)


__all__ = ["DEFAULT_SOURCE_NAME", "BibliographyPipeline", "PipelineResult", "process"]
