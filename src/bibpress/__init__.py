"""Primary public API for bibpress."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _pkg_version

from bibpress.core.bibliography import (
    BibliographyDatabase,
    BibliographyEntry,
    BibliographyIssue,
    parse_database,
    sort_by_year,
)
from bibpress.core.config import PipelineConfig, load_config
from bibpress.core.exceptions import (
    BibpressError,
    ConfigurationError,
    FetchError,
    ParseError,
    RenderError,
    UploadError,
)
from bibpress.core.pipeline import BibliographyPipeline, PipelineResult, process
from bibpress.core.rendering import (
    DocumentFormat,
    RenderedDocument,
    render_html,
    render_markdown,
    render_pdf,
)


try:
    __version__ = _pkg_version("bibpress")
except PackageNotFoundError:
    __version__ = "0.0.0"


__all__ = [
    "BibliographyDatabase",
    "BibliographyEntry",
    "BibliographyIssue",
    "BibliographyPipeline",
    "BibpressError",
    "ConfigurationError",
    "DocumentFormat",
    "FetchError",
    "ParseError",
    "PipelineConfig",
    "PipelineResult",
    "RenderError",
    "RenderedDocument",
    "UploadError",
    "__version__",
    "load_config",
    "parse_database",
    "process",
    "render_html",
    "render_markdown",
    "render_pdf",
    "sort_by_year",
]
