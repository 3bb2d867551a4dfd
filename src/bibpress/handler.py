"""Invocation handler wiring object-store events to the conversion pipeline.

Each notification of a batch is handled on its own: a fetch or parse failure
for one source never prevents the next source from being attempted, and an
upload failure never rolls back documents already written for the same source.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
import logging
from threading import Lock
from typing import Any

from bibpress.adapters.events import SourceNotification, parse_event
from bibpress.adapters.storage import ObjectStore, S3ObjectStore
from bibpress.core.config import PipelineConfig, load_config
from bibpress.core.diagnostics import DiagnosticEmitter, LoggingEmitter
from bibpress.core.exceptions import FetchError, ParseError, RenderError, UploadError
from bibpress.core.log import configure_logging
from bibpress.core.pipeline import BibliographyPipeline
from bibpress.core.rendering import DocumentFormat, derive_output_name


logger = logging.getLogger(__name__)


class SourceStatus(str, Enum):
    PROCESSED = "processed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(slots=True)
class SourceOutcome:
    """What happened to one notification."""

    notification: SourceNotification
    status: SourceStatus
    uploaded: list[str] = field(default_factory=list)
    render_failures: dict[DocumentFormat, RenderError] = field(default_factory=dict)
    upload_failures: list[UploadError] = field(default_factory=list)
    error: FetchError | ParseError | None = None

    @property
    def fatal(self) -> bool:
        """Return whether the outcome fails the invocation."""
        return self.status is SourceStatus.FAILED or bool(self.upload_failures)


@dataclass(slots=True)
class InvocationReport:
    """Aggregated outcomes for one batch of notifications."""

    outcomes: list[SourceOutcome] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is SourceStatus.PROCESSED)

    @property
    def partial(self) -> bool:
        """Return whether any source lost a format to a renderer failure."""
        return any(outcome.render_failures for outcome in self.outcomes)

    @property
    def succeeded(self) -> bool:
        """Non-empty batch with no fetch, parse or upload failure."""
        return bool(self.outcomes) and not any(outcome.fatal for outcome in self.outcomes)


def derive_output_key(source_key: str, fmt: DocumentFormat, *, prefix: str = "") -> str:
    """Return the storage key of the *fmt* document rendered from *source_key*."""
    return f"{prefix}{derive_output_name(source_key, fmt)}"


class InvocationHandler:
    """Fetch, convert and upload every source announced in a batch."""

    def __init__(
        self,
        store: ObjectStore,
        *,
        config: PipelineConfig | None = None,
        pipeline: BibliographyPipeline | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.store = store
        self.config = config or PipelineConfig()
        self.emitter = emitter or LoggingEmitter()
        self.pipeline = pipeline or BibliographyPipeline(self.config, emitter=self.emitter)

    def handle(self, notifications: Sequence[SourceNotification]) -> InvocationReport:
        report = InvocationReport()
        if not notifications:
            logger.info("No records found")
            return report
        for notification in notifications:
            report.outcomes.append(self._handle_one(notification))
        logger.info(
            "Processed %d of %d source(s)%s",
            report.processed,
            len(report.outcomes),
            " with partial output" if report.partial else "",
        )
        return report

    def _handle_one(self, notification: SourceNotification) -> SourceOutcome:
        bucket, key = notification.bucket, notification.key
        logger.info('Bucket: "%s", Key: "%s"', bucket, key)

        if not self.config.accepts(key):
            self.emitter.event("source_skipped", {"bucket": bucket, "key": key})
            return SourceOutcome(notification, SourceStatus.SKIPPED)

        try:
            payload = self.store.fetch(bucket, key)
            result = self.pipeline.process(payload, source_name=key)
        except (FetchError, ParseError) as exc:
            self.emitter.error(f"Failed to process {notification}: {exc}", exc)
            return SourceOutcome(notification, SourceStatus.FAILED, error=exc)

        outcome = SourceOutcome(
            notification,
            SourceStatus.PROCESSED,
            render_failures=dict(result.failures),
        )
        target_bucket = self.config.output_bucket or bucket
        for fmt, document in result.documents.items():
            target_key = derive_output_key(key, fmt, prefix=self.config.output_prefix)
            try:
                self.store.upload(
                    target_bucket,
                    target_key,
                    document.payload,
                    content_type=document.content_type,
                )
            except UploadError as exc:
                self.emitter.error(str(exc), exc)
                outcome.upload_failures.append(exc)
                continue
            outcome.uploaded.append(target_key)
            self.emitter.event(
                "document_uploaded",
                {"bucket": target_bucket, "key": target_key, "size": len(document)},
            )
        return outcome


_STORE: S3ObjectStore | None = None
_STORE_LOCK = Lock()


def _default_store(config: PipelineConfig) -> S3ObjectStore:
    global _STORE
    with _STORE_LOCK:
        if _STORE is None:
            _STORE = S3ObjectStore(region=config.region)
        return _STORE


def lambda_handler(event: Mapping[str, Any] | None, context: Any = None) -> bool:
    """AWS Lambda entry point for S3 ``ObjectCreated`` notifications."""
    config = load_config()
    configure_logging(config.log_level)

    notifications = parse_event(event)
    if not notifications:
        logger.info("No records found")
        return False

    handler = InvocationHandler(_default_store(config), config=config)
    report = handler.handle(notifications)
    return report.succeeded


__all__ = [
    "InvocationHandler",
    "InvocationReport",
    "SourceOutcome",
    "SourceStatus",
    "derive_output_key",
    "lambda_handler",
]
