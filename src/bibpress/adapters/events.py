"""Translate object-store event payloads into source notifications."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import logging
from typing import Any
from urllib.parse import unquote_plus


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SourceNotification:
    """A single ``(bucket, key)`` pair announcing a new source object."""

    bucket: str
    key: str

    def __str__(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


def _records(event: Mapping[str, Any] | None) -> Iterable[Any]:
    if not event:
        return ()
    records = event.get("Records")
    if not isinstance(records, list):
        return ()
    return records


def parse_record(record: Any) -> SourceNotification | None:
    """Return the notification described by one S3 event record, or ``None``."""
    if not isinstance(record, Mapping):
        return None
    s3 = record.get("s3")
    if not isinstance(s3, Mapping):
        return None
    bucket = s3.get("bucket")
    obj = s3.get("object")
    if not isinstance(bucket, Mapping) or not isinstance(obj, Mapping):
        return None
    name = bucket.get("name")
    key = obj.get("key")
    if not isinstance(name, str) or not isinstance(key, str) or not name or not key:
        return None
    # S3 URL-encodes keys in notifications, spaces arrive as '+'.
    return SourceNotification(bucket=name, key=unquote_plus(key))


def parse_event(event: Mapping[str, Any] | None) -> list[SourceNotification]:
    """Extract notifications from an S3 event, skipping malformed records."""
    notifications: list[SourceNotification] = []
    for index, record in enumerate(_records(event)):
        notification = parse_record(record)
        if notification is None:
            logger.warning("Ignoring malformed event record #%d", index)
            continue
        notifications.append(notification)
    return notifications


__all__ = ["SourceNotification", "parse_event", "parse_record"]
