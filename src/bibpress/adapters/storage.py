"""Object storage collaborators used to fetch sources and upload documents."""

from __future__ import annotations

import logging
from pathlib import Path
from threading import Lock
from typing import Any, Protocol, runtime_checkable

import boto3
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError

from bibpress.core.exceptions import FetchError, UploadError


logger = logging.getLogger(__name__)


@runtime_checkable
class ObjectStore(Protocol):
    """Minimal object-store contract consumed by the invocation handler."""

    def fetch(self, bucket: str, key: str) -> bytes: ...

    def upload(
        self,
        bucket: str,
        key: str,
        payload: bytes,
        *,
        content_type: str | None = None,
    ) -> None: ...


class S3ObjectStore:
    """Amazon S3 backed store with a lazily created, shared client."""

    def __init__(self, client: BaseClient | None = None, *, region: str | None = None) -> None:
        self._client_lock = Lock()
        self._client: BaseClient | None = client
        self._region = region

    def fetch(self, bucket: str, key: str) -> bytes:
        """Return the complete body of ``s3://bucket/key``."""
        client = self._ensure_client()
        try:
            response = client.get_object(Bucket=bucket, Key=key)
            body = response["Body"]
            try:
                return body.read()
            finally:
                body.close()
        except (BotoCoreError, ClientError) as exc:
            raise FetchError(
                f"Unable to fetch s3://{bucket}/{key}: {exc}", bucket=bucket, key=key
            ) from exc

    def upload(
        self,
        bucket: str,
        key: str,
        payload: bytes,
        *,
        content_type: str | None = None,
    ) -> None:
        """Write *payload* to ``s3://bucket/key``."""
        client = self._ensure_client()
        extra: dict[str, Any] = {}
        if content_type:
            extra["ContentType"] = content_type
        try:
            client.put_object(Bucket=bucket, Key=key, Body=payload, **extra)
        except (BotoCoreError, ClientError) as exc:
            raise UploadError(
                f"Unable to upload s3://{bucket}/{key}: {exc}", bucket=bucket, key=key
            ) from exc

    def _ensure_client(self) -> BaseClient:
        if self._client is not None:
            return self._client
        with self._client_lock:
            if self._client is None:
                logger.debug("Creating S3 client (region=%s)", self._region or "default")
                self._client = boto3.client("s3", region_name=self._region)
            return self._client


class LocalObjectStore:
    """Filesystem store where each bucket is a directory below ``root``."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def path_for(self, bucket: str, key: str) -> Path:
        bucket_dir = (self.root / bucket).resolve()
        target = (bucket_dir / key).resolve()
        if bucket_dir != target and bucket_dir not in target.parents:
            raise ValueError(f"Key '{key}' escapes bucket '{bucket}'.")
        return target

    def fetch(self, bucket: str, key: str) -> bytes:
        try:
            return self.path_for(bucket, key).read_bytes()
        except (OSError, ValueError) as exc:
            raise FetchError(
                f"Unable to fetch {bucket}/{key}: {exc}", bucket=bucket, key=key
            ) from exc

    def upload(
        self,
        bucket: str,
        key: str,
        payload: bytes,
        *,
        content_type: str | None = None,
    ) -> None:
        try:
            target = self.path_for(bucket, key)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(payload)
        except (OSError, ValueError) as exc:
            raise UploadError(
                f"Unable to upload {bucket}/{key}: {exc}", bucket=bucket, key=key
            ) from exc


__all__ = ["LocalObjectStore", "ObjectStore", "S3ObjectStore"]
