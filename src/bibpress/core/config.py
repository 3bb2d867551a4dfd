"""Configuration model for the conversion pipeline and invocation handler.

PipelineConfig

`region` (`str | None`)
: AWS region used for the S3 client. When omitted, boto3 resolves the region
  through its default chain (environment, shared config, instance metadata).

`output_bucket` (`str | None`)
: Bucket receiving the rendered documents. Defaults to the bucket the source
  notification came from.

`output_prefix` (`str`)
: Prefix prepended to every derived output key, e.g. `rendered/`.

`source_suffixes` (`list[str]`)
: Key suffixes treated as bibliography sources. Notifications for other keys
  are skipped, which also stops generated documents from re-triggering the
  handler when input and output share a bucket.

`formats` (`list[DocumentFormat]`)
: Output formats to produce, in any order. Defaults to all of them.

`parallel_renderers` (`bool`)
: Render the formats concurrently on a thread pool.

`sort_all_formats` (`bool`)
: Apply the year ordering to the Markdown and PDF outputs as well. By default
  only the HTML document is ordered by year; the other two keep parse order.

`log_level` (`str`)
: Level applied to the root logger by the Lambda entry point.

Environment overrides use the `BIBPRESS_` prefix (`BIBPRESS_OUTPUT_BUCKET`,
`BIBPRESS_FORMATS=html,pdf`, ...). `BIBPRESS_CONFIG` points to a YAML file
loaded before the overrides are applied.
"""

from __future__ import annotations

from collections.abc import Mapping
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from .exceptions import ConfigurationError
from .rendering.documents import DocumentFormat


ENV_PREFIX = "BIBPRESS_"
CONFIG_ENV_VAR = f"{ENV_PREFIX}CONFIG"

_LIST_FIELDS = {"source_suffixes", "formats"}


class PipelineConfig(BaseModel):
    """Settings shared by the pipeline, the Lambda handler and the CLI."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    region: str | None = None
    output_bucket: str | None = None
    output_prefix: str = ""
    source_suffixes: list[str] = Field(default_factory=lambda: [".bib"])
    formats: list[DocumentFormat] = Field(default_factory=lambda: list(DocumentFormat))
    parallel_renderers: bool = True
    sort_all_formats: bool = False
    log_level: str = "INFO"

    @field_validator("formats", mode="before")
    @classmethod
    def _coerce_formats(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = [value]
        if isinstance(value, (list, tuple)):
            resolved: list[DocumentFormat] = []
            for item in value:
                fmt = DocumentFormat.parse(item) if isinstance(item, str) else item
                if fmt not in resolved:
                    resolved.append(fmt)
            if not resolved:
                raise ValueError("At least one output format is required.")
            return resolved
        return value

    @field_validator("source_suffixes")
    @classmethod
    def _normalise_suffixes(cls, value: list[str]) -> list[str]:
        suffixes = [item.strip().lower() for item in value if item.strip()]
        if not suffixes:
            raise ValueError("At least one source suffix is required.")
        return suffixes

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.strip().upper() or "INFO"

    def ordered_formats(self) -> list[DocumentFormat]:
        """Return the configured formats in canonical order."""
        return [fmt for fmt in DocumentFormat if fmt in self.formats]

    def accepts(self, key: str) -> bool:
        """Return whether *key* names a bibliography source.

        The file name must have a stem, so dotfiles such as ``.bib`` are refused.
        """
        name = key.rsplit("/", 1)[-1].lower()
        return any(
            name.endswith(suffix) and len(name) > len(suffix) for suffix in self.source_suffixes
        )


def _environment_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for name in PipelineConfig.model_fields:
        raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is None:
            continue
        if name in _LIST_FIELDS:
            overrides[name] = [item.strip() for item in raw.split(",") if item.strip()]
        else:
            overrides[name] = raw
    return overrides


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigurationError(f"Unable to read configuration file '{path}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in configuration file '{path}': {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigurationError(f"Configuration file '{path}' must contain a mapping.")
    return payload


def load_config(
    path: Path | str | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> PipelineConfig:
    """Build a :class:`PipelineConfig` from an optional YAML file and the environment."""
    env = os.environ if environ is None else environ
    if path is None and env.get(CONFIG_ENV_VAR):
        path = env[CONFIG_ENV_VAR]

    data: dict[str, Any] = {}
    if path is not None:
        data.update(_read_yaml(Path(path)))
    data.update(_environment_overrides(env))

    try:
        return PipelineConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc


__all__ = ["CONFIG_ENV_VAR", "ENV_PREFIX", "PipelineConfig", "load_config"]
