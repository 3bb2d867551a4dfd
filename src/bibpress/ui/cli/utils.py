"""Utility helpers shared by CLI commands."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

from bibpress.core.config import PipelineConfig, load_config
from bibpress.core.exceptions import ConfigurationError


def resolve_config(config_path: Path | None = None, **overrides: Any) -> PipelineConfig:
    """Load the configuration and apply command-line overrides.

    Overrides set to ``None`` are ignored so unset flags keep the file or
    environment value.
    """
    config = load_config(config_path)
    updates = {name: value for name, value in overrides.items() if value is not None}
    if not updates:
        return config
    data = config.model_dump()
    data.update(updates)
    try:
        return PipelineConfig.model_validate(data)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid command-line options: {exc}") from exc


def normalise_formats(values: Iterable[str] | None) -> list[str] | None:
    """Split comma-separated ``--format`` values, returning ``None`` when empty."""
    if not values:
        return None
    formats = [item.strip() for value in values for item in value.split(",") if item.strip()]
    return formats or None


def write_output_file(target: Path, payload: bytes) -> None:
    """Persist a rendered document to disk, creating parent directories as needed."""
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(payload)
    except OSError as exc:
        raise OSError(f"Failed to write output to '{target}': {exc}") from exc


__all__ = ["normalise_formats", "resolve_config", "write_output_file"]
