"""CLI command implementations exposed via `bibpress.ui.cli`."""

from __future__ import annotations

from .inspect import inspect
from .invoke import invoke
from .render import render


__all__ = ["inspect", "invoke", "render"]
