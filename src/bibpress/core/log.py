"""Logging setup shared by the Lambda entry point and the CLI."""

from __future__ import annotations

import logging


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Apply *level* to the ``bibpress`` logger, installing a handler if none exists.

    Managed runtimes such as AWS Lambda already attach a handler to the root
    logger; in that case only the level is changed.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)

    package_logger = logging.getLogger("bibpress")
    package_logger.setLevel(level)
    package_logger.debug("Logging initialised at level %s", logging.getLevelName(level))
    return package_logger


__all__ = ["DATE_FORMAT", "LOG_FORMAT", "configure_logging"]
