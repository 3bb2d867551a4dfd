from collections.abc import Iterator
from contextlib import contextmanager
import logging

from bibpress.core.log import LOG_FORMAT, configure_logging


@contextmanager
def _bare_root() -> Iterator[logging.Logger]:
    root = logging.getLogger()
    package_logger = logging.getLogger("bibpress")
    saved_handlers = root.handlers[:]
    levels = (root.level, package_logger.level)
    root.handlers.clear()
    try:
        yield root
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(levels[0])
        package_logger.setLevel(levels[1])


def test_configure_logging_installs_handler_once() -> None:
    with _bare_root() as root:
        configure_logging("debug")
        configure_logging("INFO")

        assert len(root.handlers) == 1
        assert root.handlers[0].formatter._fmt == LOG_FORMAT
        assert root.level == logging.INFO


def test_configure_logging_keeps_existing_handlers() -> None:
    with _bare_root() as root:
        existing = logging.NullHandler()
        root.addHandler(existing)

        logger = configure_logging("WARNING")

        assert root.handlers == [existing]
        assert logger.name == "bibpress"
        assert logger.level == logging.WARNING


def test_configure_logging_falls_back_to_info() -> None:
    with _bare_root():
        assert configure_logging("verbose").level == logging.INFO
