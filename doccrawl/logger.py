# === FILE: doccrawl/logger.py ===
"""Logging setup for doccrawl.

Library modules log through :data:`logger`; the CLI calls :func:`init_logging`
once per run to pick the level and an optional log file. Records go to stderr
because stdout carries the crawl's event stream.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

logger: logging.Logger = logging.getLogger("doccrawl")


class _StderrHandler(logging.StreamHandler):
    """Writes to the current ``sys.stderr``, even after it has been swapped."""

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, _value) -> None:
        pass


def init_logging(
    level: Union[int, str] = "WARNING",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Replace the handlers of :data:`logger`: stderr, plus a rotating *log_file* if given."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(log_format)
    handlers: list[logging.Handler] = [_StderrHandler()]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(str(log_file), maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False
    return logger


init_logging()

__all__ = ["logger", "init_logging", "DEFAULT_FORMAT"]
