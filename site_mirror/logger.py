# === FILE: site_mirror/logger.py ===
"""Logging for **SiteMirror** runs.

Every component logs through the ``SiteMirror`` logger: the session writes
one line per URL (``Saved <url> -> <file>``, ``<url> already exists,
skipping`` or the error at WARNING), plus a start line and a
``Completed: ...`` summary per run. Level headers and path mapping go to
DEBUG.

Output always goes to stdout; ``--log-file`` adds a rotating file
(5 MiB x 3). The CLI calls :func:`init_logging` once per invocation, which
swaps the handlers of the module-level :data:`logger` in place, so modules
that imported it earlier keep logging to the new destinations.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "SiteMirror"

_LevelT = Union[int, str]

_MAX_LOG_BYTES: Final[int] = 5 * 1024 * 1024
_LOG_BACKUPS: Final[int] = 3


def _console_handler(fmt: str) -> logging.StreamHandler:
    # sys.stdout is looked up now, not at import, so redirected streams work
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def _rotating_handler(file: Path | str, fmt: str) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        filename=str(file),
        maxBytes=_MAX_LOG_BYTES,
        backupCount=_LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Set level and destinations of the ``SiteMirror`` logger.

    With ``replace_handlers`` the previous handlers are closed first, so a
    log file from an earlier call is released. Messages never propagate to
    the root logger.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)

    if replace_handlers:
        for handler in list(lg.handlers):
            lg.removeHandler(handler)
            handler.close()

    lg.addHandler(_console_handler(log_format))
    if log_file is not None:
        lg.addHandler(_rotating_handler(log_file, log_format))

    lg.propagate = False
    return lg


def init_logging(
    level: _LevelT = "INFO",
    log_file: str | Path | None = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Configure logging for one CLI invocation."""
    return configure(level=level, log_file=log_file, log_format=log_format, replace_handlers=True)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "LOGGER_NAME", "DEFAULT_FORMAT"]
