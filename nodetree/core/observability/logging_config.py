"""
Logging configuration — one setup call for the CLI entrypoint.

Every module logs through ``logger = logging.getLogger(__name__)`` and
inherits what is configured here.  The console level is chosen by
``resolve_level`` in precedence order:

    CLI flag  >  NODETREE_LOG_LEVEL  >  nodetree.yml log_level  >  WARNING

A log file can be added with NODETREE_LOG_FILE (and its own level via
NODETREE_LOG_FILE_LEVEL); it always records full detail.
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LEVEL = "NODETREE_LOG_LEVEL"
ENV_FILE = "NODETREE_LOG_FILE"
ENV_FILE_LEVEL = "NODETREE_LOG_FILE_LEVEL"

_CONSOLE_FORMATS = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
}
_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


def resolve_level(flag_level: str | None = None, settings_level: str | None = None) -> str:
    """Pick the effective console level name."""
    return flag_level or os.environ.get(ENV_LEVEL) or settings_level or "WARNING"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Install console (stderr) and optional file handlers on the root logger."""
    console_level = parse_level(level)
    fmt, datefmt = _console_format(console_level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    log_file = log_file or os.environ.get(ENV_FILE)
    if log_file:
        file_level = parse_level(log_file_level or os.environ.get(ENV_FILE_LEVEL) or level)
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(handler)
        root_level = min(root_level, file_level)

    root.setLevel(root_level)

    # asyncio is chatty at DEBUG
    if console_level > logging.DEBUG:
        logging.getLogger("asyncio").setLevel(logging.WARNING)

    # Don't propagate exceptions from logging itself
    logging.raiseExceptions = False


def parse_level(level: str | None) -> int:
    """Level name to numeric constant; unknown names fall back to WARNING."""
    if not level:
        return logging.WARNING
    numeric = logging.getLevelName(level.upper())
    return numeric if isinstance(numeric, int) else logging.WARNING


def _console_format(level: int) -> tuple[str, str | None]:
    for threshold in (logging.DEBUG, logging.INFO):
        if level <= threshold:
            return _CONSOLE_FORMATS[threshold]
    return "%(message)s", None
