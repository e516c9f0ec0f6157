"""
Logging setup for the reconcile-attendance entry point.

Line format:
    2026-01-06T14:05:52Z [reconcile] INFO Generated 12 suggestions for 40 records

At DEBUG and below the emitting module is appended to the source tag
([reconcile:reconciler.resolution.email_matcher]) so matcher decisions can be
traced back to the matcher that made them.

The level comes from, in order: the --debug flag, the configured log level,
the LOG_LEVEL environment variable, INFO.
Levels:
    INFO:  one summary line per batch
    DEBUG: one line per matching decision (phase hits, rejections, cache hits)
    TRACE: per-pattern scores

Engine modules only create loggers; handlers are installed by the entry
point through configure_logging().
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import UTC, datetime
from typing import TextIO

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LEVELS_BY_NAME = {
    "TRACE": TRACE,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def _log_trace(self: logging.Logger, message: object, *args: object, **kwargs: object) -> None:
    if self.isEnabledFor(TRACE):
        self._log(TRACE, message, args, **kwargs)  # type: ignore[arg-type]


logging.Logger.trace = _log_trace  # type: ignore[attr-defined]


class ISO8601Formatter(logging.Formatter):
    """UTC timestamp, bracketed source tag, level name, message."""

    def __init__(self, source: str = "reconciler", with_module: bool = False):
        super().__init__()
        self.source = source
        self.with_module = with_module

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created, UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
        tag = f"{self.source}:{record.name}" if self.with_module else self.source
        text = record.getMessage()
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return f"{stamp} [{tag}] {record.levelname} {text}"


def resolve_level(level_name: str | None, debug: bool | None = None) -> int:
    """Map a level name (or the LOG_LEVEL env var) to a logging level."""
    if debug:
        return logging.DEBUG
    name = (level_name or os.getenv("LOG_LEVEL", "") or "INFO").upper()
    return LEVELS_BY_NAME.get(name, logging.INFO)


def configure_logging(
    source: str = "reconciler",
    level: int | None = None,
    debug: bool | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Install a single handler on the root logger.

    Args:
        source: Tag printed in brackets on every line
        level: Explicit level; resolved from LOG_LEVEL when omitted
        debug: Force DEBUG regardless of level
        stream: Destination, stderr by default so stdout stays machine-readable

    Returns:
        The root logger
    """
    if level is None or debug:
        level = resolve_level(None, debug)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(ISO8601Formatter(source=source, with_module=level <= logging.DEBUG))

    root = logging.getLogger()
    # Replace, never stack, handlers when called twice
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)
    return root