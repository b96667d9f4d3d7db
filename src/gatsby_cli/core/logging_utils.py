from __future__ import annotations

import json
import logging
import sys
from typing import Any, Optional

ROOT_LOGGER_NAME = "gatsby_cli"
_HANDLER_NAME = "gatsby_cli.stderr"
_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _format_value(value: Any) -> str:
    if isinstance(value, BaseException):
        return json.dumps(f"{type(value).__name__}: {value}")
    try:
        return json.dumps(value, default=str)
    except (TypeError, ValueError):
        return json.dumps(repr(value))


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    *,
    exc: Optional[BaseException] = None,
    **fields: Any,
) -> None:
    """Emit a single structured `event key=value ...` record."""
    if not logger.isEnabledFor(level):
        return
    parts = [event]
    for key, value in fields.items():
        parts.append(f"{key}={_format_value(value)}")
    if exc is not None:
        parts.append(f"exc={_format_value(exc)}")
    logger.log(level, " ".join(parts))


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever `sys.stderr` is when a record is emitted."""

    def __init__(self) -> None:
        logging.Handler.__init__(self)

    @property
    def stream(self):  # type: ignore[override]
        return sys.stderr


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Attach the CLI stderr handler to the package logger.

    Safe to call more than once; the handler is replaced rather than stacked.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)
    handler = _StderrHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
    return logger
