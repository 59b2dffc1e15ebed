"""Diagnostic logging for parsecheck.

Protocol lines (``loaded N files``, report rows, tree dumps) are written to
stdout by the harness itself. Everything routed through these loggers is
diagnostics and goes to stderr or a log file, never stdout. Per-file outcomes
and fault tracebacks are logged at DEBUG, so the console stays quiet unless
``verbose`` is set, while a log file always receives the full trail.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional, TextIO

_ROOT = "parsecheck"
_OWNED_ATTR = "_parsecheck_handler"


def get_logger(component: Optional[str] = None) -> logging.Logger:
    """Return the logger for a parsecheck component such as ``"runner"``."""
    return logging.getLogger(f"{_ROOT}.{component}" if component else _ROOT)


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Optional[Path] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Install the console handler (stderr by default) and an optional DEBUG file sink."""
    logger = logging.getLogger(_ROOT)
    logger.propagate = False
    for handler in [h for h in logger.handlers if getattr(h, _OWNED_ATTR, False)]:
        logger.removeHandler(handler)
        handler.close()

    console_level = logging.DEBUG if verbose else logging.WARNING
    console = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter("[parsecheck] %(levelname)s %(message)s"))
    _own(logger, console)

    effective = console_level
    if log_file is not None:
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(logging.DEBUG)
        sink.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s: %(message)s"))
        _own(logger, sink)
        effective = logging.DEBUG

    logger.setLevel(effective)
    return logger


def _own(logger: logging.Logger, handler: logging.Handler) -> None:
    setattr(handler, _OWNED_ATTR, True)
    logger.addHandler(handler)


__all__ = ["configure_logging", "get_logger"]
