"""Centralized logging setup and structured-context helpers."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Dict, Optional

from constants import Constants


def configure_logging(log_file: Optional[str] = None) -> None:
    """Configure the root logger for console (stderr) output.

    The level is taken from the LARSCRIPTS_LOG_LEVEL environment variable
    (default INFO). Standard output is left alone: it carries shell code and
    paths meant for the calling shell.

    Args:
        log_file: Optional path of a file receiving a copy of all records.
    """
    level_name = os.environ.get(Constants.ENV_LOG_LEVEL, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_larscripts", False):
            root.removeHandler(handler)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
    console._larscripts = True  # type: ignore[attr-defined]
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FILE_FORMAT))
        file_handler._larscripts = True  # type: ignore[attr-defined]
        root.addHandler(file_handler)

    root.setLevel(level)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True if DEBUG records of this logger would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**kwargs: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a structured log record.

    None values are dropped so records only carry what is known.
    """
    return {k: v for k, v in kwargs.items() if v is not None}
