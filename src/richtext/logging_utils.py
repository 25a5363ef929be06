#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richtext/logging_utils.py
"""Logging setup for the richtext command line.

Handlers are attached to the ``richtext`` package logger, not the root
logger. Every module logs through ``logging.getLogger(__name__)``, so the
package logger sees all library records while an application embedding the
library keeps its own root configuration.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER_NAME = "richtext"

CONSOLE_FORMAT = "%(levelname)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(log_level: int | str) -> int:
    if isinstance(log_level, int):
        return log_level
    return getattr(logging, str(log_level).upper(), logging.INFO)


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """Configure the ``richtext`` package logger for command line use.

    Calling this again replaces the handlers installed by the previous call.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or string name (e.g., "INFO"). Unknown names
        fall back to INFO.
    log_file : str, optional
        Path to a log file that also receives every record.
    trace_mode : bool, default False
        When true, emit timestamps and the name of the module that logged.
    stream : file-like, optional
        Console stream, ``sys.stderr`` by default so that records never mix
        with document output on stdout.

    Returns
    -------
    logging.Logger
        The configured package logger.

    """
    level = _resolve_level(log_level)

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(level)
    package_logger.propagate = False
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()

    if trace_mode:
        formatter = logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT)
    else:
        formatter = logging.Formatter(CONSOLE_FORMAT)

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            package_logger.warning(f"Could not create log file {log_file}: {exc}")
        else:
            file_handler.setFormatter(formatter)
            package_logger.addHandler(file_handler)
            package_logger.debug(f"Logging to file: {log_file}")

    return package_logger


__all__ = ["configure_logging", "PACKAGE_LOGGER_NAME"]
