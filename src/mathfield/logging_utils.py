#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mathfield/logging_utils.py
"""Logging setup for mathfield entry points.

Library modules only create ``logging.getLogger(__name__)`` loggers; nothing
is configured on import. ``configure_logging`` is called by the command line
and by hosts that want mathfield diagnostics (malformed markup, unknown
commands, paste fallbacks) on stderr.

Records from mathfield modules carry a short ``component`` attribute
(``parser.latex`` rather than ``mathfield.parser.latex``) used by the trace
format.

"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from mathfield.constants import DEFAULT_LOG_LEVEL, LOGGER_NAME


class ComponentFilter(logging.Filter):
    """Attach the logger name relative to the mathfield package as ``component``."""

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith(LOGGER_NAME + "."):
            name = name[len(LOGGER_NAME) + 1 :]
        record.component = name
        return True


def resolve_level(log_level: int | str) -> int:
    """Return the numeric level for ``log_level``, falling back to the default level."""
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(str(log_level).upper())
    if isinstance(level, int):
        return level
    return logging.getLevelName(DEFAULT_LOG_LEVEL)


def configure_logging(
    log_level: int | str = DEFAULT_LOG_LEVEL,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Configure root logging handlers for the command line and embedding hosts.

    Parameters
    ----------
    log_level : int | str, default "WARNING"
        Numeric logging level or string name (e.g., "INFO"). Unknown names
        fall back to the default level.
    log_file : str, optional
        Optional path to a log file for teeing log output.
    trace_mode : bool, default False
        When true, emit timestamps and the emitting component.

    Returns
    -------
    logging.Logger
        The configured root logger instance.

    """
    resolved_level = resolve_level(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved_level)
    root_logger.handlers.clear()

    if trace_mode:
        format_str = "[%(asctime)s] [%(levelname)s] [%(component)s] %(message)s"
        date_format: Optional[str] = "%Y-%m-%d %H:%M:%S"
    else:
        format_str = LOGGER_NAME + ": %(levelname)s: %(message)s"
        date_format = None
    formatter = logging.Formatter(format_str, datefmt=date_format)
    component_filter = ComponentFilter()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(resolved_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(component_filter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            root_logger.warning("Could not create log file %s: %s", log_file, exc)
        else:
            file_handler.setLevel(resolved_level)
            file_handler.setFormatter(formatter)
            file_handler.addFilter(component_filter)
            root_logger.addHandler(file_handler)
            logging.getLogger(LOGGER_NAME).info("Logging to file: %s", log_file)

    return root_logger
