#!/usr/bin/env python3
"""Terminal colors and logging setup shared by the sync engine and the CLI."""

import logging
import sys
from typing import Optional, TextIO


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    GREY = "\033[90m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"
    ON_RED = "\033[41m"


# Four-letter tag and its color for each log level
LEVEL_TAGS = {
    logging.DEBUG: ("DEBG", Colors.CYAN),
    logging.INFO: ("INFO", Colors.GREEN),
    logging.WARNING: ("WARN", Colors.YELLOW),
    logging.ERROR: ("ERRR", Colors.RED),
    logging.CRITICAL: ("CRIT", Colors.ON_RED),
}

TIME_FORMAT = "%H:%M"


class TagFormatter(logging.Formatter):
    """
    Formats records as ``HH:MM TAG message``.

    With ``color`` the time is grey and the tag bold in its level color;
    without it the same layout is written as plain text, for pipes and files.
    """

    def __init__(self, color: bool = True):
        super().__init__(datefmt=TIME_FORMAT)
        self._formatters = {
            level: logging.Formatter(self._layout(tag, tag_color, color), datefmt=TIME_FORMAT)
            for level, (tag, tag_color) in LEVEL_TAGS.items()
        }

    @staticmethod
    def _layout(tag: str, tag_color: str, color: bool) -> str:
        if not color:
            return f"%(asctime)s {tag} %(message)s"
        return f"{Colors.GREY}%(asctime)s{Colors.RESET} {Colors.BOLD}{tag_color}{tag}{Colors.RESET} %(message)s"

    def format(self, record: logging.LogRecord) -> str:
        formatter = self._formatters.get(record.levelno)
        if formatter is None:
            return super().format(record)
        return formatter.format(record)


def setup_logging(verbose: bool = False, silent: bool = False, stream: Optional[TextIO] = None):
    """
    Route log records to ``stream`` (stderr by default).

    ``verbose`` shows sync state transitions and other DEBUG records;
    ``silent`` turns logging off entirely.
    """
    if silent:
        logging.disable(logging.CRITICAL)
        return
    logging.disable(logging.NOTSET)

    stream = stream or sys.stderr
    handler = logging.StreamHandler(stream)
    handler.setFormatter(TagFormatter(color=stream.isatty()))

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, handlers=[handler], force=True)
