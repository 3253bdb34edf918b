"""Tests for the log formatter and logging setup."""

import io
import logging

import pytest

from barsync.terminal import Colors, TagFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    logging.disable(logging.NOTSET)
    root.handlers[:] = handlers
    root.setLevel(level)


def make_record(level, message):
    return logging.LogRecord("barsync", level, __file__, 1, message, None, None)


class TestTagFormatter:
    def test_plain_layout(self):
        line = TagFormatter(color=False).format(make_record(logging.WARNING, "No favorites bar"))
        assert line.endswith(" WARN No favorites bar")
        assert "\033[" not in line

    def test_colored_tag(self):
        line = TagFormatter(color=True).format(make_record(logging.CRITICAL, "Restore failed"))
        assert f"{Colors.BOLD}{Colors.ON_RED}CRIT{Colors.RESET} Restore failed" in line

    def test_custom_level_falls_back(self):
        line = TagFormatter(color=False).format(make_record(25, "note"))
        assert line == "note"


class TestSetupLogging:
    def test_writes_plain_text_to_pipe(self, restore_root_logger):
        stream = io.StringIO()
        setup_logging(stream=stream)

        logging.info("Backup: Bookmarks.plist.bak")
        logging.debug("hidden")

        output = stream.getvalue()
        assert "INFO Backup: Bookmarks.plist.bak" in output
        assert "hidden" not in output

    def test_verbose_shows_debug(self, restore_root_logger):
        stream = io.StringIO()
        setup_logging(verbose=True, stream=stream)
        logging.debug("Sync state: idle -> validating")
        assert "DEBG Sync state: idle -> validating" in stream.getvalue()

    def test_silent(self, restore_root_logger):
        setup_logging(silent=True)
        assert not restore_root_logger.isEnabledFor(logging.CRITICAL)
