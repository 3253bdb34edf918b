#!/usr/bin/env python3
"""Where Edge and Safari keep their bookmarks, and whether they are running (macOS)."""

import logging
import subprocess
from enum import Enum
from pathlib import Path
from typing import Optional


class Browser(Enum):
    """Browsers whose bookmark stores can be synced."""
    EDGE = "edge"
    SAFARI = "safari"

    @property
    def display_name(self) -> str:
        return PROCESS_NAMES[self][0]


PROCESS_NAMES = {
    Browser.EDGE: ["Microsoft Edge"],
    Browser.SAFARI: ["Safari"],
}

EDGE_DATA_DIR = Path.home() / "Library" / "Application Support" / "Microsoft Edge"
EDGE_BOOKMARKS = EDGE_DATA_DIR / "Default" / "Bookmarks"
SAFARI_BOOKMARKS = Path.home() / "Library" / "Safari" / "Bookmarks.plist"


def is_browser_running(browser: Browser) -> bool:
    """Check if the browser's main process is running."""
    for name in PROCESS_NAMES[browser]:
        result = subprocess.run(
            ["pgrep", "-x", name],
            capture_output=True,
            text=True,
        )
        if result.returncode == 0:
            logging.debug(f"{name} is running")
            return True
    return False


def find_edge_bookmarks(data_dir: Optional[Path] = None) -> Path:
    """
    Find the Edge ``Bookmarks`` file that was modified last.

    Every profile directory (Default, Profile 1, ...) is checked; falls back
    to the Default profile path when none has a bookmarks file.
    """
    data_dir = data_dir or EDGE_DATA_DIR
    default = data_dir / "Default" / "Bookmarks"

    if not data_dir.exists():
        return default

    candidates = [
        profile_dir / "Bookmarks"
        for profile_dir in data_dir.iterdir()
        if profile_dir.is_dir() and (profile_dir / "Bookmarks").is_file()
    ]
    if not candidates:
        return default

    latest = max(candidates, key=lambda p: p.stat().st_mtime)
    logging.debug(f"Using Edge bookmarks from profile '{latest.parent.name}'")
    return latest
