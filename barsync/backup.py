#!/usr/bin/env python3
"""
Backups of bookmark files taken before they are modified.

The first backup of ``Bookmarks.plist`` is ``Bookmarks.plist.bak``; later
ones get a timestamp (``Bookmarks.plist.bak.20260212_181500``) so an earlier
recovery point is never overwritten. Backups are left on disk and are
ordered by the timestamp in their name, not by file dates: ``copy2`` keeps the
source file's mtime on every backup.
"""

import logging
import re
import shutil
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import BackupCreationError, BackupSourceNotFoundError, RestoreError

BACKUP_SUFFIX = ".bak"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

_STAMPED_NAME = re.compile(r"\.bak\.(\d{8}_\d{6})(?:_(\d+))?$")


def _backup_path_for(path: Path, now: Optional[datetime] = None) -> Path:
    backup = path.with_name(path.name + BACKUP_SUFFIX)
    if not backup.exists():
        return backup

    timestamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    backup = path.with_name(f"{path.name}{BACKUP_SUFFIX}.{timestamp}")
    counter = 1
    while backup.exists():
        backup = path.with_name(f"{path.name}{BACKUP_SUFFIX}.{timestamp}_{counter}")
        counter += 1
    return backup


def create_backup(path: Path, now: Optional[datetime] = None) -> Path:
    """
    Copy ``path`` next to itself and return the backup path.

    Raises:
        BackupSourceNotFoundError: ``path`` does not exist
        BackupCreationError: the copy failed
    """
    path = Path(path)
    if not path.exists():
        raise BackupSourceNotFoundError(path)

    backup = _backup_path_for(path, now)
    try:
        shutil.copy2(path, backup)
    except OSError as e:
        raise BackupCreationError(str(e)) from e

    logging.info(f"Backup: {backup.name}")
    return backup


def restore_backup(backup_path: Path, original_path: Path):
    """
    Replace ``original_path`` with the contents of ``backup_path``.

    Raises:
        BackupSourceNotFoundError: the backup does not exist
        RestoreError: removing the original or copying the backup failed
    """
    backup_path, original_path = Path(backup_path), Path(original_path)
    if not backup_path.exists():
        raise BackupSourceNotFoundError(backup_path)

    try:
        if original_path.exists():
            original_path.unlink()
        shutil.copy2(backup_path, original_path)
    except OSError as e:
        raise RestoreError(str(e)) from e

    logging.info(f"Restored: {original_path.name} from {backup_path.name}")


def backup_timestamp(backup: Path) -> Optional[datetime]:
    """When a timestamped backup was taken; None for the plain ``.bak``."""
    match = _STAMPED_NAME.search(Path(backup).name)
    if not match:
        return None
    return datetime.strptime(match.group(1), TIMESTAMP_FORMAT)


def _backup_order(backup: Path) -> Tuple[str, int]:
    match = _STAMPED_NAME.search(backup.name)
    if not match:
        return ("", 0)
    return (match.group(1), int(match.group(2) or 0))


def list_backups(path: Path) -> List[Path]:
    """
    All backups of ``path``, newest first.

    The plain ``.bak`` always sorts last. Chromium keeps a ``Bookmarks.bak``
    of its own next to Edge's ``Bookmarks``; it is listed too, as the oldest
    recovery point.
    """
    path = Path(path)
    if not path.parent.exists():
        return []

    plain = path.with_name(path.name + BACKUP_SUFFIX)
    backups = [
        f for f in path.parent.glob(f"{path.name}{BACKUP_SUFFIX}*")
        if f.is_file() and (f == plain or _STAMPED_NAME.search(f.name))
    ]
    backups.sort(key=_backup_order, reverse=True)
    return backups
