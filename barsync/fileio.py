#!/usr/bin/env python3
"""Whole-file reads, atomic writes and pre-sync file checks."""

import os
import stat
import tempfile
from pathlib import Path

from .errors import FileEmptyError, FileMissingError, FileNotReadableError


def validate_store_file(path: Path) -> Path:
    """
    Check that a bookmark file exists, is readable and is not empty.

    Raises:
        FileMissingError, FileNotReadableError, FileEmptyError
    """
    path = Path(path)
    try:
        info = path.stat()
    except PermissionError as e:
        # macOS denies stat on protected files without Full Disk Access
        raise FileNotReadableError(path) from e
    except OSError as e:
        raise FileMissingError(path) from e

    if not stat.S_ISREG(info.st_mode):
        raise FileMissingError(path)
    if not os.access(path, os.R_OK):
        raise FileNotReadableError(path)
    if info.st_size == 0:
        raise FileEmptyError(path)
    return path


def read_document(path: Path) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def atomic_write(path: Path, data: bytes):
    """
    Replace ``path`` with ``data`` in one step.

    The data goes to a temporary file in the same directory which is then
    renamed over ``path``, so readers see either the old or the new file.
    The original file mode is kept.
    """
    path = Path(path)
    mode = path.stat().st_mode & 0o7777 if path.exists() else None

    fd, temp_path = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        if mode is not None:
            os.chmod(temp_path, mode)
        os.replace(temp_path, path)
    except BaseException:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise
