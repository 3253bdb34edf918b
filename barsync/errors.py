#!/usr/bin/env python3
"""Exceptions raised while reading, merging and syncing bookmark stores."""

from pathlib import Path
from typing import Optional


# ============== Parsing ==============

class ParseError(Exception):
    """Bookmark document could not be turned into a bookmark tree."""
    pass


class DocumentNotFoundError(ParseError):
    """Expected container (``roots`` / ``Children``) is missing from the document."""
    pass


class MalformedDocumentError(ParseError):
    """Document is not valid JSON/plist or does not have the expected shape."""
    pass


class BarNotFoundError(ParseError):
    """No favorites bar folder found and the caller asked for a strict match."""
    pass


# ============== Backup ==============

class BackupError(Exception):
    pass


class BackupSourceNotFoundError(BackupError):
    def __init__(self, path: Path):
        super().__init__(f"Source file not found: {path}")
        self.path = path


class BackupCreationError(BackupError):
    def __init__(self, message: str):
        super().__init__(f"Failed to create backup: {message}")


class RestoreError(BackupError):
    def __init__(self, message: str):
        super().__init__(f"Failed to restore from backup: {message}")


# ============== File Validation ==============

class FileValidationError(Exception):
    def __init__(self, message: str, path: Path):
        super().__init__(message)
        self.path = path


class FileMissingError(FileValidationError):
    def __init__(self, path: Path):
        super().__init__(f"File not found at path: {path}", path)


class FileNotReadableError(FileValidationError):
    def __init__(self, path: Path):
        super().__init__(f"File is not readable at path: {path}", path)


class FileEmptyError(FileValidationError):
    def __init__(self, path: Path):
        super().__init__(f"File is empty (0 bytes) at path: {path}", path)


# ============== Sync ==============

class SyncError(Exception):
    """
    Base class for every failure reported by a sync run.

    ``backup_path`` is set once a backup of the destination exists, so a
    caller can offer manual rollback.
    """

    def __init__(self, message: str, backup_path: Optional[Path] = None):
        super().__init__(message)
        self.backup_path = backup_path


class ValidationFailed(SyncError):
    def __init__(self, details: str):
        super().__init__(f"Validation failed: {details}")
        self.details = details


class PermissionDenied(ValidationFailed):
    def __init__(self, path: Path):
        SyncError.__init__(
            self,
            f"Access denied to {path}. "
            "Please grant Full Disk Access in System Settings > Privacy & Security.",
        )
        self.details = str(path)
        self.path = path


class BrowserRunning(SyncError):
    def __init__(self, browser_name: str):
        super().__init__(
            f"Cannot sync: {browser_name} is currently running. "
            f"Please quit {browser_name} and try again."
        )
        self.browser_name = browser_name


class BackupFailed(SyncError):
    def __init__(self, details: str):
        super().__init__(f"Backup creation failed: {details}")
        self.details = details


class ParsingFailed(SyncError):
    def __init__(self, source_name: str, details: str):
        super().__init__(f"Failed to parse {source_name}: {details}")
        self.source_name = source_name
        self.details = details


class SerializationFailed(SyncError):
    def __init__(self, target_name: str, details: str):
        super().__init__(f"Failed to serialize to {target_name}: {details}")
        self.target_name = target_name
        self.details = details


class WriteFailed(SyncError):
    def __init__(self, target_name: str, details: str):
        super().__init__(f"Failed to write {target_name}: {details}")
        self.target_name = target_name
        self.details = details


class RestoreFailed(SyncError):
    """Destination may be inconsistent: the restore after a failed sync also failed."""

    def __init__(self, original: BaseException, restore_error: BaseException,
                 backup_path: Optional[Path] = None):
        super().__init__(
            f"Critical error - backup restore failed: {restore_error}. "
            f"Original error: {original}",
            backup_path=backup_path,
        )
        self.original = original
        self.restore_error = restore_error
