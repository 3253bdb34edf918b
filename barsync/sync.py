#!/usr/bin/env python3
"""
Sync the favorites bar between Edge and Safari.

A sync run goes through these states:

    IDLE -> VALIDATING -> BACKUP_CHECKING -> BACKING_UP
         -> CONVERTING -> MERGING -> WRITING -> DONE

Failures before BACKING_UP go straight to FAILED; nothing has been touched
yet. Once the destination is backed up, any failure goes through RESTORING,
which copies the backup back over the destination before the error is
re-raised. If the restore fails too, ``RestoreFailed`` is raised instead.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .backup import create_backup, restore_backup
from .browsers import Browser, is_browser_running
from .edge_codec import EdgeDocument, decode_edge, node_to_edge_dict
from .errors import (
    BackupError,
    BackupFailed,
    BrowserRunning,
    FileNotReadableError,
    FileValidationError,
    ParseError,
    ParsingFailed,
    PermissionDenied,
    RestoreFailed,
    SerializationFailed,
    SyncError,
    ValidationFailed,
    WriteFailed,
)
from .fileio import atomic_write, read_document, validate_store_file
from .locator import BAR_TITLES, SAFARI_SOURCE_TITLES, locate_bar
from .merge import merge_into_edge, merge_into_safari
from .models import BookmarkFolder, BookmarkNode, IdGenerator, count_items
from .safari_codec import decode_safari, node_to_safari_dict

STORE_NAMES = {
    Browser.EDGE: "Edge bookmarks",
    Browser.SAFARI: "Safari bookmarks",
}

# Errors raised by json/plistlib when a document cannot be written out
SERIALIZATION_ERRORS = (TypeError, ValueError, OverflowError)


class SyncDirection(Enum):
    """Which store is read and which one is rewritten."""
    EDGE_TO_SAFARI = "edge-to-safari"
    SAFARI_TO_EDGE = "safari-to-edge"

    @property
    def source(self) -> Browser:
        return Browser.EDGE if self is SyncDirection.EDGE_TO_SAFARI else Browser.SAFARI

    @property
    def destination(self) -> Browser:
        return Browser.SAFARI if self is SyncDirection.EDGE_TO_SAFARI else Browser.EDGE

    @property
    def label(self) -> str:
        return f"{self.source.display_name} -> {self.destination.display_name}"


class SyncState(Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    BACKUP_CHECKING = "backup_checking"
    BACKING_UP = "backing_up"
    CONVERTING = "converting"
    MERGING = "merging"
    WRITING = "writing"
    RESTORING = "restoring"
    DONE = "done"
    FAILED = "failed"


@dataclass
class SyncResult:
    """Outcome of a successful sync."""
    direction: SyncDirection
    backup_path: Path
    bar_title: str
    bookmarks: int
    folders: int


class SyncEngine:
    """
    Runs one sync at a time between an Edge and a Safari bookmark file.

    Args:
        edge_path: Edge ``Bookmarks`` JSON file
        safari_path: Safari ``Bookmarks.plist`` file
        is_running: tells whether a browser is running; the destination
            browser must be closed before its file is touched;
            defaults to a pgrep check
        strict_bar_match: fail with ``ParsingFailed`` instead of wrapping the
            whole source tree when no favorites bar folder is found
        id_generator_factory: builds the identifier generator owned by each run
    """

    def __init__(
        self,
        edge_path: Path,
        safari_path: Path,
        is_running: Optional[Callable[[Browser], bool]] = None,
        strict_bar_match: bool = False,
        id_generator_factory: Callable[[], IdGenerator] = IdGenerator,
    ):
        self.paths: Dict[Browser, Path] = {
            Browser.EDGE: Path(edge_path),
            Browser.SAFARI: Path(safari_path),
        }
        self.is_running = is_running or is_browser_running
        self.strict_bar_match = strict_bar_match
        self.id_generator_factory = id_generator_factory
        self.state = SyncState.IDLE

    def _enter(self, state: SyncState):
        logging.debug(f"Sync state: {self.state.value} -> {state.value}")
        self.state = state

    # ============== Entry Point ==============

    def sync(self, direction: SyncDirection) -> SyncResult:
        """
        Replace the destination's favorites bar with the source's.

        Raises:
            SyncError: one of its subclasses, see ``barsync.errors``
        """
        self.state = SyncState.IDLE
        source_path = self.paths[direction.source]
        destination_path = self.paths[direction.destination]
        logging.info(f"Syncing favorites bar: {direction.label}")

        try:
            self._validate(source_path, destination_path)

            self._enter(SyncState.BACKUP_CHECKING)
            if self.is_running(direction.destination):
                raise BrowserRunning(direction.destination.display_name)

            self._enter(SyncState.BACKING_UP)
            try:
                backup_path = create_backup(destination_path)
            except BackupError as e:
                raise BackupFailed(str(e)) from e
        except SyncError as e:
            logging.error(str(e))
            self._enter(SyncState.FAILED)
            raise

        try:
            bar = self._transfer(direction, source_path, destination_path)
        except Exception as error:
            self._restore(error, backup_path, destination_path)
            raise

        self._enter(SyncState.DONE)
        bookmarks, folders = count_items(bar.children)
        logging.info(f"Synced {bookmarks} bookmarks in {folders} folders to {destination_path.name}")
        return SyncResult(
            direction=direction,
            backup_path=backup_path,
            bar_title=bar.title,
            bookmarks=bookmarks,
            folders=folders,
        )

    # ============== Phases ==============

    def _validate(self, *paths: Path):
        self._enter(SyncState.VALIDATING)
        for path in paths:
            try:
                validate_store_file(path)
            except FileNotReadableError as e:
                raise PermissionDenied(path) from e
            except FileValidationError as e:
                raise ValidationFailed(str(e)) from e

    def _transfer(self, direction: SyncDirection, source_path: Path, destination_path: Path) -> BookmarkFolder:
        source_name = STORE_NAMES[direction.source]
        destination_name = STORE_NAMES[direction.destination]
        ids = self.id_generator_factory()

        self._enter(SyncState.CONVERTING)
        forest = self._read_tree(direction.source, source_path)
        try:
            bar = self._locate(direction.source, forest, ids)
        except ParseError as e:
            raise ParsingFailed(source_name, str(e)) from e

        destination_raw = self._read(destination_name, destination_path)
        try:
            native_bar = self._to_native(direction.destination, bar, destination_raw, ids)
        except ParseError as e:
            raise ParsingFailed(destination_name, str(e)) from e

        self._enter(SyncState.MERGING)
        merge = merge_into_safari if direction.destination is Browser.SAFARI else merge_into_edge
        try:
            merged = merge(destination_raw, native_bar)
        except ParseError as e:
            raise ParsingFailed(destination_name, str(e)) from e
        except SERIALIZATION_ERRORS as e:
            raise SerializationFailed(destination_name, str(e)) from e

        self._enter(SyncState.WRITING)
        try:
            atomic_write(destination_path, merged)
        except OSError as e:
            raise WriteFailed(destination_name, str(e)) from e

        return bar

    def _restore(self, error: Exception, backup_path: Path, destination_path: Path):
        self._enter(SyncState.RESTORING)
        logging.error(f"Sync failed: {error}")
        logging.info(f"Restoring {destination_path.name} from {backup_path.name}...")
        try:
            restore_backup(backup_path, destination_path)
        except BackupError as restore_error:
            self._enter(SyncState.FAILED)
            logging.critical(f"Restore failed, {destination_path} may be damaged: {restore_error}")
            raise RestoreFailed(error, restore_error, backup_path=backup_path) from restore_error

        self._enter(SyncState.FAILED)
        if isinstance(error, SyncError):
            error.backup_path = backup_path

    # ============== Helpers ==============

    def _read(self, store_name: str, path: Path) -> bytes:
        try:
            return read_document(path)
        except OSError as e:
            raise ParsingFailed(store_name, f"could not read {path}: {e}") from e

    def _read_tree(self, browser: Browser, path: Path) -> List[BookmarkNode]:
        store_name = STORE_NAMES[browser]
        raw = self._read(store_name, path)
        decode = decode_edge if browser is Browser.EDGE else decode_safari
        try:
            return decode(raw)
        except ParseError as e:
            raise ParsingFailed(store_name, str(e)) from e

    def _locate(self, browser: Browser, forest: List[BookmarkNode], ids: IdGenerator) -> BookmarkFolder:
        if browser is Browser.SAFARI:
            # Safari may hold both its own BookmarksBar and a previously synced bar
            return locate_bar(forest, ids, SAFARI_SOURCE_TITLES, prefer_largest=True,
                              strict=self.strict_bar_match)
        return locate_bar(forest, ids, BAR_TITLES, strict=self.strict_bar_match)

    def _to_native(self, browser: Browser, bar: BookmarkFolder, destination_raw: bytes,
                   ids: IdGenerator) -> Dict:
        destination_name = STORE_NAMES[browser]
        if browser is Browser.EDGE:
            ids.reserve(EdgeDocument.from_bytes(destination_raw).iter_ids())
        try:
            if browser is Browser.EDGE:
                return node_to_edge_dict(bar, ids)
            return node_to_safari_dict(bar, ids)
        except SERIALIZATION_ERRORS as e:
            raise SerializationFailed(destination_name, str(e)) from e


# ============== Convenience Functions ==============

def sync_edge_to_safari(edge_path: Path, safari_path: Path, **kwargs) -> SyncResult:
    """Copy Edge's favorites bar into Safari's bookmarks."""
    return SyncEngine(edge_path, safari_path, **kwargs).sync(SyncDirection.EDGE_TO_SAFARI)


def sync_safari_to_edge(edge_path: Path, safari_path: Path, **kwargs) -> SyncResult:
    """Copy Safari's favorites bar into Edge's bookmarks."""
    return SyncEngine(edge_path, safari_path, **kwargs).sync(SyncDirection.SAFARI_TO_EDGE)
