"""Core modules for Edge/Safari favorites bar sync."""

from .models import Bookmark, BookmarkFolder, BookmarkNode, IdGenerator
from .terminal import Colors, setup_logging
from .edge_codec import EdgeDocument, decode_edge, encode_edge
from .safari_codec import SafariDocument, decode_safari, encode_safari
from .locator import BAR_TITLES, CANONICAL_BAR_TITLE, locate_bar
from .merge import merge_into_edge, merge_into_safari
from .backup import create_backup, list_backups, restore_backup
from .browsers import Browser, find_edge_bookmarks, is_browser_running, SAFARI_BOOKMARKS
from .errors import SyncError, RestoreFailed
from .sync import (
    SyncDirection,
    SyncEngine,
    SyncResult,
    SyncState,
    sync_edge_to_safari,
    sync_safari_to_edge,
)

__all__ = [
    # Models
    "Bookmark",
    "BookmarkFolder",
    "BookmarkNode",
    "IdGenerator",
    # Terminal
    "Colors",
    "setup_logging",
    # Codecs
    "EdgeDocument",
    "decode_edge",
    "encode_edge",
    "SafariDocument",
    "decode_safari",
    "encode_safari",
    # Bar locator and merge
    "BAR_TITLES",
    "CANONICAL_BAR_TITLE",
    "locate_bar",
    "merge_into_edge",
    "merge_into_safari",
    # Backups
    "create_backup",
    "list_backups",
    "restore_backup",
    # Browsers
    "Browser",
    "find_edge_bookmarks",
    "is_browser_running",
    "SAFARI_BOOKMARKS",
    # Sync
    "SyncError",
    "RestoreFailed",
    "SyncDirection",
    "SyncEngine",
    "SyncResult",
    "SyncState",
    "sync_edge_to_safari",
    "sync_safari_to_edge",
]
