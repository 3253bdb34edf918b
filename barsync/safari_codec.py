#!/usr/bin/env python3
"""
Read and write Safari ``Bookmarks.plist`` files.

Safari stores bookmarks as a (usually binary) property list. Every node is a
dictionary with ``WebBookmarkUUID`` and ``WebBookmarkType``; folders
(``WebBookmarkTypeList``) carry ``Title`` and ``Children``, leaves
(``WebBookmarkTypeLeaf``) carry ``URLString`` and a ``URIDictionary`` holding
the title.
"""

import logging
import plistlib
import re
from typing import Dict, List, Optional, Sequence
from xml.parsers.expat import ExpatError

from .errors import DocumentNotFoundError, MalformedDocumentError
from .models import Bookmark, BookmarkFolder, BookmarkNode, IdGenerator, make_node

LIST_TYPE = "WebBookmarkTypeList"
LEAF_TYPE = "WebBookmarkTypeLeaf"
FILE_VERSION = 1

_UUID_PATTERN = re.compile(
    r"^[0-9A-Fa-f]{8}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{4}-[0-9A-Fa-f]{12}$"
)


def normalize_uuid(value: Optional[str], ids: IdGenerator) -> str:
    """Keep ``value`` if it is a UUID string, otherwise hand out a fresh one."""
    if isinstance(value, str) and _UUID_PATTERN.match(value):
        return value
    return ids.new_uuid()


class SafariDocument:
    """Raw Safari plist document; keeps the on-disk plist format for writing back."""

    def __init__(self, data: Dict, fmt=plistlib.FMT_BINARY):
        self.data = data
        self.fmt = fmt

    @classmethod
    def from_bytes(cls, raw: bytes) -> "SafariDocument":
        try:
            data = plistlib.loads(raw)
        except (plistlib.InvalidFileException, ExpatError, ValueError, TypeError) as e:
            raise MalformedDocumentError(f"Invalid Safari bookmarks plist: {e}") from e

        if not isinstance(data, dict):
            raise MalformedDocumentError("Root plist is not a dictionary")
        if "Children" not in data:
            raise DocumentNotFoundError("Root plist missing 'Children' key")
        if not isinstance(data["Children"], list):
            raise MalformedDocumentError("Root plist 'Children' is not an array")

        fmt = plistlib.FMT_BINARY if raw.startswith(b"bplist") else plistlib.FMT_XML
        return cls(data, fmt)

    @property
    def children(self) -> List[Dict]:
        return self.data["Children"]

    @children.setter
    def children(self, value: List[Dict]):
        self.data["Children"] = value

    def to_bytes(self) -> bytes:
        return plistlib.dumps(self.data, fmt=self.fmt, sort_keys=False)


# ============== Decoding ==============

def _safari_dict_to_node(entry: Dict) -> Optional[BookmarkNode]:
    if not isinstance(entry, dict):
        raise MalformedDocumentError(f"Safari bookmark entry is not a dictionary: {entry!r}")

    node_type = entry.get("WebBookmarkType")
    node_id = entry.get("WebBookmarkUUID", "")

    if node_type == LEAF_TYPE:
        uri_dict = entry.get("URIDictionary")
        title = (uri_dict.get("title") if isinstance(uri_dict, dict) else None) or entry.get("Title", "")
        return make_node(node_id, title, entry.get("URLString", ""))

    if node_type == LIST_TYPE:
        children = entry.get("Children", [])
        if not isinstance(children, list):
            raise MalformedDocumentError(f"'Children' of Safari folder {node_id} is not an array")
        converted = [node for node in map(_safari_dict_to_node, children) if node is not None]
        return BookmarkFolder(id=node_id, title=entry.get("Title", ""), children=tuple(converted))

    # Proxy entries (History) and unknown types have no counterpart in the tree
    logging.debug(f"Skipping Safari entry of type {node_type!r}: {entry.get('Title', '')}")
    return None


def decode_safari(raw: bytes) -> List[BookmarkNode]:
    """Parse a Safari plist and return its top-level entries."""
    document = SafariDocument.from_bytes(raw)
    return [node for node in map(_safari_dict_to_node, document.children) if node is not None]


# ============== Encoding ==============

def node_to_safari_dict(node: BookmarkNode, ids: IdGenerator) -> Dict:
    """Convert a node to a Safari plist dictionary."""
    if isinstance(node, Bookmark):
        return {
            "WebBookmarkType": LEAF_TYPE,
            "WebBookmarkUUID": normalize_uuid(node.id, ids),
            "URLString": node.url,
            "URIDictionary": {"title": node.title},
        }
    return {
        "WebBookmarkType": LIST_TYPE,
        "WebBookmarkUUID": normalize_uuid(node.id, ids),
        "Title": node.title,
        "Children": [node_to_safari_dict(child, ids) for child in node.children],
    }


def encode_safari(nodes: Sequence[BookmarkNode], ids: Optional[IdGenerator] = None) -> bytes:
    """Encode nodes as a complete binary Safari bookmarks plist."""
    ids = ids or IdGenerator()
    root = {
        "Title": "Bookmarks",
        "WebBookmarkUUID": ids.new_uuid(),
        "WebBookmarkType": LIST_TYPE,
        "WebBookmarkFileVersion": FILE_VERSION,
        "Children": [node_to_safari_dict(node, ids) for node in nodes],
    }
    return SafariDocument(root).to_bytes()
