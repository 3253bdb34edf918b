#!/usr/bin/env python3
"""
Read and write Chromium/Edge ``Bookmarks`` JSON files.

Edge keeps its bookmarks in a JSON document with up to three root folders:

    {
      "checksum": "...",
      "roots": {
        "bookmark_bar": {"id": "1", "name": "Favorites bar", "type": "folder", "children": [...]},
        "other": {...},
        "synced": {...}
      },
      "version": 1
    }
"""

import hashlib
import json
import logging
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Optional, Sequence

from .errors import DocumentNotFoundError, MalformedDocumentError
from .models import Bookmark, BookmarkFolder, BookmarkNode, IdGenerator, make_node

ROOT_KEYS = ("bookmark_bar", "other", "synced")
BAR_ROOT = "bookmark_bar"
FOLDER_TYPE = "folder"
URL_TYPE = "url"

# Chrome epoch starts at 1601-01-01, Unix epoch at 1970-01-01 (microseconds)
CHROME_EPOCH_OFFSET = 11644473600000000


def chrome_timestamp(now: Optional[datetime] = None) -> str:
    """Current time as Chrome stores it: microseconds since 1601-01-01, as a string."""
    now = now or datetime.now(timezone.utc)
    return str(int(now.timestamp() * 1000000) + CHROME_EPOCH_OFFSET)


def edge_checksum(roots: Dict) -> str:
    """Compute the MD5 checksum Chromium stores next to ``roots``."""
    digest = hashlib.md5()

    def visit(node: Dict):
        digest.update(str(node.get("id", "")).encode("utf-8"))
        digest.update(str(node.get("name", "")).encode("utf-16-le"))
        if node.get("type") == URL_TYPE:
            digest.update(b"url")
            digest.update(str(node.get("url", "")).encode("utf-8"))
        else:
            digest.update(b"folder")
            for child in node.get("children") or []:
                visit(child)

    for key in ROOT_KEYS:
        if isinstance(roots.get(key), dict):
            visit(roots[key])
    return digest.hexdigest()


class EdgeDocument:
    """Raw Edge JSON document; everything outside the bar is passed through untouched."""

    def __init__(self, data: Dict):
        self.data = data

    @classmethod
    def from_bytes(cls, raw: bytes) -> "EdgeDocument":
        try:
            data = json.loads(raw.decode("utf-8-sig"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise MalformedDocumentError(f"Invalid Edge bookmarks JSON: {e}") from e

        if not isinstance(data, dict):
            raise MalformedDocumentError("Edge bookmarks root is not a JSON object")
        if "roots" not in data:
            raise DocumentNotFoundError("Edge bookmarks JSON has no 'roots' object")
        if not isinstance(data["roots"], dict):
            raise MalformedDocumentError("Edge bookmarks 'roots' is not a JSON object")
        return cls(data)

    @property
    def roots(self) -> Dict:
        return self.data["roots"]

    def iter_ids(self) -> Iterator[str]:
        """Yield the id of every node in every root."""
        stack = [node for node in self.roots.values() if isinstance(node, dict)]
        while stack:
            node = stack.pop()
            if "id" in node:
                yield str(node["id"])
            stack.extend(child for child in node.get("children") or [] if isinstance(child, dict))

    def refresh_checksum(self):
        """Recompute ``checksum`` if the document carries one."""
        if "checksum" in self.data:
            self.data["checksum"] = edge_checksum(self.roots)

    def to_bytes(self) -> bytes:
        # Chromium writes its bookmarks with 3-space indentation and sorted keys
        return json.dumps(self.data, indent=3, sort_keys=True, ensure_ascii=False).encode("utf-8")


# ============== Decoding ==============

def _edge_dict_to_node(node: Dict) -> BookmarkNode:
    if not isinstance(node, dict):
        raise MalformedDocumentError(f"Edge bookmark node is not an object: {node!r}")

    children = node.get("children")
    if children is not None and not isinstance(children, list):
        raise MalformedDocumentError(f"'children' of Edge node {node.get('id')} is not a list")

    url = node.get("url") if node.get("type") != FOLDER_TYPE else None
    converted = [_edge_dict_to_node(child) for child in children] if children is not None else None
    return make_node(str(node.get("id", "")), node.get("name", ""), url, converted)


def decode_edge(raw: bytes) -> List[BookmarkNode]:
    """Parse Edge JSON and return one node per root folder that is present."""
    document = EdgeDocument.from_bytes(raw)

    result = []
    for key in ROOT_KEYS:
        root = document.roots.get(key)
        if root is None:
            logging.debug(f"Edge root '{key}' not present, skipping")
            continue
        result.append(_edge_dict_to_node(root))
    return result


# ============== Encoding ==============

def _node_to_plain_dict(node: BookmarkNode) -> Dict:
    if isinstance(node, Bookmark):
        return {"id": node.id, "name": node.title, "type": URL_TYPE, "url": node.url}
    return {
        "id": node.id,
        "name": node.title,
        "type": FOLDER_TYPE,
        "children": [_node_to_plain_dict(child) for child in node.children],
    }


def encode_edge(nodes: Sequence[BookmarkNode]) -> bytes:
    """
    Encode nodes as a complete Edge bookmarks document.

    The nodes become the children of ``bookmark_bar``; ``other`` is an empty
    folder and ``synced`` a placeholder folder without children.
    """
    roots = {
        "bookmark_bar": {
            "id": "1",
            "name": "Bookmarks Bar",
            "type": FOLDER_TYPE,
            "children": [_node_to_plain_dict(node) for node in nodes],
        },
        "other": {"id": "2", "name": "Other Bookmarks", "type": FOLDER_TYPE, "children": []},
        "synced": {"id": "3", "name": "Synced", "type": FOLDER_TYPE},
    }
    document = EdgeDocument({"checksum": "", "roots": roots, "version": 1})
    document.refresh_checksum()
    return document.to_bytes()


def node_to_edge_dict(node: BookmarkNode, ids: IdGenerator, timestamp: Optional[str] = None) -> Dict:
    """
    Convert a node into a full Edge node with fresh ids, ready to be placed
    into an existing Edge document.
    """
    timestamp = timestamp or chrome_timestamp()
    edge_node = {
        "id": ids.next_edge_id(),
        "guid": ids.new_uuid().lower(),
        "date_added": timestamp,
        "date_last_used": "0",
        "source": "unknown",
        "name": node.title,
    }

    if isinstance(node, BookmarkFolder):
        edge_node["type"] = FOLDER_TYPE
        edge_node["date_modified"] = timestamp
        edge_node["children"] = [node_to_edge_dict(child, ids, timestamp) for child in node.children]
    else:
        edge_node["type"] = URL_TYPE
        edge_node["url"] = node.url

    return edge_node
