#!/usr/bin/env python3
"""Common data models for Edge/Safari bookmark conversion."""

import itertools
import re
import uuid
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple, Union


@dataclass(frozen=True)
class Bookmark:
    """Represents a single bookmark (link leaf)."""
    id: str
    title: str
    url: str


@dataclass(frozen=True)
class BookmarkFolder:
    """Represents a bookmark folder containing other bookmarks or folders."""
    id: str
    title: str
    children: Tuple[Union["Bookmark", "BookmarkFolder"], ...] = ()


BookmarkNode = Union[Bookmark, BookmarkFolder]


def make_node(
    node_id: str,
    title: str,
    url: Optional[str] = None,
    children: Optional[Sequence[BookmarkNode]] = None,
) -> BookmarkNode:
    """
    Build a node from loose native fields.

    A node is a folder if it has a non-empty children sequence or no address,
    otherwise it is a link.
    """
    if children or url is None:
        return BookmarkFolder(id=node_id, title=title, children=tuple(children or ()))
    return Bookmark(id=node_id, title=title, url=url)


def count_items(nodes: Iterable[BookmarkNode]) -> Tuple[int, int]:
    """Count total bookmarks and folders."""
    bookmarks, folders = 0, 0
    for node in nodes:
        if isinstance(node, Bookmark):
            bookmarks += 1
        elif isinstance(node, BookmarkFolder):
            sub_bm, sub_fl = count_items(node.children)
            bookmarks += sub_bm
            folders += 1 + sub_fl
    return bookmarks, folders


# ============== ID Generation ==============

_NUMERIC_ID = re.compile(r"^\d+$")


class IdGenerator:
    """
    Identifier source owned by a single sync run.

    Edge ids are decimal strings handed out from a counter; Safari ids are
    upper-case UUIDs.
    """

    def __init__(self, start: int = 1000, uuid_factory=uuid.uuid4):
        self._counter = itertools.count(start + 1)
        self._uuid_factory = uuid_factory

    def reserve(self, existing_ids: Iterable[str]):
        """Move the Edge counter past every numeric id in ``existing_ids``."""
        numeric = [int(i) for i in existing_ids if isinstance(i, str) and _NUMERIC_ID.match(i)]
        if not numeric:
            return
        current = next(self._counter)
        self._counter = itertools.count(max(current, max(numeric) + 1))

    def next_edge_id(self) -> str:
        return str(next(self._counter))

    def new_uuid(self) -> str:
        return str(self._uuid_factory()).upper()
