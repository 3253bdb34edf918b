#!/usr/bin/env python3
"""Find the favorites bar folder among the root folders of a bookmark store."""

import logging
from typing import Dict, Iterable, Optional, Sequence

from .errors import BarNotFoundError
from .models import BookmarkFolder, BookmarkNode, IdGenerator

# Title every synced bar gets, whatever it was called in the source store
CANONICAL_BAR_TITLE = "收藏夹栏"

BAR_TITLES = frozenset({
    "Bookmarks Bar",
    "Bookmarks bar",
    "Favorites Bar",
    "Favorites bar",
    CANONICAL_BAR_TITLE,
    "书签栏",
})

# Safari's own toolbar folder; the bar is placed right after it
SAFARI_BAR_TITLE = "BookmarksBar"
SAFARI_SOURCE_TITLES = BAR_TITLES | {SAFARI_BAR_TITLE}


def locate_bar(
    forest: Sequence[BookmarkNode],
    ids: IdGenerator,
    titles: Iterable[str] = BAR_TITLES,
    prefer_largest: bool = False,
    strict: bool = False,
) -> BookmarkFolder:
    """
    Return the folder that represents the favorites bar, re-titled to
    ``CANONICAL_BAR_TITLE``.

    The first top-level folder whose title is in ``titles`` wins, or the one
    with the most children when ``prefer_largest`` is set. If nothing matches,
    a new folder wrapping the whole forest is returned, unless ``strict`` is
    set, in which case ``BarNotFoundError`` is raised.
    """
    titles = frozenset(titles)
    candidates = [node for node in forest if isinstance(node, BookmarkFolder) and node.title in titles]

    if candidates:
        match = candidates[0]
        if prefer_largest:
            match = max(candidates, key=lambda node: len(node.children))
        logging.debug(f"Found favorites bar '{match.title}' ({len(match.children)} entries)")
        return BookmarkFolder(id=match.id, title=CANONICAL_BAR_TITLE, children=match.children)

    root_titles = ", ".join(repr(node.title) for node in forest)
    if strict:
        raise BarNotFoundError(f"No favorites bar folder among root folders: {root_titles}")

    logging.warning(f"No favorites bar folder found among [{root_titles}], wrapping all of them")
    return BookmarkFolder(id=ids.new_uuid(), title=CANONICAL_BAR_TITLE, children=tuple(forest))


def find_bar_index(
    entries: Sequence[Dict],
    title_key: str,
    type_key: str,
    folder_type: str,
    titles: Iterable[str] = BAR_TITLES,
) -> Optional[int]:
    """
    Index of the first native entry that is a folder titled like the bar.

    A same-named entry whose type is not ``folder_type`` is not a match.
    """
    titles = frozenset(titles)
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            continue
        title = entry.get(title_key)
        if isinstance(title, str) and title in titles and entry.get(type_key) == folder_type:
            return index
    return None
