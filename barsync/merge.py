#!/usr/bin/env python3
"""
Replace the favorites bar inside an existing bookmark document.

Only the bar subtree changes; every sibling entry and every other field of
the destination document is passed through as it was read.
"""

import logging
from typing import Dict, List, Sequence

from . import edge_codec, safari_codec
from .edge_codec import EdgeDocument
from .locator import BAR_TITLES, SAFARI_BAR_TITLE, find_bar_index
from .safari_codec import SafariDocument


def place_bar(
    entries: Sequence[Dict],
    bar: Dict,
    title_key: str,
    type_key: str,
    folder_type: str,
    anchor_title: str = SAFARI_BAR_TITLE,
) -> List[Dict]:
    """
    Return a new entry list with ``bar`` in it.

    An existing bar folder is replaced at its position. Otherwise the bar is
    inserted right after the entry titled ``anchor_title``, or first if there
    is no such entry.
    """
    result = list(entries)

    index = find_bar_index(result, title_key, type_key, folder_type, BAR_TITLES)
    if index is not None:
        logging.debug(f"Replacing existing bar at position {index}")
        result[index] = bar
        return result

    insert_at = 0
    for i, entry in enumerate(result):
        if isinstance(entry, dict) and entry.get(title_key) == anchor_title:
            insert_at = i + 1
            break

    logging.debug(f"No existing bar, inserting at position {insert_at}")
    result.insert(insert_at, bar)
    return result


def merge_into_safari(raw: bytes, bar: Dict) -> bytes:
    """Put a Safari bar dictionary into the raw Safari plist ``raw``."""
    document = SafariDocument.from_bytes(raw)
    document.children = place_bar(
        document.children,
        bar,
        title_key="Title",
        type_key="WebBookmarkType",
        folder_type=safari_codec.LIST_TYPE,
    )
    return document.to_bytes()


def merge_into_edge(raw: bytes, bar: Dict) -> bytes:
    """
    Put an Edge bar folder into the raw Edge JSON ``raw``.

    ``roots.bookmark_bar`` is the bar whatever its localized name: its
    children are replaced and its own id, guid and name are kept.
    """
    document = EdgeDocument.from_bytes(raw)
    roots = document.roots

    current = roots.get(edge_codec.BAR_ROOT)
    if isinstance(current, dict) and current.get("type", edge_codec.FOLDER_TYPE) == edge_codec.FOLDER_TYPE:
        updated = dict(current)
        updated["children"] = bar.get("children", [])
        if "date_modified" in bar:
            updated["date_modified"] = bar["date_modified"]
        roots[edge_codec.BAR_ROOT] = updated
        logging.debug(f"Replaced children of Edge bar '{current.get('name', '')}'")
    else:
        roots[edge_codec.BAR_ROOT] = bar
        logging.debug("Edge document has no bar root, installing a new one")

    document.refresh_checksum()
    return document.to_bytes()
