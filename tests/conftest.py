"""Shared fixtures: small Edge and Safari bookmark files."""

import errno
import itertools
import json
import plistlib
import uuid
from pathlib import Path
from unittest.mock import patch

import pytest

from barsync.models import IdGenerator

WORK_UUID = "6A0C5B2E-1D41-4C7A-9F3B-2C8E5D7A1B90"
READING_LIST_UUID = "3B8F2A10-9C4D-4E5F-8A6B-7C9D0E1F2A3B"
BOOKMARKS_BAR_UUID = "0F1E2D3C-4B5A-4968-8776-A5B4C3D2E1F0"


def edge_data():
    return {
        "checksum": "00000000000000000000000000000000",
        "roots": {
            "bookmark_bar": {
                "children": [
                    {
                        "children": [
                            {
                                "date_added": "13350000000000000",
                                "guid": "5f8c1e0a-1111-4a2b-9c3d-000000000004",
                                "id": "4",
                                "name": "Tracker",
                                "type": "url",
                                "url": "https://example.com/tracker",
                            }
                        ],
                        "date_added": "13350000000000000",
                        "date_modified": "13350000000000000",
                        "guid": "5f8c1e0a-1111-4a2b-9c3d-000000000005",
                        "id": "5",
                        "name": "Work",
                        "type": "folder",
                    },
                    {
                        "date_added": "13350000000000000",
                        "guid": "5f8c1e0a-1111-4a2b-9c3d-000000000006",
                        "id": "6",
                        "name": "Docs",
                        "type": "url",
                        "url": "https://example.com/docs",
                    },
                ],
                "date_added": "13350000000000000",
                "date_modified": "13350000000000000",
                "guid": "0bc5d13f-2cba-5d74-951f-3f233fe6c908",
                "id": "1",
                "name": "Bookmarks Bar",
                "type": "folder",
            },
            "other": {
                "children": [
                    {
                        "guid": "5f8c1e0a-1111-4a2b-9c3d-000000000007",
                        "id": "7",
                        "name": "Recipes",
                        "type": "url",
                        "url": "https://example.com/recipes",
                    }
                ],
                "guid": "82b081ec-3dd3-529c-8475-ab6c344590dd",
                "id": "2",
                "name": "Other Bookmarks",
                "type": "folder",
            },
            "synced": {
                "children": [],
                "guid": "4cf2e351-0e85-532b-bb37-df045d8f8d0f",
                "id": "3",
                "name": "Mobile Bookmarks",
                "type": "folder",
            },
        },
        "sync_metadata": "c29tZSBvcGFxdWUgZGF0YQ==",
        "version": 1,
    }


def safari_data():
    return {
        "Children": [
            {
                "Children": [],
                "Title": "BookmarksBar",
                "WebBookmarkType": "WebBookmarkTypeList",
                "WebBookmarkUUID": BOOKMARKS_BAR_UUID,
            },
            {
                "Children": [
                    {
                        "URIDictionary": {"title": "Saved article"},
                        "URLString": "https://example.com/article",
                        "WebBookmarkType": "WebBookmarkTypeLeaf",
                        "WebBookmarkUUID": "9E8D7C6B-5A49-4837-A261-5F4E3D2C1B0A",
                    }
                ],
                "Title": "com.apple.ReadingList",
                "WebBookmarkType": "WebBookmarkTypeList",
                "WebBookmarkUUID": READING_LIST_UUID,
            },
        ],
        "Sync": {"ServerData": b"\x00\x01\x02"},
        "Title": "",
        "WebBookmarkFileVersion": 1,
        "WebBookmarkType": "WebBookmarkTypeList",
        "WebBookmarkUUID": "11111111-2222-4333-8444-555555555555",
    }


def write_edge(path, data):
    path.write_text(json.dumps(data, indent=3), encoding="utf-8")
    return path


def write_safari(path, data, fmt=plistlib.FMT_BINARY):
    path.write_bytes(plistlib.dumps(data, fmt=fmt))
    return path


def sequential_uuids():
    counter = itertools.count(1)
    return lambda: uuid.UUID(int=next(counter))


def deny_stat(target):
    """Patch ``Path.stat`` to fail with EPERM for ``target`` only."""
    real_stat = Path.stat

    def stat(self, *args, **kwargs):
        if self == target:
            raise PermissionError(errno.EPERM, "Operation not permitted", str(self))
        return real_stat(self, *args, **kwargs)

    return patch.object(Path, "stat", stat)


@pytest.fixture
def edge_file(tmp_path):
    return write_edge(tmp_path / "Bookmarks", edge_data())


@pytest.fixture
def safari_file(tmp_path):
    return write_safari(tmp_path / "Bookmarks.plist", safari_data())


@pytest.fixture
def ids():
    return IdGenerator(uuid_factory=sequential_uuids())


@pytest.fixture
def not_running():
    return lambda browser: False
