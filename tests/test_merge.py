"""Tests for replacing the favorites bar inside existing documents."""

import copy
import json
import plistlib

import pytest

from barsync.edge_codec import edge_checksum
from barsync.errors import ParseError
from barsync.merge import merge_into_edge, merge_into_safari, place_bar

from conftest import edge_data, safari_data

LIST = "WebBookmarkTypeList"
LEAF = "WebBookmarkTypeLeaf"


def folder(title, children=None):
    return {"Title": title, "WebBookmarkType": LIST, "Children": children or []}


def place(entries, bar):
    return place_bar(entries, bar, "Title", "WebBookmarkType", LIST)


@pytest.fixture
def new_bar():
    return folder("收藏夹栏", [{"URLString": "https://example.com/docs", "WebBookmarkType": LEAF}])


class TestPlaceBar:
    def test_replaces_existing_bar_in_place(self, new_bar):
        entries = [folder("BookmarksBar"), folder("Favorites Bar", [folder("old")]), folder("Reading")]
        result = place(entries, new_bar)

        assert len(result) == len(entries)
        assert result[1] is new_bar
        assert result[0] == entries[0]
        assert result[2] == entries[2]

    def test_inserts_after_anchor(self, new_bar):
        entries = [folder("Reading"), folder("BookmarksBar"), folder("BookmarksMenu")]
        result = place(entries, new_bar)

        assert len(result) == len(entries) + 1
        assert result[2] is new_bar
        assert [e for e in result if e is not new_bar] == entries

    def test_inserts_first_without_anchor(self, new_bar):
        entries = [folder("Reading"), folder("BookmarksMenu")]
        result = place(entries, new_bar)
        assert result == [new_bar] + entries

    def test_same_named_link_is_not_replaced(self, new_bar):
        link = {"Title": "收藏夹栏", "WebBookmarkType": LEAF, "URLString": "https://example.com"}
        result = place([link], new_bar)
        assert result == [new_bar, link]

    def test_does_not_mutate_input(self, new_bar):
        entries = [folder("BookmarksBar")]
        snapshot = copy.deepcopy(entries)
        place(entries, new_bar)
        assert entries == snapshot


class TestMergeIntoSafari:
    def test_inserts_after_bookmarks_bar(self, new_bar):
        raw = plistlib.dumps(safari_data(), fmt=plistlib.FMT_BINARY)
        merged = merge_into_safari(raw, new_bar)

        assert merged.startswith(b"bplist00")
        result = plistlib.loads(merged)
        original = safari_data()
        assert [c["Title"] for c in result["Children"]] == ["BookmarksBar", "收藏夹栏", "com.apple.ReadingList"]
        assert result["Children"][0] == original["Children"][0]
        assert result["Children"][2] == original["Children"][1]
        for key in ("Sync", "Title", "WebBookmarkFileVersion", "WebBookmarkType", "WebBookmarkUUID"):
            assert result[key] == original[key]

    def test_replaces_existing_bar(self, new_bar):
        data = safari_data()
        data["Children"].insert(0, folder("收藏夹栏", [folder("stale")]))
        merged = plistlib.loads(merge_into_safari(plistlib.dumps(data), new_bar))

        assert len(merged["Children"]) == 3
        assert merged["Children"][0] == new_bar
        assert merged["Children"][1:] == data["Children"][1:]

    def test_rejects_garbage(self, new_bar):
        with pytest.raises(ParseError):
            merge_into_safari(b"garbage", new_bar)


class TestMergeIntoEdge:
    @pytest.fixture
    def edge_bar(self):
        return {
            "id": "1001",
            "name": "收藏夹栏",
            "type": "folder",
            "date_modified": "13400000000000000",
            "children": [{"id": "1002", "name": "Docs", "type": "url", "url": "https://example.com/new"}],
        }

    def test_replaces_bar_children_only(self, edge_bar):
        original = edge_data()
        merged = json.loads(merge_into_edge(json.dumps(original).encode("utf-8"), edge_bar))

        bar = merged["roots"]["bookmark_bar"]
        assert bar["children"] == edge_bar["children"]
        assert bar["id"] == "1"
        assert bar["name"] == "Bookmarks Bar"
        assert bar["guid"] == original["roots"]["bookmark_bar"]["guid"]
        assert bar["date_modified"] == "13400000000000000"

        assert merged["roots"]["other"] == original["roots"]["other"]
        assert merged["roots"]["synced"] == original["roots"]["synced"]
        assert merged["sync_metadata"] == original["sync_metadata"]
        assert merged["version"] == 1

    def test_recomputes_checksum(self, edge_bar):
        merged = json.loads(merge_into_edge(json.dumps(edge_data()).encode("utf-8"), edge_bar))
        assert merged["checksum"] == edge_checksum(merged["roots"])

    def test_no_checksum_is_not_added(self, edge_bar):
        data = edge_data()
        del data["checksum"]
        merged = json.loads(merge_into_edge(json.dumps(data).encode("utf-8"), edge_bar))
        assert "checksum" not in merged

    def test_installs_missing_bar_root(self, edge_bar):
        data = edge_data()
        del data["roots"]["bookmark_bar"]
        merged = json.loads(merge_into_edge(json.dumps(data).encode("utf-8"), edge_bar))
        assert merged["roots"]["bookmark_bar"] == edge_bar
        assert merged["roots"]["other"] == data["roots"]["other"]

    def test_rejects_document_without_roots(self, edge_bar):
        with pytest.raises(ParseError):
            merge_into_edge(b'{"version": 1}', edge_bar)
