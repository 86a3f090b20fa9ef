"""Unit tests for BookmarkStore."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import pytest
from unittest.mock import Mock
from models.bookmark import Bookmark
from services.bookmark_store import BookmarkStore, BOOKMARK_FAILURE_MESSAGE, bookmarks_key
from services.key_value_store import InMemoryKeyValueStore, KeyValueStore, StorageError

CONTENT = "".join(f"Session {i:03d}: easy aerobic run with strides. " for i in range(100))


class TestBookmarkStore:
    """Test suite for BookmarkStore."""

    @pytest.fixture
    def store(self):
        return InMemoryKeyValueStore()

    @pytest.fixture
    def bookmarks(self, store):
        bookmark_store = BookmarkStore(store, "plan-1", initial_delay=0)
        bookmark_store.load()
        return bookmark_store

    def test_load_without_data_is_empty(self, bookmarks):
        assert bookmarks.bookmarks == []

    def test_toggle_adds_bookmark(self, bookmarks, store):
        result = bookmarks.toggle(500, CONTENT)

        assert result.action == "added"
        assert result.persisted is True
        assert result.message == "Bookmark added"
        assert result.bookmark.position == 500
        assert result.bookmark.preview == CONTENT[500:600]
        assert result.bookmark.id.startswith("bm_")
        assert len(store.get(bookmarks_key("plan-1"))) == 1

    def test_toggle_within_window_removes(self, bookmarks, store):
        """Test that toggling again within 99 characters removes the bookmark."""
        bookmarks.toggle(500, CONTENT)
        result = bookmarks.toggle(599, CONTENT)

        assert result.action == "removed"
        assert result.message == "Bookmark removed"
        assert bookmarks.bookmarks == []
        assert store.get(bookmarks_key("plan-1")) == []

    def test_toggle_within_window_below(self, bookmarks):
        bookmarks.toggle(500, CONTENT)
        bookmarks.toggle(401, CONTENT)
        assert bookmarks.bookmarks == []

    @pytest.mark.parametrize("second", [601, 399, 1500])
    def test_toggle_outside_window_adds_second(self, bookmarks, second):
        """Test that toggling 101 or more characters away keeps both bookmarks."""
        bookmarks.toggle(500, CONTENT)
        bookmarks.toggle(second, CONTENT)
        assert len(bookmarks.bookmarks) == 2

    def test_exact_window_distance_adds_second(self, bookmarks):
        bookmarks.toggle(500, CONTENT)
        bookmarks.toggle(600, CONTENT)
        assert [b.position for b in bookmarks.bookmarks] == [500, 600]

    def test_bookmarks_sorted_by_position(self, bookmarks):
        for position in (3000, 200, 1500, 800):
            bookmarks.toggle(position, CONTENT)
        assert [b.position for b in bookmarks.bookmarks] == [200, 800, 1500, 3000]

    def test_preview_without_content(self, bookmarks):
        assert bookmarks.toggle(10).bookmark.preview == ""

    def test_ids_unique(self, bookmarks):
        ids = {bookmarks.toggle(p, CONTENT).bookmark.id for p in range(0, 2000, 200)}
        assert len(ids) == 10

    def test_round_trip_preserves_order_and_fields(self, bookmarks, store):
        """Test that a saved set loads back unchanged."""
        for position in (900, 100, 2400):
            bookmarks.toggle(position, CONTENT)
        saved = list(bookmarks.bookmarks)

        reloaded = BookmarkStore(store, "plan-1").load()

        assert reloaded == saved

    def test_sets_are_per_document(self, bookmarks, store):
        bookmarks.toggle(100, CONTENT)
        other = BookmarkStore(store, "plan-2")
        assert other.load() == []

    def test_load_sorts_and_skips_malformed(self, store):
        store.set(bookmarks_key("plan-1"), [
            {"id": "bm_b", "position": 900, "timestamp": "2026-01-02T00:00:00+00:00", "preview": "b"},
            {"position": 5},
            {"id": "bm_a", "position": 100, "timestamp": "2026-01-01T00:00:00+00:00"},
        ])

        loaded = BookmarkStore(store, "plan-1").load()

        assert [b.id for b in loaded] == ["bm_a", "bm_b"]
        assert loaded[0].preview == ""

    def test_load_failure_yields_empty(self):
        failing = Mock(spec=KeyValueStore)
        failing.get.side_effect = StorageError("unreachable")

        assert BookmarkStore(failing, "plan-1").load() == []

    def test_persist_failure_keeps_change(self):
        """Test that a failed write is reported but not rolled back."""
        failing = Mock(spec=KeyValueStore)
        failing.get.return_value = None
        failing.set.side_effect = StorageError("unreachable")
        bookmark_store = BookmarkStore(failing, "plan-1", max_retries=3, initial_delay=0)
        bookmark_store.load()

        result = bookmark_store.toggle(250, CONTENT)

        assert result.persisted is False
        assert result.message == BOOKMARK_FAILURE_MESSAGE
        assert "unreachable" in result.error
        assert [b.position for b in bookmark_store.bookmarks] == [250]
        assert failing.set.call_count == 3

    def test_transient_read_failure_keeps_bookmarks(self, bookmarks, store):
        """Test that a failed reload leaves stored bookmarks intact."""
        for position in (100, 900, 2400):
            bookmarks.toggle(position, CONTENT)
        key = bookmarks_key("plan-1")

        flaky = Mock(spec=KeyValueStore)
        flaky.get.side_effect = [StorageError("timeout"), store.get(key)]
        flaky.set.side_effect = store.set
        bookmarks.store = flaky

        assert len(bookmarks.load()) == 3
        assert bookmarks.loaded is False

        result = bookmarks.toggle(3500, CONTENT)

        assert result.persisted is True
        assert [b["position"] for b in store.get(key)] == [100, 900, 2400, 3500]

    def test_unreadable_bookmarks_are_not_overwritten(self, store):
        seeded = BookmarkStore(store, "plan-1", initial_delay=0)
        seeded.load()
        seeded.toggle(100, CONTENT)
        seeded.toggle(900, CONTENT)

        unreadable = Mock(spec=KeyValueStore)
        unreadable.get.side_effect = StorageError("timeout")
        bookmark_store = BookmarkStore(unreadable, "plan-1", initial_delay=0)
        bookmark_store.load()

        result = bookmark_store.toggle(2000, CONTENT)

        assert result.persisted is False
        assert result.message == BOOKMARK_FAILURE_MESSAGE
        unreadable.set.assert_not_called()
        assert len(store.get(bookmarks_key("plan-1"))) == 2

    def test_bookmark_dict_round_trip(self):
        bookmark = Bookmark(id="bm_1", position=42, timestamp="2026-10-19T08:00:00+00:00", preview="Tempo")
        assert Bookmark.from_dict(bookmark.to_dict()) == bookmark
