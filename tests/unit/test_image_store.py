"""Tests for nanostudio.core.image_store - SQLite and in-memory stores."""

from __future__ import annotations

import sqlite3

import pytest

from nanostudio.core.errors import StoreError
from nanostudio.core.image_store import InMemoryImageStore, SQLiteImageStore
from nanostudio.core.models import GeneratedImage


def _image(image_id: str, timestamp: int = 1000, prompt: str = "p") -> GeneratedImage:
    return GeneratedImage(
        id=image_id,
        url=f"data:image/png;base64,{image_id}",
        prompt=prompt,
        model="Nano",
        timestamp=timestamp,
    )


@pytest.fixture(params=["sqlite", "memory"])
def store(request, temp_dir):
    """Run every contract test against both implementations."""
    if request.param == "sqlite":
        return SQLiteImageStore(temp_dir / "gallery.db")
    return InMemoryImageStore()


class TestStoreContract:
    """Behaviour shared by every ImageStore."""

    def test_empty_store(self, store):
        assert store.get_all() == []
        assert store.count() == 0

    def test_append_then_get_all(self, store):
        """An appended image comes back with the same id and fields."""
        image = _image("a")
        store.append(image)
        assert store.get_all() == [image]

    def test_clear_then_get_all_is_empty(self, store):
        store.append(_image("a"))
        store.append(_image("b"))
        store.clear()
        assert store.get_all() == []

    def test_newest_first(self, store):
        """Later appends come first."""
        store.append(_image("old", timestamp=1))
        store.append(_image("new", timestamp=2))
        assert [image.id for image in store.get_all()] == ["new", "old"]

    def test_batch_keeps_order_and_goes_first(self, store):
        """A batch is prepended as a block in its own order."""
        store.append(_image("older"))
        store.append_many([_image("b1"), _image("b2"), _image("b3")])
        assert [image.id for image in store.get_all()] == ["b1", "b2", "b3", "older"]

    def test_duplicate_id_rejected(self, store):
        store.append(_image("a"))
        with pytest.raises(StoreError):
            store.append(_image("a"))

    def test_failed_batch_writes_nothing(self, store):
        """A batch with a clashing id leaves the store unchanged."""
        store.append(_image("a"))
        with pytest.raises(StoreError):
            store.append_many([_image("b"), _image("a")])
        assert [image.id for image in store.get_all()] == ["a"]

    def test_count(self, store):
        store.append_many([_image("a"), _image("b")])
        assert store.count() == 2

    def test_empty_prompt_round_trips(self, store):
        store.append(_image("a", prompt=""))
        assert store.get_all()[0].prompt == ""


class TestSQLiteImageStore:
    """SQLite-specific behaviour."""

    def test_persists_across_instances(self, temp_dir):
        """Images survive reopening the database."""
        db_path = temp_dir / "gallery.db"
        SQLiteImageStore(db_path).append(_image("persisted"))

        reopened = SQLiteImageStore(db_path)
        assert [image.id for image in reopened.get_all()] == ["persisted"]

    def test_creates_parent_directory(self, temp_dir):
        db_path = temp_dir / "nested" / "dir" / "gallery.db"
        SQLiteImageStore(db_path)
        assert db_path.exists()

    def test_unavailable_database_raises_store_error(self, temp_dir):
        """A path that cannot be opened as a database raises StoreError."""
        db_path = temp_dir / "gallery.db"
        db_path.mkdir()
        with pytest.raises(StoreError):
            SQLiteImageStore(db_path)

    def test_corrupted_table_raises_store_error(self, temp_dir):
        """Read failures surface as StoreError rather than sqlite3 errors."""
        db_path = temp_dir / "gallery.db"
        store = SQLiteImageStore(db_path)
        with sqlite3.connect(db_path) as conn:
            conn.execute("DROP TABLE images")

        with pytest.raises(StoreError):
            store.get_all()
        with pytest.raises(StoreError):
            store.append(_image("a"))

    def test_append_many_empty_is_noop(self, temp_dir):
        store = SQLiteImageStore(temp_dir / "gallery.db")
        store.append_many([])
        assert store.count() == 0
