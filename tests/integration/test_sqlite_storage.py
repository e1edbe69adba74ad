"""Integration tests for the SQLite key-value store."""

from __future__ import annotations

import sqlite3

import pytest

from sms_threads.drafts import DraftStore
from sms_threads.exceptions import StorageError
from sms_threads.storage import SqliteKeyValueStore


@pytest.mark.integration
class TestSqliteKeyValueStore:
    """Integration tests against a real SQLite file."""

    @pytest.mark.asyncio
    async def test_missing_key_reads_none(self, mock_settings) -> None:
        store = SqliteKeyValueStore(mock_settings.storage_path, mock_settings)

        assert await store.get_item("draft index") is None

    @pytest.mark.asyncio
    async def test_set_overwrites(self, mock_settings) -> None:
        store = SqliteKeyValueStore(mock_settings.storage_path, mock_settings)

        await store.set_item("k", [["a", {"x": 1}]])
        await store.set_item("k", [["b", None]])

        assert await store.get_item("k") == [["b", None]]

    @pytest.mark.asyncio
    async def test_drafts_round_trip_through_file(self, mock_settings) -> None:
        drafts = DraftStore(SqliteKeyValueStore(mock_settings.storage_path, mock_settings))
        drafts.add({"id": "dabc", "recipients": ["555"], "content": ["hi"], "timestamp": 5})
        drafts.add({"id": 42, "subject": "re", "timestamp": 6})
        await drafts.store()

        reopened = DraftStore(SqliteKeyValueStore(mock_settings.storage_path, mock_settings))
        await reopened.request()

        assert list(reopened) == ["dabc", "42"]
        assert reopened.get("dabc") == drafts.get("dabc")
        assert reopened.get(42) == drafts.get(42)

    @pytest.mark.asyncio
    async def test_unsupported_schema_version(self, mock_settings) -> None:
        SqliteKeyValueStore(mock_settings.storage_path, mock_settings).initialize()
        with sqlite3.connect(mock_settings.storage_path) as conn:
            conn.execute("UPDATE _schema_meta SET value = '99' WHERE key = 'schema_version'")

        store = SqliteKeyValueStore(mock_settings.storage_path, mock_settings)

        with pytest.raises(StorageError):
            await store.get_item("k")

    @pytest.mark.asyncio
    async def test_corrupt_value_surfaces_storage_error(self, mock_settings) -> None:
        store = SqliteKeyValueStore(mock_settings.storage_path, mock_settings)
        await store.set_item("draft index", [])
        with sqlite3.connect(mock_settings.storage_path) as conn:
            conn.execute("""UPDATE kv_items SET value = '[["dabc", ' WHERE key = 'draft index'""")

        with pytest.raises(StorageError):
            await store.get_item("draft index")

    @pytest.mark.asyncio
    async def test_unreadable_database_surfaces_storage_error(self, mock_settings, tmp_path) -> None:
        # A directory cannot be opened as a database file.
        store = SqliteKeyValueStore(tmp_path, mock_settings.model_copy(update={"storage_max_retries": 0}))

        with pytest.raises(StorageError):
            await store.set_item("k", 1)
