"""SQLite-backed key-value store.

Values are stored as JSON text, one row per key. The sqlite3 module is
synchronous, so every call is moved off the event loop with
`asyncio.to_thread`.
"""

from __future__ import annotations

import asyncio
import json
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, TypeVar

import structlog

from sms_threads.config import Settings
from sms_threads.exceptions import StorageError
from sms_threads.utils import retry_on_failure

logger = structlog.get_logger()

T = TypeVar("T")

_SCHEMA_VERSION = 1


class SqliteKeyValueStore:
    """Key-value store persisted in a local SQLite database."""

    def __init__(self, db_path: Path, settings: Settings | None = None) -> None:
        """Create a store.

        Args:
            db_path: Path to the SQLite database file.
            settings: Application settings; retry policy is read from here.
        """
        from sms_threads.config import get_settings

        self._db_path = Path(db_path)
        self._initialized = False
        settings = settings or get_settings()
        self._run_with_retry = retry_on_failure(
            max_retries=settings.storage_max_retries,
            delay=settings.storage_retry_delay,
            exceptions=(sqlite3.OperationalError,),
        )(self._run_in_thread)

    def initialize(self) -> None:
        """Create the schema if needed and check its version."""

        self._db_path.parent.mkdir(parents=True, exist_ok=True)

        with self._connect() as conn:
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS _schema_meta (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );
                """
            )

            current_version = self._get_schema_version(conn)
            if current_version is None:
                self._create_schema_v1(conn)
                self._set_schema_version(conn, _SCHEMA_VERSION)
                conn.commit()
                logger.info("kv_store_schema_created", version=_SCHEMA_VERSION)
            elif current_version != _SCHEMA_VERSION:
                raise StorageError(
                    f"Unsupported schema version {current_version}; expected {_SCHEMA_VERSION}"
                )

        self._initialized = True

    async def get_item(self, key: str) -> Any | None:
        """Read the value stored under ``key``, or None when absent.

        Raises:
            StorageError: If the database cannot be read or the stored value
                is not valid JSON.
        """

        raw = await self._call(self._get_sync, key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.error("kv_item_corrupt", key=key, error=str(exc))
            raise StorageError(f"Stored value for {key!r} is not valid JSON") from exc

    async def set_item(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any previous value.

        Raises:
            StorageError: If the database cannot be written.
        """

        encoded = json.dumps(value)
        await self._call(self._set_sync, key, encoded)
        logger.debug("kv_item_written", key=key, size=len(encoded))

    async def _call(self, func: Callable[..., T], *args: Any) -> T:
        try:
            return await self._run_with_retry(func, *args)
        except sqlite3.Error as exc:
            logger.error("kv_store_failed", operation=func.__name__, error=str(exc))
            raise StorageError(str(exc)) from exc

    async def _run_in_thread(self, func: Callable[..., T], *args: Any) -> T:
        return await asyncio.to_thread(func, *args)

    def _get_sync(self, key: str) -> str | None:
        self._ensure_initialized()
        with self._connect() as conn:
            row = conn.execute("SELECT value FROM kv_items WHERE key = ?", (key,)).fetchone()
        return None if row is None else str(row["value"])

    def _set_sync(self, key: str, encoded: str) -> None:
        self._ensure_initialized()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO kv_items (key, value, updated_at_iso)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value=excluded.value,
                    updated_at_iso=excluded.updated_at_iso
                """,
                (key, encoded, datetime.now(timezone.utc).isoformat()),
            )
            conn.commit()

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            self.initialize()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self._db_path)
        try:
            conn.row_factory = sqlite3.Row
            yield conn
        finally:
            conn.close()

    def _get_schema_version(self, conn: sqlite3.Connection) -> int | None:
        row = conn.execute(
            "SELECT value FROM _schema_meta WHERE key = 'schema_version'"
        ).fetchone()
        if row is None:
            return None
        return int(row[0])

    def _set_schema_version(self, conn: sqlite3.Connection, version: int) -> None:
        conn.execute(
            "INSERT OR REPLACE INTO _schema_meta(key, value) VALUES('schema_version', ?) ",
            (str(version),),
        )

    def _create_schema_v1(self, conn: sqlite3.Connection) -> None:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS kv_items (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at_iso TEXT NOT NULL
            );
            """
        )
