"""In-memory draft index with lazy load from, and explicit flush to, storage.

The index is only persisted by :meth:`DraftStore.store`. The first
:meth:`DraftStore.request` replaces the in-memory index with the persisted
one; drafts added before that load completes are discarded.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterator
from typing import Any, Callable

import structlog

from sms_threads.exceptions import StorageError
from sms_threads.identifiers import draft_key, is_numeric_id
from sms_threads.models import Draft, to_draft
from sms_threads.storage import KeyValueStore

logger = structlog.get_logger()

DEFAULT_STORAGE_KEY = "draft index"


class DraftStore:
    """Collection of drafts keyed by draft id.

    Keys are always strings, so a thread id passed as ``42`` or ``"42"``
    addresses the same draft.
    """

    def __init__(self, storage: KeyValueStore, storage_key: str = DEFAULT_STORAGE_KEY) -> None:
        """Create an empty draft store.

        Args:
            storage: Persistent key-value store holding the draft index.
            storage_key: Key the whole index is stored under.
        """

        self._storage = storage
        self._storage_key = storage_key
        self._index: dict[str, Draft | None] = {}
        self._is_cached = False

    @property
    def is_cached(self) -> bool:
        """Whether the persisted index has been loaded."""
        return self._is_cached

    def add(self, draft: Any) -> DraftStore:
        """Insert or overwrite a draft.

        Args:
            draft: A Draft or any draft-like record. None is ignored.

        Returns:
            The store, for chaining.
        """

        if draft is None:
            return self
        draft = to_draft(draft).model_copy(deep=True)
        self._index[draft.id] = draft
        logger.debug("draft_added", draft_id=draft.id)
        return self

    def delete(self, draft: Any) -> DraftStore:
        """Remove a draft, given the Draft itself or its id. Missing ids are ignored."""

        if draft is None:
            return self
        draft_id = draft.id if isinstance(draft, Draft) else draft
        if self._index.pop(draft_key(draft_id), None) is not None:
            logger.debug("draft_deleted", draft_id=draft_key(draft_id))
        return self

    def get(self, draft_id: Any) -> Draft | None:
        """Return a fresh copy of the stored draft, or None when absent."""

        recalled = self._index.get(draft_key(draft_id))
        return recalled.model_copy(deep=True) if recalled else None

    def has(self, draft_id: Any) -> bool:
        return draft_key(draft_id) in self._index

    def clear(self) -> DraftStore:
        """Discard every draft."""

        self._index = {}
        return self

    def threadless(self) -> list[str]:
        """Ids of drafts that do not belong to a backend thread."""

        return [key for key, value in self._index.items() if not is_numeric_id(key) and value]

    def for_each(self, callback: Callable[[Draft | None, str], Any]) -> None:
        """Call ``callback(draft, draft_id)`` for every entry, in index order."""

        for key, value in list(self._index.items()):
            callback(value, key)

    async def store(self) -> None:
        """Persist the whole index, overwriting the previously stored one.

        Raises:
            StorageError: If the key-value store rejects the write.
        """

        entries = [
            [key, value.model_dump(mode="json") if value else None]
            for key, value in self._index.items()
        ]
        await self._storage.set_item(self._storage_key, entries)
        logger.info("drafts_stored", count=len(entries))

    async def request(self, callback: Callable[[], Any] | None = None) -> None:
        """Make sure the in-memory index reflects persisted state.

        The first call loads the stored index and replaces the in-memory one.
        Later calls do no I/O but still yield to the event loop before
        completing.

        Args:
            callback: Invoked once the index is ready.

        Raises:
            StorageError: If the key-value store cannot be read or holds a
                malformed draft index.
        """

        if self._is_cached:
            await asyncio.sleep(0)
        else:
            records = await self._storage.get_item(self._storage_key)
            self._index = self._hydrate(records or [])
            logger.info("drafts_loaded", count=len(self._index))

        self._is_cached = True
        if callback is not None:
            callback()

    def _hydrate(self, records: Any) -> dict[str, Draft | None]:
        if not isinstance(records, list):
            raise StorageError(
                f"Stored draft index must be a list of [id, draft] pairs, got {type(records).__name__}"
            )

        index: dict[str, Draft | None] = {}
        for entry in records:
            if not isinstance(entry, (list, tuple)) or len(entry) != 2:
                raise StorageError(f"Malformed draft index entry: {entry!r}")
            key, value = entry
            key = draft_key(key)
            if not value:
                index[key] = None
                continue
            if isinstance(value, dict) and not value.get("id"):
                value = {**value, "id": key}
            index[key] = to_draft(value)
        return index

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, draft_id: object) -> bool:
        return self.has(draft_id)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._index))
