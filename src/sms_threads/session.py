"""Messaging session.

This module wires the draft store and thread index to their collaborators
and owns their lifecycle.
"""

import structlog

from sms_threads.config import Settings
from sms_threads.drafts import DraftStore
from sms_threads.navigation import HashLocation, Location
from sms_threads.storage import KeyValueStore, SqliteKeyValueStore
from sms_threads.threads import ThreadIndex

logger = structlog.get_logger()


class MessagingSession:
    """Owner of the draft store and thread index for one application run.

    Call :meth:`start` before showing drafting UI so no draft is added while
    the initial load is still in flight, and :meth:`shutdown` on exit to
    persist drafts.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        storage: KeyValueStore | None = None,
        location: Location | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            settings: Application settings. If None, uses default settings.
            storage: Key-value store for drafts. If None, opens the SQLite
                store at ``settings.storage_path``.
            location: Navigation location. If None, uses an in-memory one.
        """
        from sms_threads.config import get_settings

        self.settings = settings or get_settings()
        if storage is None:
            storage = SqliteKeyValueStore(self.settings.storage_path, self.settings)
        self.storage = storage
        self.location = location if location is not None else HashLocation()
        self.drafts = DraftStore(self.storage, storage_key=self.settings.drafts_storage_key)
        self.threads = ThreadIndex(self.drafts, location=self.location)
        logger.info("messaging_session_initialized")

    async def start(self) -> None:
        """Load persisted drafts.

        Raises:
            StorageError: If the drafts cannot be read.
        """

        await self.drafts.request()
        logger.info("messaging_session_started", drafts=len(self.drafts))

    async def shutdown(self) -> None:
        """Persist drafts, then drop every in-memory thread.

        Raises:
            StorageError: If the drafts cannot be written.
        """

        await self.drafts.store()
        self.threads.clear()
        self.threads.close()
        logger.info("messaging_session_stopped")
