"""Thread index keyed by numeric backend thread id.

Identifiers that do not coerce to a number belong to drafts that were never
sent; lookups for those are answered by the draft store.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from datetime import datetime
from typing import Any, Callable

import structlog
from pydantic import ValidationError

from sms_threads.drafts import DraftStore
from sms_threads.exceptions import MissingIdentifierError
from sms_threads.identifiers import ThreadId, classify_id, id_from_hash, is_numeric_id
from sms_threads.models import MessageRecord, Thread, to_message_record
from sms_threads.navigation import HashLocation, Location
from sms_threads.threads.builders import thread_from_draft, thread_from_message

logger = structlog.get_logger()


def _is_newer(candidate: datetime | None, current: datetime | None) -> bool:
    if candidate is None or current is None:
        return True
    try:
        return candidate >= current
    except TypeError:
        # Naive vs aware timestamps cannot be ordered; newest arrival wins.
        return True


class ThreadIndex:
    """Collection of conversation threads, one per numeric thread id."""

    def __init__(self, drafts: DraftStore, location: Location | None = None) -> None:
        """Create an empty index.

        Args:
            drafts: Draft store answering for non-numeric ids.
            location: Source of the current navigation hash. Defaults to an
                empty in-memory location.
        """

        self._drafts = drafts
        self._threads: dict[int | float, Thread] = {}
        self._location = location if location is not None else HashLocation()
        self._last_id: str | None = None
        self._unsubscribe = self._location.subscribe(self._on_location_changed)

    def close(self) -> None:
        """Stop listening for location changes."""
        self._unsubscribe()

    def register_message(self, message: Any, *, read: bool = False) -> Thread:
        """Fold a raw message into its thread, creating the thread if needed.

        Args:
            message: MessageRecord or mapping carrying a ``threadId``.
            read: Whether the message was already read.

        Returns:
            The thread the message was appended to.

        Raises:
            MissingIdentifierError: If the message has no numeric thread id.
        """

        record = to_message_record(message)
        raw_id = record.thread_id
        if raw_id is None or raw_id == "" or not is_numeric_id(raw_id):
            raise MissingIdentifierError(f"Message {record.id!r} has no usable thread id")

        thread_id = classify_id(raw_id).value
        thread = self._threads.get(thread_id)
        if thread is None:
            thread = self.set(thread_id, thread_from_message(record, read=read))
        else:
            self._fold(thread, record, read)

        thread.messages.append(record)
        logger.debug(
            "message_registered",
            thread_id=thread_id,
            message_id=record.id,
            message_count=len(thread.messages),
        )
        return thread

    def set(self, thread_id: Any, thread: Any) -> Thread:
        """Insert a thread, or merge fields into the existing one in place.

        Merging overwrites summary fields one by one. The existing ``messages``
        list and the Thread object itself are kept.

        Raises:
            MissingIdentifierError: If ``thread_id`` is not numeric.
        """

        ident = classify_id(thread_id)
        if not isinstance(ident, ThreadId):
            raise MissingIdentifierError(f"Thread id must be numeric, got {thread_id!r}")
        key = ident.value

        if isinstance(thread, Mapping):
            ignored = [k for k in thread if k != "messages" and Thread.field_name(str(k)) is None]
            if ignored:
                logger.debug("thread_fields_ignored", thread_id=key, fields=ignored)

        summary = Thread.summary_of(thread)
        summary["id"] = key

        existing = self._threads.get(key)
        if existing is None:
            created = self._build(summary)
            self._threads[key] = created
            return created

        for name, value in summary.items():
            try:
                setattr(existing, name, value)
            except ValidationError as exc:
                logger.warning("thread_field_rejected", thread_id=key, field=name, error=str(exc))
        return existing

    def get(self, thread_id: Any) -> Thread | None:
        """Look up a thread, or a transient thread view of a draft."""

        ident = classify_id(thread_id)
        if isinstance(ident, ThreadId):
            return self._threads.get(ident.value)
        draft = self._drafts.get(ident.value)
        return thread_from_draft(draft, read=True) if draft else None

    def has(self, thread_id: Any) -> bool:
        ident = classify_id(thread_id)
        if isinstance(ident, ThreadId):
            return ident.value in self._threads
        return self._drafts.has(ident.value)

    def delete(self, thread_id: Any) -> bool:
        """Remove a thread and any draft stored under the same id.

        Returns:
            True if a thread was removed from the index.
        """

        if self._drafts.has(thread_id):
            self._drafts.delete(thread_id)

        ident = classify_id(thread_id)
        if not isinstance(ident, ThreadId):
            return False
        return self._threads.pop(ident.value, None) is not None

    def clear(self) -> None:
        """Discard every thread. Drafts are left alone."""
        self._threads = {}

    def for_each(self, callback: Callable[[Thread, int | float], Any]) -> None:
        for key, thread in list(self._threads.items()):
            callback(thread, key)

    @staticmethod
    def id_from_hash(hash_: str | None) -> str | None:
        return id_from_hash(hash_)

    def has_draft(self, thread_id: Any) -> bool:
        """True for an unsent draft that has not been promoted to a thread."""
        return not is_numeric_id(thread_id) and self._drafts.has(thread_id)

    def thread_has_draft(self, thread: Thread | Any) -> bool:
        """True when a draft is stored under the same id as ``thread``."""

        thread_id = thread.id if isinstance(thread, Thread) else thread
        if thread_id is None:
            return False
        return self._drafts.has(thread_id)

    @staticmethod
    def is_draft_id(thread_id: Any) -> bool:
        return not is_numeric_id(thread_id)

    @property
    def size(self) -> int:
        return len(self._threads)

    @property
    def current_id(self) -> str | None:
        """Id named by the current location hash, if any."""

        current = id_from_hash(self._location.hash)
        if current:
            self._last_id = current
        return current

    @property
    def last_id(self) -> str | None:
        """Current id, or the last one seen when the location names none."""

        return self.current_id or self._last_id

    @property
    def active(self) -> Thread | None:
        current = self.current_id
        return self.get(current) if current else None

    def _on_location_changed(self, hash_: str) -> None:
        current = id_from_hash(hash_)
        if current:
            self._last_id = current

    def _fold(self, thread: Thread, record: MessageRecord, read: bool) -> None:
        if not read:
            thread.unread_count += 1
        if not _is_newer(record.timestamp, thread.timestamp):
            return

        latest = thread_from_message(record, read=True)
        thread.body = latest.body
        thread.last_message_type = latest.last_message_type
        thread.last_message_subject = latest.last_message_subject
        if latest.timestamp is not None:
            thread.timestamp = latest.timestamp

    def _build(self, summary: dict[str, Any]) -> Thread:
        try:
            return Thread.model_validate(summary)
        except ValidationError as exc:
            invalid = {str(err["loc"][0]) for err in exc.errors() if err["loc"]}
            logger.warning("thread_fields_defaulted", thread_id=summary.get("id"), fields=sorted(invalid))
            return Thread.model_validate({k: v for k, v in summary.items() if k not in invalid})

    def __len__(self) -> int:
        return len(self._threads)

    def __iter__(self) -> Iterator[int | float]:
        return iter(list(self._threads))

    def __contains__(self, thread_id: object) -> bool:
        return self.has(thread_id)
