"""Builders turning raw messages and drafts into Thread summaries."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sms_threads.models import (
    INBOUND_DELIVERIES,
    Draft,
    MessageRecord,
    MessageType,
    Thread,
    to_draft,
    to_message_record,
)


def _participants(message: MessageRecord) -> list[str]:
    if message.delivery is None:
        return []
    if message.delivery in INBOUND_DELIVERIES:
        return [message.sender or ""]
    if message.receivers is not None:
        return list(message.receivers)
    return [message.receiver or ""]


def _first_text(content: list[Any]) -> str:
    return next((part for part in content if isinstance(part, str)), "")


def _from_epoch_ms(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def thread_from_message(record: Any, *, read: bool = False) -> Thread:
    """Build a thread summary from a single raw message.

    Inbound messages (received or not yet downloaded) list the sender as the
    participant; outbound ones list the receivers.

    Args:
        record: MessageRecord or a mapping with message fields.
        read: Whether the message was already read.

    Returns:
        A new Thread whose ``messages`` list is empty.
    """

    message = to_message_record(record)
    return Thread(
        id=message.thread_id,
        participants=_participants(message),
        body=message.body or "",
        timestamp=message.timestamp,
        unread_count=0 if read else 1,
        last_message_type=message.type or MessageType.SMS.value,
        last_message_subject=message.subject or "",
    )


def thread_from_draft(record: Any, *, read: bool = False) -> Thread:
    """Build a transient thread view of a draft.

    The preview body is the first plain-text content part.
    """

    draft: Draft = to_draft(record)
    return Thread(
        id=draft.id,
        participants=list(draft.recipients) or [""],
        body=_first_text(draft.content),
        timestamp=_from_epoch_ms(draft.timestamp),
        unread_count=0 if read else 1,
        last_message_type=draft.type or MessageType.SMS.value,
        last_message_subject=draft.subject,
    )


def create_thread(record: Any, *, read: bool = False) -> Thread:
    """Build a thread from a message or a draft.

    Records with a ``delivery`` value are messages; everything else is treated
    as a draft. Threads are returned unchanged.
    """

    if isinstance(record, Thread):
        return record
    if isinstance(record, MessageRecord):
        delivery = record.delivery
    elif isinstance(record, dict):
        delivery = record.get("delivery")
    else:
        delivery = getattr(record, "delivery", None)

    if delivery is not None:
        return thread_from_message(record, read=read)
    return thread_from_draft(record, read=read)
