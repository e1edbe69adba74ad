"""Data models for SMS Threads.

This module contains Pydantic models for drafts, threads and the raw message
records delivered by the messaging backend.
"""

from sms_threads.models.draft import ContentPart, Draft, to_draft
from sms_threads.models.message import (
    INBOUND_DELIVERIES,
    Delivery,
    MessageRecord,
    MessageType,
    to_message_record,
)
from sms_threads.models.thread import Thread

__all__ = [
    "ContentPart",
    "Delivery",
    "Draft",
    "INBOUND_DELIVERIES",
    "MessageRecord",
    "MessageType",
    "Thread",
    "to_draft",
    "to_message_record",
]
