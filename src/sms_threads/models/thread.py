"""Thread model: a conversation summary folded from messages or a draft."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sms_threads.models.message import MessageRecord, MessageType

# Numeric for backend threads; a draft id for transient draft-backed views.
ThreadKey = Union[int, float, str]


class Thread(BaseModel):
    """Conversation summary.

    Only ``messages`` is not a summary field: it is the append-only list of
    raw records folded into this thread and survives every merge.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    SUMMARY_FIELDS: ClassVar[tuple[str, ...]] = (
        "body",
        "id",
        "last_message_subject",
        "last_message_type",
        "participants",
        "timestamp",
        "unread_count",
    )

    id: Optional[ThreadKey] = Field(default=None, description="Thread ID")
    participants: list[str] = Field(default_factory=list, description="Participant addresses")
    body: str = Field(default="", description="Preview of the latest text")
    timestamp: Optional[datetime] = Field(default=None, description="Latest activity")
    last_message_type: str = Field(default=MessageType.SMS.value)
    last_message_subject: str = Field(default="")
    unread_count: int = Field(default=0, ge=0)
    messages: list[MessageRecord] = Field(default_factory=list)

    @classmethod
    def field_name(cls, key: str) -> str | None:
        """Map a snake_case name or camelCase alias to a summary field name."""

        for name in cls.SUMMARY_FIELDS:
            if key == name or key == to_camel(name):
                return name
        return None

    @classmethod
    def summary_of(cls, thread_like: Any) -> dict[str, Any]:
        """Extract the summary fields present on a thread-like record."""

        if isinstance(thread_like, Thread):
            return {name: getattr(thread_like, name) for name in cls.SUMMARY_FIELDS}
        if isinstance(thread_like, Mapping):
            summary: dict[str, Any] = {}
            for key, value in thread_like.items():
                name = cls.field_name(str(key))
                if name is not None:
                    summary[name] = value
            return summary
        return {
            name: getattr(thread_like, name)
            for name in cls.SUMMARY_FIELDS
            if hasattr(thread_like, name)
        }
