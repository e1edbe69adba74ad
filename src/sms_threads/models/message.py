"""Raw message records and the enums describing them."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

logger = structlog.get_logger()


class Delivery(str, Enum):
    """Delivery state reported by the messaging backend."""

    RECEIVED = "received"
    NOT_DOWNLOADED = "not-downloaded"
    SENT = "sent"


class MessageType(str, Enum):
    """Message type tags."""

    SMS = "sms"


# Messages in these states were sent to us, so the sender is the participant.
INBOUND_DELIVERIES = frozenset({Delivery.RECEIVED.value, Delivery.NOT_DOWNLOADED.value})


def _address(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class MessageRecord(BaseModel):
    """Raw message record supplied by the messaging backend."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: Optional[Union[int, str]] = Field(default=None, description="Backend message ID")
    thread_id: Optional[Union[int, float, str]] = Field(
        default=None, description="Backend thread ID"
    )
    delivery: Optional[str] = Field(default=None, description="Delivery state")
    sender: Optional[str] = Field(default=None, description="Sender address")
    receiver: Optional[str] = Field(default=None, description="Single receiver address")
    receivers: Optional[list[str]] = Field(default=None, description="Receiver addresses")
    body: Optional[str] = Field(default=None, description="Text body")
    subject: Optional[str] = Field(default=None, description="Subject (mms)")
    timestamp: Optional[datetime] = Field(default=None, description="Message date")
    type: Optional[str] = Field(default=None, description="Message type tag")

    @field_validator("sender", "receiver", mode="before")
    @classmethod
    def _stringify_address(cls, value: Any) -> Any:
        return _address(value)

    @field_validator("receivers", mode="before")
    @classmethod
    def _stringify_addresses(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return [_address(item) for item in value]
        return value


def _record_fields(record: Any) -> dict[str, Any]:
    if record is None:
        return {}
    if isinstance(record, Mapping):
        return {str(key): value for key, value in record.items()}
    return {
        name: getattr(record, name)
        for name in MessageRecord.model_fields
        if hasattr(record, name)
    }


def to_message_record(record: Any) -> MessageRecord:
    """Convert a raw backend message into a :class:`MessageRecord`.

    Fields that fail validation are dropped and defaulted rather than
    rejected, so a malformed field never prevents a message from being
    folded into its thread.

    Args:
        record: A MessageRecord, a mapping, or any object exposing message
            attributes.

    Returns:
        MessageRecord: The input itself when it already is one, else a new one.
    """

    if isinstance(record, MessageRecord):
        return record

    data = _record_fields(record)
    try:
        return MessageRecord.model_validate(data)
    except ValidationError as exc:
        invalid = {str(err["loc"][0]) for err in exc.errors() if err["loc"]}
        logger.warning(
            "message_fields_defaulted",
            message_id=data.get("id"),
            fields=sorted(invalid),
        )
        kept = {
            key: value
            for key, value in data.items()
            if key not in invalid and to_camel(key) not in invalid
        }
        return MessageRecord.model_validate(kept)
