"""Draft model: an unsent message waiting in the draft store."""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import Any, Union

import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator

from sms_threads.identifiers import draft_key, generate_draft_id
from sms_threads.models.message import MessageType

logger = structlog.get_logger()

# Plain strings are text; attachments are stored as JSON-compatible mappings.
ContentPart = Union[str, dict[str, Any]]


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class Draft(BaseModel):
    """Unsent message content, stored temporarily in the draft store."""

    id: str = Field(
        default_factory=generate_draft_id,
        frozen=True,
        description="Draft ID; a stringified thread ID or a generated one",
    )
    recipients: list[str] = Field(
        default_factory=lambda: [""],
        description="Recipient addresses",
    )
    content: list[ContentPart] = Field(
        default_factory=list,
        description="Ordered content parts (text and attachments)",
    )
    subject: str = Field(default="", description="Subject line")
    timestamp: int = Field(
        default_factory=_now_ms,
        description="Last modification time in epoch milliseconds",
    )
    type: str = Field(default=MessageType.SMS.value, description="Message type tag")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_numeric_id(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return draft_key(value)
        return value


_DRAFT_FIELDS = tuple(Draft.model_fields)

# JS-style "value || default": these fields also fall back when falsy.
_FALSY_DEFAULTED = frozenset({"id", "timestamp", "type"})


def _record_fields(record: Any) -> dict[str, Any]:
    if record is None:
        return {}
    if isinstance(record, Mapping):
        return dict(record)
    return {name: getattr(record, name) for name in _DRAFT_FIELDS if hasattr(record, name)}


def to_draft(record: Any) -> Draft:
    """Convert a draft-like record into a canonical :class:`Draft`.

    Missing fields get their defaults. Fields that fail validation are
    dropped and defaulted rather than rejected.

    Args:
        record: A Draft, a mapping, or any object exposing draft attributes.

    Returns:
        Draft: The input itself when it already is a Draft, else a new one.
    """

    if isinstance(record, Draft):
        return record

    data = _record_fields(record)
    fields: dict[str, Any] = {}
    for name in _DRAFT_FIELDS:
        value = data.get(name)
        if value is None:
            continue
        if name in _FALSY_DEFAULTED and not value:
            continue
        fields[name] = value

    try:
        return Draft.model_validate(fields)
    except ValidationError as exc:
        invalid = {str(err["loc"][0]) for err in exc.errors() if err["loc"]}
        logger.warning(
            "draft_fields_defaulted",
            draft_id=fields.get("id"),
            fields=sorted(invalid),
        )
        return Draft.model_validate({k: v for k, v in fields.items() if k not in invalid})
