"""Identifier helpers shared by the draft store and the thread index.

Two identifier spaces coexist: numeric thread ids assigned by the messaging
backend, and generated string ids for drafts that have no thread yet. Every
identifier handed to this package is classified exactly once, here.
"""

from __future__ import annotations

import math
import random
import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Union

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"
_THREAD_HASH = re.compile(r"\bthread=(.+)$")
_PREFIXED_INT = re.compile(r"^[+-]?0[xob][0-9a-f]+$", re.IGNORECASE)

# Never parses as a number, so generated ids always classify as drafts.
DRAFT_ID_PREFIX = "d"


@dataclass(frozen=True)
class ThreadId:
    """Identifier of a backend conversation thread."""

    value: int | float

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class DraftId:
    """Identifier of a draft that has not been promoted to a thread."""

    value: str

    def __str__(self) -> str:
        return self.value


AnyId = Union[ThreadId, DraftId]


def _coerce_number(raw: Any) -> int | float | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        number: int | float = raw
    else:
        text = str(raw).strip()
        if not text:
            number = 0
        else:
            try:
                number = int(text, 0) if _PREFIXED_INT.match(text) else float(text)
            except ValueError:
                return None

    if isinstance(number, float):
        if not math.isfinite(number):
            return None
        if number.is_integer():
            return int(number)
    return number


def is_numeric_id(raw: Any) -> bool:
    """Return True when ``raw`` coerces to a finite number."""

    return _coerce_number(raw) is not None


def to_numeric_id(raw: Any) -> int | float:
    """Coerce ``raw`` to its numeric thread id.

    Raises:
        ValueError: If ``raw`` is not numeric.
    """

    number = _coerce_number(raw)
    if number is None:
        raise ValueError(f"Not a numeric identifier: {raw!r}")
    return number


def classify_id(raw: Any) -> AnyId:
    """Classify ``raw`` as a :class:`ThreadId` or a :class:`DraftId`."""

    if isinstance(raw, (ThreadId, DraftId)):
        return raw
    number = _coerce_number(raw)
    if number is None:
        return DraftId(str(raw))
    return ThreadId(number)


def draft_key(raw: Any) -> str:
    """Normalize any identifier to the string key used by the draft index."""

    if isinstance(raw, (ThreadId, DraftId)):
        return str(raw)
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    return str(raw)


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def _fraction_to_base36(fraction: float, length: int) -> str:
    digits = []
    for _ in range(length):
        fraction *= 36
        digit = int(fraction)
        digits.append(_BASE36[digit])
        fraction -= digit
    return "".join(digits)


def generate_draft_id(
    now_ms: int | None = None,
    rand: Callable[[], float] | None = None,
) -> str:
    """Generate a short id for a draft not yet attached to a thread.

    The id is the draft prefix, the last three base-36 digits of the current
    epoch milliseconds, and eight base-36 digits taken from the fractional
    part of ``1 + random()``. It is collision resistant enough for one
    process on one device, not cryptographically unique.

    Args:
        now_ms: Epoch milliseconds to use instead of the clock.
        rand: Source of random floats in ``[0, 1)``.

    Returns:
        A 12 character string that never coerces to a number.
    """

    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    rand = rand or random.random

    stamp = _to_base36(now_ms)[-3:]
    fraction = (1 + rand()) % 1
    return DRAFT_ID_PREFIX + stamp + _fraction_to_base36(fraction, 8)


def id_from_hash(hash_: str | None) -> str | None:
    """Extract the thread or draft id from a ``thread=<value>`` hash fragment."""

    if not hash_:
        return None
    match = _THREAD_HASH.search(hash_)
    return match.group(1).strip() if match else None
