"""Key-value store interface consumed by the draft store."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Asynchronous persistent key-value store.

    Values must be JSON-compatible. A missing key reads as ``None``.
    """

    async def get_item(self, key: str) -> Any | None:
        ...

    async def set_item(self, key: str, value: Any) -> None:
        ...


class MemoryKeyValueStore:
    """In-process store; values are JSON round-tripped like a real backend would."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    async def get_item(self, key: str) -> Any | None:
        await asyncio.sleep(0)
        raw = self._items.get(key)
        return None if raw is None else json.loads(raw)

    async def set_item(self, key: str, value: Any) -> None:
        await asyncio.sleep(0)
        self._items[key] = json.dumps(value)

    def __contains__(self, key: object) -> bool:
        return key in self._items
