"""Navigation location collaborator.

The thread index reads the current hash fragment through a :class:`Location`
rather than a process-wide global, and listens for its change notifications.
"""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

import structlog

logger = structlog.get_logger()

LocationListener = Callable[[str], None]


@runtime_checkable
class Location(Protocol):
    """Readable hash fragment with change notifications."""

    @property
    def hash(self) -> str:
        ...

    def subscribe(self, listener: LocationListener) -> Callable[[], None]:
        ...


class HashLocation:
    """In-memory location; assigning ``hash`` notifies subscribers on change."""

    def __init__(self, hash_: str = "") -> None:
        self._hash = hash_
        self._listeners: list[LocationListener] = []

    @property
    def hash(self) -> str:
        return self._hash

    @hash.setter
    def hash(self, value: str) -> None:
        if value == self._hash:
            return
        self._hash = value
        logger.debug("location_changed", hash=value)
        for listener in list(self._listeners):
            listener(value)

    def subscribe(self, listener: LocationListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
