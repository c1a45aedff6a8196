from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any, Protocol


def _monotonic() -> float:
    return time.monotonic()


class KeyValueStore(Protocol):
    """
    Port for a key-value backend with per-key TTL.

    Every operation is atomic at the key level; callers never need multi-key
    transactions. Values are JSON-serializable mappings.
    """

    def set_json(self, key: str, value: dict[str, Any], ttl: int | None = None) -> None:
        """
        Store ``value`` under ``key``.

        :param ttl: Lifetime in whole seconds; ``None`` keeps the entry forever.
        :raises ValueError: If ``ttl`` is not positive.
        """

    def get_json(self, key: str) -> dict[str, Any] | None:
        """Return the stored mapping, or ``None`` when absent or expired."""

    def delete(self, key: str) -> bool:
        """Remove ``key``. :returns: True only for the caller that actually removed it."""

    def ping(self) -> bool:
        """Report backend reachability."""


class InMemoryKeyValueStore(KeyValueStore):
    """
    In-process key-value store with lazy TTL expiry.

    .. note::
       Uses a threading lock so concurrent requests in one process observe
       per-key atomicity, like the networked backend.
    """

    def __init__(self, clock: Callable[[], float] = _monotonic) -> None:
        self._clock = clock
        self._data: dict[str, tuple[dict[str, Any], float | None]] = {}
        self._lock = threading.Lock()

    def _live(self, key: str) -> dict[str, Any] | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        value, deadline = entry
        if deadline is not None and deadline <= self._clock():
            del self._data[key]
            return None
        return value

    def set_json(self, key: str, value: dict[str, Any], ttl: int | None = None) -> None:
        if ttl is not None and ttl <= 0:
            raise ValueError("ttl must be a positive number of seconds")
        deadline = self._clock() + ttl if ttl is not None else None
        with self._lock:
            self._data[key] = (dict(value), deadline)

    def get_json(self, key: str) -> dict[str, Any] | None:
        with self._lock:
            value = self._live(key)
            return dict(value) if value is not None else None

    def delete(self, key: str) -> bool:
        with self._lock:
            if self._live(key) is None:
                return False
            del self._data[key]
            return True

    def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        with self._lock:
            return sum(1 for key in list(self._data) if self._live(key) is not None)
