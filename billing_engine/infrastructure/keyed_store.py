"""Keyed store with TTL, injected per app instead of held in module globals.

Provides :class:`KeyedStore` (abstract base) and :class:`InMemoryKeyedStore`
(default implementation backed by a dict). Used to replay responses for
repeated ``Idempotency-Key`` requests.
"""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Tuple


class KeyedStore(ABC):
    """Abstract base class for keyed stores.

    Subclass this to plug in Redis or any other shared backend.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the stored value, or ``None`` on miss / expiry."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store *value* under *key*, replacing any previous value."""

    @abstractmethod
    def sweep(self) -> int:
        """Drop expired entries and return how many were removed."""


class InMemoryKeyedStore(KeyedStore):
    """Dict-backed store with per-entry TTL, safe to share across threads.

    Args:
        ttl_seconds: Time-to-live for each entry in seconds.
        sweep_threshold: Size above which `set` sweeps expired entries.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        sweep_threshold: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._sweep_threshold = sweep_threshold
        self._clock = clock
        self._lock = threading.Lock()
        # key -> (stored_at, value)
        self._store: Dict[str, Tuple[float, Any]] = {}

    def _expired(self, stored_at: float) -> bool:
        return self._clock() - stored_at >= self._ttl

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._expired(stored_at):
                self._store.pop(key, None)
                return None
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._store[key] = (self._clock(), value)
            if len(self._store) > self._sweep_threshold:
                self._sweep_locked()

    def sweep(self) -> int:
        with self._lock:
            return self._sweep_locked()

    def _sweep_locked(self) -> int:
        expired = [key for key, (stored_at, _) in self._store.items() if self._expired(stored_at)]
        for key in expired:
            del self._store[key]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


def with_idempotency(store: KeyedStore, key: str | None, fn: Callable[[], Any]) -> Tuple[Any, bool]:
    """Run *fn* once per *key*, replaying the stored result on repeats.

    Returns ``(result, replayed)``. Without a key, *fn* always runs.
    """
    if not key:
        return fn(), False

    cached = store.get(key)
    if cached is not None:
        return cached, True

    result = fn()
    store.set(key, result)
    return result, False
