"""
Cache index abstraction mapping cache tokens to blob keys.

Supports an in-memory fallback for tests/local runs and a Redis-backed
implementation for production. Entries expire on their own; nothing here
refreshes or invalidates them.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

import redis


class CacheIndex(Protocol):
    """Minimal key/value interface with per-entry expiry."""

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        ...

    def get(self, key: str) -> Optional[str]:
        ...

    def close(self) -> None:
        ...


@dataclass
class InMemoryCacheIndex:
    """Dictionary-backed cache honouring TTLs against an injectable clock."""

    clock: Callable[[], float] = time.monotonic
    entries: dict[str, tuple[str, float]] = field(default_factory=dict)

    def __post_init__(self):
        self._lock = threading.Lock()

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            self.entries[key] = (value, self.clock() + ttl_seconds)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self.entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self.clock() >= expires_at:
                del self.entries[key]
                return None
            return value

    def close(self) -> None:
        pass


@dataclass
class RedisCacheIndex:
    """Redis-backed cache using SET with EX for expiry."""

    url: str

    def __post_init__(self):
        self.client = redis.Redis.from_url(self.url, decode_responses=True)

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self.client.set(key, value, ex=ttl_seconds)

    def get(self, key: str) -> Optional[str]:
        return self.client.get(key)

    def close(self) -> None:
        self.client.close()
