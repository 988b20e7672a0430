import asyncio
import time
from typing import Any, Dict, Optional
from dataclasses import dataclass


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


class TTLCache:
    """In-memory TTL cache with LRU eviction, used for sign-in nonces and revoked sessions"""

    def __init__(self, default_ttl: int = 300, max_size: int = 10000):
        self.default_ttl = default_ttl
        self.max_size = max_size
        self._cache: Dict[str, CacheEntry] = {}
        self._access_order: list = []
        self._lock = asyncio.Lock()

    def _expire(self, key: str, now: float) -> Optional[CacheEntry]:
        entry = self._cache.get(key)
        if entry is None:
            return None
        if now > entry.expires_at:
            self._remove(key)
            return None
        return entry

    def _remove(self, key: str) -> None:
        self._cache.pop(key, None)
        if key in self._access_order:
            self._access_order.remove(key)

    async def get(self, key: str) -> Optional[Any]:
        async with self._lock:
            entry = self._expire(key, time.time())
            if entry is None:
                return None

            # Update access order for LRU
            self._access_order.remove(key)
            self._access_order.append(key)

            return entry.value

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        async with self._lock:
            ttl = ttl or self.default_ttl
            self._cache[key] = CacheEntry(value=value, expires_at=time.time() + ttl)

            if key in self._access_order:
                self._access_order.remove(key)
            self._access_order.append(key)

            # Evict oldest if over max size
            while len(self._cache) > self.max_size:
                self._remove(self._access_order[0])

    async def pop(self, key: str) -> Optional[Any]:
        """Remove and return a live entry; a key can be consumed once."""
        async with self._lock:
            entry = self._expire(key, time.time())
            if entry is None:
                return None
            self._remove(key)
            return entry.value
