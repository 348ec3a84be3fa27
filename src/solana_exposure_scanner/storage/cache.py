"""Scan result caches.

Caches store the serialized (`ExposureResult.to_dict`) form of a result
under a key, with a time-to-live. Two backends are provided: a bounded
in-process store and Redis.
"""

import json
import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any, Protocol

from redis.asyncio import Redis

from solana_exposure_scanner.ingestor.models import SolanaNetwork

logger = logging.getLogger(__name__)

# Default configuration
DEFAULT_TTL_SECONDS = 600  # 10 minutes
DEFAULT_MAX_ENTRIES = 100
DEFAULT_REDIS_KEY_PREFIX = "exposure:"


def cache_key(address: str, network: SolanaNetwork) -> str:
    """Build the cache key of a scan (network-scoped)."""
    return f"{network.value}:{address}"


class ScanCache(Protocol):
    async def get(self, key: str) -> dict[str, Any] | None: ...

    async def set(self, key: str, value: dict[str, Any]) -> None: ...


class MemoryScanCache:
    """Bounded in-process cache of key -> (value, expiry).

    When full, the entry closest to expiry is evicted first (entries share
    one TTL, so that is also the oldest insertion). Expired entries are
    dropped lazily on access.

    Example:
        ```python
        cache = MemoryScanCache(ttl_seconds=600, max_entries=100)
        await cache.set("mainnet:addr", result.to_dict())
        data = await cache.get("mainnet:addr")
        ```
    """

    def __init__(
        self,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, tuple[dict[str, Any], float]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> dict[str, Any] | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: dict[str, Any]) -> None:
        now = self._clock()
        self._entries.pop(key, None)
        self._purge_expired(now)
        while len(self._entries) >= self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted cached scan %s", evicted)
        self._entries[key] = (value, now + self._ttl)

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()


class RedisScanCache:
    """Redis-backed scan cache using `SET key value EX ttl`."""

    def __init__(
        self,
        redis: Redis,
        *,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        key_prefix: str = DEFAULT_REDIS_KEY_PREFIX,
    ) -> None:
        self._redis = redis
        self._ttl = ttl_seconds
        self._prefix = key_prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> dict[str, Any] | None:
        cached = await self._redis.get(self._key(key))
        if cached is None:
            return None
        data = json.loads(cached if isinstance(cached, str) else cached.decode())
        if not isinstance(data, dict):
            raise ValueError(f"Cached scan for {key} is not an object")
        return data

    async def set(self, key: str, value: dict[str, Any]) -> None:
        await self._redis.set(self._key(key), json.dumps(value), ex=self._ttl)

    async def close(self) -> None:
        await self._redis.aclose()
