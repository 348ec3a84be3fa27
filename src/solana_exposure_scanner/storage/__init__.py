"""Storage module - scan result caching."""

from solana_exposure_scanner.storage.cache import (
    MemoryScanCache,
    RedisScanCache,
    ScanCache,
    cache_key,
)

__all__ = [
    "MemoryScanCache",
    "RedisScanCache",
    "ScanCache",
    "cache_key",
]
