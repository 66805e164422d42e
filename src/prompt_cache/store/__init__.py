"""In-memory cache store with FIFO eviction."""

from .cache_store import CacheStore

__all__ = ["CacheStore"]
