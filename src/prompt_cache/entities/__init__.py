"""Domain entities for internal representation.

These are pure dataclasses (frozen where they represent cached data)
used internally by the store and services. They are NOT used for API
contracts or the persisted record - use DTOs from the dto package for that.

Entities should have:
- No JSON serialization logic
- No Pydantic validation
- Pure domain logic only
"""

from .cache_entry import CacheEntryEntity, now_millis
from .cache_match import CacheMatchEntity
from .cache_metrics import CacheMetrics
from .embedding_vector import EmbeddingVector, similarity

__all__ = [
    "CacheEntryEntity",
    "CacheMatchEntity",
    "CacheMetrics",
    "EmbeddingVector",
    "now_millis",
    "similarity",
]
