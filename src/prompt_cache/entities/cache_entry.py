"""Cache entry domain entity."""

import time
from dataclasses import dataclass, field

from .embedding_vector import EmbeddingVector


def now_millis() -> int:
    """Current time as integer epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for a cached query-answer pair.

    This is an internal representation used by the store and services.
    For API contracts and the persisted shape, use the DTO classes from
    the dto package.

    Attributes:
        query: The original user query
        answer: The answer that was given for it
        embedding: The embedding vector of the query
        created_at: Creation time in epoch milliseconds
    """

    query: str
    answer: str
    embedding: EmbeddingVector
    created_at: int = field(default_factory=now_millis)
