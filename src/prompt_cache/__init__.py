"""Prompt Cache - semantic response cache with FIFO eviction.

Given a new query, decides via cosine similarity over previously
answered queries whether a cached answer is close enough to reuse.

Layers:
    - entities: Domain models (EmbeddingVector, CacheEntryEntity, CacheMatchEntity)
    - store: Bounded in-memory store with FIFO eviction
    - services: Similarity search and cache orchestration
    - protocols: Interface contracts (EmbeddingProvider, SnapshotStorage)
    - repositories: Embedding model and snapshot storage implementations
    - handlers: Message transport and HTTP handlers
    - dto: Data transfer objects (transport, API and persisted contracts)

Usage:
    ```python
    from prompt_cache.repositories import JsonFileStorage, LocalEmbeddingProvider
    from prompt_cache.services import CacheService

    cache = CacheService.create(
        embedding_provider=LocalEmbeddingProvider.create(),
        storage=JsonFileStorage.create(),
    )
    match = await cache.lookup("What is a semantic cache?")
    ```

For HTTP API:
    ```python
    from prompt_cache.api.app import app
    ```
"""

from prompt_cache.config import settings
from prompt_cache.entities import CacheEntryEntity, CacheMatchEntity, EmbeddingVector, similarity
from prompt_cache.errors import (
    CacheError,
    DimensionMismatch,
    EmbeddingUnavailable,
    PersistenceFailure,
    ZeroNormVector,
)
from prompt_cache.handlers import CacheHandler, MessageHandler
from prompt_cache.protocols import EmbeddingProvider, SnapshotStorage
from prompt_cache.services import CacheService, SimilaritySearch, find_best_match
from prompt_cache.store import CacheStore

__all__ = [
    # Configuration
    "settings",
    # Errors
    "CacheError",
    "DimensionMismatch",
    "EmbeddingUnavailable",
    "PersistenceFailure",
    "ZeroNormVector",
    # Protocols (interfaces)
    "EmbeddingProvider",
    "SnapshotStorage",
    # Core
    "CacheStore",
    "SimilaritySearch",
    "find_best_match",
    "CacheService",
    # Handlers
    "CacheHandler",
    "MessageHandler",
    # Entities (domain models)
    "CacheEntryEntity",
    "CacheMatchEntity",
    "EmbeddingVector",
    "similarity",
]
