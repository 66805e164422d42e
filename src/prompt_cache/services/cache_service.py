"""Cache service for core business logic.

This service orchestrates cache operations by coordinating the store
(in-memory entries), the similarity search, the embedding provider
(vector generation) and the snapshot storage (durability).
"""

import asyncio
import logging
import math
import time

from prompt_cache.config import settings
from prompt_cache.entities import (
    CacheEntryEntity,
    CacheMatchEntity,
    CacheMetrics,
    EmbeddingVector,
    now_millis,
)
from prompt_cache.errors import DimensionMismatch, EmbeddingUnavailable, PersistenceFailure
from prompt_cache.protocols import EmbeddingProvider, SnapshotStorage
from prompt_cache.store import CacheStore

from .similarity_search import SimilaritySearch

logger = logging.getLogger(__name__)


class CacheService:
    """Core cache orchestration service.

    This service depends on PROTOCOLS, not concrete implementations:
    - EmbeddingProvider: local sentence-transformers, Ollama, or a test fake
    - SnapshotStorage: JSON file, Redis, memory

    The service itself holds no state beyond the store it delegates to.
    The store is flushed to storage after each mutation; a storage
    failure is logged and counted but never fails the operation.

    Example:
        ```python
        from prompt_cache.repositories import JsonFileStorage, LocalEmbeddingProvider
        from prompt_cache.services import CacheService

        cache = CacheService.create(
            embedding_provider=LocalEmbeddingProvider.create(),
            storage=JsonFileStorage.create(),
        )

        match = await cache.lookup("How do I reverse a list in Python?")
        await cache.record("How do I reverse a list in Python?", "Use reversed() or list[::-1].")
        ```
    """

    def __init__(
        self,
        store: CacheStore,
        embedding_provider: EmbeddingProvider,
        storage: SnapshotStorage | None = None,
        search: SimilaritySearch | None = None,
        embedding_dimension: int | None = None,
        embedding_timeout: float | None = None,
    ) -> None:
        """Initialize the cache service.

        Args:
            store: The in-memory cache store (required).
            embedding_provider: Embedding generation service (required).
            storage: Snapshot storage. If None, nothing is persisted.
            search: Similarity search. Defaults to the settings threshold.
            embedding_dimension: Expected vector dimension. Defaults to settings.
            embedding_timeout: Seconds to wait for one embedding. Defaults to settings.
        """
        self._store = store
        self._embeddings = embedding_provider
        self._storage = storage
        self._search = search or SimilaritySearch()
        self._dimension = embedding_dimension or settings.embedding_dimension
        self._timeout = embedding_timeout or settings.embedding_timeout
        self._metrics = CacheMetrics()

    @classmethod
    def create(
        cls,
        embedding_provider: EmbeddingProvider,
        storage: SnapshotStorage | None = None,
        max_capacity: int | None = None,
        similarity_threshold: float | None = None,
        embedding_dimension: int | None = None,
        embedding_timeout: float | None = None,
    ) -> "CacheService":
        """Factory method that loads the store from storage.

        A storage read failure is logged and the service starts with an
        empty store, since durability problems must not stop the cache.

        Args:
            embedding_provider: Embedding generation service (required).
            storage: Snapshot storage to load from and flush to.
            max_capacity: Maximum entries. If None, uses settings.
            similarity_threshold: Match threshold. If None, uses settings.
            embedding_dimension: Expected dimension. If None, uses settings.
            embedding_timeout: Embedding timeout. If None, uses settings.

        Returns:
            Configured CacheService instance
        """
        store = CacheStore(max_capacity=max_capacity)
        if storage is not None:
            try:
                store = CacheStore.load(
                    storage.read(),
                    max_capacity=max_capacity,
                    dimension=embedding_dimension or settings.embedding_dimension,
                )
                logger.info("Loaded %d cache entries from %s", len(store), storage.describe())
            except PersistenceFailure:
                logger.exception("Could not load cache from %s, starting empty", storage.describe())

        return cls(
            store=store,
            embedding_provider=embedding_provider,
            storage=storage,
            search=SimilaritySearch(threshold=similarity_threshold),
            embedding_dimension=embedding_dimension,
            embedding_timeout=embedding_timeout,
        )

    async def embed(self, text: str) -> EmbeddingVector:
        """Embed a text and validate the provider output.

        Args:
            text: The text to embed

        Returns:
            The embedding vector

        Raises:
            EmbeddingUnavailable: If the provider fails, times out, or
                returns a zero or non-finite vector
            DimensionMismatch: If the vector has the wrong dimension
        """
        try:
            values = await asyncio.wait_for(self._embeddings.encode(text), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise EmbeddingUnavailable(
                f"Embedding timed out after {self._timeout}s ({self._embeddings.model_name})"
            ) from e
        except EmbeddingUnavailable:
            raise
        except Exception as e:
            raise EmbeddingUnavailable(f"Embedding provider failed: {e}") from e

        if len(values) != self._dimension:
            raise DimensionMismatch(expected=self._dimension, actual=len(values))
        try:
            vector = EmbeddingVector.from_sequence(values)
        except ValueError as e:
            raise EmbeddingUnavailable(str(e)) from e
        if vector.norm == 0 or not math.isfinite(vector.norm):
            raise EmbeddingUnavailable("Embedding provider returned a zero vector")
        return vector

    async def lookup(
        self,
        query_text: str,
        threshold: float | None = None,
    ) -> CacheMatchEntity | None:
        """Find a cached answer for a semantically similar query.

        Business logic:
        1. Return None right away if the cache is empty
        2. Generate embedding for the query text
        3. Scan the store for the most similar entry
        4. Return it if its similarity is above the threshold

        Args:
            query_text: The query to search for
            threshold: Override the default similarity threshold

        Returns:
            CacheMatchEntity if found, None otherwise

        Raises:
            EmbeddingUnavailable: If no embedding could be produced. Callers
                should treat this as a miss.
            ValueError: If the threshold override is outside -1 to 1
        """
        if threshold is not None:
            SimilaritySearch.validate_threshold(threshold)

        start_time = time.time()
        if self._store.is_empty():
            self._metrics.record_miss((time.time() - start_time) * 1000)
            return None

        try:
            vector = await self.embed(query_text)
        except EmbeddingUnavailable:
            self._metrics.record_error()
            raise

        match = self._search.find_best_match(vector, self._store, threshold=threshold)
        lookup_time_ms = (time.time() - start_time) * 1000

        if match is None:
            self._metrics.record_miss(lookup_time_ms)
            logger.debug("Cache miss for %r", query_text[:50])
        else:
            self._metrics.record_hit(lookup_time_ms)
            logger.debug("Cache hit for %r (similarity %.4f)", query_text[:50], match.similarity)
        return match

    async def record(self, query_text: str, answer_text: str) -> CacheEntryEntity:
        """Cache an answered query.

        Business logic:
        1. Generate embedding for the query text
        2. Create the entry stamped with the current time
        3. Insert it into the store (evicting the oldest entries if full)
        4. Flush the store snapshot to storage

        The minimum answer length is the caller's precondition and is not
        checked here.

        Args:
            query_text: The original query
            answer_text: The answer to cache

        Returns:
            The inserted entry

        Raises:
            EmbeddingUnavailable: If no embedding could be produced
        """
        vector = await self.embed(query_text)
        entry = CacheEntryEntity(
            query=query_text,
            answer=answer_text,
            embedding=vector,
            created_at=now_millis(),
        )
        self._store.insert(entry)
        self._metrics.record_insert()
        self.flush()
        return entry

    def flush(self) -> bool:
        """Persist the current store snapshot.

        Returns:
            True if written (or no storage configured), False on failure
        """
        if self._storage is None:
            return True
        # Snapshot taken after eviction, never above capacity
        record = self._store.to_record()
        try:
            self._storage.write(record)
        except PersistenceFailure:
            self._metrics.record_persistence_failure()
            logger.exception("Failed to persist cache to %s", self._storage.describe())
            return False
        return True

    def clear(self) -> int:
        """Clear all cache entries and persist the empty cache.

        Returns:
            Number of entries deleted
        """
        count = self._store.clear()
        self.flush()
        logger.info("Cleared %d cache entries", count)
        return count

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with cache statistics
        """
        return {
            "total_entries": len(self._store),
            "max_capacity": self._store.max_capacity,
            "threshold": self.threshold,
            "embedding_model": self._embeddings.model_name,
            "embedding_dimension": self._dimension,
            "storage": self._storage.describe() if self._storage is not None else "none",
            "metrics": self._metrics.to_dict(),
        }

    async def is_healthy(self) -> bool:
        """Check if cache is healthy.

        Returns:
            True if both storage and embeddings are healthy
        """
        return self.storage_healthy() and await self._embeddings.is_available()

    def storage_healthy(self) -> bool:
        if self._storage is None:
            return True
        return self._storage.health_check()

    def set_threshold(self, threshold: float) -> None:
        """Update the similarity threshold.

        Args:
            threshold: New threshold value (-1 to 1, higher = more strict)
        """
        self._search.threshold = threshold

    @property
    def threshold(self) -> float:
        """Get current similarity threshold."""
        return self._search.threshold

    @property
    def store(self) -> CacheStore:
        """Get the underlying store (for testing)."""
        return self._store

    @property
    def embedding_provider(self) -> EmbeddingProvider:
        """Get the underlying embedding provider (for testing)."""
        return self._embeddings

    @property
    def metrics(self) -> CacheMetrics:
        return self._metrics
