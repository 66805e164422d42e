"""Nearest-neighbour search over the cache store.

A plain linear scan: the store is bounded to a small capacity, so
n * D dot products per query are cheap and no index has to be kept in
sync with FIFO eviction.
"""

from collections.abc import Iterable

from prompt_cache.config import settings
from prompt_cache.entities import CacheEntryEntity, CacheMatchEntity, EmbeddingVector, similarity
from prompt_cache.store import CacheStore


def find_best_match(
    query: EmbeddingVector,
    entries: Iterable[CacheEntryEntity],
    threshold: float,
) -> CacheMatchEntity | None:
    """Return the most similar entry if it beats the threshold.

    The best score is only replaced by a strictly greater one, so among
    equal scores the first entry in scan order (the oldest) wins. The
    threshold is strict: a score equal to it is not a match.

    Args:
        query: The query embedding
        entries: Entries to scan, oldest first
        threshold: Minimum similarity, exclusive

    Returns:
        CacheMatchEntity for the best entry, or None

    Raises:
        DimensionMismatch: If a stored embedding differs in dimension from the query
    """
    best_entry: CacheEntryEntity | None = None
    best_score = float("-inf")

    for entry in entries:
        score = similarity(query, entry.embedding)
        if score > best_score:
            best_score = score
            best_entry = entry

    if best_entry is None or not best_score > threshold:
        return None
    return CacheMatchEntity(entry=best_entry, similarity=best_score)


class SimilaritySearch:
    """Threshold-configured search over a CacheStore.

    Example:
        ```python
        search = SimilaritySearch(threshold=0.92)
        match = search.find_best_match(query_vector, store)
        if match:
            print(match.answer, match.similarity)
        ```
    """

    def __init__(self, threshold: float | None = None) -> None:
        """Initialize the search.

        Args:
            threshold: Default similarity threshold (-1 to 1). Defaults to settings.
        """
        self._threshold = settings.cache_similarity_threshold if threshold is None else threshold
        self.validate_threshold(self._threshold)

    @staticmethod
    def validate_threshold(threshold: float) -> None:
        if not -1 <= threshold <= 1:
            raise ValueError("Threshold must be between -1 and 1")

    @property
    def threshold(self) -> float:
        """Get current similarity threshold."""
        return self._threshold

    @threshold.setter
    def threshold(self, value: float) -> None:
        self.validate_threshold(value)
        self._threshold = value

    def find_best_match(
        self,
        query: EmbeddingVector,
        store: CacheStore,
        threshold: float | None = None,
    ) -> CacheMatchEntity | None:
        """Find the best match for a query in the store.

        Args:
            query: The query embedding
            store: The cache store to scan
            threshold: Override the default threshold

        Returns:
            CacheMatchEntity if an entry scores above the threshold, None otherwise

        Raises:
            ValueError: If the threshold override is outside -1 to 1
        """
        if threshold is None:
            threshold = self._threshold
        else:
            self.validate_threshold(threshold)
        if store.is_empty():
            return None
        return find_best_match(query, store.all(), threshold)
