"""Cache match domain entity."""

from dataclasses import dataclass

from .cache_entry import CacheEntryEntity


@dataclass(frozen=True)
class CacheMatchEntity:
    """Domain entity for a similarity search hit.

    Attributes:
        entry: The best matching cache entry
        similarity: Cosine similarity to the query (-1 = opposite, 1 = identical)
    """

    entry: CacheEntryEntity
    similarity: float

    @property
    def query(self) -> str:
        return self.entry.query

    @property
    def answer(self) -> str:
        return self.entry.answer
