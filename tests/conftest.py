"""Shared fixtures for prompt cache tests."""

import zlib

import numpy as np
import pytest

from prompt_cache.entities import CacheEntryEntity, EmbeddingVector
from prompt_cache.errors import EmbeddingUnavailable
from prompt_cache.repositories import MemoryStorage
from prompt_cache.services import CacheService, SimilaritySearch
from prompt_cache.store import CacheStore

DIMENSION = 4


class FakeEmbeddingProvider:
    """Deterministic stand-in for a real embedding model.

    Texts listed in ``vectors`` get that exact vector; any other text gets
    a pseudo-random vector seeded by its CRC32, so repeated calls agree.
    """

    def __init__(
        self,
        vectors: dict[str, list[float]] | None = None,
        dimension: int = DIMENSION,
        fail: bool = False,
    ) -> None:
        self.vectors = dict(vectors or {})
        self._dimension = dimension
        self.fail = fail
        self.calls: list[str] = []

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def model_name(self) -> str:
        return "fake-model"

    async def encode(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.fail:
            raise EmbeddingUnavailable("model not loaded")
        if text in self.vectors:
            return list(self.vectors[text])
        rng = np.random.default_rng(zlib.crc32(text.encode("utf-8")))
        return rng.standard_normal(self._dimension).tolist()

    async def is_available(self) -> bool:
        return not self.fail


def make_entry(query: str, values: list[float], created_at: int = 1_700_000_000_000) -> CacheEntryEntity:
    return CacheEntryEntity(
        query=query,
        answer=f"answer to {query}",
        embedding=EmbeddingVector.from_sequence(values),
        created_at=created_at,
    )


def unit_at(score: float) -> list[float]:
    """2-d unit vector whose cosine with [1, 0] is ``score``."""
    return [score, float(np.sqrt(1.0 - score * score))]


@pytest.fixture
def provider() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def service(provider: FakeEmbeddingProvider, storage: MemoryStorage) -> CacheService:
    return CacheService(
        store=CacheStore(max_capacity=100),
        embedding_provider=provider,
        storage=storage,
        search=SimilaritySearch(threshold=0.92),
        embedding_dimension=DIMENSION,
        embedding_timeout=5.0,
    )
