"""Persisted snapshot record DTOs.

Shape on disk / in Redis::

    {"cache": [{"query": ..., "answer": ..., "embedding": [...], "createdAt": ...}, ...]}

The browser extension that originally produced these snapshots wrote
``prompt`` and ``timestamp``; both are still accepted on read.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from prompt_cache.entities import CacheEntryEntity, EmbeddingVector


class CacheEntryRecord(BaseModel):
    """One cache entry in its serialized form."""

    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(..., validation_alias=AliasChoices("query", "prompt"))
    answer: str
    embedding: list[float] = Field(..., min_length=1)
    created_at: int = Field(
        ...,
        validation_alias=AliasChoices("createdAt", "timestamp", "created_at"),
        serialization_alias="createdAt",
    )

    @classmethod
    def from_entity(cls, entry: CacheEntryEntity) -> "CacheEntryRecord":
        return cls(
            query=entry.query,
            answer=entry.answer,
            embedding=entry.embedding.to_list(),
            created_at=entry.created_at,
        )

    def to_entity(self, dimension: int | None = None) -> CacheEntryEntity:
        return CacheEntryEntity(
            query=self.query,
            answer=self.answer,
            embedding=EmbeddingVector.from_sequence(self.embedding, dimension=dimension),
            created_at=self.created_at,
        )


class CacheSnapshotRecord(BaseModel):
    """The whole persisted cache, oldest entry first."""

    cache: list[CacheEntryRecord] = Field(default_factory=list)
