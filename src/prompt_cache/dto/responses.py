"""Response DTOs for the message transport and the HTTP API."""

from typing import Any

from pydantic import BaseModel, Field

from .records import CacheEntryRecord


class SearchCacheResponse(BaseModel):
    """Transport response for ``searchCache``.

    ``similarity`` is omitted from the message when there is no match.
    """

    match: CacheEntryRecord | None = None
    similarity: float | None = None

    def to_message(self) -> dict[str, Any]:
        message = self.model_dump(by_alias=True)
        if self.similarity is None:
            message.pop("similarity")
        return message


class CachePromptResponse(BaseModel):
    """Transport response for a successful ``cachePrompt``."""

    success: bool = True


class ErrorResponse(BaseModel):
    """Transport response for any failed request."""

    error: str


class SearchResponse(BaseModel):
    """HTTP response for a cache search."""

    text: str = Field(..., description="The original query text")
    is_hit: bool = Field(..., description="Whether an entry matched above the threshold")
    match: CacheEntryRecord | None = Field(None, description="The best matching entry, if any")
    similarity: float | None = Field(
        None,
        description="Cosine similarity of the match (1 = identical)",
        ge=-1.0,
        le=1.0,
    )
    lookup_time_ms: float = Field(..., description="Time taken for the lookup in milliseconds")


class RecordResponse(BaseModel):
    """HTTP response for recording an entry."""

    success: bool = Field(..., description="Whether the operation succeeded")
    created_at: int = Field(..., description="Entry creation time (epoch milliseconds)")
    size: int = Field(..., description="Number of entries in the cache after the insert", ge=0)
    message: str = Field(..., description="Human-readable status message")


class CacheStatsResponse(BaseModel):
    """HTTP response for cache statistics."""

    total_entries: int = Field(..., description="Number of cached entries", ge=0)
    max_capacity: int = Field(..., description="Maximum number of entries kept", ge=1)
    threshold: float = Field(..., description="Current similarity threshold", ge=-1.0, le=1.0)
    embedding_model: str = Field(..., description="Embedding model identifier")
    embedding_dimension: int = Field(..., description="Embedding vector dimension", ge=1)
    storage: str = Field(..., description="Where the snapshot is persisted")
    metrics: dict[str, float | int] = Field(default_factory=dict)


class HealthCheckResponse(BaseModel):
    """HTTP response for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    storage_healthy: bool = Field(..., description="Whether the snapshot storage is reachable")
    embedding_healthy: bool = Field(..., description="Whether the embedding provider is available")
