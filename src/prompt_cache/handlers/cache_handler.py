"""HTTP handlers for cache operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

import time

from fastapi import HTTPException, status

from prompt_cache.dto import (
    CacheEntryRecord,
    CacheStatsResponse,
    HealthCheckResponse,
    RecordRequest,
    RecordResponse,
    SearchRequest,
    SearchResponse,
    ThresholdRequest,
)
from prompt_cache.errors import CacheError, EmbeddingUnavailable
from prompt_cache.services import CacheService


class CacheHandler:
    """HTTP handlers for cache operations.

    This handler delegates business logic to CacheService
    and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Setting appropriate status codes
    - Error handling and responses

    Example:
        ```python
        handler = CacheHandler(cache_service=cache_service)

        @app.post("/cache/search", response_model=SearchResponse)
        async def search_cache(request: SearchRequest, handler: HandlerDep):
            return await handler.search(request)
        ```
    """

    def __init__(self, cache_service: CacheService) -> None:
        """Initialize the cache handler.

        Args:
            cache_service: The cache service for business logic (required).
        """
        self._cache = cache_service

    async def search(self, request: SearchRequest) -> SearchResponse:
        """Handle POST /cache/search requests.

        Args:
            request: The search request DTO

        Returns:
            SearchResponse with hit status and the best match

        Raises:
            HTTPException: 503 if the embedding model is unavailable,
                500 for any other cache error
        """
        start_time = time.time()
        try:
            match = await self._cache.lookup(request.text, threshold=request.threshold)
        except EmbeddingUnavailable as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Embedding model unavailable: {e}",
            ) from e
        except CacheError as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to search cache: {e}",
            ) from e

        lookup_time_ms = (time.time() - start_time) * 1000
        return SearchResponse(
            text=request.text,
            is_hit=match is not None,
            match=CacheEntryRecord.from_entity(match.entry) if match else None,
            similarity=match.similarity if match else None,
            lookup_time_ms=lookup_time_ms,
        )

    async def record(self, request: RecordRequest) -> RecordResponse:
        """Handle POST /cache/record requests.

        Args:
            request: The record request DTO

        Returns:
            RecordResponse with storage confirmation

        Raises:
            HTTPException: 503 if the embedding model is unavailable,
                500 for any other cache error
        """
        try:
            entry = await self._cache.record(request.query, request.answer)
        except EmbeddingUnavailable as e:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"Embedding model unavailable: {e}",
            ) from e
        except CacheError as e:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to record entry: {e}",
            ) from e

        return RecordResponse(
            success=True,
            created_at=entry.created_at,
            size=self._cache.store.size(),
            message="Entry recorded successfully",
        )

    def get_stats(self) -> CacheStatsResponse:
        """Handle GET /stats requests."""
        return CacheStatsResponse(**self._cache.get_stats())

    def clear_cache(self) -> dict:
        """Handle DELETE /cache requests.

        Returns:
            Dict with clear operation result
        """
        count = self._cache.clear()
        return {
            "success": True,
            "deleted_count": count,
            "message": "Cache cleared successfully",
        }

    def get_threshold(self) -> dict[str, float]:
        return {"threshold": self._cache.threshold}

    def set_threshold(self, request: ThresholdRequest) -> dict:
        """Handle POST /cache/threshold requests."""
        try:
            self._cache.set_threshold(request.threshold)
        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e),
            ) from e
        return {"message": "Threshold updated", "threshold": self._cache.threshold}

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests.

        Returns:
            HealthCheckResponse with per-dependency status
        """
        storage_healthy = self._cache.storage_healthy()
        embedding_healthy = await self._cache.embedding_provider.is_available()
        is_healthy = storage_healthy and embedding_healthy
        return HealthCheckResponse(
            status="healthy" if is_healthy else "unhealthy",
            storage_healthy=storage_healthy,
            embedding_healthy=embedding_healthy,
        )
