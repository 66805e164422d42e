from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from prompt_cache.api.dependencies import HandlerDep, MessageHandlerDep, make_lifespan
from prompt_cache.config import settings
from prompt_cache.dto import (
    CacheStatsResponse,
    HealthCheckResponse,
    RecordRequest,
    RecordResponse,
    SearchRequest,
    SearchResponse,
    ThresholdRequest,
)
from prompt_cache.services import CacheService


def create_app(cache_service: CacheService | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        cache_service: Pre-built service. If None, one is built from
            settings when the app starts.

    Returns:
        The configured FastAPI app
    """
    app = FastAPI(
        title="Prompt Cache API",
        description="Semantic response cache with FIFO eviction and cosine similarity search",
        version="0.1.0",
        lifespan=make_lifespan(cache_service),
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Prompt Cache API",
            "version": "0.1.0",
            "description": "Semantic response cache with FIFO eviction and cosine similarity search",
            "endpoints": {
                "messages": "/messages",
                "search": "/cache/search",
                "record": "/cache/record",
                "stats": "/stats",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return await handler.health_check()

    @app.post("/messages")
    async def messages(payload: dict[str, Any], handler: MessageHandlerDep) -> dict[str, Any]:
        """Message transport endpoint (``searchCache`` / ``cachePrompt``)."""
        return await handler.handle_message(payload)

    @app.post("/cache/search", response_model=SearchResponse)
    async def search_cache(request: SearchRequest, handler: HandlerDep) -> SearchResponse:
        """Search the cache for a semantically similar query."""
        return await handler.search(request)

    @app.post("/cache/record", response_model=RecordResponse)
    async def record_cache(request: RecordRequest, handler: HandlerDep) -> RecordResponse:
        """Record an answered query in the cache."""
        return await handler.record(request)

    @app.delete("/cache")
    async def clear_cache(handler: HandlerDep) -> dict[str, Any]:
        """Clear all entries from the cache."""
        return handler.clear_cache()

    @app.get("/cache/threshold", response_model=dict[str, float])
    async def get_threshold(handler: HandlerDep) -> dict[str, float]:
        """Get the current similarity threshold."""
        return handler.get_threshold()

    @app.post("/cache/threshold")
    async def set_threshold(request: ThresholdRequest, handler: HandlerDep) -> dict[str, Any]:
        """Update the similarity threshold."""
        return handler.set_threshold(request)

    @app.get("/stats", response_model=CacheStatsResponse)
    async def get_stats(handler: HandlerDep) -> CacheStatsResponse:
        """Get cache statistics."""
        return handler.get_stats()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "prompt_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
