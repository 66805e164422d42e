"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from prompt_cache.config import configure_logging, settings
from prompt_cache.handlers import CacheHandler, MessageHandler
from prompt_cache.protocols import EmbeddingProvider, SnapshotStorage
from prompt_cache.repositories import (
    JsonFileStorage,
    LocalEmbeddingProvider,
    MemoryStorage,
    OllamaEmbeddingProvider,
    RedisSnapshotStorage,
)
from prompt_cache.services import CacheService

logger = logging.getLogger(__name__)


def build_embedding_provider() -> EmbeddingProvider:
    """Create the embedding provider selected by settings.embedding_provider."""
    if settings.embedding_provider == "ollama":
        return OllamaEmbeddingProvider.create()
    return LocalEmbeddingProvider.create(dimension=settings.embedding_dimension)


def build_storage() -> SnapshotStorage:
    """Create the snapshot storage selected by settings.cache_storage."""
    if settings.cache_storage == "redis":
        return RedisSnapshotStorage.create()
    if settings.cache_storage == "memory":
        return MemoryStorage.create()
    return JsonFileStorage.create()


def get_handler(request: Request) -> CacheHandler:
    """Dependency injection for CacheHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "cache_handler", None)
    if handler is None:
        raise RuntimeError("CacheHandler not initialized. Check lifespan setup.")
    return handler


def get_message_handler(request: Request) -> MessageHandler:
    """Dependency injection for MessageHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "message_handler", None)
    if handler is None:
        raise RuntimeError("MessageHandler not initialized. Check lifespan setup.")
    return handler


def make_lifespan(
    cache_service: CacheService | None = None,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Build the lifespan context manager for the app.

    Args:
        cache_service: Pre-built service (tests, embedding hosts). If None,
            the provider and storage are built from settings and the
            persisted snapshot is loaded.

    Returns:
        A lifespan callable for FastAPI
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Initialize all layers and store them in app.state.

        1. Embedding provider and snapshot storage (from settings)
        2. Service (business logic) - app.state.cache_service
        3. Handlers (HTTP and messages) - app.state.cache_handler / message_handler

        Cleanup removes everything from app.state and closes HTTP clients.
        """
        configure_logging()

        service = cache_service
        if service is None:
            service = CacheService.create(
                embedding_provider=build_embedding_provider(),
                storage=build_storage(),
            )

        app.state.cache_service = service
        app.state.cache_handler = CacheHandler(cache_service=service)
        app.state.message_handler = MessageHandler(cache_service=service)

        logger.info("Cache service initialized")
        logger.info("Embedding model: %s", service.embedding_provider.model_name)
        logger.info("Threshold: %s, entries: %d", service.threshold, service.store.size())

        yield

        provider = service.embedding_provider
        if isinstance(provider, OllamaEmbeddingProvider):
            await provider.close()

        del app.state.message_handler
        del app.state.cache_handler
        del app.state.cache_service
        logger.info("Cache service shut down")

    return lifespan


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[CacheHandler, Depends(get_handler)]
MessageHandlerDep = Annotated[MessageHandler, Depends(get_message_handler)]
