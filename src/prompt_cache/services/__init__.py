"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Store / Repository
    (Transport) -> (Business) -> (Data)

Usage:
    ```python
    from prompt_cache.services import CacheService

    # Using factory method (recommended, loads the persisted snapshot)
    cache = CacheService.create(embedding_provider=provider, storage=storage)

    # Or manual creation
    cache = CacheService(store=CacheStore(), embedding_provider=provider)
    ```
"""

from .cache_service import CacheService
from .similarity_search import SimilaritySearch, find_best_match

__all__ = [
    "CacheService",
    "SimilaritySearch",
    "find_best_match",
]
