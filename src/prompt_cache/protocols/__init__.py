"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (file -> Redis, local -> Ollama, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from prompt_cache.protocols import EmbeddingProvider, SnapshotStorage

    storage: SnapshotStorage = JsonFileStorage.create()      # works
    storage: SnapshotStorage = RedisSnapshotStorage.create() # also works
    ```
"""

from .embedding_provider import EmbeddingProvider
from .snapshot_storage import SnapshotStorage

__all__ = [
    "EmbeddingProvider",
    "SnapshotStorage",
]
