"""Repository layer for external collaborators.

This layer abstracts external dependencies (snapshot storage backends,
embedding models) behind protocol-based interfaces. This enables:
- Easy swapping of implementations (file -> Redis, local -> Ollama, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from prompt_cache.protocols import EmbeddingProvider, SnapshotStorage

from .json_file_storage import JsonFileStorage
from .local_embedding_provider import LocalEmbeddingProvider
from .memory_storage import MemoryStorage
from .ollama_embedding_provider import OllamaEmbeddingProvider
from .redis_snapshot_storage import RedisSnapshotStorage

__all__ = [
    "EmbeddingProvider",
    "SnapshotStorage",
    "JsonFileStorage",
    "MemoryStorage",
    "RedisSnapshotStorage",
    "LocalEmbeddingProvider",
    "OllamaEmbeddingProvider",
]
