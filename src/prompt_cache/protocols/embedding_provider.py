"""Embedding provider protocol.

Defines the interface for any embedding generation service that can
convert text to vector embeddings.

Implementations include:
- sentence-transformers (local, default)
- Ollama (local HTTP API)
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Protocol for embedding generation services.

    Any type that implements these members satisfies the protocol,
    no explicit inheritance needed. The provider is injected into
    CacheService at construction.

    Implementations must raise EmbeddingUnavailable when they cannot
    produce a vector, and must never return a zero vector in its place.

    Example:
        ```python
        from prompt_cache.protocols import EmbeddingProvider

        provider: EmbeddingProvider = LocalEmbeddingProvider.create()
        provider: EmbeddingProvider = OllamaEmbeddingProvider.create()
        ```
    """

    @property
    def dimension(self) -> int:
        """Return the dimension of the embedding vectors.

        Returns:
            The vector dimension (e.g., 384 for all-MiniLM-L6-v2)
        """
        ...

    @property
    def model_name(self) -> str:
        """Return the name/identifier of the model."""
        ...

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Args:
            text: The text to encode

        Returns:
            The embedding vector as a list of floats

        Raises:
            EmbeddingUnavailable: If the model cannot be reached or fails
        """
        ...

    async def is_available(self) -> bool:
        """Check if the embedding provider is available.

        Returns:
            True if available, False otherwise
        """
        ...
