"""Ollama-based embedding provider.

Uses Ollama's local API to generate embeddings. Ollama serves models locally
without requiring HuggingFace authentication or downloading models manually.

Requirements:
    - Ollama installed: https://ollama.com
    - Model pulled: `ollama pull all-minilm`
    - Ollama running: `ollama serve` (usually runs automatically)

Models available:
- all-minilm (22M params, 384 dims)
- nomic-embed-text (137M params, 768 dims)
- embeddinggemma (308M params, 768 dims, 2K context)
- mxbai-embed-large (335M params, 1024 dims)
"""

import logging

import httpx

from prompt_cache.config import settings
from prompt_cache.errors import EmbeddingUnavailable

logger = logging.getLogger(__name__)


class OllamaEmbeddingProvider:
    """Ollama-based implementation of EmbeddingProvider protocol.

    This class satisfies the EmbeddingProvider protocol through structural
    typing - no explicit inheritance needed.

    Uses Ollama's local API to generate embeddings. The API endpoint is
    http://localhost:11434/api/embed by default.

    Example:
        ```python
        provider = OllamaEmbeddingProvider.create(
            model_name="all-minilm",
            base_url="http://localhost:11434"
        )

        embedding = await provider.encode("Hello, world!")
        print(len(embedding))  # 384
        ```
    """

    # Known model dimensions (for common models)
    MODEL_DIMENSIONS = {
        "all-minilm": 384,
        "all-minilm:l6-v2": 384,
        "nomic-embed-text": 768,
        "embeddinggemma": 768,
        "embeddinggemma:300m": 768,
        "mxbai-embed-large": 1024,
    }

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Ollama embedding provider.

        Args:
            model_name: Name of the Ollama model.
                       Defaults to settings.embedding_model.
            base_url: Ollama API base URL.
                     Defaults to settings.ollama_base_url.
            timeout: Request timeout in seconds. Defaults to settings.embedding_timeout.
            client: Pre-built async HTTP client (mostly for tests).
        """
        self._model_name = model_name or settings.embedding_model
        self._base_url = (base_url or settings.ollama_base_url).rstrip("/")
        self._timeout = timeout or settings.embedding_timeout
        self._dimension: int | None = None
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @classmethod
    def create(
        cls,
        model_name: str | None = None,
        base_url: str | None = None,
    ) -> "OllamaEmbeddingProvider":
        """Factory method to create OllamaEmbeddingProvider with defaults.

        Args:
            model_name: Model name. If None, uses settings.
            base_url: Ollama API URL. If None, uses settings.

        Returns:
            Configured OllamaEmbeddingProvider
        """
        return cls(model_name=model_name, base_url=base_url)

    @property
    def dimension(self) -> int:
        """Get the embedding vector dimension.

        Note:
            Known models return their published dimension. Unknown models
            fall back to settings.embedding_dimension until the first
            encode reports the real one.
        """
        if self._dimension is None:
            self._dimension = self.MODEL_DIMENSIONS.get(
                self._model_name, settings.embedding_dimension
            )
        return self._dimension

    @property
    def model_name(self) -> str:
        """Get the model name/identifier."""
        return self._model_name

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Args:
            text: The text to encode

        Returns:
            The embedding vector as a list of floats

        Raises:
            EmbeddingUnavailable: If the Ollama request fails or the
                response has no embedding
        """
        url = f"{self._base_url}/api/embed"
        payload = {
            "model": self._model_name,
            "input": text,
        }

        try:
            response = await self.client.post(url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            error_msg = f"Ollama API error: {e}"
            if "connection refused" in str(e).lower() or isinstance(e, httpx.ConnectError):
                error_msg += " (is Ollama running? Try: ollama serve)"
            elif isinstance(e, httpx.HTTPStatusError) and e.response.status_code == 404:
                error_msg += f" (model not found? Try: ollama pull {self._model_name})"
            raise EmbeddingUnavailable(error_msg) from e
        except ValueError as e:
            raise EmbeddingUnavailable(f"Ollama returned invalid JSON: {e}") from e

        # Ollama returns {"embeddings": [[...]]} for single input
        if data.get("embeddings"):
            embedding = data["embeddings"][0]
        # Fallback: older "embedding" (singular)
        elif data.get("embedding"):
            embedding = data["embedding"]
        else:
            raise EmbeddingUnavailable(f"Unexpected Ollama response format: {list(data)}")

        self._dimension = len(embedding)
        return embedding

    async def is_available(self) -> bool:
        """Check if the embedding provider is available.

        Returns:
            True if Ollama is running and the model answers, False otherwise
        """
        try:
            _ = await self.encode("test")
            return True
        except EmbeddingUnavailable:
            logger.warning("Ollama model %s is not available", self._model_name)
            return False

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
