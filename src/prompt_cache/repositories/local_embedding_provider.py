"""Local sentence-transformers embedding provider.

This is the default embedding provider, using sentence-transformers
models running locally. No API calls required.

Default model: sentence-transformers/all-MiniLM-L6-v2 (384 dimensions,
mean pooling). Embeddings are L2-normalized.
"""

import asyncio
import logging
import threading
import time

import numpy as np
from sentence_transformers import SentenceTransformer

from prompt_cache.config import settings
from prompt_cache.errors import EmbeddingUnavailable

logger = logging.getLogger(__name__)


class LocalEmbeddingProvider:
    """Local sentence-transformers implementation of EmbeddingProvider.

    This class satisfies the EmbeddingProvider protocol through structural
    typing - no explicit inheritance needed.

    The model is loaded on first use and reused afterwards. Inference is
    blocking, so encode() runs it in a worker thread to keep the event
    loop free.
    """

    def __init__(self, model_name: str | None = None, dimension: int | None = None) -> None:
        """Initialize the local embedding provider.

        Args:
            model_name: Name of the sentence-transformers model.
                       Defaults to settings.embedding_model.
            dimension: Expected output dimension. If None, read from the model.
        """
        self._model_name = model_name or settings.embedding_model
        self._model: SentenceTransformer | None = None
        self._dimension = dimension
        self._load_lock = threading.Lock()

    @classmethod
    def create(
        cls,
        model_name: str | None = None,
        dimension: int | None = None,
    ) -> "LocalEmbeddingProvider":
        """Factory method to create LocalEmbeddingProvider with defaults.

        Args:
            model_name: Model name. If None, uses settings.
            dimension: Expected dimension. If None, read from the model.

        Returns:
            Configured LocalEmbeddingProvider
        """
        return cls(model_name=model_name, dimension=dimension)

    @property
    def model(self) -> SentenceTransformer:
        """Lazy-load the embedding model."""
        if self._model is None:
            with self._load_lock:
                if self._model is None:
                    logger.info("Loading embedding model: %s", self._model_name)
                    start_time = time.time()
                    self._model = SentenceTransformer(self._model_name)
                    logger.info("Model loaded in %.2fs", time.time() - start_time)
        return self._model

    @property
    def dimension(self) -> int:
        """Get the embedding vector dimension."""
        if self._dimension is None:
            reported = self.model.get_sentence_embedding_dimension()
            if reported is None:
                # Get dimension by encoding a sample
                reported = len(self.model.encode(["test"], show_progress_bar=False)[0])
            self._dimension = int(reported)
        return self._dimension

    @property
    def model_name(self) -> str:
        """Get the model name/identifier."""
        return self._model_name

    def _encode_sync(self, text: str) -> list[float]:
        embedding = self.model.encode(
            text,
            show_progress_bar=False,
            normalize_embeddings=True,
        )
        # Handle both single string (returns array) and list input
        if isinstance(embedding, np.ndarray):
            if embedding.ndim == 1:
                return embedding.tolist()
            return embedding[0].tolist()
        return list(embedding)

    async def encode(self, text: str) -> list[float]:
        """Generate embedding vector for a single text.

        Args:
            text: The text to encode

        Returns:
            The embedding vector as a list of floats

        Raises:
            EmbeddingUnavailable: If the model cannot be loaded or inference fails
        """
        try:
            return await asyncio.to_thread(self._encode_sync, text)
        except Exception as e:
            raise EmbeddingUnavailable(f"Local model {self._model_name} failed: {e}") from e

    async def is_available(self) -> bool:
        """Check if the embedding provider is available.

        Returns:
            True if the model can be loaded, False otherwise
        """
        try:
            await asyncio.to_thread(lambda: self.model)
            return True
        except Exception:
            logger.warning("Embedding model %s is not available", self._model_name, exc_info=True)
            return False
