"""Tests for the embedding provider adapters (no real models or servers)."""

from unittest.mock import MagicMock, patch

import httpx
import numpy as np
import pytest

from prompt_cache.errors import EmbeddingUnavailable
from prompt_cache.protocols import EmbeddingProvider
from prompt_cache.repositories import LocalEmbeddingProvider, OllamaEmbeddingProvider


def ollama_with(handler) -> OllamaEmbeddingProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OllamaEmbeddingProvider(model_name="all-minilm", base_url="http://ollama.test", client=client)


class TestOllamaEmbeddingProvider:
    @pytest.mark.asyncio
    async def test_encode_posts_to_embed_endpoint(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = request.read()
            return httpx.Response(200, json={"embeddings": [[0.1, 0.2, 0.3]]})

        provider = ollama_with(handler)
        assert await provider.encode("hello") == [0.1, 0.2, 0.3]
        assert seen["url"] == "http://ollama.test/api/embed"
        assert b'"input":"hello"' in seen["body"].replace(b" ", b"")
        assert provider.dimension == 3
        await provider.close()

    @pytest.mark.asyncio
    async def test_singular_embedding_field(self):
        provider = ollama_with(lambda request: httpx.Response(200, json={"embedding": [1.0, 0.0]}))
        assert await provider.encode("hello") == [1.0, 0.0]

    @pytest.mark.asyncio
    async def test_http_error_is_embedding_unavailable(self):
        provider = ollama_with(lambda request: httpx.Response(404, json={"error": "model not found"}))
        with pytest.raises(EmbeddingUnavailable, match="ollama pull all-minilm"):
            await provider.encode("hello")

    @pytest.mark.asyncio
    async def test_connection_error_is_embedding_unavailable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        provider = ollama_with(handler)
        with pytest.raises(EmbeddingUnavailable):
            await provider.encode("hello")
        assert await provider.is_available() is False

    @pytest.mark.asyncio
    async def test_empty_response_is_embedding_unavailable(self):
        provider = ollama_with(lambda request: httpx.Response(200, json={"embeddings": []}))
        with pytest.raises(EmbeddingUnavailable):
            await provider.encode("hello")

    def test_known_model_dimension(self):
        provider = OllamaEmbeddingProvider(model_name="nomic-embed-text")
        assert provider.dimension == 768
        assert isinstance(provider, EmbeddingProvider)


class TestLocalEmbeddingProvider:
    @pytest.mark.asyncio
    async def test_encode_uses_normalized_embeddings(self):
        model = MagicMock()
        model.encode.return_value = np.array([0.6, 0.8], dtype=np.float32)

        with patch(
            "prompt_cache.repositories.local_embedding_provider.SentenceTransformer",
            return_value=model,
        ) as factory:
            provider = LocalEmbeddingProvider(model_name="tiny-model", dimension=2)
            vector = await provider.encode("hello")
            await provider.encode("again")

        assert vector == pytest.approx([0.6, 0.8])
        factory.assert_called_once_with("tiny-model")
        assert model.encode.call_args.kwargs["normalize_embeddings"] is True

    @pytest.mark.asyncio
    async def test_model_load_failure_is_embedding_unavailable(self):
        with patch(
            "prompt_cache.repositories.local_embedding_provider.SentenceTransformer",
            side_effect=OSError("model not found"),
        ):
            provider = LocalEmbeddingProvider(model_name="missing-model", dimension=2)
            with pytest.raises(EmbeddingUnavailable):
                await provider.encode("hello")
            assert await provider.is_available() is False

    def test_dimension_read_from_model(self):
        model = MagicMock()
        model.get_sentence_embedding_dimension.return_value = 384

        with patch(
            "prompt_cache.repositories.local_embedding_provider.SentenceTransformer",
            return_value=model,
        ):
            provider = LocalEmbeddingProvider(model_name="tiny-model")
            assert provider.dimension == 384
            assert isinstance(provider, EmbeddingProvider)
