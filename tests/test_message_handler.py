"""Tests for the searchCache / cachePrompt message contract."""

import pytest

from prompt_cache.handlers import MessageHandler
from prompt_cache.repositories import MemoryStorage
from prompt_cache.services import CacheService

from .conftest import DIMENSION

LONG_QUERY = "How can I merge two dictionaries in Python?"
LONG_ANSWER = "Use the | operator or {**a, **b} in Python 3.9+."


@pytest.fixture
def handler(service):
    return MessageHandler(cache_service=service, min_query_length=25, min_answer_length=10)


@pytest.mark.asyncio
async def test_cache_prompt_then_search_hits(handler, service):
    response = await handler.handle_message(
        {"action": "cachePrompt", "prompt": LONG_QUERY, "answer": LONG_ANSWER}
    )
    assert response == {"success": True}
    assert service.store.size() == 1

    response = await handler.handle_message({"action": "searchCache", "text": LONG_QUERY})

    assert response["similarity"] == pytest.approx(1.0)
    match = response["match"]
    assert match["query"] == LONG_QUERY
    assert match["answer"] == LONG_ANSWER
    assert set(match) == {"query", "answer", "embedding", "createdAt"}


@pytest.mark.asyncio
async def test_search_miss_omits_similarity(handler):
    response = await handler.handle_message({"action": "searchCache", "text": LONG_QUERY})
    assert response == {"match": None}


@pytest.mark.asyncio
async def test_short_search_text_is_skipped(handler, provider, service):
    await service.record(LONG_QUERY, LONG_ANSWER)
    provider.calls.clear()

    response = await handler.handle_message({"action": "searchCache", "text": "too short"})

    assert response == {"match": None}
    assert provider.calls == []


@pytest.mark.asyncio
async def test_search_degrades_to_miss_when_model_unavailable(handler, provider, service):
    await service.record(LONG_QUERY, LONG_ANSWER)
    provider.fail = True

    response = await handler.handle_message({"action": "searchCache", "text": LONG_QUERY})
    assert response == {"match": None}


@pytest.mark.asyncio
async def test_short_answer_is_not_cached(handler, service):
    response = await handler.handle_message(
        {"action": "cachePrompt", "prompt": LONG_QUERY, "answer": "0123456789"}
    )
    assert "error" in response
    assert service.store.is_empty()


@pytest.mark.asyncio
async def test_cache_prompt_reports_embedding_failure(handler, provider, service):
    provider.fail = True
    response = await handler.handle_message(
        {"action": "cachePrompt", "prompt": LONG_QUERY, "answer": LONG_ANSWER}
    )
    assert response == {"error": "model not loaded"}
    assert service.store.is_empty()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"action": "deleteEverything"},
        {"text": "no action here"},
        {"action": "cachePrompt", "prompt": LONG_QUERY},
        "not even a dict",
    ],
)
async def test_invalid_messages_return_errors(handler, payload):
    response = await handler.handle_message(payload)
    assert set(response) == {"error"}
    assert response["error"].startswith("Invalid message")


@pytest.mark.asyncio
@pytest.mark.parametrize("embedding", [[0, 0, 0, 0], [0.6, 0.8]])
async def test_search_misses_after_loading_unusable_snapshot_entry(provider, embedding):
    storage = MemoryStorage(
        {"cache": [{"query": LONG_QUERY, "answer": LONG_ANSWER, "embedding": embedding, "createdAt": 1}]}
    )
    service = CacheService.create(embedding_provider=provider, storage=storage, embedding_dimension=DIMENSION)
    handler = MessageHandler(cache_service=service, min_query_length=25, min_answer_length=10)

    response = await handler.handle_message({"action": "searchCache", "text": LONG_QUERY})

    assert response == {"match": None}
