"""
Tests for the prompt cache HTTP API.
"""

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from prompt_cache.api.app import create_app
from prompt_cache.api.dependencies import get_handler, get_message_handler

QUERY = "What is the capital city of Australia?"
ANSWER = "Canberra is the capital of Australia."


@pytest.fixture
def client(service):
    """Create a test client around the fake-backed service."""
    with TestClient(create_app(cache_service=service)) as test_client:
        yield test_client


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Prompt Cache API"


def test_health(client, provider):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"

    provider.fail = True
    data = client.get("/health").json()
    assert data["status"] == "unhealthy"
    assert data["embedding_healthy"] is False


def test_record_and_search(client):
    """Test recording an entry and finding it again."""
    response = client.post("/cache/record", json={"query": QUERY, "answer": ANSWER})
    assert response.status_code == 200
    assert response.json()["size"] == 1

    response = client.post("/cache/search", json={"text": QUERY})
    assert response.status_code == 200
    data = response.json()
    assert data["is_hit"] is True
    assert data["match"]["answer"] == ANSWER
    assert data["similarity"] == pytest.approx(1.0)


def test_search_empty_cache(client):
    """Search works with no cached data."""
    response = client.post("/cache/search", json={"text": QUERY})
    assert response.status_code == 200
    data = response.json()
    assert data["is_hit"] is False
    assert data["match"] is None


def test_search_with_model_down(client, provider):
    client.post("/cache/record", json={"query": QUERY, "answer": ANSWER})
    provider.fail = True

    response = client.post("/cache/search", json={"text": QUERY})
    assert response.status_code == 503


def test_messages_endpoint(client):
    """The message transport contract is served over HTTP too."""
    response = client.post(
        "/messages",
        json={"action": "cachePrompt", "prompt": QUERY, "answer": ANSWER},
    )
    assert response.json() == {"success": True}

    response = client.post("/messages", json={"action": "searchCache", "text": QUERY})
    data = response.json()
    assert data["match"]["query"] == QUERY
    assert "similarity" in data

    response = client.post("/messages", json={"action": "unknown"})
    assert "error" in response.json()


def test_threshold(client):
    """Test get and set threshold endpoints."""
    assert client.get("/cache/threshold").json() == {"threshold": 0.92}

    response = client.post("/cache/threshold", json={"threshold": 0.85})
    assert response.status_code == 200
    assert client.get("/cache/threshold").json() == {"threshold": 0.85}

    response = client.post("/cache/threshold", json={"threshold": 5})
    assert response.status_code == 422


def test_stats_and_clear(client):
    """Test stats and clear endpoints."""
    client.post("/cache/record", json={"query": QUERY, "answer": ANSWER})

    stats = client.get("/stats").json()
    assert stats["total_entries"] == 1
    assert stats["max_capacity"] == 100
    assert stats["metrics"]["records"] == 1

    response = client.delete("/cache")
    assert response.json()["deleted_count"] == 1
    assert client.get("/stats").json()["total_entries"] == 0


def test_dependencies_require_lifespan():
    """Handlers are only available once the lifespan has run."""
    request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace()))
    with pytest.raises(RuntimeError):
        get_handler(request)
    with pytest.raises(RuntimeError):
        get_message_handler(request)
