"""Tests for the FIFO-bounded CacheStore."""

import pytest

from prompt_cache.errors import PersistenceFailure
from prompt_cache.store import CacheStore

from .conftest import make_entry


def entries(count: int, start: int = 0):
    return [make_entry(f"query {i}", [1.0, float(i)], created_at=1000 + i) for i in range(start, start + count)]


def test_new_store_is_empty():
    store = CacheStore(max_capacity=5)
    assert store.is_empty()
    assert store.size() == 0
    assert list(store.all()) == []


def test_capacity_holds_after_every_insert():
    store = CacheStore(max_capacity=100)
    for entry in entries(250):
        store.insert(entry)
        assert store.size() <= 100


def test_fifo_eviction_drops_oldest_first():
    store = CacheStore(max_capacity=100)
    inserted = entries(101)
    for entry in inserted:
        store.insert(entry)

    kept = list(store.all())
    assert kept == inserted[1:]
    assert inserted[0] not in kept


def test_capacity_three_scenario():
    store = CacheStore(max_capacity=3)
    e1, e2, e3, e4 = entries(4)
    for entry in (e1, e2, e3, e4):
        store.insert(entry)
    assert list(store.all()) == [e2, e3, e4]


def test_eviction_ignores_access():
    store = CacheStore(max_capacity=2)
    e1, e2, e3 = entries(3)
    store.insert(e1)
    store.insert(e2)
    # Reading e1 does not protect it
    assert next(store.all()) == e1
    store.insert(e3)
    assert list(store.all()) == [e2, e3]


def test_all_is_a_snapshot():
    store = CacheStore(max_capacity=2)
    e1, e2, e3 = entries(3)
    store.insert(e1)
    store.insert(e2)

    iterator = store.all()
    store.insert(e3)
    assert list(iterator) == [e1, e2]
    assert list(store.all()) == [e2, e3]


def test_insert_many_matches_sequential_inserts():
    batch = entries(7)

    sequential = CacheStore(max_capacity=5)
    for entry in batch:
        sequential.insert(entry)

    batched = CacheStore(max_capacity=5)
    batched.insert_many(batch)

    assert list(batched.all()) == list(sequential.all())


def test_insert_many_appends_after_existing_entries():
    store = CacheStore(max_capacity=4)
    first = entries(3)
    more = entries(2, start=3)
    store.insert_many(first)
    store.insert_many(more)
    assert list(store.all()) == first[1:] + more


def test_clear_removes_everything():
    store = CacheStore(max_capacity=5)
    store.insert_many(entries(3))
    assert store.clear() == 3
    assert store.is_empty()


def test_invalid_capacity():
    with pytest.raises(ValueError):
        CacheStore(max_capacity=0)


def test_round_trip_preserves_content_and_order():
    store = CacheStore(max_capacity=10)
    store.insert_many(entries(6))

    reloaded = CacheStore.load(store.to_record(), max_capacity=10)
    assert list(reloaded.all()) == list(store.all())


def test_record_shape():
    store = CacheStore(max_capacity=10)
    store.insert(make_entry("hello", [0.5, 0.5], created_at=42))

    assert store.to_record() == {
        "cache": [
            {
                "query": "hello",
                "answer": "answer to hello",
                "embedding": [0.5, 0.5],
                "createdAt": 42,
            }
        ]
    }


@pytest.mark.parametrize("record", [None, {}, {"cache": []}])
def test_load_missing_or_empty_record_gives_empty_store(record):
    store = CacheStore.load(record, max_capacity=10)
    assert store.is_empty()


def test_load_trims_oversized_record_to_most_recent():
    big = CacheStore(max_capacity=10)
    big.insert_many(entries(5))

    small = CacheStore.load(big.to_record(), max_capacity=3)
    assert [e.query for e in small.all()] == ["query 2", "query 3", "query 4"]


def test_load_accepts_legacy_field_names():
    record = {
        "cache": [
            {"prompt": "old prompt", "answer": "old answer", "embedding": [1, 0], "timestamp": 1690000000000},
        ]
    }
    store = CacheStore.load(record, max_capacity=10)
    (entry,) = list(store.all())
    assert entry.query == "old prompt"
    assert entry.created_at == 1690000000000
    assert entry.embedding.values == (1.0, 0.0)


@pytest.mark.parametrize(
    "record",
    [
        {"cache": [{"query": "missing fields"}]},
        {"cache": [{"query": "q", "answer": "a", "embedding": [], "createdAt": 1}]},
        {"cache": "not a list"},
    ],
)
def test_load_malformed_record_raises(record):
    with pytest.raises(PersistenceFailure):
        CacheStore.load(record, max_capacity=10)


def test_load_drops_entries_with_unusable_embeddings(caplog):
    record = {
        "cache": [
            {"query": "zero", "answer": "a", "embedding": [0, 0, 0], "createdAt": 1},
            {"query": "short", "answer": "a", "embedding": [1, 0], "createdAt": 2},
            {"query": "kept", "answer": "a", "embedding": [1, 0, 0], "createdAt": 3},
        ]
    }
    with caplog.at_level("WARNING", logger="prompt_cache.store.cache_store"):
        store = CacheStore.load(record, max_capacity=10, dimension=3)

    assert [e.query for e in store.all()] == ["kept"]
    assert "'zero'" in caplog.text
    assert "'short'" in caplog.text


def test_load_without_dimension_keeps_any_dimension():
    record = {
        "cache": [
            {"query": "two", "answer": "a", "embedding": [1, 0], "createdAt": 1},
            {"query": "three", "answer": "a", "embedding": [1, 0, 0], "createdAt": 2},
        ]
    }
    store = CacheStore.load(record, max_capacity=10)
    assert store.size() == 2
