"""Bounded, insertion-ordered in-memory cache store.

Eviction is strict FIFO by insertion order: the oldest entries go first,
regardless of how recently they were matched. No access bookkeeping is
kept, so an insert costs O(k) for k evicted entries.
"""

import logging
import threading
from collections.abc import Iterable, Iterator
from typing import Any

from pydantic import ValidationError

from prompt_cache.config import settings
from prompt_cache.dto import CacheEntryRecord, CacheSnapshotRecord
from prompt_cache.entities import CacheEntryEntity
from prompt_cache.errors import PersistenceFailure

logger = logging.getLogger(__name__)


class CacheStore:
    """Ordered, size-bounded collection of cache entries.

    Mutations are serialized by a lock and replace the internal tuple,
    so readers iterate an immutable snapshot and never observe a
    half-applied eviction.

    Example:
        ```python
        store = CacheStore(max_capacity=3)
        for entry in (e1, e2, e3, e4):
            store.insert(entry)
        list(store.all())  # [e2, e3, e4]
        ```
    """

    def __init__(
        self,
        entries: Iterable[CacheEntryEntity] = (),
        max_capacity: int | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            entries: Initial entries, oldest first. Only the most recent
                max_capacity are kept.
            max_capacity: Maximum number of entries. Defaults to settings.
        """
        self._max_capacity = settings.cache_max_capacity if max_capacity is None else max_capacity
        if self._max_capacity < 1:
            raise ValueError("max_capacity must be at least 1")
        self._lock = threading.Lock()
        initial = tuple(entries)
        self._entries: tuple[CacheEntryEntity, ...] = initial[-self._max_capacity :]

    @classmethod
    def load(
        cls,
        record: dict[str, Any] | None,
        max_capacity: int | None = None,
        dimension: int | None = None,
    ) -> "CacheStore":
        """Rebuild a store from a persisted snapshot record.

        Entries whose embedding cannot be compared against a query are
        dropped with a warning: wrong dimension (e.g. written by another
        embedding model), zero norm, or non-finite components.

        Args:
            record: Persisted ``{"cache": [...]}`` mapping. None or an
                empty mapping yields an empty store.
            max_capacity: Maximum number of entries. Defaults to settings.
            dimension: Expected embedding dimension. Not checked when None.

        Returns:
            The reconstructed store

        Raises:
            PersistenceFailure: If the record is malformed
        """
        if not record:
            return cls(max_capacity=max_capacity)

        try:
            snapshot = CacheSnapshotRecord.model_validate(record)
        except ValidationError as e:
            raise PersistenceFailure(f"Invalid cache snapshot: {e}") from e

        entries = []
        for item in snapshot.cache:
            try:
                entry = item.to_entity(dimension=dimension)
            except ValueError as e:
                logger.warning("Dropping snapshot entry %r: %s", item.query, e)
                continue
            if entry.embedding.norm == 0:
                logger.warning("Dropping snapshot entry %r: zero embedding", item.query)
                continue
            entries.append(entry)

        store = cls(entries, max_capacity=max_capacity)
        if len(store) < len(entries):
            logger.warning(
                "Snapshot held %d entries, kept the most recent %d",
                len(entries),
                len(store),
            )
        return store

    def insert(self, entry: CacheEntryEntity) -> None:
        """Append an entry, evicting the oldest ones to make room.

        Always succeeds: when the store is full, the oldest
        ``size - max_capacity + 1`` entries are dropped before appending.

        Args:
            entry: The entry to append
        """
        with self._lock:
            entries = self._entries
            if len(entries) >= self._max_capacity:
                entries = entries[len(entries) - self._max_capacity + 1 :]
            self._entries = entries + (entry,)

    def insert_many(self, entries: Iterable[CacheEntryEntity]) -> None:
        """Append several entries as if inserted one at a time, in order.

        A batch larger than the capacity keeps only its most recent
        max_capacity entries.

        Args:
            entries: Entries to append, oldest first
        """
        batch = tuple(entries)
        if not batch:
            return
        with self._lock:
            combined = self._entries + batch
            self._entries = combined[-self._max_capacity :]

    def all(self) -> Iterator[CacheEntryEntity]:
        """Iterate over entries in insertion order (oldest first).

        The iterator walks a snapshot taken at call time; later inserts
        and evictions do not affect it.
        """
        snapshot = self._entries
        return iter(snapshot)

    def to_record(self) -> dict[str, Any]:
        """Return the store as a persisted snapshot record."""
        snapshot = self._entries
        record = CacheSnapshotRecord(
            cache=[CacheEntryRecord.from_entity(entry) for entry in snapshot]
        )
        return record.model_dump(by_alias=True)

    def clear(self) -> int:
        """Remove all entries.

        Returns:
            Number of entries removed
        """
        with self._lock:
            count = len(self._entries)
            self._entries = ()
        return count

    def size(self) -> int:
        return len(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    @property
    def max_capacity(self) -> int:
        """Maximum number of entries kept."""
        return self._max_capacity

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CacheEntryEntity]:
        return self.all()
