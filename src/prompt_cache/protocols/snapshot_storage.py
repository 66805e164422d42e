"""Snapshot storage protocol.

Defines the interface for any backend that can persist the cache as a
single ``{"cache": [...]}`` record and read it back at startup.

Implementations include:
- JSON file on local disk (default)
- Redis key holding a JSON document
- In-process memory (tests, ephemeral runs)
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SnapshotStorage(Protocol):
    """Protocol for snapshot storage backends.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.

    Example:
        ```python
        from prompt_cache.protocols import SnapshotStorage

        storage: SnapshotStorage = JsonFileStorage.create()
        storage: SnapshotStorage = RedisSnapshotStorage.create()
        ```
    """

    def read(self) -> dict[str, Any] | None:
        """Read the persisted record.

        Returns:
            The record, or None if nothing has been persisted yet

        Raises:
            PersistenceFailure: If the backend cannot be read
        """
        ...

    def write(self, record: dict[str, Any]) -> None:
        """Replace the persisted record.

        Args:
            record: The full ``{"cache": [...]}`` record

        Raises:
            PersistenceFailure: If the backend cannot be written
        """
        ...

    def health_check(self) -> bool:
        """Check if the backend is accessible.

        Returns:
            True if healthy, False otherwise
        """
        ...

    def describe(self) -> str:
        """Return a short human-readable location (path, key...)."""
        ...
