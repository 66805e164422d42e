"""Redis implementation of SnapshotStorage.

The snapshot is stored as a single JSON string under one key. A single
SET replaces it, so a reader always sees a complete snapshot.
"""

import json
import logging
from typing import Any

import redis

from prompt_cache.config import get_redis_client, settings
from prompt_cache.errors import PersistenceFailure

logger = logging.getLogger(__name__)


class RedisSnapshotStorage:
    """Redis implementation of SnapshotStorage.

    This class satisfies the SnapshotStorage protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        key: str | None = None,
    ) -> None:
        """Initialize the Redis snapshot storage.

        Args:
            redis_client: Redis client instance. If None, creates default.
            key: Key holding the snapshot. Defaults to settings.cache_redis_key.
        """
        self._client = redis_client or get_redis_client()
        self._key = key or settings.cache_redis_key

    @classmethod
    def create(
        cls,
        redis_client: redis.Redis | None = None,
        key: str | None = None,
    ) -> "RedisSnapshotStorage":
        """Factory method to create RedisSnapshotStorage with defaults.

        Args:
            redis_client: Redis client. If None, built from settings.
            key: Snapshot key. If None, uses settings.

        Returns:
            Configured RedisSnapshotStorage
        """
        return cls(redis_client=redis_client, key=key)

    def read(self) -> dict[str, Any] | None:
        """Read the snapshot from Redis.

        Returns:
            The parsed record, or None if the key does not exist

        Raises:
            PersistenceFailure: If Redis is unreachable or the value is not JSON
        """
        try:
            raw = self._client.get(self._key)
        except redis.RedisError as e:
            raise PersistenceFailure(f"Failed to read Redis key {self._key}: {e}") from e

        if raw is None:
            return None
        try:
            if isinstance(raw, bytes):
                raw = raw.decode("utf-8")
            record = json.loads(raw)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise PersistenceFailure(f"Redis key {self._key} does not hold JSON: {e}") from e

        if not isinstance(record, dict):
            raise PersistenceFailure(f"Expected a JSON object under Redis key {self._key}")
        return record

    def write(self, record: dict[str, Any]) -> None:
        """Replace the snapshot in Redis.

        Args:
            record: The full snapshot record

        Raises:
            PersistenceFailure: If Redis is unreachable
        """
        try:
            self._client.set(self._key, json.dumps(record, ensure_ascii=False))
        except redis.RedisError as e:
            raise PersistenceFailure(f"Failed to write Redis key {self._key}: {e}") from e
        logger.debug("Wrote %d entries to Redis key %s", len(record.get("cache", [])), self._key)

    def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(self._client.ping())
        except redis.RedisError:
            return False

    def describe(self) -> str:
        return f"redis:{self._key}"

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
