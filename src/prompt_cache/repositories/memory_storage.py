"""In-process implementation of SnapshotStorage.

Nothing survives a restart. Useful for tests and for running the
service without any durable backend.
"""

import copy
from typing import Any


class MemoryStorage:
    """Keeps the last written record in memory."""

    def __init__(self, record: dict[str, Any] | None = None) -> None:
        self._record = copy.deepcopy(record) if record is not None else None
        self.writes = 0

    @classmethod
    def create(cls, record: dict[str, Any] | None = None) -> "MemoryStorage":
        return cls(record=record)

    def read(self) -> dict[str, Any] | None:
        return copy.deepcopy(self._record)

    def write(self, record: dict[str, Any]) -> None:
        self._record = copy.deepcopy(record)
        self.writes += 1

    def health_check(self) -> bool:
        return True

    def describe(self) -> str:
        return "memory"
