"""JSON file implementation of SnapshotStorage.

The whole cache is one small JSON document, rewritten after each
mutation. Writes go to a temporary file in the same directory and are
moved into place with ``os.replace``, so readers never see a partial file.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from prompt_cache.config import settings
from prompt_cache.errors import PersistenceFailure

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """Local JSON file implementation of SnapshotStorage.

    This class satisfies the SnapshotStorage protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        """Initialize the file storage.

        Args:
            path: Location of the JSON file. Defaults to settings.cache_path.
        """
        self._path = Path(path or settings.cache_path)

    @classmethod
    def create(cls, path: str | Path | None = None) -> "JsonFileStorage":
        """Factory method to create JsonFileStorage with defaults.

        Args:
            path: File path. If None, uses settings.

        Returns:
            Configured JsonFileStorage
        """
        return cls(path=path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> dict[str, Any] | None:
        """Read the snapshot file.

        Returns:
            The parsed record, or None if the file does not exist or is empty

        Raises:
            PersistenceFailure: If the file cannot be read or is not valid JSON
        """
        if not self._path.exists():
            return None
        try:
            text = self._path.read_text(encoding="utf-8")
            if not text.strip():
                return None
            record = json.loads(text)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise PersistenceFailure(f"Failed to read {self._path}: {e}") from e

        if not isinstance(record, dict):
            raise PersistenceFailure(f"Expected a JSON object in {self._path}")
        return record

    def write(self, record: dict[str, Any]) -> None:
        """Atomically replace the snapshot file.

        Args:
            record: The full snapshot record

        Raises:
            PersistenceFailure: If the file cannot be written
        """
        tmp_name: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                dir=self._path.parent,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(record, f, ensure_ascii=False)
            os.replace(tmp_name, self._path)
            tmp_name = None
            logger.debug("Wrote %d entries to %s", len(record.get("cache", [])), self._path)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceFailure(f"Failed to write {self._path}: {e}") from e
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

    def health_check(self) -> bool:
        """Check that the snapshot directory is writable.

        Returns:
            True if healthy, False otherwise
        """
        directory = self._path.parent
        return directory.is_dir() and os.access(directory, os.W_OK)

    def describe(self) -> str:
        return f"file:{self._path}"
