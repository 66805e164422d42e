"""Error types raised by the cache core.

Empty caches and misses are normal ``None`` results, never errors.
"""


class CacheError(Exception):
    """Base class for all prompt cache errors."""


class EmbeddingUnavailable(CacheError):
    """The embedding provider could not produce a vector.

    Callers should treat a failed lookup as a miss and a failed record
    as a logged, non-fatal event.
    """


class DimensionMismatch(CacheError, ValueError):
    """Two vectors (or a vector and the configured model) disagree on dimension."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Embedding dimension mismatch: expected {expected}, got {actual}")


class ZeroNormVector(CacheError, ValueError):
    """Cosine similarity is undefined for a zero-norm vector."""


class PersistenceFailure(CacheError):
    """Reading or writing the persisted snapshot failed.

    The in-memory store stays valid; only durability is affected.
    """
