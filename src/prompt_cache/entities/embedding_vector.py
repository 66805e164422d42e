"""Embedding vector value type and cosine similarity."""

import math
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np

from prompt_cache.errors import DimensionMismatch, ZeroNormVector


@dataclass(frozen=True)
class EmbeddingVector:
    """Immutable fixed-dimension embedding.

    Vectors from the embedding models are usually unit-normalized, but
    nothing here relies on it: similarity divides by both norms.

    Attributes:
        values: The vector components
    """

    values: tuple[float, ...]

    @classmethod
    def from_sequence(
        cls,
        values: Iterable[float],
        dimension: int | None = None,
    ) -> "EmbeddingVector":
        """Build a vector from any sequence of numbers.

        Args:
            values: Vector components (list, tuple, numpy array...)
            dimension: Expected dimension. Checked when given.

        Returns:
            The EmbeddingVector

        Raises:
            DimensionMismatch: If dimension is given and does not match
            ValueError: If any component is NaN or infinite
        """
        components = tuple(float(v) for v in values)
        if dimension is not None and len(components) != dimension:
            raise DimensionMismatch(expected=dimension, actual=len(components))
        if not all(math.isfinite(v) for v in components):
            raise ValueError("Embedding contains non-finite values")
        return cls(values=components)

    @property
    def dimension(self) -> int:
        """Number of components."""
        return len(self.values)

    @property
    def norm(self) -> float:
        """L2 norm of the vector."""
        return float(np.linalg.norm(self.as_array()))

    def as_array(self) -> np.ndarray:
        """Return a read-only float64 numpy view of the components."""
        array = np.asarray(self.values, dtype=np.float64)
        array.flags.writeable = False
        return array

    def to_list(self) -> list[float]:
        """Return the components as a plain list (for JSON)."""
        return list(self.values)

    def __len__(self) -> int:
        return len(self.values)


def similarity(a: EmbeddingVector, b: EmbeddingVector) -> float:
    """Cosine similarity between two vectors.

    Args:
        a: First vector
        b: Second vector

    Returns:
        dot(a, b) / (|a| * |b|), clipped to [-1, 1]

    Raises:
        DimensionMismatch: If the vectors have different dimensions
        ZeroNormVector: If either vector has zero norm
    """
    if a.dimension != b.dimension:
        raise DimensionMismatch(expected=a.dimension, actual=b.dimension)

    left = a.as_array()
    right = b.as_array()
    denominator = np.linalg.norm(left) * np.linalg.norm(right)
    if denominator == 0:
        raise ZeroNormVector("Cosine similarity is undefined for a zero vector")

    score = float(np.dot(left, right) / denominator)
    # Rounding can push |v|.|v| / |v|^2 a hair past 1
    return max(-1.0, min(1.0, score))
