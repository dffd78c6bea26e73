"""
Embedding value object for storing vector embeddings.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import numpy as np


class EmbeddingSource(Enum):
    """Kinds of entities an embedding can describe."""

    OUTFIT = "outfit"
    CATALOG_ITEM = "catalog_item"


@dataclass(frozen=True)
class Embedding:
    """
    Value object representing a vector embedding.

    Immutable to ensure embedding integrity once created.
    """

    vector: tuple[float, ...]  # Immutable tuple for hashability
    source: EmbeddingSource
    dimension: int

    def __post_init__(self) -> None:
        """Validate embedding dimensions."""
        if self.dimension <= 0:
            raise ValueError("Embedding dimension must be positive")
        if len(self.vector) != self.dimension:
            raise ValueError(
                f"Vector length {len(self.vector)} does not match "
                f"declared dimension {self.dimension}"
            )

    @classmethod
    def from_list(
        cls,
        vector: Sequence[float],
        source: EmbeddingSource = EmbeddingSource.CATALOG_ITEM,
    ) -> "Embedding":
        """Create an Embedding from a sequence of floats."""
        return cls(
            vector=tuple(float(v) for v in vector),
            source=source,
            dimension=len(vector),
        )

    def to_list(self) -> list[float]:
        """Convert embedding vector to list."""
        return list(self.vector)

    def to_array(self) -> np.ndarray:
        """Convert embedding vector to a float64 numpy array."""
        return np.asarray(self.vector, dtype=np.float64)

    def to_pgvector(self) -> str:
        """Serialize in the bracketed text form used by pgvector columns."""
        return "[" + ",".join(repr(v) for v in self.vector) + "]"
