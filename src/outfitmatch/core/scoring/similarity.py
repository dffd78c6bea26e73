"""
Cosine similarity computation functions.

Provides efficient similarity computation between embeddings using numpy.

Example:
    >>> from outfitmatch.core.scoring.similarity import cosine_similarity
    >>> sim = cosine_similarity([1.0, 0.0], [0.5, 0.5])
    >>> print(f"Similarity: {sim:.4f}")
    Similarity: 0.7071
"""

from __future__ import annotations

from typing import List, Union

import numpy as np

from outfitmatch.utils.exceptions import DimensionMismatch

# Type alias for vectors
VectorLike = Union[np.ndarray, List[float]]


def cosine_similarity(
    vec_a: VectorLike,
    vec_b: VectorLike,
) -> float:
    """
    Compute cosine similarity between two vectors.

    Cosine similarity measures the angle between vectors, ranging from:
    - 1.0: Identical direction (most similar)
    - 0.0: Orthogonal (no similarity)
    - -1.0: Opposite direction (least similar)

    Args:
        vec_a: First vector (numpy array or list).
        vec_b: Second vector (numpy array or list).

    Returns:
        Cosine similarity score in range [-1, 1]. A zero vector has no
        direction and scores 0.0 against anything.

    Raises:
        DimensionMismatch: If vectors have different dimensions.

    Example:
        >>> cosine_similarity([1.0, 0.0], [-1.0, 0.0])
        -1.0
    """
    a = np.asarray(vec_a, dtype=np.float64)
    b = np.asarray(vec_b, dtype=np.float64)

    if a.shape != b.shape:
        raise DimensionMismatch(
            f"Vector dimensions must match: {a.shape} vs {b.shape}",
            expected=a.shape[0] if a.ndim == 1 else None,
            actual=b.shape[0] if b.ndim == 1 else None,
        )

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)

    if norm_a == 0 or norm_b == 0:
        return 0.0

    similarity = np.dot(a, b) / (norm_a * norm_b)

    # Clip to [-1, 1] to absorb floating point error
    return float(np.clip(similarity, -1.0, 1.0))


def batch_cosine_similarity(
    query: VectorLike,
    candidates: np.ndarray,
) -> np.ndarray:
    """
    Compute cosine similarity between a query and multiple candidates.

    Efficient batch computation using matrix operations.

    Args:
        query: Query vector of shape (dim,).
        candidates: Matrix of candidate vectors, shape (n, dim).

    Returns:
        Array of similarity scores, shape (n,), clipped to [-1, 1].
        Rows with zero norm (or a zero query) score 0.0.

    Raises:
        DimensionMismatch: If candidate rows and query differ in dimension.

    Example:
        >>> scores = batch_cosine_similarity(profile, np.stack(item_vectors))
        >>> top_indices = np.argsort(scores)[::-1][:10]
    """
    q = np.asarray(query, dtype=np.float64)
    c = np.asarray(candidates, dtype=np.float64)

    if c.size == 0:
        return np.zeros(0, dtype=np.float64)

    if c.ndim != 2 or c.shape[1] != q.shape[0]:
        raise DimensionMismatch(
            f"Candidate matrix shape {c.shape} incompatible with query shape {q.shape}",
            expected=q.shape[0],
            actual=c.shape[1] if c.ndim == 2 else None,
        )

    q_norm = np.linalg.norm(q)
    c_norms = np.linalg.norm(c, axis=1)

    if q_norm == 0:
        return np.zeros(c.shape[0], dtype=np.float64)

    dots = c @ q
    denom = c_norms * q_norm
    similarities = np.divide(dots, denom, out=np.zeros_like(dots), where=denom > 0)

    return np.clip(similarities, -1.0, 1.0)


def distance_to_similarity(distance: float) -> float:
    """
    Convert cosine distance (as reported by vector stores) to similarity.

    Args:
        distance: Cosine distance in [0, 2] where 0 = identical.

    Returns:
        Cosine similarity in [-1, 1].
    """
    return 1.0 - distance
