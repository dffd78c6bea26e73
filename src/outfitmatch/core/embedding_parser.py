"""
Normalization of stored embeddings into numeric vectors.

Embeddings reach the core either as native numeric sequences or, when
read back from a pgvector column through a REST layer, as bracketed
text such as ``"[0.12,-0.03,...]"``. ``parse_embedding`` is the single
place where both forms are turned into a 1-D float64 numpy array.

Example:
    >>> parse_embedding("[1, 0.5, -2]")
    array([ 1. ,  0.5, -2. ])
"""

from __future__ import annotations

from numbers import Real
from typing import Any, Optional

import numpy as np

from outfitmatch.domain.entities.embedding import Embedding
from outfitmatch.utils.exceptions import DimensionMismatch, MalformedEmbedding


def _parse_vector_text(text: str) -> list[float]:
    """Parse ``"[v1,v2,...]"`` into floats."""
    cleaned = text.strip()
    if not (cleaned.startswith("[") and cleaned.endswith("]")):
        raise MalformedEmbedding("Embedding string must be enclosed in brackets", value=text)

    body = cleaned[1:-1].strip()
    if not body:
        raise MalformedEmbedding("Embedding string is empty", value=text)

    try:
        return [float(part) for part in body.split(",")]
    except ValueError as e:
        raise MalformedEmbedding(f"Embedding string has a non-numeric component: {e}", value=text) from e


def parse_embedding(value: Any, expected_dim: Optional[int] = None) -> np.ndarray:
    """
    Normalize a stored embedding to a numeric vector.

    Args:
        value: List/tuple of numbers, numpy array, Embedding value object,
            or a bracketed comma-separated string.
        expected_dim: Required dimension, if known.

    Returns:
        1-D float64 numpy array.

    Raises:
        MalformedEmbedding: If the value cannot be read as a finite,
            non-empty numeric vector.
        DimensionMismatch: If the parsed vector does not have
            ``expected_dim`` components.
    """
    if value is None:
        raise MalformedEmbedding("Embedding is missing")

    if isinstance(value, Embedding):
        components: Any = value.to_array()
    elif isinstance(value, str):
        components = _parse_vector_text(value)
    elif isinstance(value, np.ndarray):
        components = value
    elif isinstance(value, (list, tuple)):
        if any(isinstance(v, bool) or not isinstance(v, (Real, np.number)) for v in value):
            raise MalformedEmbedding("Embedding contains non-numeric components", value=value)
        components = value
    else:
        raise MalformedEmbedding(
            f"Unsupported embedding type: {type(value).__name__}", value=value
        )

    try:
        vector = np.asarray(components, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise MalformedEmbedding(f"Embedding is not numeric: {e}", value=value) from e

    if vector.ndim != 1:
        raise MalformedEmbedding(f"Embedding must be 1-D, got shape {vector.shape}", value=value)
    if vector.size == 0:
        raise MalformedEmbedding("Embedding is empty", value=value)
    if not np.all(np.isfinite(vector)):
        raise MalformedEmbedding("Embedding contains NaN or infinite values", value=value)

    if expected_dim is not None and vector.shape[0] != expected_dim:
        raise DimensionMismatch(
            f"Embedding has {vector.shape[0]} dimensions, expected {expected_dim}",
            expected=expected_dim,
            actual=int(vector.shape[0]),
        )

    return vector
