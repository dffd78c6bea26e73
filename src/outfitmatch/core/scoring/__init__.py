# Scoring Package
"""
Similarity scoring helpers.

Provides:
- cosine_similarity: Compute similarity between two embeddings
- batch_cosine_similarity: Score a query against a candidate matrix
- distance_to_similarity: Convert store-reported cosine distances

Example:
    >>> from outfitmatch.core.scoring import batch_cosine_similarity
    >>> scores = batch_cosine_similarity(profile_vector, candidate_matrix)
"""

from .similarity import (
    batch_cosine_similarity,
    cosine_similarity,
    distance_to_similarity,
)

__all__ = [
    "cosine_similarity",
    "batch_cosine_similarity",
    "distance_to_similarity",
]
