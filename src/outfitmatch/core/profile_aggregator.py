"""
Style profile aggregation.

Combines the embeddings of several outfits into one representative
query vector by taking the per-dimension arithmetic mean.

Example:
    >>> aggregator = ProfileAggregator()
    >>> profile = aggregator.aggregate([[1.0, 0.0], "[0.0, 1.0]"])
    >>> profile.vector
    array([0.5, 0.5])
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

import numpy as np

from outfitmatch.core.embedding_parser import parse_embedding
from outfitmatch.domain.entities.style_profile import StyleProfile
from outfitmatch.utils.exceptions import (
    DimensionMismatch,
    EmbeddingError,
    MalformedEmbedding,
    NoValidEmbeddings,
)
from outfitmatch.utils.logger import get_logger

logger = get_logger(__name__)


class ProfileAggregator:
    """
    Builds a StyleProfile from source embeddings.

    Every input goes through ``parse_embedding``. Inputs that cannot be
    parsed are excluded (``MalformedEmbedding``); inputs whose dimension
    differs from the expected one are rejected (``DimensionMismatch``).
    Neither is dropped silently: both are counted on the profile, kept in
    ``profile.issues`` and logged at WARNING.

    Attributes:
        expected_dim: Required dimension. When None, the dimension of the
            first input that parses is used for the whole call.
    """

    def __init__(self, expected_dim: Optional[int] = None):
        """
        Initialize the aggregator.

        Args:
            expected_dim: Embedding dimension every input must have.
        """
        if expected_dim is not None and expected_dim <= 0:
            raise ValueError("expected_dim must be positive")
        self.expected_dim = expected_dim

    def aggregate(self, embeddings: Sequence[Any]) -> StyleProfile:
        """
        Average the given embeddings into one style profile vector.

        Args:
            embeddings: Native vectors or serialized ``"[...]"`` strings.

        Returns:
            StyleProfile with the mean vector and exclusion counts.

        Raises:
            NoValidEmbeddings: If the input is empty or nothing usable
                remains after exclusions.
        """
        if not embeddings:
            raise NoValidEmbeddings("No embeddings supplied")

        expected_dim = self.expected_dim
        vectors: List[np.ndarray] = []
        issues: List[EmbeddingError] = []
        excluded = 0
        rejected = 0

        for index, raw in enumerate(embeddings):
            try:
                vector = parse_embedding(raw, expected_dim=expected_dim)
            except MalformedEmbedding as e:
                excluded += 1
                issues.append(e)
                logger.warning(f"Excluding malformed embedding #{index}: {e.message}")
                continue
            except DimensionMismatch as e:
                rejected += 1
                issues.append(e)
                logger.warning(f"Rejecting embedding #{index}: {e.message}")
                continue

            if expected_dim is None:
                expected_dim = int(vector.shape[0])
            vectors.append(vector)

        if not vectors:
            raise NoValidEmbeddings(
                f"None of the {len(embeddings)} embeddings could be used",
                excluded=excluded,
                rejected=rejected,
            )

        # Column-wise sort fixes the summation order for any input order
        mean_vector = np.mean(np.sort(np.vstack(vectors), axis=0), axis=0)

        if excluded or rejected:
            logger.warning(
                f"Style profile built from {len(vectors)}/{len(embeddings)} embeddings "
                f"({excluded} malformed, {rejected} dimension mismatches)"
            )
        else:
            logger.debug(f"Style profile built from {len(vectors)} embeddings (dim={mean_vector.shape[0]})")

        return StyleProfile(
            vector=mean_vector,
            source_count=len(vectors),
            excluded_count=excluded,
            rejected_count=rejected,
            issues=issues,
        )
