"""
Similarity ranking of catalog items against a query vector.

The ranker asks the catalog store for candidates, scores them by cosine
similarity, drops everything below the threshold and returns at most
``limit`` items, best first. Ties are broken by item id so identical
inputs always produce identical output.

Example:
    >>> ranker = SimilarityRanker(repository, timeout=5.0)
    >>> ranked = await ranker.rank(profile.vector, threshold=0.5, limit=12)
    >>> for entry in ranked:
    ...     print(entry.item.name, f"{entry.score:.3f}")
"""

from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np

from outfitmatch.core.embedding_parser import parse_embedding
from outfitmatch.core.scoring.similarity import batch_cosine_similarity
from outfitmatch.domain.entities.catalog_item import CatalogItem
from outfitmatch.domain.interfaces.repository_interface import (
    CandidateMatch,
    CatalogRepositoryInterface,
)
from outfitmatch.utils.exceptions import (
    DimensionMismatch,
    MalformedEmbedding,
    RetrievalFailed,
)
from outfitmatch.utils.logger import get_logger, log_execution_time
from outfitmatch.utils.validators import validate_limit, validate_threshold

logger = get_logger(__name__)


@dataclass(frozen=True)
class RankedItem:
    """A catalog item with its similarity score (None for fallback items)."""

    item: CatalogItem
    score: Optional[float] = None


class SimilarityRanker:
    """
    Ranks catalog items by cosine similarity to a query vector.

    A failing, timed-out or inconsistent candidate retrieval raises
    ``RetrievalFailed``; the ranker never ranks a partial candidate set.

    Attributes:
        repository: Catalog store providing candidates.
        timeout: Seconds allowed for the candidate read (None = no limit).
        expected_dim: Required query dimension, if configured.
    """

    def __init__(
        self,
        repository: CatalogRepositoryInterface,
        timeout: Optional[float] = None,
        expected_dim: Optional[int] = None,
    ):
        """
        Initialize the ranker.

        Args:
            repository: Catalog store to query.
            timeout: Timeout for the candidate read in seconds.
            expected_dim: Dimension every query must have.
        """
        self.repository = repository
        self.timeout = timeout
        self.expected_dim = expected_dim

    async def rank(
        self,
        query: np.ndarray | Sequence[float] | str,
        threshold: float,
        limit: int,
    ) -> List[RankedItem]:
        """
        Return catalog items ordered by similarity to ``query``.

        Args:
            query: Query embedding.
            threshold: Minimum score kept, in [0, 1].
            limit: Maximum number of results, > 0.

        Returns:
            At most ``limit`` RankedItems with score >= threshold, sorted
            by descending score then ascending item id.

        Raises:
            InvalidInputError: If threshold or limit is out of range.
            MalformedEmbedding: If the query cannot be read as a vector.
            DimensionMismatch: If the query has the wrong dimension.
            RetrievalFailed: If candidates cannot be retrieved completely.
        """
        threshold = validate_threshold(threshold)
        limit = validate_limit(limit)
        query_vector = parse_embedding(query, expected_dim=self.expected_dim)

        with log_execution_time(logger, f"similarity ranking (limit={limit}, threshold={threshold})"):
            candidates = await self._fetch_candidates(query_vector, threshold, limit)
            scored = self._score_candidates(query_vector, candidates)

        ranked = [
            RankedItem(item=item, score=score)
            for item, score in scored.values()
            if score >= threshold
        ]
        ranked.sort(key=lambda entry: (-entry.score, entry.item.id))

        logger.debug(
            f"Ranked {len(candidates)} candidates: {len(ranked)} cleared threshold {threshold}, "
            f"returning {min(len(ranked), limit)}"
        )
        return ranked[:limit]

    async def _fetch_candidates(
        self,
        query_vector: np.ndarray,
        threshold: float,
        limit: int,
    ) -> List[CandidateMatch]:
        """Read candidates from the store, converting every failure."""
        try:
            candidates = await asyncio.wait_for(
                self.repository.find_candidates(query_vector, threshold, limit),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise RetrievalFailed(
                f"Similarity query timed out after {self.timeout}s",
                operation="find_candidates",
                timeout=self.timeout,
            ) from e
        except RetrievalFailed:
            raise
        except Exception as e:
            raise RetrievalFailed(
                f"Similarity query failed: {type(e).__name__}",
                operation="find_candidates",
            ) from e

        if candidates is None:
            raise RetrievalFailed("Similarity query returned no result set", operation="find_candidates")
        return list(candidates)

    def _score_candidates(
        self,
        query_vector: np.ndarray,
        candidates: List[CandidateMatch],
    ) -> Dict[str, tuple[CatalogItem, float]]:
        """
        Score every candidate, keyed by item id.

        Store-provided similarities are trusted after a sanity check;
        the rest are computed from item embeddings in one batch.
        """
        scored: Dict[str, tuple[CatalogItem, float]] = {}
        unscored_items: List[CatalogItem] = []
        unscored_vectors: List[np.ndarray] = []
        dim = int(query_vector.shape[0])

        for candidate in candidates:
            item = candidate.item
            if candidate.similarity is not None:
                score = float(candidate.similarity)
                if not math.isfinite(score):
                    raise RetrievalFailed(
                        f"Store returned a non-finite similarity for item {item.id}",
                        operation="score_candidates",
                    )
                self._keep_best(scored, item, min(1.0, max(-1.0, score)))
                continue

            try:
                vector = parse_embedding(item.embedding, expected_dim=dim)
            except (DimensionMismatch, MalformedEmbedding) as e:
                raise RetrievalFailed(
                    f"Candidate {item.id} has an unusable embedding",
                    operation="score_candidates",
                ) from e
            unscored_items.append(item)
            unscored_vectors.append(vector)

        if unscored_vectors:
            scores = batch_cosine_similarity(query_vector, np.vstack(unscored_vectors))
            for item, score in zip(unscored_items, scores):
                self._keep_best(scored, item, float(score))

        return scored

    @staticmethod
    def _keep_best(
        scored: Dict[str, tuple[CatalogItem, float]],
        item: CatalogItem,
        score: float,
    ) -> None:
        current = scored.get(item.id)
        if current is None or score > current[1]:
            scored[item.id] = (item, score)
