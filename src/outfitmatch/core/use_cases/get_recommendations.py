# Get Recommendations Use Case
"""
Use case for retrieving personalised catalog recommendations.

Builds a style profile from outfit embeddings, ranks catalog items by
similarity to it and falls back to in-stock items whenever ranking is
unavailable or empty.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Sequence

from outfitmatch.core.embedding_text import build_outfit_embedding_text
from outfitmatch.core.fallback_selector import FallbackSelector
from outfitmatch.core.profile_aggregator import ProfileAggregator
from outfitmatch.core.ranking import RankedItem, SimilarityRanker
from outfitmatch.domain.entities.outfit import OutfitAnalysis
from outfitmatch.domain.entities.style_profile import StyleProfile
from outfitmatch.domain.interfaces.embedding_provider_interface import EmbeddingProviderInterface
from outfitmatch.domain.interfaces.repository_interface import (
    CatalogRepositoryInterface,
    OutfitRepositoryInterface,
)
from outfitmatch.utils.config import RecommendationConfig
from outfitmatch.utils.exceptions import ConfigurationError, NoValidEmbeddings, RetrievalFailed
from outfitmatch.utils.logger import get_logger, log_exception
from outfitmatch.utils.validators import validate_limit, validate_threshold

logger = get_logger(__name__)


class FallbackReason(Enum):
    """Why personalised ranking was replaced by the fallback list."""

    NO_VALID_EMBEDDINGS = "no_valid_embeddings"
    RETRIEVAL_FAILED = "retrieval_failed"
    EMPTY_RESULT = "empty_result"


@dataclass
class RecommendationResult:
    """Result of a recommendation query."""
    items: List[RankedItem]  # scores are None when used_fallback is True
    used_fallback: bool = False
    fallback_reason: Optional[FallbackReason] = None
    profile: Optional[StyleProfile] = None
    message: str = ""

    @property
    def scores(self) -> List[Optional[float]]:
        return [entry.score for entry in self.items]


@dataclass
class _RequestParams:
    threshold: float
    limit: int
    fallback_limit: int


class RecommendationService:
    """
    Orchestrates ProfileAggregator -> SimilarityRanker -> FallbackSelector.

    Each call is an independent pipeline:
    1. Aggregate the source embeddings into a style profile
       (no valid embeddings -> fallback)
    2. Rank catalog items against the profile
       (retrieval failure or empty ranking -> fallback)
    3. Fallback: in-stock items without scores

    No retries happen here and nothing is kept between calls.
    """

    def __init__(
        self,
        catalog_repository: CatalogRepositoryInterface,
        config: Optional[RecommendationConfig] = None,
        outfit_repository: Optional[OutfitRepositoryInterface] = None,
        embedding_provider: Optional[EmbeddingProviderInterface] = None,
        aggregator: Optional[ProfileAggregator] = None,
        ranker: Optional[SimilarityRanker] = None,
        fallback_selector: Optional[FallbackSelector] = None,
    ):
        """
        Initialize the service.

        Args:
            catalog_repository: Catalog store used for ranking and fallback.
            config: Threshold/limit defaults and timeouts.
            outfit_repository: Needed by ``recommend_for_user``.
            embedding_provider: Needed by ``recommend_for_analysis``.
            aggregator: Override the default ProfileAggregator.
            ranker: Override the default SimilarityRanker.
            fallback_selector: Override the default FallbackSelector.
        """
        self.config = config or RecommendationConfig()
        self.catalog_repository = catalog_repository
        self.outfit_repository = outfit_repository
        self.embedding_provider = embedding_provider

        timeout = self.config.retrieval_timeout_seconds
        self.aggregator = aggregator or ProfileAggregator(expected_dim=self.config.embedding_dim)
        self.ranker = ranker or SimilarityRanker(
            catalog_repository,
            timeout=timeout,
            expected_dim=self.config.embedding_dim,
        )
        self.fallback_selector = fallback_selector or FallbackSelector(catalog_repository, timeout=timeout)

    async def recommend(
        self,
        source_embeddings: Sequence[Any],
        threshold: Optional[float] = None,
        limit: Optional[int] = None,
    ) -> RecommendationResult:
        """
        Recommend catalog items for a set of source embeddings.

        Args:
            source_embeddings: Outfit embeddings (native or serialized).
            threshold: Minimum similarity (defaults to config).
            limit: Maximum number of items (defaults to config).

        Returns:
            RecommendationResult; ``used_fallback`` tells which path ran.

        Raises:
            InvalidInputError: If threshold or limit is out of range.
        """
        params = self._resolve_params(threshold, limit)

        # START
        try:
            profile = self.aggregator.aggregate(list(source_embeddings))
        except NoValidEmbeddings as e:
            logger.info(f"No usable style profile ({e.message}); using fallback")
            return await self._fallback(params, FallbackReason.NO_VALID_EMBEDDINGS)

        # RANK
        try:
            ranked = await self.ranker.rank(profile.vector, params.threshold, params.limit)
        except RetrievalFailed as e:
            log_exception(logger, "similarity retrieval", e)
            return await self._fallback(params, FallbackReason.RETRIEVAL_FAILED, profile)

        if not ranked:
            logger.info(f"No catalog item reached similarity {params.threshold}; using fallback")
            return await self._fallback(params, FallbackReason.EMPTY_RESULT, profile)

        logger.info(f"Returning {len(ranked)} ranked recommendations")
        return RecommendationResult(
            items=ranked,
            used_fallback=False,
            profile=profile,
            message=f"Found {len(ranked)} items matching your style.",
        )

    async def recommend_for_user(
        self,
        user_id: str,
        threshold: Optional[float] = None,
        limit: Optional[int] = None,
    ) -> RecommendationResult:
        """
        Recommend items from all of a user's outfits.

        Outfits without an embedding are ignored; a failing outfit read is
        handled like a user with no embeddings.

        Args:
            user_id: Owner of the outfits.
            threshold: Minimum similarity (defaults to config).
            limit: Maximum number of items (defaults to config).

        Returns:
            RecommendationResult.

        Raises:
            ConfigurationError: If no outfit repository was provided.
        """
        if self.outfit_repository is None:
            raise ConfigurationError("recommend_for_user requires an outfit repository")

        try:
            outfits = await asyncio.wait_for(
                self.outfit_repository.list_outfits(user_id),
                timeout=self.config.retrieval_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error(f"Outfit read for user {user_id} timed out")
            outfits = []
        except Exception as e:
            log_exception(logger, f"outfit read for user {user_id}", e)
            outfits = []

        embeddings = [outfit.embedding for outfit in outfits if outfit.has_embedding()]
        logger.info(f"User {user_id}: {len(embeddings)}/{len(outfits)} outfits carry an embedding")
        return await self.recommend(embeddings, threshold=threshold, limit=limit)

    async def recommend_for_analysis(
        self,
        analysis: OutfitAnalysis,
        threshold: Optional[float] = None,
        limit: Optional[int] = None,
    ) -> RecommendationResult:
        """
        Recommend items for a freshly analysed outfit photo.

        The analysis is turned into embedding text and embedded by the
        provider; if that fails the fallback list is returned.

        Args:
            analysis: Vision analysis of the uploaded outfit.
            threshold: Minimum similarity (defaults to config).
            limit: Maximum number of items (defaults to config).

        Returns:
            RecommendationResult.

        Raises:
            ConfigurationError: If no embedding provider was provided.
        """
        if self.embedding_provider is None:
            raise ConfigurationError("recommend_for_analysis requires an embedding provider")

        text = build_outfit_embedding_text(analysis)
        try:
            embedding = await asyncio.wait_for(
                self.embedding_provider.embed_text(text),
                timeout=self.config.retrieval_timeout_seconds,
            )
            sources: List[Any] = [embedding]
        except asyncio.TimeoutError:
            logger.error(f"Embedding provider {self.embedding_provider.model_name} timed out")
            sources = []
        except Exception as e:
            log_exception(logger, f"embedding with {self.embedding_provider.model_name}", e)
            sources = []

        return await self.recommend(sources, threshold=threshold, limit=limit)

    def _resolve_params(self, threshold: Optional[float], limit: Optional[int]) -> _RequestParams:
        resolved_threshold = validate_threshold(
            self.config.match_threshold if threshold is None else threshold
        )
        resolved_limit = validate_limit(self.config.match_count if limit is None else limit)
        fallback_limit = resolved_limit if limit is not None else self.config.fallback_count
        return _RequestParams(
            threshold=resolved_threshold,
            limit=resolved_limit,
            fallback_limit=fallback_limit,
        )

    async def _fallback(
        self,
        params: _RequestParams,
        reason: FallbackReason,
        profile: Optional[StyleProfile] = None,
    ) -> RecommendationResult:
        # FALLBACK
        items = await self.fallback_selector.select_fallback(params.fallback_limit)
        logger.info(f"Fallback ({reason.value}) returned {len(items)} items")

        if items:
            message = "Showing in-stock items from the catalog."
        else:
            message = "No items are available right now."

        return RecommendationResult(
            items=[RankedItem(item=item, score=None) for item in items],
            used_fallback=True,
            fallback_reason=reason,
            profile=profile,
            message=message,
        )
