"""Unit tests for the recommendation use case."""

import asyncio

import pytest

from outfitmatch.core.use_cases import FallbackReason, RecommendationService
from outfitmatch.domain.entities.outfit import OutfitAnalysis
from outfitmatch.domain.interfaces.embedding_provider_interface import EmbeddingProviderInterface
from outfitmatch.infrastructure.database.memory_repository import (
    InMemoryCatalogRepository,
    InMemoryOutfitRepository,
)
from outfitmatch.utils.exceptions import ConfigurationError, InvalidInputError


class StaticEmbeddingProvider(EmbeddingProviderInterface):
    """Provider returning a fixed vector and recording the text it saw."""

    def __init__(self, vector, fail=False):
        self.vector = vector
        self.fail = fail
        self.texts = []

    async def embed_text(self, text):
        self.texts.append(text)
        if self.fail:
            raise RuntimeError("provider unavailable")
        return self.vector

    @property
    def embedding_dim(self):
        return len(self.vector)

    @property
    def model_name(self):
        return "static-test"


class SlowSearchRepository(InMemoryCatalogRepository):
    async def find_candidates(self, query, threshold, limit):
        await asyncio.sleep(5)
        return []


class OfflineRepository(InMemoryCatalogRepository):
    async def find_candidates(self, query, threshold, limit):
        raise ConnectionError("offline")

    async def list_in_stock(self, limit):
        raise ConnectionError("offline")


class FailingOutfitRepository(InMemoryOutfitRepository):
    async def list_outfits(self, user_id):
        raise ConnectionError("outfits table unavailable")


def _ids(result):
    return [entry.item.id for entry in result.items]


@pytest.fixture
def service(memory_repository, outfit_repository, recommendation_config):
    return RecommendationService(
        memory_repository,
        config=recommendation_config,
        outfit_repository=outfit_repository,
    )


class TestRecommend:
    """Test the ranking path."""

    @pytest.mark.asyncio
    async def test_ranked_results(self, service):
        """Test matching items are returned with scores."""
        result = await service.recommend([[1.0, 0.0]])

        assert result.used_fallback is False
        assert result.fallback_reason is None
        assert _ids(result) == ["a", "c", "d"]
        assert all(score is not None and score >= 0.5 for score in result.scores)
        assert result.message == "Found 3 items matching your style."
        assert result.profile.source_count == 1

    @pytest.mark.asyncio
    async def test_orthogonal_scenario(self, make_item, recommendation_config):
        """Test profile between two items ranks only the close one."""
        repository = InMemoryCatalogRepository([
            make_item("east", [1.0, 0.0]),
            make_item("north", [0.0, 1.0]),
        ])
        service = RecommendationService(repository, config=recommendation_config)

        result = await service.recommend([[1.0, 0.0], [1.0, 0.0]], threshold=0.9, limit=5)

        assert _ids(result) == ["east"]
        assert result.scores == pytest.approx([1.0])

    @pytest.mark.asyncio
    async def test_explicit_limit(self, service):
        """Test caller limit overrides the configured count."""
        result = await service.recommend([[1.0, 0.0]], limit=1)
        assert _ids(result) == ["a"]

    @pytest.mark.asyncio
    async def test_malformed_inputs_tolerated(self, service):
        """Test one good embedding is enough."""
        result = await service.recommend(["garbage", [1.0, 0.0], [1.0, 0.0, 0.0]])

        assert result.used_fallback is False
        assert result.profile.excluded_count == 1
        assert result.profile.rejected_count == 1

    @pytest.mark.asyncio
    async def test_invalid_threshold(self, service):
        """Test caller errors are raised, not hidden behind a fallback."""
        with pytest.raises(InvalidInputError):
            await service.recommend([[1.0, 0.0]], threshold=2.0)

    @pytest.mark.asyncio
    async def test_invalid_limit(self, service):
        """Test zero limit is rejected."""
        with pytest.raises(InvalidInputError):
            await service.recommend([[1.0, 0.0]], limit=0)

    @pytest.mark.asyncio
    async def test_concurrent_requests_independent(self, service):
        """Test concurrent calls do not interfere."""
        east, north = await asyncio.gather(
            service.recommend([[1.0, 0.0]], threshold=0.9),
            service.recommend([[0.0, 1.0]], threshold=0.9),
        )
        assert _ids(east) == ["a"]
        assert _ids(north) == ["b"]


class TestRecommendFallback:
    """Test every path into the fallback list."""

    @pytest.mark.asyncio
    async def test_no_embeddings(self, service):
        """Test empty input falls back to in-stock items."""
        result = await service.recommend([])

        assert result.used_fallback is True
        assert result.fallback_reason is FallbackReason.NO_VALID_EMBEDDINGS
        assert _ids(result) == ["a", "b", "c", "d"]
        assert result.scores == [None, None, None, None]
        assert result.profile is None

    @pytest.mark.asyncio
    async def test_only_malformed_embeddings(self, service):
        """Test unusable input falls back."""
        result = await service.recommend(["[x]", None])
        assert result.fallback_reason is FallbackReason.NO_VALID_EMBEDDINGS

    @pytest.mark.asyncio
    async def test_empty_ranking(self, service):
        """Test no match above threshold falls back."""
        result = await service.recommend([[0.0, -1.0]])

        assert result.used_fallback is True
        assert result.fallback_reason is FallbackReason.EMPTY_RESULT
        assert result.profile is not None
        assert _ids(result) == ["a", "b", "c", "d"]

    @pytest.mark.asyncio
    async def test_retrieval_timeout(self, catalog_items, recommendation_config):
        """Test a hanging similarity query falls back without raising."""
        config = recommendation_config.model_copy(update={"retrieval_timeout_seconds": 0.05})
        service = RecommendationService(SlowSearchRepository(catalog_items), config=config)

        result = await service.recommend([[1.0, 0.0]])

        assert result.used_fallback is True
        assert result.fallback_reason is FallbackReason.RETRIEVAL_FAILED
        assert _ids(result) == ["a", "b", "c", "d"]
        assert all(score is None for score in result.scores)

    @pytest.mark.asyncio
    async def test_fallback_limit_defaults_to_config(self, memory_repository, recommendation_config):
        """Test configured fallback count applies when no limit is given."""
        config = recommendation_config.model_copy(update={"fallback_count": 2})
        service = RecommendationService(memory_repository, config=config)

        result = await service.recommend([])

        assert _ids(result) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_fallback_respects_caller_limit(self, service):
        """Test explicit limit also caps the fallback list."""
        result = await service.recommend([], limit=3)
        assert _ids(result) == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_everything_offline(self, catalog_items, recommendation_config):
        """Test failing store yields an empty fallback, never an exception."""
        service = RecommendationService(OfflineRepository(catalog_items), config=recommendation_config)

        result = await service.recommend([[1.0, 0.0]])

        assert result.used_fallback is True
        assert result.fallback_reason is FallbackReason.RETRIEVAL_FAILED
        assert result.items == []
        assert result.message == "No items are available right now."

    @pytest.mark.asyncio
    async def test_empty_catalog(self, recommendation_config):
        """Test empty catalog yields an empty fallback."""
        service = RecommendationService(InMemoryCatalogRepository(), config=recommendation_config)

        result = await service.recommend([[1.0, 0.0]])

        assert result.used_fallback is True
        assert result.items == []


class TestRecommendForUser:
    """Test recommendations from stored outfits."""

    @pytest.mark.asyncio
    async def test_uses_all_user_outfits(self, service):
        """Test outfits with embeddings are averaged; others are ignored."""
        result = await service.recommend_for_user("user-1")

        assert result.used_fallback is False
        assert result.profile.source_count == 2
        assert sorted(_ids(result)[:2]) == ["a", "c"]
        assert _ids(result)[2] == "d"

    @pytest.mark.asyncio
    async def test_other_users_outfits_not_used(self, service):
        """Test each user only sees their own style."""
        result = await service.recommend_for_user("user-2", threshold=0.9)
        assert _ids(result) == ["b"]

    @pytest.mark.asyncio
    async def test_user_without_outfits(self, service):
        """Test new users get the fallback list."""
        result = await service.recommend_for_user("nobody")

        assert result.used_fallback is True
        assert result.fallback_reason is FallbackReason.NO_VALID_EMBEDDINGS

    @pytest.mark.asyncio
    async def test_deleted_outfit_no_longer_counts(self, service, outfit_repository):
        """Test deleting an outfit changes the profile."""
        assert outfit_repository.delete_outfit("o2", "user-1") is True

        result = await service.recommend_for_user("user-1")

        assert result.profile.source_count == 1

    @pytest.mark.asyncio
    async def test_outfit_read_failure(self, memory_repository, recommendation_config):
        """Test outfit store failure is treated as no embeddings."""
        service = RecommendationService(
            memory_repository,
            config=recommendation_config,
            outfit_repository=FailingOutfitRepository(),
        )

        result = await service.recommend_for_user("user-1")

        assert result.fallback_reason is FallbackReason.NO_VALID_EMBEDDINGS

    @pytest.mark.asyncio
    async def test_requires_outfit_repository(self, memory_repository):
        """Test missing outfit store is a configuration error."""
        with pytest.raises(ConfigurationError):
            await RecommendationService(memory_repository).recommend_for_user("user-1")


class TestRecommendForAnalysis:
    """Test recommendations for a freshly analysed outfit."""

    @pytest.mark.asyncio
    async def test_embeds_analysis_text(self, memory_repository, recommendation_config):
        """Test the analysis is embedded and ranked."""
        provider = StaticEmbeddingProvider([0.0, 1.0])
        service = RecommendationService(
            memory_repository, config=recommendation_config, embedding_provider=provider
        )
        analysis = OutfitAnalysis(
            style_tags=["casual", "streetwear"],
            colors=["black"],
            description="Oversized hoodie with cargo pants",
            categories=["tops", "bottoms"],
        )

        result = await service.recommend_for_analysis(analysis, threshold=0.9)

        assert _ids(result) == ["b"]
        assert provider.texts[0].startswith("Style: casual, streetwear")

    @pytest.mark.asyncio
    async def test_provider_failure_falls_back(self, memory_repository, recommendation_config):
        """Test provider errors lead to the fallback list."""
        service = RecommendationService(
            memory_repository,
            config=recommendation_config,
            embedding_provider=StaticEmbeddingProvider([0.0, 1.0], fail=True),
        )

        result = await service.recommend_for_analysis(OutfitAnalysis(description="jacket"))

        assert result.used_fallback is True
        assert result.fallback_reason is FallbackReason.NO_VALID_EMBEDDINGS

    @pytest.mark.asyncio
    async def test_requires_provider(self, memory_repository):
        """Test missing provider is a configuration error."""
        with pytest.raises(ConfigurationError):
            await RecommendationService(memory_repository).recommend_for_analysis(OutfitAnalysis())
