"""
Wiring of stores and services from an AppConfig.

Nothing here is cached at module level; each call builds fresh objects
so callers (and tests) control the lifetime of every client.
"""

from typing import Optional

from outfitmatch.core.use_cases.get_recommendations import RecommendationService
from outfitmatch.domain.interfaces.embedding_provider_interface import EmbeddingProviderInterface
from outfitmatch.domain.interfaces.repository_interface import (
    CatalogRepositoryInterface,
    OutfitRepositoryInterface,
)
from outfitmatch.infrastructure.database import (
    ChromaCatalogRepository,
    InMemoryCatalogRepository,
    SupabaseCatalogRepository,
    SupabaseOutfitRepository,
    create_supabase_client,
)
from outfitmatch.utils.config import AppConfig
from outfitmatch.utils.logger import get_logger

logger = get_logger(__name__)


def build_catalog_repository(config: AppConfig, supabase_client=None) -> CatalogRepositoryInterface:
    """
    Create the catalog store selected by ``config.database.backend``.

    Args:
        config: Application configuration.
        supabase_client: Existing Supabase client (created from
            ``config.supabase`` when omitted).
    """
    backend = config.database.backend
    embedding_dim = config.recommendation.embedding_dim

    if backend == "chroma":
        repository = ChromaCatalogRepository(config.database, embedding_dim=embedding_dim)
    elif backend == "supabase":
        client = supabase_client or create_supabase_client(config.supabase)
        repository = SupabaseCatalogRepository(client, config.supabase)
    else:
        repository = InMemoryCatalogRepository(expected_dim=embedding_dim)

    logger.info(f"Using {backend} catalog store")
    return repository


def build_recommendation_service(
    config: AppConfig,
    catalog_repository: Optional[CatalogRepositoryInterface] = None,
    outfit_repository: Optional[OutfitRepositoryInterface] = None,
    embedding_provider: Optional[EmbeddingProviderInterface] = None,
    supabase_client=None,
) -> RecommendationService:
    """
    Build a RecommendationService from configuration.

    Stores that are not passed in are created from ``config``. With the
    supabase backend the outfit store shares the catalog's client.

    Args:
        config: Application configuration.
        catalog_repository: Catalog store override.
        outfit_repository: Outfit store override.
        embedding_provider: Provider used by ``recommend_for_analysis``.
        supabase_client: Existing Supabase client.

    Returns:
        A ready RecommendationService.
    """
    if config.database.backend == "supabase" and (catalog_repository is None or outfit_repository is None):
        supabase_client = supabase_client or create_supabase_client(config.supabase)
        if outfit_repository is None:
            outfit_repository = SupabaseOutfitRepository(supabase_client, config.supabase)

    if catalog_repository is None:
        catalog_repository = build_catalog_repository(config, supabase_client=supabase_client)

    return RecommendationService(
        catalog_repository,
        config=config.recommendation,
        outfit_repository=outfit_repository,
        embedding_provider=embedding_provider,
    )
