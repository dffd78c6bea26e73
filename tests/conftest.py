"""Pytest fixtures and configuration for OutfitMatch tests."""

import os
import tempfile
import uuid
from typing import Callable, Optional, Sequence

# Keep test runs from writing into the repository's logs/ directory
os.environ.setdefault("OUTFITMATCH_LOG_DIR", tempfile.mkdtemp(prefix="outfitmatch-logs-"))

import pytest

from outfitmatch.domain.entities.catalog_item import CatalogItem
from outfitmatch.domain.entities.embedding import Embedding
from outfitmatch.domain.entities.outfit import Outfit
from outfitmatch.infrastructure.database.memory_repository import (
    InMemoryCatalogRepository,
    InMemoryOutfitRepository,
)
from outfitmatch.utils.config import AppConfig, DatabaseConfig, RecommendationConfig


@pytest.fixture
def make_item() -> Callable[..., CatalogItem]:
    """Factory for catalog items with a small embedding."""

    def _make_item(
        item_id: str,
        vector: Optional[Sequence[float]] = None,
        in_stock: bool = True,
        **kwargs,
    ) -> CatalogItem:
        kwargs.setdefault("name", f"Item {item_id}")
        kwargs.setdefault("brand", "Acme")
        kwargs.setdefault("image_url", f"https://example.com/{item_id}.jpg")
        return CatalogItem(
            id=item_id,
            in_stock=in_stock,
            embedding=Embedding.from_list(vector) if vector is not None else None,
            **kwargs,
        )

    return _make_item


@pytest.fixture
def make_outfit() -> Callable[..., Outfit]:
    """Factory for outfits owned by a user."""

    def _make_outfit(outfit_id: str, user_id: str = "user-1", embedding=None, **kwargs) -> Outfit:
        return Outfit(id=outfit_id, user_id=user_id, embedding=embedding, **kwargs)

    return _make_outfit


@pytest.fixture
def catalog_items(make_item) -> list[CatalogItem]:
    """Five 2-D items spread around the unit circle, one out of stock."""
    return [
        make_item("a", [1.0, 0.0]),
        make_item("b", [0.0, 1.0]),
        make_item("c", [0.8, 0.6]),
        make_item("d", [0.6, 0.8]),
        make_item("e", [-1.0, 0.0], in_stock=False),
    ]


@pytest.fixture
def memory_repository(catalog_items) -> InMemoryCatalogRepository:
    """In-memory catalog holding ``catalog_items``."""
    return InMemoryCatalogRepository(catalog_items, expected_dim=2)


@pytest.fixture
def outfit_repository(make_outfit) -> InMemoryOutfitRepository:
    """Outfits for two users; user-1 has one outfit without an embedding."""
    return InMemoryOutfitRepository([
        make_outfit("o1", "user-1", [1.0, 0.0]),
        make_outfit("o2", "user-1", "[0.8, 0.6]"),
        make_outfit("o3", "user-1", None),
        make_outfit("o4", "user-2", [0.0, 1.0]),
    ])


@pytest.fixture
def recommendation_config() -> RecommendationConfig:
    """Recommendation defaults sized for 2-D test vectors."""
    return RecommendationConfig(
        match_threshold=0.5,
        match_count=12,
        fallback_count=12,
        retrieval_timeout_seconds=1.0,
        embedding_dim=2,
    )


@pytest.fixture
def test_config(tmp_path, recommendation_config) -> AppConfig:
    """Application config with a throwaway ChromaDB directory."""
    return AppConfig(
        recommendation=recommendation_config,
        database=DatabaseConfig(
            backend="memory",
            persist_directory=str(tmp_path / "chroma"),
            collection_name=f"test_{uuid.uuid4().hex[:8]}",
            batch_size=2,
            distance_metric="cosine",
        ),
        log_level="DEBUG",
    )
