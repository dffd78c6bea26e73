"""Unit tests for the Supabase stores using a mocked client."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import numpy as np
import pytest

from outfitmatch.core.use_cases import RecommendationService
from outfitmatch.infrastructure.database.supabase_repository import (
    SupabaseCatalogRepository,
    SupabaseOutfitRepository,
    create_supabase_client,
    to_vector_literal,
)
from outfitmatch.utils.config import SupabaseConfig
from outfitmatch.utils.exceptions import CatalogError, ConfigurationError


def _item_row(item_id, similarity=None, in_stock=True, **extra):
    row = {
        "id": item_id,
        "brand": "Acme",
        "name": f"Item {item_id}",
        "category": "tops",
        "price_range": "$$",
        "image_url": f"https://example.com/{item_id}.jpg",
        "style_tags": ["casual", "minimalist"],
        "colors": ["black"],
        "in_stock": in_stock,
        "created_at": "2024-03-01T12:00:00Z",
    }
    if similarity is not None:
        row["similarity"] = similarity
    row.update(extra)
    return row


class QueryBuilder:
    """Chainable stand-in for the PostgREST query builder."""

    def __init__(self, data=None, count=None):
        self.calls = []
        self.response = SimpleNamespace(data=data or [], count=count)

    def __getattr__(self, name):
        def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return method

    def execute(self):
        return self.response


@pytest.fixture
def config():
    return SupabaseConfig(url="https://project.supabase.co", service_key="service-key")


class TestSupabaseCatalogRepository:
    """Test catalog reads and writes."""

    @pytest.mark.asyncio
    async def test_find_candidates_calls_stored_function(self, config):
        """Test similarity search goes through the stored function."""
        client = MagicMock()
        client.rpc.return_value = QueryBuilder(data=[_item_row("x", 0.82), _item_row("y", 0.64)])
        repository = SupabaseCatalogRepository(client, config)

        candidates = await repository.find_candidates(np.array([0.5, -0.25]), 0.5, 12)

        client.rpc.assert_called_once_with(
            "find_similar_items",
            {"query_embedding": "[0.5,-0.25]", "match_threshold": 0.5, "match_count": 12},
        )
        assert [c.item.id for c in candidates] == ["x", "y"]
        assert [c.similarity for c in candidates] == [0.82, 0.64]
        assert candidates[0].item.style_tags == ["casual", "minimalist"]

    @pytest.mark.asyncio
    async def test_find_candidates_no_rows(self, config):
        """Test empty result set."""
        client = MagicMock()
        client.rpc.return_value = QueryBuilder(data=None)

        assert await SupabaseCatalogRepository(client, config).find_candidates(np.array([1.0]), 0.5, 12) == []

    @pytest.mark.asyncio
    async def test_list_in_stock_query(self, config):
        """Test fallback query filters, orders and limits."""
        builder = QueryBuilder(data=[_item_row("a"), _item_row("b")])
        client = MagicMock()
        client.table.return_value = builder

        items = await SupabaseCatalogRepository(client, config).list_in_stock(2)

        client.table.assert_called_once_with("items")
        assert [call[0] for call in builder.calls] == ["select", "eq", "order", "limit"]
        assert builder.calls[1][1] == ("in_stock", True)
        assert [item.id for item in items] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_count(self, config):
        """Test exact count is read from the response."""
        client = MagicMock()
        client.table.return_value = QueryBuilder(count=42)

        assert await SupabaseCatalogRepository(client, config).count() == 42

    def test_add_items_upserts_pgvector_text(self, config, make_item):
        """Test items are written with their embedding as vector text."""
        builder = QueryBuilder()
        client = MagicMock()
        client.table.return_value = builder

        written = SupabaseCatalogRepository(client, config).add_items([make_item("a", [1.0, 0.5])])

        assert written == 1
        (name, args, _kwargs) = builder.calls[0]
        assert name == "upsert"
        assert args[0][0]["embedding"] == "[1.0,0.5]"

    def test_add_items_requires_embedding(self, config, make_item):
        """Test items without embedding are refused."""
        with pytest.raises(CatalogError):
            SupabaseCatalogRepository(MagicMock(), config).add_items([make_item("a")])

    @pytest.mark.asyncio
    async def test_rpc_error_becomes_fallback(self, config, recommendation_config):
        """Test a failing stored function leads to the in-stock fallback."""
        client = MagicMock()
        client.rpc.side_effect = RuntimeError("function find_similar_items does not exist")
        client.table.return_value = QueryBuilder(data=[_item_row("a"), _item_row("b")])
        service = RecommendationService(SupabaseCatalogRepository(client, config), config=recommendation_config)

        result = await service.recommend([[1.0, 0.0]])

        assert result.used_fallback is True
        assert [entry.item.id for entry in result.items] == ["a", "b"]


class TestSupabaseOutfitRepository:
    """Test outfit reads."""

    @pytest.mark.asyncio
    async def test_list_outfits_keeps_raw_embedding(self, config):
        """Test serialized embeddings are passed through untouched."""
        builder = QueryBuilder(data=[
            {"id": "o1", "user_id": "u1", "embedding": "[0.1,0.2]", "style_tags": ["boho"]},
            {"id": "o2", "user_id": "u1", "embedding": None},
        ])
        client = MagicMock()
        client.table.return_value = builder

        outfits = await SupabaseOutfitRepository(client, config).list_outfits("u1")

        assert builder.calls[1] == ("eq", ("user_id", "u1"), {})
        assert outfits[0].embedding == "[0.1,0.2]"
        assert outfits[0].style_tags == ["boho"]
        assert outfits[1].has_embedding() is False


class TestClientFactory:
    """Test client creation."""

    def test_missing_credentials(self):
        """Test empty URL or key is a configuration error."""
        with pytest.raises(ConfigurationError):
            create_supabase_client(SupabaseConfig(url="", service_key=""))


def test_to_vector_literal():
    """Test vectors are formatted as pgvector text."""
    assert to_vector_literal(np.array([1.0, -0.5, 0.25])) == "[1.0,-0.5,0.25]"
