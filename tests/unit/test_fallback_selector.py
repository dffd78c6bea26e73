"""Unit tests for fallback selection."""

import asyncio

import pytest

from outfitmatch.core.fallback_selector import FallbackSelector
from outfitmatch.infrastructure.database.memory_repository import InMemoryCatalogRepository
from outfitmatch.utils.exceptions import InvalidInputError


class UnreachableCatalogRepository(InMemoryCatalogRepository):
    async def list_in_stock(self, limit):
        raise ConnectionError("catalog offline")


class HangingCatalogRepository(InMemoryCatalogRepository):
    async def list_in_stock(self, limit):
        await asyncio.sleep(5)
        return []


class LeakyCatalogRepository(InMemoryCatalogRepository):
    """Store that ignores the in-stock filter and the ordering."""

    async def list_in_stock(self, limit):
        return list(reversed(list(self._items.values())))


class TestSelectFallback:
    """Test fallback list contents."""

    @pytest.mark.asyncio
    async def test_in_stock_only(self, memory_repository):
        """Test out-of-stock items never appear."""
        items = await FallbackSelector(memory_repository).select_fallback(12)

        assert [item.id for item in items] == ["a", "b", "c", "d"]
        assert all(item.in_stock for item in items)

    @pytest.mark.asyncio
    async def test_limit(self, memory_repository):
        """Test at most limit items are returned."""
        items = await FallbackSelector(memory_repository).select_fallback(2)
        assert [item.id for item in items] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_deterministic(self, memory_repository):
        """Test same catalog gives the same list."""
        selector = FallbackSelector(memory_repository)
        assert await selector.select_fallback(3) == await selector.select_fallback(3)

    @pytest.mark.asyncio
    async def test_store_output_filtered_and_sorted(self, catalog_items):
        """Test in-stock filter and id ordering hold whatever the store returns."""
        items = await FallbackSelector(LeakyCatalogRepository(catalog_items)).select_fallback(12)
        assert [item.id for item in items] == ["a", "b", "c", "d"]

    @pytest.mark.asyncio
    async def test_empty_catalog(self):
        """Test empty catalog yields an empty list."""
        assert await FallbackSelector(InMemoryCatalogRepository()).select_fallback(12) == []

    @pytest.mark.asyncio
    async def test_nothing_in_stock(self, make_item):
        """Test catalog without stock yields an empty list."""
        repository = InMemoryCatalogRepository([make_item("x", [1.0], in_stock=False)])
        assert await FallbackSelector(repository).select_fallback(12) == []


class TestFallbackErrors:
    """Test catalog failures never propagate."""

    @pytest.mark.asyncio
    async def test_unreachable_catalog(self, catalog_items):
        """Test store errors yield an empty list."""
        selector = FallbackSelector(UnreachableCatalogRepository(catalog_items))
        assert await selector.select_fallback(12) == []

    @pytest.mark.asyncio
    async def test_timeout(self, catalog_items):
        """Test slow store yields an empty list."""
        selector = FallbackSelector(HangingCatalogRepository(catalog_items), timeout=0.05)
        assert await selector.select_fallback(12) == []

    @pytest.mark.asyncio
    async def test_invalid_limit(self, memory_repository):
        """Test caller errors are still reported."""
        with pytest.raises(InvalidInputError):
            await FallbackSelector(memory_repository).select_fallback(0)
