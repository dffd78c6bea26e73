"""
In-process catalog and outfit stores.

The catalog store performs a flat scan: every item with an embedding is
a candidate and the SimilarityRanker scores them all. Suitable for tests,
demos and catalogs small enough to hold in memory.

Example:
    >>> repo = InMemoryCatalogRepository(expected_dim=1536)
    >>> repo.add_items(items)
    >>> candidates = await repo.find_candidates(query, threshold=0.5, limit=12)
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

import numpy as np

from outfitmatch.domain.entities.catalog_item import CatalogItem
from outfitmatch.domain.entities.outfit import Outfit
from outfitmatch.domain.interfaces.repository_interface import (
    CandidateMatch,
    CatalogRepositoryInterface,
    OutfitRepositoryInterface,
)
from outfitmatch.utils.exceptions import CatalogError, DimensionMismatch
from outfitmatch.utils.logger import get_logger

logger = get_logger(__name__)


class InMemoryCatalogRepository(CatalogRepositoryInterface):
    """Catalog held in a dict keyed by item id."""

    def __init__(
        self,
        items: Optional[Iterable[CatalogItem]] = None,
        expected_dim: Optional[int] = None,
    ):
        """
        Initialize the store.

        Args:
            items: Initial catalog items.
            expected_dim: Dimension every item embedding must have.
        """
        self.expected_dim = expected_dim
        self._items: Dict[str, CatalogItem] = {}
        if items:
            self.add_items(items)

    def add_items(self, items: Iterable[CatalogItem]) -> int:
        """
        Add or replace catalog items.

        Args:
            items: Items carrying their ingestion-time embedding.

        Returns:
            Number of items stored.

        Raises:
            CatalogError: If an item has no embedding.
            DimensionMismatch: If an embedding has the wrong dimension.
        """
        batch = list(items)
        for item in batch:
            if item.embedding is None:
                raise CatalogError(
                    f"Item {item.id} has no embedding",
                    context={"item_id": item.id},
                )
            if self.expected_dim is None:
                self.expected_dim = item.embedding.dimension
            elif item.embedding.dimension != self.expected_dim:
                raise DimensionMismatch(
                    f"Item {item.id} embedding has {item.embedding.dimension} dimensions, "
                    f"expected {self.expected_dim}",
                    expected=self.expected_dim,
                    actual=item.embedding.dimension,
                )

        for item in batch:
            self._items[item.id] = item

        logger.info(f"Stored {len(batch)} catalog items ({len(self._items)} total)")
        return len(batch)

    def remove_item(self, item_id: str) -> bool:
        """Remove an item; returns False if it was not present."""
        return self._items.pop(item_id, None) is not None

    async def find_candidates(
        self,
        query: np.ndarray,
        threshold: float,
        limit: int,
    ) -> List[CandidateMatch]:
        # Flat scan: scoring, filtering and capping are left to the ranker
        return [
            CandidateMatch(item=item)
            for item in self._items.values()
            if item.embedding is not None
        ]

    async def list_in_stock(self, limit: int) -> List[CatalogItem]:
        in_stock = sorted(
            (item for item in self._items.values() if item.in_stock),
            key=lambda item: item.id,
        )
        return in_stock[:limit]

    async def count(self) -> int:
        return len(self._items)


class InMemoryOutfitRepository(OutfitRepositoryInterface):
    """Outfits held in memory, grouped by owner."""

    def __init__(self, outfits: Optional[Iterable[Outfit]] = None):
        self._outfits: Dict[str, Outfit] = {}
        for outfit in outfits or []:
            self.add_outfit(outfit)

    def add_outfit(self, outfit: Outfit) -> None:
        self._outfits[outfit.id] = outfit

    def delete_outfit(self, outfit_id: str, user_id: str) -> bool:
        """
        Delete an outfit on behalf of its owner.

        Other outfits and their embeddings are untouched.

        Returns:
            True if deleted, False if missing or owned by someone else.
        """
        outfit = self._outfits.get(outfit_id)
        if outfit is None or outfit.user_id != user_id:
            return False
        del self._outfits[outfit_id]
        return True

    async def list_outfits(self, user_id: str) -> List[Outfit]:
        return sorted(
            (outfit for outfit in self._outfits.values() if outfit.user_id == user_id),
            key=lambda outfit: (outfit.created_at, outfit.id),
        )
