"""
Abstract interfaces for the catalog and outfit stores.

The recommendation core only reads through these narrow contracts. All
methods are coroutines because every implementation is backed by an
external data service (or behaves as if it were).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from outfitmatch.domain.entities.catalog_item import CatalogItem
from outfitmatch.domain.entities.outfit import Outfit


@dataclass(frozen=True)
class CandidateMatch:
    """
    A catalog item returned by a similarity query.

    ``similarity`` is set when the store already scored the candidate
    (e.g. a server-side stored function); otherwise the ranker scores it
    from ``item.embedding``.
    """

    item: CatalogItem
    similarity: Optional[float] = None


class CatalogRepositoryInterface(ABC):
    """
    Abstract base class for catalog stores.

    Defines the contract for reading catalog items and their embeddings.
    """

    @abstractmethod
    async def find_candidates(
        self,
        query: np.ndarray,
        threshold: float,
        limit: int,
    ) -> List[CandidateMatch]:
        """
        Retrieve candidate items for a similarity query.

        Implementations may pre-filter by ``threshold`` and ``limit`` (a
        stored function does) or return a superset (a flat scan does);
        the ranker applies both again.

        Args:
            query: Query embedding vector.
            threshold: Minimum similarity of interest.
            limit: Number of results the caller wants.

        Returns:
            Candidate matches.

        Raises:
            Exception: Any store/network error; the ranker converts it.
        """
        pass

    @abstractmethod
    async def list_in_stock(self, limit: int) -> List[CatalogItem]:
        """
        Return up to ``limit`` in-stock items ordered by item id.

        Args:
            limit: Maximum number of items.

        Returns:
            In-stock catalog items.
        """
        pass

    @abstractmethod
    async def count(self) -> int:
        """Return the total number of items in the catalog."""
        pass


class OutfitRepositoryInterface(ABC):
    """Read access to users' outfits."""

    @abstractmethod
    async def list_outfits(self, user_id: str) -> List[Outfit]:
        """
        Return all outfits owned by a user.

        Args:
            user_id: Owner of the outfits.

        Returns:
            The user's outfits, with or without embeddings.
        """
        pass
