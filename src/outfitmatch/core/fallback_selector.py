"""
Deterministic, non-personalised fallback results.

Used whenever personalised ranking is unavailable or comes back empty,
so the caller always has something to show if the catalog has anything
in stock.
"""

from __future__ import annotations

import asyncio
from typing import List, Optional

from outfitmatch.domain.entities.catalog_item import CatalogItem
from outfitmatch.domain.interfaces.repository_interface import CatalogRepositoryInterface
from outfitmatch.utils.logger import get_logger, log_exception
from outfitmatch.utils.validators import validate_limit

logger = get_logger(__name__)


class FallbackSelector:
    """
    Selects up to ``limit`` in-stock catalog items, ordered by item id.

    Never raises for catalog problems: an empty, failing or timed-out
    catalog read yields an empty list.
    """

    def __init__(
        self,
        repository: CatalogRepositoryInterface,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the selector.

        Args:
            repository: Catalog store to read from.
            timeout: Timeout for the catalog read in seconds.
        """
        self.repository = repository
        self.timeout = timeout

    async def select_fallback(self, limit: int) -> List[CatalogItem]:
        """
        Return the fallback item list.

        Args:
            limit: Maximum number of items, > 0.

        Returns:
            In-stock items sorted by id, at most ``limit`` of them.

        Raises:
            InvalidInputError: If limit is not a positive integer.
        """
        limit = validate_limit(limit)

        try:
            items = await asyncio.wait_for(
                self.repository.list_in_stock(limit),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.error(f"Fallback catalog read timed out after {self.timeout}s, returning no items")
            return []
        except Exception as e:
            log_exception(logger, "fallback catalog read", e)
            return []

        selected = sorted(
            (item for item in items or [] if item.in_stock),
            key=lambda item: item.id,
        )[:limit]

        if not selected:
            logger.warning("Catalog has no in-stock items; fallback is empty")
        else:
            logger.info(f"Selected {len(selected)} fallback items")
        return selected
