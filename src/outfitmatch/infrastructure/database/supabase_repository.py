"""
Supabase (Postgres + pgvector) catalog and outfit stores.

Similarity search runs server-side through the ``find_similar_items``
stored function, which returns rows carrying a ``similarity`` column.
The supabase-py client is synchronous, so each request is executed in a
worker thread.
"""

import asyncio
from typing import Iterable, List, Optional

import numpy as np
from supabase import Client, create_client

from outfitmatch.domain.entities.catalog_item import CatalogItem
from outfitmatch.domain.entities.outfit import Outfit
from outfitmatch.domain.interfaces.repository_interface import (
    CandidateMatch,
    CatalogRepositoryInterface,
    OutfitRepositoryInterface,
)
from outfitmatch.utils.config import SupabaseConfig
from outfitmatch.utils.exceptions import CatalogError, ConfigurationError
from outfitmatch.utils.logger import get_logger

from .models import row_to_catalog_item, row_to_outfit

logger = get_logger(__name__)


def create_supabase_client(config: SupabaseConfig) -> Client:
    """
    Create a Supabase client from configuration.

    Args:
        config: Supabase URL and service role key.

    Returns:
        Client: A new Supabase client.

    Raises:
        ConfigurationError: If credentials are missing or the client
            cannot be created.
    """
    if not config.url or not config.service_key:
        raise ConfigurationError(
            "Supabase URL and service key are required "
            "(set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY)"
        )
    try:
        return create_client(config.url, config.service_key)
    except Exception as e:
        raise ConfigurationError(f"Failed to create Supabase client: {e}") from e


def to_vector_literal(vector: np.ndarray) -> str:
    """Format a vector as the ``[x,y,...]`` text pgvector accepts."""
    return "[" + ",".join(repr(float(v)) for v in np.asarray(vector).ravel()) + "]"


def catalog_item_to_row(item: CatalogItem) -> dict:
    """Row payload for the items table."""
    return {
        "id": item.id,
        "brand": item.brand,
        "name": item.name,
        "category": item.category,
        "price_range": item.price_range,
        "image_url": item.image_url,
        "description": item.description,
        "style_tags": list(item.style_tags),
        "colors": list(item.colors),
        "in_stock": item.in_stock,
        "product_url": item.product_url,
        "embedding": item.embedding.to_pgvector() if item.embedding is not None else None,
    }


class SupabaseCatalogRepository(CatalogRepositoryInterface):
    """Catalog stored in a Supabase ``items`` table."""

    def __init__(self, client: Client, config: Optional[SupabaseConfig] = None):
        self.client = client
        self.config = config or SupabaseConfig()

    def add_items(self, items: Iterable[CatalogItem]) -> int:
        """
        Upsert catalog items (with embeddings) into the items table.

        Returns:
            Number of rows written.

        Raises:
            CatalogError: If an item has no embedding or the write fails.
        """
        rows = []
        for item in items:
            if item.embedding is None:
                raise CatalogError(f"Item {item.id} has no embedding", context={"item_id": item.id})
            rows.append(catalog_item_to_row(item))
        if not rows:
            return 0

        try:
            self.client.table(self.config.items_table).upsert(rows).execute()
        except Exception as e:
            raise CatalogError(f"Failed to upsert {len(rows)} items: {e}") from e

        logger.info(f"Upserted {len(rows)} items into {self.config.items_table}")
        return len(rows)

    async def find_candidates(
        self,
        query: np.ndarray,
        threshold: float,
        limit: int,
    ) -> List[CandidateMatch]:
        params = {
            "query_embedding": to_vector_literal(query),
            "match_threshold": threshold,
            "match_count": limit,
        }
        result = await asyncio.to_thread(
            lambda: self.client.rpc(self.config.match_function, params).execute()
        )

        matches = []
        for row in result.data or []:
            similarity = row.get("similarity")
            matches.append(
                CandidateMatch(
                    item=row_to_catalog_item(row["id"], row),
                    similarity=float(similarity) if similarity is not None else None,
                )
            )
        logger.debug(f"{self.config.match_function} returned {len(matches)} rows")
        return matches

    async def list_in_stock(self, limit: int) -> List[CatalogItem]:
        result = await asyncio.to_thread(
            lambda: self.client.table(self.config.items_table)
            .select("*")
            .eq("in_stock", True)
            .order("id")
            .limit(limit)
            .execute()
        )
        return [row_to_catalog_item(row["id"], row) for row in result.data or []]

    async def count(self) -> int:
        result = await asyncio.to_thread(
            lambda: self.client.table(self.config.items_table)
            .select("id", count="exact")
            .limit(1)
            .execute()
        )
        return result.count or 0


class SupabaseOutfitRepository(OutfitRepositoryInterface):
    """Users' outfits stored in a Supabase ``outfits`` table."""

    def __init__(self, client: Client, config: Optional[SupabaseConfig] = None):
        self.client = client
        self.config = config or SupabaseConfig()

    async def list_outfits(self, user_id: str) -> List[Outfit]:
        result = await asyncio.to_thread(
            lambda: self.client.table(self.config.outfits_table)
            .select("*")
            .eq("user_id", user_id)
            .order("created_at")
            .execute()
        )
        return [row_to_outfit(row) for row in result.data or []]
