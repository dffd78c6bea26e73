"""Pydantic models and metadata converters for the persistent catalog stores.

Vector stores keep scalar metadata only, so list fields are flattened to
semicolon-separated strings and optional fields to empty strings.
"""

from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Sequence

from pydantic import BaseModel, Field

from outfitmatch.core.embedding_parser import parse_embedding
from outfitmatch.domain.entities.catalog_item import CatalogItem
from outfitmatch.domain.entities.embedding import Embedding, EmbeddingSource
from outfitmatch.domain.entities.outfit import Outfit

LIST_SEPARATOR = ";"


class BatchInsertResult(BaseModel):
    """Model tracking batch insertion statistics."""

    success_count: int = Field(..., ge=0, description="Number of successfully inserted items")
    failed_ids: list[str] = Field(default_factory=list, description="List of failed item IDs")
    total_time: float = Field(..., ge=0.0, description="Total operation time in seconds")


def split_list(value: Any) -> list[str]:
    """Read a list field stored either natively or as ``"a;b;c"``."""
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(LIST_SEPARATOR) if part.strip()]
    return [str(part) for part in value]


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        # Postgres emits "Z" suffixes that older fromisoformat rejects
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return datetime.now(timezone.utc)


def catalog_item_to_metadata(item: CatalogItem) -> dict:
    """Extract metadata dict for vector store storage (excluding the embedding).

    Args:
        item: CatalogItem instance

    Returns:
        Dictionary with scalar metadata fields
    """
    return {
        'name': item.name,
        'brand': item.brand or '',
        'category': item.category or '',
        'price_range': item.price_range or '',
        'image_url': item.image_url,
        'description': item.description or '',
        'style_tags': LIST_SEPARATOR.join(item.style_tags),
        'colors': LIST_SEPARATOR.join(item.colors),
        'in_stock': bool(item.in_stock),
        'product_url': item.product_url or '',
        'created_at': item.created_at.isoformat(),
    }


def row_to_catalog_item(
    item_id: str,
    row: Mapping[str, Any],
    embedding: Optional[Sequence[float]] = None,
) -> CatalogItem:
    """Reconstruct a CatalogItem from store metadata or a database row.

    Args:
        item_id: Item identifier
        row: Metadata dictionary or table row
        embedding: Embedding vector (native or pgvector string), if loaded

    Returns:
        Reconstructed CatalogItem instance
    """
    vector = None
    if embedding is not None:
        vector = Embedding.from_list(parse_embedding(embedding).tolist(), EmbeddingSource.CATALOG_ITEM)

    return CatalogItem(
        id=str(item_id),
        name=row.get('name') or '',
        brand=row.get('brand') or '',
        category=row.get('category') or None,
        price_range=row.get('price_range') or None,
        image_url=row.get('image_url') or '',
        description=row.get('description') or None,
        style_tags=split_list(row.get('style_tags')),
        colors=split_list(row.get('colors')),
        in_stock=bool(row.get('in_stock', True)),
        product_url=row.get('product_url') or None,
        created_at=_parse_timestamp(row.get('created_at')),
        embedding=vector,
    )


def row_to_outfit(row: Mapping[str, Any]) -> Outfit:
    """Build an Outfit from a table row, keeping the raw embedding value."""
    return Outfit(
        id=str(row['id']),
        user_id=str(row['user_id']),
        image_url=row.get('image_url') or '',
        style_tags=split_list(row.get('style_tags')),
        colors=split_list(row.get('colors')),
        description=row.get('description') or '',
        categories=split_list(row.get('categories')),
        embedding=row.get('embedding'),
        created_at=_parse_timestamp(row.get('created_at')),
    )
