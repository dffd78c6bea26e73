"""
CatalogItem entity representing a shoppable product in the catalog.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from .embedding import Embedding


@dataclass
class CatalogItem:
    """Represents a catalog product with its ingestion-time embedding."""

    id: str
    name: str
    brand: str = ""
    category: Optional[str] = None
    price_range: Optional[str] = None  # "$", "$$", "$$$"
    image_url: str = ""
    description: Optional[str] = None
    style_tags: List[str] = field(default_factory=list)
    colors: List[str] = field(default_factory=list)
    in_stock: bool = True
    product_url: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # Produced once at catalog ingestion, never recomputed per request
    embedding: Optional[Embedding] = None

    def __post_init__(self) -> None:
        """Validate required fields after initialization."""
        if not self.id:
            raise ValueError("CatalogItem id cannot be empty")
        if not self.name:
            raise ValueError("CatalogItem name cannot be empty")
