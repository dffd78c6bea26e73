"""
Text sent to the embedding provider for outfits and catalog items.

Outfits and catalog items are embedded from the same kind of
line-oriented summary so their vectors live in a comparable space.
"""

from typing import Iterable

from outfitmatch.domain.entities.catalog_item import CatalogItem
from outfitmatch.domain.entities.outfit import OutfitAnalysis


def _join(values: Iterable[str]) -> str:
    return ", ".join(v.strip() for v in values if v and v.strip())


def build_outfit_embedding_text(analysis: OutfitAnalysis) -> str:
    """Compose the embedding text for an analysed outfit photo."""
    lines = [
        f"Style: {_join(analysis.style_tags)}",
        f"Colors: {_join(analysis.colors)}",
        f"Description: {analysis.description.strip()}",
        f"Categories: {_join(analysis.categories)}",
    ]
    return "\n".join(lines)


def build_catalog_embedding_text(item: CatalogItem) -> str:
    """Compose the embedding text for a catalog item at ingestion time."""
    lines = [
        f"Brand: {item.brand}",
        f"Product: {item.name}",
        f"Category: {item.category or ''}",
        f"Style: {_join(item.style_tags)}",
        f"Colors: {_join(item.colors)}",
        f"Description: {(item.description or '').strip()}",
    ]
    return "\n".join(lines)
