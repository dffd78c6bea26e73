# Domain Entities Package
"""
Core business entities as dataclasses.
"""

from .catalog_item import CatalogItem
from .embedding import Embedding, EmbeddingSource
from .outfit import Outfit, OutfitAnalysis
from .style_profile import StyleProfile

__all__ = [
    "CatalogItem",
    "Embedding",
    "EmbeddingSource",
    "Outfit",
    "OutfitAnalysis",
    "StyleProfile",
]
