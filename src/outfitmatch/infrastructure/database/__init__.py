"""Catalog and outfit store implementations."""

from .chroma_repository import ChromaCatalogRepository
from .memory_repository import InMemoryCatalogRepository, InMemoryOutfitRepository
from .models import BatchInsertResult
from .supabase_repository import (
    SupabaseCatalogRepository,
    SupabaseOutfitRepository,
    create_supabase_client,
)

__all__ = [
    "BatchInsertResult",
    "ChromaCatalogRepository",
    "InMemoryCatalogRepository",
    "InMemoryOutfitRepository",
    "SupabaseCatalogRepository",
    "SupabaseOutfitRepository",
    "create_supabase_client",
]
