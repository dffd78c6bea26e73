# Domain Interfaces Package
"""
Abstract base classes defining contracts for infrastructure implementations.
"""

from .embedding_provider_interface import EmbeddingProviderInterface
from .repository_interface import (
    CandidateMatch,
    CatalogRepositoryInterface,
    OutfitRepositoryInterface,
)

__all__ = [
    "CandidateMatch",
    "CatalogRepositoryInterface",
    "EmbeddingProviderInterface",
    "OutfitRepositoryInterface",
]
