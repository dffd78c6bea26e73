# Ranking Package
"""
Nearest-neighbour ranking of catalog items.
"""

from .similarity_ranker import RankedItem, SimilarityRanker

__all__ = ["RankedItem", "SimilarityRanker"]
