"""Core recommendation components for OutfitMatch."""

from .embedding_parser import parse_embedding
from .fallback_selector import FallbackSelector
from .profile_aggregator import ProfileAggregator
from .ranking import RankedItem, SimilarityRanker

__all__ = [
    "parse_embedding",
    "ProfileAggregator",
    "SimilarityRanker",
    "RankedItem",
    "FallbackSelector",
]
