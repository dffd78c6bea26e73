# Use Cases Package
"""
Application use cases (business logic).

Use cases orchestrate the flow of data between domain entities,
the ranking components and the stores.
"""

from outfitmatch.core.use_cases.get_recommendations import (
    FallbackReason,
    RecommendationResult,
    RecommendationService,
)

__all__ = [
    "FallbackReason",
    "RecommendationResult",
    "RecommendationService",
]
