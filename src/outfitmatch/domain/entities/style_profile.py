"""
StyleProfile: the aggregated vector describing a user's aesthetic.

Derived per recommendation request and never persisted or cached.
"""

from dataclasses import dataclass, field
from typing import List

import numpy as np

from outfitmatch.utils.exceptions import EmbeddingError


@dataclass(frozen=True, eq=False)
class StyleProfile:
    """Result of aggregating one or more source embeddings."""

    vector: np.ndarray
    source_count: int
    excluded_count: int = 0  # malformed inputs
    rejected_count: int = 0  # dimension mismatches
    issues: List[EmbeddingError] = field(default_factory=list)

    @property
    def dimension(self) -> int:
        return int(self.vector.shape[0])

    @property
    def skipped_count(self) -> int:
        """Total number of inputs that did not contribute to the profile."""
        return self.excluded_count + self.rejected_count
