"""
Outfit entity and the vision analysis attached to an uploaded outfit photo.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Optional


@dataclass(frozen=True)
class OutfitAnalysis:
    """Style tags, colors and description returned by the vision provider."""

    style_tags: List[str] = field(default_factory=list)
    colors: List[str] = field(default_factory=list)
    description: str = ""
    categories: List[str] = field(default_factory=list)


@dataclass
class Outfit:
    """
    A user's uploaded outfit.

    The embedding is kept exactly as the store returned it: a list of
    floats, a pgvector string such as ``"[0.1,0.2]"``, or None when the
    upstream tagging/embedding step failed.
    """

    id: str
    user_id: str
    image_url: str = ""
    style_tags: List[str] = field(default_factory=list)
    colors: List[str] = field(default_factory=list)
    description: str = ""
    categories: List[str] = field(default_factory=list)
    embedding: Optional[Any] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Outfit id cannot be empty")
        if not self.user_id:
            raise ValueError("Outfit user_id cannot be empty")

    def has_embedding(self) -> bool:
        """Check if the outfit carries any stored embedding value."""
        return self.embedding is not None

    @property
    def analysis(self) -> OutfitAnalysis:
        """The vision analysis this outfit was created from."""
        return OutfitAnalysis(
            style_tags=list(self.style_tags),
            colors=list(self.colors),
            description=self.description,
            categories=list(self.categories),
        )
