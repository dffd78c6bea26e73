"""
Abstract interface for text embedding providers.
"""

from abc import ABC, abstractmethod
from typing import List


class EmbeddingProviderInterface(ABC):
    """
    Abstract base class for hosted embedding models.

    Generating vectors is outside this package; implementations wrap
    whatever provider the deployment uses.
    """

    @abstractmethod
    async def embed_text(self, text: str) -> List[float]:
        """
        Generate an embedding vector for a piece of text.

        Args:
            text: Text to embed.

        Returns:
            Embedding vector.
        """
        pass

    @property
    @abstractmethod
    def embedding_dim(self) -> int:
        """Return the embedding dimension."""
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Return the model name/identifier."""
        pass
