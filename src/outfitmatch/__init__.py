"""OutfitMatch - embedding-based outfit recommendation engine.

Turns a user's outfit embeddings into a style profile, ranks catalog
items by cosine similarity and falls back to in-stock items when
personalised retrieval is unavailable.
"""

__version__ = "0.1.0"
__author__ = "OutfitMatch Team"
