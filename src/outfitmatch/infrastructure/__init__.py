"""Infrastructure adapters for external catalog stores."""
