"""
Custom exception hierarchy for OutfitMatch.

Provides a structured exception hierarchy for different error scenarios:
- AppException: Base for all application errors
- ConfigError: Configuration-related errors
- EmbeddingError: Embedding parsing and aggregation errors
- RetrievalError: Candidate retrieval errors (store / RPC calls)
- CatalogError: Catalog storage and ingestion errors
- ValidationError: Input validation errors

Each exception includes:
- Descriptive message
- Optional error code for programmatic handling
- Optional context dictionary for debugging

Example:
    >>> from outfitmatch.utils.exceptions import RetrievalFailed
    >>> raise RetrievalFailed("Similarity query timed out", operation="find_candidates")
"""

from __future__ import annotations

from typing import Any, Dict, Optional


# ============================================
# Base Exception
# ============================================


class AppException(Exception):
    """
    Base exception for all OutfitMatch application errors.

    All custom exceptions inherit from this class, allowing:
    - Catch-all handling of application errors
    - Consistent error structure across the app
    - Error code and context support

    Attributes:
        message: Human-readable error description.
        code: Optional error code for programmatic handling.
        context: Optional dictionary with debugging context.

    Example:
        >>> try:
        ...     raise AppException("Something went wrong", code="APP_001")
        ... except AppException as e:
        ...     print(f"Error {e.code}: {e.message}")
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Initialize the exception.

        Args:
            message: Human-readable error description.
            code: Optional error code (e.g., "CONFIG_INVALID").
            context: Optional dict with additional debugging info.
        """
        self.message = message
        self.code = code or self._default_code()
        self.context = context or {}
        super().__init__(self.message)

    def _default_code(self) -> str:
        """Generate default error code from class name."""
        # CamelCase -> UPPER_SNAKE_CASE
        name = self.__class__.__name__
        code = ""
        for i, char in enumerate(name):
            if char.isupper() and i > 0:
                code += "_"
            code += char.upper()
        return code

    def __str__(self) -> str:
        """String representation with code if available."""
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "context": self.context,
        }


# ============================================
# Configuration Errors
# ============================================


class ConfigError(AppException):
    """
    Base exception for configuration-related errors.

    Raised when there are issues with:
    - Loading configuration files
    - Parsing YAML
    - Validating configuration values
    """

    pass


class ConfigFileNotFoundError(ConfigError):
    """
    Raised when a required configuration file is not found.

    Example:
        >>> raise ConfigFileNotFoundError(path="/path/to/config.yaml")
    """

    def __init__(
        self,
        message: str = "Configuration file not found",
        path: Optional[str] = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        if path:
            context["path"] = path
        super().__init__(message, code="CONFIG_FILE_NOT_FOUND", context=context, **kwargs)


class ConfigurationError(ConfigError):
    """
    Raised when configuration is invalid or cannot be parsed.

    Example:
        >>> raise ConfigurationError(
        ...     "match_threshold must be within [0, 1]",
        ...     context={"match_threshold": 1.7}
        ... )
    """

    def __init__(
        self,
        message: str = "Invalid configuration",
        **kwargs,
    ) -> None:
        super().__init__(message, code="CONFIG_INVALID", **kwargs)


# ============================================
# Embedding Errors
# ============================================


class EmbeddingError(AppException):
    """
    Base exception for embedding errors.

    Raised when there are issues with:
    - Parsing stored / serialized embeddings
    - Comparing embeddings of different dimensions
    - Building a style profile from outfit embeddings
    """

    pass


class DimensionMismatch(EmbeddingError):
    """
    Raised when two embeddings that must be compared differ in dimension.

    Vectors are never truncated or padded to make them fit.

    Example:
        >>> raise DimensionMismatch(expected=1536, actual=768)
    """

    def __init__(
        self,
        message: str = "Embedding dimension mismatch",
        expected: Optional[int] = None,
        actual: Optional[int] = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        if expected is not None:
            context["expected_dim"] = expected
        if actual is not None:
            context["actual_dim"] = actual
        self.expected = expected
        self.actual = actual
        super().__init__(message, code="DIMENSION_MISMATCH", context=context, **kwargs)


class MalformedEmbedding(EmbeddingError):
    """
    Raised when a value cannot be parsed into a numeric embedding.

    Example:
        >>> raise MalformedEmbedding("Not a vector", value="[0.1,abc]")
    """

    def __init__(
        self,
        message: str = "Malformed embedding",
        value: Any = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        if value is not None:
            context["value"] = str(value)[:100]  # Limit value length
        super().__init__(message, code="MALFORMED_EMBEDDING", context=context, **kwargs)


class NoValidEmbeddings(EmbeddingError):
    """Raised when no usable embedding is left to build a style profile."""

    def __init__(
        self,
        message: str = "No valid embeddings to aggregate",
        excluded: int = 0,
        rejected: int = 0,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        context["excluded"] = excluded
        context["rejected"] = rejected
        self.excluded = excluded
        self.rejected = rejected
        super().__init__(message, code="NO_VALID_EMBEDDINGS", context=context, **kwargs)


# ============================================
# Retrieval Errors
# ============================================


class RetrievalError(AppException):
    """
    Base exception for candidate retrieval errors.

    Raised when there are issues with:
    - Similarity queries against the catalog store
    - Remote stored-function calls
    - Timeouts of external reads
    """

    pass


class RetrievalFailed(RetrievalError):
    """
    Raised when the similarity retrieval cannot produce a complete candidate set.

    The underlying cause is chained with ``raise ... from``.

    Example:
        >>> raise RetrievalFailed(
        ...     "Similarity query timed out",
        ...     operation="find_candidates",
        ...     timeout=5.0
        ... )
    """

    def __init__(
        self,
        message: str = "Candidate retrieval failed",
        operation: Optional[str] = None,
        timeout: Optional[float] = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        if operation:
            context["operation"] = operation
        if timeout is not None:
            context["timeout_seconds"] = timeout
        super().__init__(message, code="RETRIEVAL_FAILED", context=context, **kwargs)


# ============================================
# Catalog Errors
# ============================================


class CatalogError(AppException):
    """
    Base exception for catalog storage errors.

    Raised when there are issues with:
    - Creating or accessing the catalog store
    - Ingesting catalog items
    """

    def __init__(
        self,
        message: str = "Catalog operation failed",
        **kwargs,
    ) -> None:
        super().__init__(message, code="CATALOG_ERROR", **kwargs)


class CatalogImportError(CatalogError):
    """Raised when catalog rows cannot be imported."""

    def __init__(
        self,
        message: str = "Failed to import catalog",
        path: Optional[str] = None,
        row: Optional[int] = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        if path:
            context["path"] = path
        if row is not None:
            context["row"] = row
        super().__init__(message, context=context, **kwargs)


# ============================================
# Validation Errors
# ============================================


class ValidationError(AppException):
    """
    Base exception for input validation errors.

    Raised when caller input fails validation.
    """

    pass


class InvalidInputError(ValidationError):
    """Raised when input data is invalid."""

    def __init__(
        self,
        message: str = "Invalid input",
        field: Optional[str] = None,
        value: Any = None,
        **kwargs,
    ) -> None:
        context = kwargs.pop("context", {})
        if field:
            context["field"] = field
        if value is not None:
            context["value"] = str(value)[:100]
        super().__init__(message, code="INVALID_INPUT", context=context, **kwargs)


# Alias for common import pattern
OutfitMatchError = AppException
