"""
Input validation utilities.
"""

from typing import Any

from .exceptions import InvalidInputError


def validate_threshold(threshold: Any) -> float:
    """
    Validate a similarity threshold.

    Args:
        threshold: Threshold value supplied by the caller.

    Returns:
        Threshold as float.

    Raises:
        InvalidInputError: If threshold is not a number within [0, 1].
    """
    if isinstance(threshold, bool):
        raise InvalidInputError("Threshold must be a number", field="threshold", value=threshold)
    try:
        value = float(threshold)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(
            "Threshold must be a number", field="threshold", value=threshold
        ) from e

    if not 0.0 <= value <= 1.0:
        raise InvalidInputError(
            f"Threshold must be within [0, 1], got {value}",
            field="threshold",
            value=threshold,
        )
    return value


def validate_limit(limit: Any, field: str = "limit") -> int:
    """
    Validate a result-count cap.

    Args:
        limit: Limit value supplied by the caller.
        field: Name reported in the error context.

    Returns:
        Limit as int.

    Raises:
        InvalidInputError: If limit is not a positive integer.
    """
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise InvalidInputError(f"{field} must be an integer", field=field, value=limit)
    if limit <= 0:
        raise InvalidInputError(f"{field} must be positive, got {limit}", field=field, value=limit)
    return limit
