"""Utility modules for configuration, logging, validation and errors."""

from .config import AppConfig, DatabaseConfig, RecommendationConfig, SupabaseConfig, load_config
from .logger import (
    get_logger,
    log_exception,
    log_execution_time,
    set_log_level,
)
from .validators import validate_limit, validate_threshold

__all__ = [
    # Configuration
    "AppConfig",
    "DatabaseConfig",
    "RecommendationConfig",
    "SupabaseConfig",
    "load_config",
    # Logging
    "get_logger",
    "log_execution_time",
    "set_log_level",
    "log_exception",
    # Validation
    "validate_threshold",
    "validate_limit",
]
