"""Configuration management system using Pydantic v2 and YAML.

This module provides type-safe configuration loading with validation
for the OutfitMatch recommendation engine. Configuration objects are
passed explicitly to the components that need them; there is no
process-wide cached instance.
"""

import os
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigFileNotFoundError, ConfigurationError


class RecommendationConfig(BaseModel):
    """Defaults for the ranking and fallback pipeline."""

    match_threshold: float = Field(default=0.5, ge=0.0, le=1.0, description="Minimum cosine similarity kept by the ranker")
    match_count: int = Field(default=12, ge=1, description="Maximum number of ranked items returned")
    fallback_count: int = Field(default=12, ge=1, description="Maximum number of in-stock fallback items")
    retrieval_timeout_seconds: float = Field(default=5.0, gt=0.0, description="Timeout for each external catalog read")
    embedding_dim: Optional[int] = Field(default=1536, ge=1, description="Expected embedding dimension (None infers it per request)")


class DatabaseConfig(BaseModel):
    """Configuration for the catalog embedding store."""

    backend: Literal["memory", "chroma", "supabase"] = Field(default="memory", description="Catalog store implementation")
    persist_directory: str = Field(default="./data/chroma", description="Directory for ChromaDB persistence")
    collection_name: str = Field(default="catalog_items", description="ChromaDB collection name")
    batch_size: int = Field(default=100, ge=1, description="Batch size for embedding insertion")
    distance_metric: str = Field(default="cosine", description="Distance metric for similarity search")

    @field_validator('distance_metric')
    @classmethod
    def validate_distance_metric(cls, v: str) -> str:
        """Only cosine space yields scores comparable to the match threshold."""
        if v.lower() != "cosine":
            raise ValueError(f"Invalid distance metric '{v}'. Only 'cosine' is supported")
        return v.lower()


class SupabaseConfig(BaseModel):
    """Configuration for the hosted Postgres/pgvector catalog."""

    url: str = Field(default_factory=lambda: os.environ.get("SUPABASE_URL", ""), description="Supabase project URL")
    service_key: str = Field(default_factory=lambda: os.environ.get("SUPABASE_SERVICE_ROLE_KEY", ""), description="Service role key")
    items_table: str = Field(default="items", description="Catalog items table")
    outfits_table: str = Field(default="outfits", description="User outfits table")
    match_function: str = Field(default="find_similar_items", description="Stored similarity function")


class AppConfig(BaseModel):
    """Root configuration model containing all sub-configurations."""

    recommendation: RecommendationConfig = Field(default_factory=RecommendationConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    supabase: SupabaseConfig = Field(default_factory=SupabaseConfig)
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level. Choose from: {valid_levels}")
        return v_upper


def load_config(config_path: Optional[Path | str] = None) -> AppConfig:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to configuration file. Defaults to the
                    OUTFITMATCH_CONFIG env var, then config/config.yaml
                    relative to the project root.

    Returns:
        Validated AppConfig instance

    Raises:
        ConfigFileNotFoundError: If config file doesn't exist
        ConfigurationError: If configuration is invalid
    """
    if config_path is None:
        env_config_path = os.environ.get('OUTFITMATCH_CONFIG')
        if env_config_path:
            config_path = Path(env_config_path)
        else:
            # src/outfitmatch/utils/config.py -> repository root
            project_root = Path(__file__).resolve().parents[3]
            config_path = project_root / "config" / "config.yaml"
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        example_path = config_path.parent / "config.example.yaml"
        raise ConfigFileNotFoundError(
            f"Configuration file not found: {config_path}. "
            f"Copy {example_path} to {config_path} or set OUTFITMATCH_CONFIG.",
            path=str(config_path),
        )

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            config_dict = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Could not parse {config_path}: {e}",
                context={"path": str(config_path)},
            ) from e

    try:
        return AppConfig.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in {config_path}: {e.error_count()} error(s)",
            context={"path": str(config_path), "errors": e.errors(include_url=False)},
        ) from e
