# DataLab Engine - Core Configuration
# Typed, environment-driven thresholds for the local statistics engine

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    """Logging level enumeration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output format."""
    TEXT = "text"
    JSON = "json"


class EngineSettings(BaseSettings):
    """
    Engine settings - Singleton pattern with caching.

    Every threshold used by the agent operations lives here so callers can
    override them per call (``EngineSettings(iqr_multiplier=3.0)``) or per
    process through ``DATALAB_*`` environment variables.
    """

    model_config = SettingsConfigDict(
        env_prefix="DATALAB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Application metadata
    app_name: str = Field(default="DataLab Engine", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")

    # Logging
    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: LogFormat = Field(default=LogFormat.TEXT)
    slow_operation_ms: float = Field(default=1000.0, gt=0, description="Warn above this duration")

    # Missing values
    missing_fill_sentinel: str = Field(default="Unknown", description="Fill for all-missing columns")

    # Type inference
    date_fraction_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    mixed_type_ratio: float = Field(default=0.9, ge=0.0, le=1.0)

    # Duplicates
    key_delimiter: str = Field(default="\x1f", min_length=1)

    # Outliers
    iqr_multiplier: float = Field(default=1.5, gt=0)
    min_outlier_values: int = Field(default=4, ge=2)

    # Correlation
    strong_correlation_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    correlation_decimals: int = Field(default=3, ge=0, le=10)

    # Trends
    trend_change_threshold_pct: float = Field(default=10.0, ge=0.0)
    min_trend_values: int = Field(default=3, ge=2)
    seasonality_min_rows: int = Field(default=12, ge=1)

    # Summary
    top_values_limit: int = Field(default=5, ge=1, le=100)


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """
    Get cached settings instance (Singleton pattern).

    The instance is frozen, so sharing it across concurrent calls is safe.
    """
    return EngineSettings()
