"""Configuration management for the document store."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageConfig(BaseModel):
    """Log file configuration."""

    data_dir: Path = Field(default=Path("data"), description="Directory holding the log file")
    log_filename: str = Field(
        default="records.log", min_length=1, description="Log file name inside data_dir"
    )
    sync_mode: Literal["fsync", "none"] = Field(
        default="fsync", description="Whether writes are fsynced before returning"
    )
    create_if_missing: bool = Field(
        default=True, description="Create an empty log file when none exists"
    )

    @property
    def log_path(self) -> Path:
        """Full path of the log file."""
        return self.data_dir / self.log_filename


class QueryConfig(BaseModel):
    """Query evaluation and write coordination configuration."""

    strict_operators: bool = Field(
        default=True,
        description="Reject field queries without exactly one recognized operator",
    )
    corrupt_record_policy: Literal["raise", "skip"] = Field(
        default="raise", description="What to do with live lines that fail to decode"
    )
    cache_policy: Literal["reload", "cache"] = Field(
        default="reload", description="Reload the log on every find, or cache until a local write"
    )
    lock_timeout_seconds: float = Field(
        default=30.0, gt=0, description="Max time a writer waits for the exclusive section"
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(default="json", description="Log format")
    otel_endpoint: str | None = Field(
        default=None, description="OpenTelemetry collector endpoint"
    )
    otel_service_name: str = Field(default="doc_store", description="Service name for tracing")
    metrics_port: int = Field(default=8001, ge=1, le=65535, description="Prometheus metrics port")


class Config(BaseSettings):
    """Main configuration for the document store."""

    model_config = SettingsConfigDict(
        env_prefix="DOC_STORE_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    storage: StorageConfig = Field(default_factory=StorageConfig)
    query: QueryConfig = Field(default_factory=QueryConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    def ensure_directories(self) -> None:
        """Ensure the data directory exists."""
        self.storage.data_dir.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_config() -> Config:
    """Get the global configuration instance."""
    return Config()
