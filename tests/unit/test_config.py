"""Unit tests for configuration module."""

from __future__ import annotations

from pathlib import Path

import pytest

from doc_store.infrastructure.config import (
    Config,
    ObservabilityConfig,
    QueryConfig,
    StorageConfig,
    get_config,
)


@pytest.mark.unit
class TestConfig:
    """Tests for Config class."""

    def test_default_config(self) -> None:
        """Test default configuration values."""
        config = Config()

        assert config.storage.log_filename == "records.log"
        assert config.storage.sync_mode == "fsync"
        assert config.storage.create_if_missing is True
        assert config.query.strict_operators is True
        assert config.query.corrupt_record_policy == "raise"
        assert config.query.cache_policy == "reload"
        assert config.query.lock_timeout_seconds == 30.0
        assert config.observability.log_format == "json"

    def test_log_path(self, temp_dir: Path) -> None:
        """log_path joins data_dir and log_filename."""
        storage = StorageConfig(data_dir=temp_dir, log_filename="users.log")

        assert storage.log_path == temp_dir / "users.log"

    def test_ensure_directories(self, temp_dir: Path) -> None:
        """Test that ensure_directories creates the data directory."""
        config = Config(storage=StorageConfig(data_dir=temp_dir / "nested" / "data"))

        config.ensure_directories()

        assert config.storage.data_dir.exists()

    def test_invalid_lock_timeout(self) -> None:
        """Lock timeout must be positive."""
        with pytest.raises(ValueError):
            QueryConfig(lock_timeout_seconds=0)

    def test_invalid_cache_policy(self) -> None:
        """Only reload and cache are accepted."""
        with pytest.raises(ValueError):
            QueryConfig(cache_policy="forever")  # type: ignore

    def test_corrupt_record_policies(self) -> None:
        """Test valid corrupt-record policies."""
        for policy in ["raise", "skip"]:
            query = QueryConfig(corrupt_record_policy=policy)  # type: ignore
            assert query.corrupt_record_policy == policy

    def test_invalid_metrics_port(self) -> None:
        with pytest.raises(ValueError):
            ObservabilityConfig(metrics_port=70000)

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Nested settings are read from DOC_STORE_ variables."""
        monkeypatch.setenv("DOC_STORE_QUERY__CACHE_POLICY", "cache")
        monkeypatch.setenv("DOC_STORE_STORAGE__LOG_FILENAME", "events.log")

        config = Config()

        assert config.query.cache_policy == "cache"
        assert config.storage.log_filename == "events.log"


@pytest.mark.unit
class TestConfigSingleton:
    """Tests for get_config singleton."""

    def test_get_config_returns_same_instance(self) -> None:
        """Test that get_config returns the same instance."""
        config1 = get_config()
        config2 = get_config()
        assert config1 is config2
