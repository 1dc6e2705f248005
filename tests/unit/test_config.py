"""Unit tests for configuration loading and validation."""

import pytest
from pathlib import Path
from pydantic import ValidationError

from docsync.common.config import (
    Config,
    LoggingConfig,
    ReadmeSettings,
    RetryConfig,
    SyncConfig,
    TablesConfig,
)


class TestRetryConfig:
    """Tests for RetryConfig model."""

    def test_default_values(self):
        """Test default retry configuration values."""
        config = RetryConfig()
        assert config.max_attempts == 3
        assert 500 in config.status_codes
        assert 503 in config.status_codes

    def test_invalid_status_code(self):
        """Test validation of invalid status codes."""
        with pytest.raises(ValidationError):
            RetryConfig(status_codes=[999])

    def test_validation_constraints(self):
        """Test field validation constraints."""
        with pytest.raises(ValidationError):
            RetryConfig(max_attempts=0)


class TestLoggingConfig:
    """Tests for LoggingConfig model."""

    def test_level_normalized(self):
        """Test that log level is upper-cased."""
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_invalid_level(self):
        """Test rejection of unknown log level."""
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")

    def test_invalid_handler(self):
        """Test rejection of unknown handler."""
        with pytest.raises(ValidationError):
            LoggingConfig(handlers=["syslog"])


class TestSyncConfig:
    """Tests for SyncConfig model."""

    def test_default_values(self):
        """Test default synchronization settings."""
        config = SyncConfig()
        assert config.base_version_name == "v2018-08-01"
        assert config.guide_category_titles[0] == "Getting started"
        assert config.guide_category_titles[-1] == "More"
        assert config.reference_category_titles == ["Introduction"]
        assert config.max_upload_attempts == 6
        assert config.retry_delay == 5.0
        assert "upload request timed out" in config.specification_timeout_message

    def test_version_from_tag(self):
        """Test building a version identifier from a tag."""
        config = SyncConfig()
        assert config.version_from_tag("piotr-123") == "v2018-08-01-piotr-123"

    def test_overlapping_titles_rejected(self):
        """Test that a title cannot be both a guide and a reference category."""
        with pytest.raises(ValidationError, match="both guide and reference"):
            SyncConfig(
                guide_category_titles=["Intro", "More"],
                reference_category_titles=["Intro"],
            )

    def test_url_template_requires_placeholder(self):
        """Test that docs URL template must contain {version}."""
        with pytest.raises(ValidationError):
            SyncConfig(docs_url_template="https://docs.example.com/")

    def test_max_upload_attempts_constraint(self):
        """Test that at least one upload attempt is required."""
        with pytest.raises(ValidationError):
            SyncConfig(max_upload_attempts=0)


class TestConfig:
    """Tests for the main Config model."""

    def test_defaults(self):
        """Test that defaults work without a file."""
        config = Config()
        assert config.readme.base_url == "https://dash.readme.com/api/v1"
        assert config.rdme.rdme_path == "rdme"
        assert config.tables.build_command == ["npm", "run", "build-md-tables-from-openapi"]

    def test_from_yaml_string(self):
        """Test loading configuration from YAML string."""
        config = Config.from_yaml_string(
            """
sync:
  base_version_name: v2024-01-01
  reference_category_titles:
    - API Reference
  max_upload_attempts: 2
tables:
  build_command: []
"""
        )
        assert config.sync.base_version_name == "v2024-01-01"
        assert config.sync.reference_category_titles == ["API Reference"]
        assert config.sync.max_upload_attempts == 2
        assert config.tables.build_command == []
        assert config.tables.update_command == TablesConfig().update_command

    def test_from_empty_yaml_string(self):
        """Test that an empty document yields defaults."""
        assert Config.from_yaml_string("") == Config()

    def test_from_yaml_file(self, tmp_path: Path):
        """Test loading configuration from YAML file."""
        path = tmp_path / "docsync.yaml"
        path.write_text("readme:\n  per_page: 50\nlogging:\n  level: debug\n")

        config = Config.from_yaml(path)

        assert config.readme.per_page == 50
        assert config.logging.level == "DEBUG"

    def test_from_missing_yaml_file(self, tmp_path: Path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            Config.from_yaml(tmp_path / "missing.yaml")


class TestReadmeSettings:
    """Tests for environment-based secrets."""

    def test_reads_environment(self, monkeypatch):
        """Test reading README_IO_AUTH from the environment."""
        monkeypatch.setenv("README_IO_AUTH", "rdme_from_env_123456")
        assert ReadmeSettings().readme_io_auth == "rdme_from_env_123456"

    def test_reads_dotenv_file(self, monkeypatch, tmp_path: Path):
        """Test reading README_IO_AUTH from a .env file in the working directory."""
        monkeypatch.delenv("README_IO_AUTH", raising=False)
        (tmp_path / ".env").write_text("README_IO_AUTH=rdme_from_dotenv_123\n")
        monkeypatch.chdir(tmp_path)
        assert ReadmeSettings().readme_io_auth == "rdme_from_dotenv_123"
