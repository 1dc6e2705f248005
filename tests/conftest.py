"""Shared pytest fixtures for all tests."""

from pathlib import Path

import pytest
import respx

from docsync.common.config import (
    Config,
    HTTPConfig,
    LoggingConfig,
    ReadmeAPIConfig,
    RetryConfig,
    SyncConfig,
)

TEST_API_KEY = "rdme_test_key_0123456789"


@pytest.fixture
def sample_config() -> Config:
    """Provide a sample configuration for tests."""
    return Config(
        logging=LoggingConfig(
            level="DEBUG",
            format="text",
            handlers=["console"],
        ),
    )


@pytest.fixture
def http_config() -> HTTPConfig:
    """Provide a sample HTTP configuration for tests."""
    return HTTPConfig(
        timeout=10,
        max_redirects=3,
        verify_ssl=True,
        retry=RetryConfig(max_attempts=1),
    )


@pytest.fixture
def readme_api_config(http_config: HTTPConfig) -> ReadmeAPIConfig:
    """Provide a ReadMe API configuration pointing at a mocked host."""
    return ReadmeAPIConfig(
        base_url="https://dash.readme.test/api/v1",
        per_page=2,
        http=http_config,
    )


@pytest.fixture
def sync_config(tmp_path: Path) -> SyncConfig:
    """Provide a sync configuration with short category lists and no delay."""
    return SyncConfig(
        base_version_name="v2018-08-01",
        guide_category_titles=["Getting started", "Development", "More"],
        reference_category_titles=["Introduction", "Endpoints"],
        max_upload_attempts=3,
        retry_delay=0.0,
        openapi_file=str(tmp_path / "reference" / "OpenAPI.json"),
        guides_dir=str(tmp_path / "docs" / "guides"),
        reference_docs_dir=str(tmp_path / "docs" / "reference-docs"),
    )


@pytest.fixture
def api_key() -> str:
    """Provide a ReadMe API key long enough to pass validation."""
    return TEST_API_KEY


@pytest.fixture
def mock_http():
    """Provide a respx mock for httpx requests."""
    with respx.mock:
        yield respx
