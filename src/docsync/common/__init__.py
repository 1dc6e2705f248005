"""Common utilities and shared components for docsync."""

from .config import (
    Config,
    HTTPConfig,
    RetryConfig,
    LoggingConfig,
    ConcurrencyConfig,
    ReadmeAPIConfig,
    ReadmeSettings,
    RdmeConfig,
    SyncConfig,
    TablesConfig,
)
from .logging_config import setup_logging
from .http_client import AsyncHTTPClient
from .concurrency_limiter import ConcurrencyLimiter

__all__ = [
    "Config",
    "HTTPConfig",
    "RetryConfig",
    "LoggingConfig",
    "ConcurrencyConfig",
    "ReadmeAPIConfig",
    "ReadmeSettings",
    "RdmeConfig",
    "SyncConfig",
    "TablesConfig",
    "setup_logging",
    "AsyncHTTPClient",
    "ConcurrencyLimiter",
]
