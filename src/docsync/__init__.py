"""docsync package initialization."""

from pathlib import Path
from typing import Optional

import structlog

from .common.config import (
    Config,
    HTTPConfig,
    LoggingConfig,
    ReadmeAPIConfig,
    ReadmeSettings,
    RdmeConfig,
    SyncConfig,
    TablesConfig,
)
from .common.logging_config import setup_logging
from .common.http_client import AsyncHTTPClient
from .common.concurrency_limiter import ConcurrencyLimiter
from .api.base_client import AuthenticatedAPIClient
from .api.readme_client import ReadmeClient
from .clients.rdme_client import RdmeClient
from .clients.command_runner import CommandRunner
from .parsers import ApiSpecification, Category, CategoryType, UploadReport
from .core.exceptions import (
    DocSyncError,
    ConfigurationError,
    ReadmeAPIError,
    VersionAlreadyExistsError,
    CleanError,
    UploadError,
    RdmeNotFoundError,
    CategoryNotFoundError,
    SpecificationUploadError,
    GuideUploadError,
    ReferenceUploadError,
    CommandError,
)
from .core.asset_scanner import AssetReference, scan_docs
from .core.synchronizer import BulkUploader, SyncPhase, SyncResult, VersionSynchronizer

__version__ = "0.1.0"
__all__ = [
    "AsyncHTTPClient",
    "AuthenticatedAPIClient",
    "ReadmeClient",
    "RdmeClient",
    "CommandRunner",
    "ConcurrencyLimiter",
    "Config",
    "HTTPConfig",
    "LoggingConfig",
    "ReadmeAPIConfig",
    "ReadmeSettings",
    "RdmeConfig",
    "SyncConfig",
    "TablesConfig",
    "configure",
    "get_config",
    "ApiSpecification",
    "Category",
    "CategoryType",
    "UploadReport",
    "DocSyncError",
    "ConfigurationError",
    "ReadmeAPIError",
    "VersionAlreadyExistsError",
    "CleanError",
    "UploadError",
    "RdmeNotFoundError",
    "CategoryNotFoundError",
    "SpecificationUploadError",
    "GuideUploadError",
    "ReferenceUploadError",
    "CommandError",
    "AssetReference",
    "scan_docs",
    "BulkUploader",
    "SyncPhase",
    "SyncResult",
    "VersionSynchronizer",
]

# Module-level logger (not configured yet)
logger = structlog.get_logger(__name__)

_config: Optional[Config] = None


def configure(
    config_path: Optional[Path] = None, config: Optional[Config] = None
) -> Config:
    """
    Configure the docsync package.

    Call once at startup to load the configuration and set up logging.

    Args:
        config_path: Path to YAML configuration file
        config: Pre-loaded Config object (takes precedence over config_path)

    Returns:
        The active Config

    Example:
        >>> import docsync
        >>> from pathlib import Path
        >>> docsync.configure(config_path=Path("docsync.yaml"))
    """
    global _config

    if config is not None:
        _config = config
    elif config_path is not None:
        _config = Config.from_yaml(config_path)
    else:
        _config = Config()

    setup_logging(_config.logging)

    logger.debug(
        "docsync_configured",
        version=__version__,
        base_version=_config.sync.base_version_name,
    )
    return _config


def get_config() -> Config:
    """Get current configuration, initializing with defaults if needed."""
    global _config
    if _config is None:
        _config = Config()
        setup_logging(_config.logging)
    return _config
