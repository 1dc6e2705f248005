"""Core synchronization logic."""

from .exceptions import (
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
from .asset_scanner import AssetReference, find_asset_references, find_markdown_files, scan_docs

__all__ = [
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
    "find_asset_references",
    "find_markdown_files",
    "scan_docs",
]
