"""Configuration models using Pydantic for validation."""

from pathlib import Path
from typing import Optional, Dict, List

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

logger = structlog.get_logger(__name__)


class RetryConfig(BaseModel):
    """Configuration for HTTP retry logic with exponential backoff."""

    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum number of retry attempts",
    )
    backoff_multiplier: float = Field(
        default=1.0,
        ge=0.1,
        le=10.0,
        description="Multiplier for exponential backoff calculation",
    )
    min_wait: float = Field(
        default=1.0,
        ge=0.01,
        le=60.0,
        description="Minimum wait time between retries in seconds",
    )
    max_wait: float = Field(
        default=10.0,
        ge=0.01,
        le=300.0,
        description="Maximum wait time between retries in seconds",
    )
    status_codes: List[int] = Field(
        default_factory=lambda: [408, 429, 500, 502, 503, 504],
        description="HTTP status codes that should trigger a retry",
    )
    retry_non_idempotent: bool = Field(
        default=False,
        description=(
            "Also retry POST/PATCH on timeouts and retryable statuses. When off, "
            "those are only retried if the connection could not be opened"
        ),
    )

    @field_validator("status_codes")
    @classmethod
    def validate_status_codes(cls, v: List[int]) -> List[int]:
        """Validate that status codes are in valid range."""
        for code in v:
            if not 100 <= code <= 599:
                raise ValueError(f"Invalid HTTP status code: {code}")
        return v


class HTTPConfig(BaseModel):
    """Configuration for HTTP client."""

    timeout: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Request timeout in seconds",
    )
    max_redirects: int = Field(
        default=5,
        ge=0,
        le=20,
        description="Maximum number of redirects to follow",
    )
    verify_ssl: bool = Field(
        default=True,
        description="Whether to verify SSL certificates",
    )
    max_connections: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Maximum number of connections in the pool",
    )
    max_keepalive_connections: int = Field(
        default=20,
        ge=0,
        le=100,
        description="Maximum number of keep-alive connections",
    )
    retry: RetryConfig = Field(
        default_factory=RetryConfig,
        description="Retry configuration",
    )


class FileLoggingConfig(BaseModel):
    """Configuration for file-based logging."""

    path: str = Field(
        default="logs/docsync.log",
        description="Path to log file",
    )
    max_bytes: int = Field(
        default=10485760,  # 10MB
        ge=1024,
        description="Maximum size of log file before rotation",
    )
    backup_count: int = Field(
        default=5,
        ge=0,
        le=50,
        description="Number of backup log files to keep",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    format: str = Field(
        default="text",
        description="Log format: json or text",
    )
    handlers: List[str] = Field(
        default_factory=lambda: ["console"],
        description="Enabled log handlers: console, file",
    )
    file: Optional[FileLoggingConfig] = Field(
        default=None,
        description="File logging configuration (optional)",
    )
    third_party: Dict[str, str] = Field(
        default_factory=dict,
        description="Log levels for third-party libraries",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of {valid_levels}"
            )
        return v_upper

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        valid_formats = ["json", "text"]
        v_lower = v.lower()
        if v_lower not in valid_formats:
            raise ValueError(
                f"Invalid format: {v}. Must be one of {valid_formats}"
            )
        return v_lower

    @field_validator("handlers")
    @classmethod
    def validate_handlers(cls, v: List[str]) -> List[str]:
        """Validate handlers."""
        valid_handlers = ["console", "file"]
        for handler in v:
            if handler not in valid_handlers:
                raise ValueError(
                    f"Invalid handler: {handler}. Must be one of {valid_handlers}"
                )
        return v


class ConcurrencyConfig(BaseModel):
    """Configuration for concurrency control."""

    max_concurrent_requests: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Maximum number of concurrent requests",
    )


class ReadmeAPIConfig(BaseModel):
    """Configuration for the documentation host management API."""

    base_url: str = Field(
        default="https://dash.readme.com/api/v1",
        description="Base URL of the management API",
    )
    per_page: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Page size used when listing categories and specifications",
    )
    http: HTTPConfig = Field(
        default_factory=HTTPConfig,
        description="HTTP client configuration",
    )
    concurrency: ConcurrencyConfig = Field(
        default_factory=ConcurrencyConfig,
        description="Concurrency control for delete fan-outs",
    )


class RdmeConfig(BaseModel):
    """Configuration for the rdme bulk-upload CLI."""

    rdme_path: str = Field(
        default="rdme",
        description="Path to rdme binary",
    )
    timeout: int = Field(
        default=600,
        ge=10,
        le=3600,
        description="Command execution timeout in seconds",
    )
    success_marker: str = Field(
        default="successfully created",
        description="Text rdme prints on stdout when docs were uploaded",
    )
    category_not_found_marker: str = Field(
        default="Unable to find a category with the slug",
        description="Text rdme prints when a doc targets a category not visible yet",
    )


class SyncConfig(BaseModel):
    """Configuration for the version synchronization run."""

    base_version_name: str = Field(
        default="v2018-08-01",
        description="Version that new versions are forked from",
    )
    guide_category_titles: List[str] = Field(
        default_factory=lambda: [
            "Getting started",
            "Development",
            "Building blocks",
            "Campaigns Recipes",
            "Discounts Recipes",
            "Distributions Recipes",
            "More",
        ],
        description="Guide categories, in display order",
    )
    reference_category_titles: List[str] = Field(
        default_factory=lambda: ["Introduction"],
        description="Reference categories, in display order after the guides",
    )
    max_upload_attempts: int = Field(
        default=6,
        ge=1,
        le=50,
        description="Attempts for the reference docs upload",
    )
    retry_delay: float = Field(
        default=5.0,
        ge=0.0,
        le=300.0,
        description="Fixed delay in seconds between reference docs upload attempts",
    )
    specification_timeout_message: str = Field(
        default=(
            "We're sorry, your upload request timed out. Please try again "
            "or split your file up into smaller chunks."
        ),
        description="Upload error text that still means the specification was accepted",
    )
    openapi_file: str = Field(
        default="reference/OpenAPI.json",
        description="OpenAPI document uploaded as the version's specification",
    )
    guides_dir: str = Field(
        default="docs/guides",
        description="Directory of guide markdown files",
    )
    reference_docs_dir: str = Field(
        default="docs/reference-docs",
        description="Directory of reference markdown files",
    )
    docs_url_template: str = Field(
        default="https://docs.voucherify.io/{version}/",
        description="Published URL of a version, with a {version} placeholder",
    )

    @field_validator("reference_category_titles")
    @classmethod
    def validate_disjoint_titles(cls, v: List[str], info) -> List[str]:
        """Reject titles configured both as guide and reference categories."""
        guides = set(info.data.get("guide_category_titles", []))
        overlap = guides.intersection(v)
        if overlap:
            raise ValueError(
                f"Categories configured as both guide and reference: {sorted(overlap)}"
            )
        return v

    @field_validator("docs_url_template")
    @classmethod
    def validate_url_template(cls, v: str) -> str:
        """Validate that the URL template contains a {version} placeholder."""
        if "{version}" not in v:
            raise ValueError("URL template must contain {version} placeholder")
        return v

    def version_from_tag(self, version_tag: str) -> str:
        """Build a full version identifier from a tag."""
        return f"{self.base_version_name}-{version_tag}"


class TablesConfig(BaseModel):
    """Commands that rebuild markdown tables from the OpenAPI document."""

    build_command: List[str] = Field(
        default_factory=lambda: ["npm", "run", "build-md-tables-from-openapi"],
        description="Command building markdown tables (empty to skip)",
    )
    update_command: List[str] = Field(
        default_factory=lambda: ["npm", "run", "update-md-tables-in-doc"],
        description="Command writing markdown tables into docs (empty to skip)",
    )
    timeout: int = Field(
        default=300,
        ge=5,
        le=3600,
        description="Command execution timeout in seconds",
    )


class ReadmeSettings(BaseSettings):
    """
    Secrets for the documentation host.

    Read from the process environment or a local .env file.
    For example: README_IO_AUTH=rdme_xxx
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    readme_io_auth: Optional[str] = None


class Config(BaseModel):
    """Main configuration class for docsync."""

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration",
    )
    readme: ReadmeAPIConfig = Field(
        default_factory=ReadmeAPIConfig,
        description="Documentation host API configuration",
    )
    rdme: RdmeConfig = Field(
        default_factory=RdmeConfig,
        description="rdme CLI configuration",
    )
    sync: SyncConfig = Field(
        default_factory=SyncConfig,
        description="Version synchronization configuration",
    )
    tables: TablesConfig = Field(
        default_factory=TablesConfig,
        description="Markdown table commands",
    )

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Config object with validated configuration

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If YAML is invalid
            pydantic.ValidationError: If configuration is invalid

        Example:
            >>> from pathlib import Path
            >>> config = Config.from_yaml(Path("docsync.yaml"))
        """
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        logger.debug("config_loaded", path=str(path))
        return cls.model_validate(data or {})

    @classmethod
    def from_yaml_string(cls, yaml_string: str) -> "Config":
        """
        Load configuration from YAML string.

        Example:
            >>> yaml_str = "sync:\\n  max_upload_attempts: 3"
            >>> config = Config.from_yaml_string(yaml_str)
        """
        data = yaml.safe_load(yaml_string)
        return cls.model_validate(data or {})
