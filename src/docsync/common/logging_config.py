"""Logging configuration using structlog for structured logging."""

import logging
import logging.handlers
import re
import sys
from pathlib import Path
from typing import Any, Dict, List

import structlog

from .config import LoggingConfig

SECRET_KEYS = frozenset({"authorization", "api_key", "readme_io_auth", "rdme_api_key"})
BASIC_AUTH_PATTERN = re.compile(r"Basic\s+[A-Za-z0-9+/=]+")
REDACTED = "***"

DEFAULT_THIRD_PARTY_LEVELS = {
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "tenacity": "INFO",
    "asyncio": "WARNING",
}


def redact_secrets(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Mask the ReadMe API key wherever it could reach a log record.

    Values under secret-looking keys are replaced outright; Basic auth
    tokens inside any other string value (error messages, commands) are
    masked in place.
    """
    for key, value in event_dict.items():
        if key.lower() in SECRET_KEYS:
            event_dict[key] = REDACTED
        elif isinstance(value, str) and "Basic" in value:
            event_dict[key] = BASIC_AUTH_PATTERN.sub(f"Basic {REDACTED}", value)
    return event_dict


def _build_processors(config: LoggingConfig) -> List[Any]:
    processors: List[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if config.format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return processors


def _build_handlers(config: LoggingConfig, log_level: int) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []

    # stdout carries command output (published URL, asset listing)
    if "console" in config.handlers:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        handlers.append(console_handler)

    if "file" in config.handlers and config.file:
        Path(config.file.path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            filename=config.file.path,
            maxBytes=config.file.max_bytes,
            backupCount=config.file.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        handlers.append(file_handler)

    return handlers


def setup_logging(config: LoggingConfig) -> None:
    """
    Configure logging based on configuration.

    structlog renders on top of standard library logging so httpx and
    tenacity records share the same handlers. Log lines go to stderr (and
    optionally a rotating file); the API key is redacted from every event.

    Args:
        config: LoggingConfig object with logging settings

    Example:
        >>> from docsync.common.config import LoggingConfig
        >>> setup_logging(LoggingConfig(level="DEBUG", format="text"))
    """
    log_level = getattr(logging, config.level.upper())

    third_party_levels = {**DEFAULT_THIRD_PARTY_LEVELS, **config.third_party}
    for library, level in third_party_levels.items():
        logging.getLogger(library).setLevel(getattr(logging, level.upper()))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    for handler in _build_handlers(config, log_level):
        handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    structlog.configure(
        processors=_build_processors(config),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_context(**kwargs: Any) -> None:
    """
    Bind context variables that will be included in all subsequent log messages.

    Example:
        >>> bind_context(version="v2018-08-01-docs")
        >>> logger.info("category_created")  # includes version
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
