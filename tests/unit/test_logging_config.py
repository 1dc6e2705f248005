"""Unit tests for logging setup."""

import json
import logging
import sys
from pathlib import Path

import pytest
import structlog

from docsync.common.config import FileLoggingConfig, LoggingConfig
from docsync.common.logging_config import redact_secrets, setup_logging


@pytest.fixture
def reset_logging():
    """Restore a console-only setup after a test reconfigures logging."""
    yield
    for handler in logging.getLogger().handlers:
        handler.close()
    setup_logging(LoggingConfig())


class TestRedactSecrets:
    """Tests for the secret-masking processor."""

    def test_secret_keys_masked(self):
        """Test that values under secret keys are replaced."""
        event = redact_secrets(
            None,
            "info",
            {"event": "rdme_execute", "api_key": "rdme_abc", "Authorization": "Basic Zm9vOg=="},
        )
        assert event["api_key"] == "***"
        assert event["Authorization"] == "***"
        assert event["event"] == "rdme_execute"

    def test_basic_token_in_message_masked(self):
        """Test that a Basic token embedded in a message is masked."""
        event = redact_secrets(
            None, "error", {"event": "sync_failed", "error": "sent Basic cmRtZV9rZXk6 and failed"}
        )
        assert event["error"] == "sent Basic *** and failed"


class TestSetupLogging:
    """Tests for handler and renderer setup."""

    def test_json_file_logging(self, tmp_path: Path, reset_logging):
        """Test that JSON records reach the log file with secrets redacted."""
        log_file = tmp_path / "logs" / "docsync.log"
        setup_logging(
            LoggingConfig(
                format="json",
                handlers=["file"],
                file=FileLoggingConfig(path=str(log_file)),
            )
        )

        structlog.get_logger("docsync.tests").warning(
            "category_delete_failed", readme_io_auth="rdme_secret_123", slug="more"
        )
        for handler in logging.getLogger().handlers:
            handler.flush()

        record = json.loads(log_file.read_text().splitlines()[-1])
        assert record["event"] == "category_delete_failed"
        assert record["slug"] == "more"
        assert record["readme_io_auth"] == "***"
        assert record["level"] == "warning"

    def test_third_party_levels(self, reset_logging):
        """Test default and overridden third-party log levels."""
        setup_logging(LoggingConfig(third_party={"httpx": "DEBUG"}))

        assert logging.getLogger("httpx").level == logging.DEBUG
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_console_handler_uses_stderr(self, reset_logging):
        """Test that console logs do not mix with command output on stdout."""
        setup_logging(LoggingConfig(handlers=["console"]))

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert handlers[0].stream is sys.stderr
