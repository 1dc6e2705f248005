"""Tests for the docsync command line interfaces."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from docsync.cli import assets as assets_cli
from docsync.cli.main import main, validate_options
from docsync.core.exceptions import ReferenceUploadError, VersionAlreadyExistsError
from docsync.core.synchronizer import SyncResult


@pytest.fixture
def mock_synchronize():
    """Patch the synchronization so no client is opened."""
    with patch("docsync.cli.main.synchronize", new_callable=AsyncMock) as mock:
        mock.side_effect = lambda config, version, create: SyncResult(
            version=version,
            created=create,
            url=f"https://docs.voucherify.io/{version}/",
        )
        yield mock


class TestValidateOptions:
    """Tests for flag combination checks."""

    @pytest.mark.parametrize(
        "version,version_tag,create,update,expected",
        [
            (None, None, True, False, "missing `version` or `versionTag`"),
            ("v1", "tag", True, False, "conflicting arguments `version` and `versionTag`"),
            ("v1", None, False, False, "missing `update` or `create`"),
            (None, "tag", True, True, "conflicting arguments `update` and `create`"),
        ],
    )
    def test_invalid_combinations(self, version, version_tag, create, update, expected):
        """Test that each invalid combination is reported."""
        assert expected in validate_options(version, version_tag, create, update)

    def test_valid_combination(self):
        """Test that one version source and one mode is accepted."""
        assert validate_options(None, "piotr-123", False, True) is None


class TestMain:
    """Tests for the docsync command."""

    def test_no_arguments_prints_help(self, mock_synchronize, capsys):
        """Test that running without flags shows help and does nothing."""
        assert main([]) == 0

        assert "examples:" in capsys.readouterr().out
        mock_synchronize.assert_not_called()

    def test_version_tag_with_create(self, mock_synchronize, capsys):
        """Test that a tag is appended to the base version name."""
        assert main(["-vt", "piotr-123", "--create"]) == 0

        config, version = mock_synchronize.call_args.args[:2]
        assert version == "v2018-08-01-piotr-123"
        assert mock_synchronize.call_args.kwargs["create"] is True
        assert "Visit: https://docs.voucherify.io/v2018-08-01-piotr-123/" in capsys.readouterr().out

    def test_version_equals_syntax(self, mock_synchronize):
        """Test the --v=VALUE form with update."""
        assert main(["--v=v2018-08-01-docs", "--update"]) == 0

        assert mock_synchronize.call_args.args[1] == "v2018-08-01-docs"
        assert mock_synchronize.call_args.kwargs["create"] is False

    def test_version_is_used_verbatim(self, mock_synchronize):
        """Test that an explicit version is not combined with the base name."""
        main(["--version", "v2024-custom", "--update"])
        assert mock_synchronize.call_args.args[1] == "v2024-custom"

    @pytest.mark.parametrize(
        "argv",
        [
            ["--create"],
            ["--vt", "tag"],
            ["--vt", "tag", "--create", "--update"],
            ["--v", "v1", "--vt", "tag", "--create"],
        ],
    )
    def test_invalid_arguments(self, mock_synchronize, capsys, argv):
        """Test that invalid flags exit with a usage error before any work."""
        assert main(argv) == 2

        assert "invalid arguments" in capsys.readouterr().err
        mock_synchronize.assert_not_called()

    def test_config_file(self, mock_synchronize, tmp_path: Path):
        """Test that --config changes the base version name."""
        config_file = tmp_path / "docsync.yaml"
        config_file.write_text("sync:\n  base_version_name: v2024-01-01\n")

        assert main(["--vt", "docs", "--create", "--config", str(config_file)]) == 0
        assert mock_synchronize.call_args.args[1] == "v2024-01-01-docs"

    def test_missing_config_file(self, mock_synchronize, capsys, tmp_path: Path):
        """Test that a missing config file is a usage error."""
        argv = ["--vt", "tag", "--update", "--config", str(tmp_path / "missing.yaml")]

        assert main(argv) == 2

        assert "invalid arguments, cannot load config" in capsys.readouterr().err
        mock_synchronize.assert_not_called()

    @pytest.mark.parametrize(
        "content",
        [
            "sync: [unclosed\n",
            "sync:\n  max_upload_attempts: 0\n",
        ],
    )
    def test_invalid_config_file(self, mock_synchronize, capsys, tmp_path: Path, content):
        """Test that malformed YAML or invalid values are usage errors."""
        config_file = tmp_path / "docsync.yaml"
        config_file.write_text(content)

        assert main(["--vt", "tag", "--update", "--config", str(config_file)]) == 2

        assert "invalid arguments" in capsys.readouterr().err
        mock_synchronize.assert_not_called()

    @pytest.mark.parametrize(
        "error",
        [
            VersionAlreadyExistsError("maybe version is already created?", status_code=400),
            ReferenceUploadError("Reference docs were not uploaded", attempts=6),
            httpx.ConnectError("Connection refused"),
        ],
    )
    def test_sync_failure_exit_code(self, mock_synchronize, capsys, error):
        """Test that a failed synchronization exits with 1."""
        mock_synchronize.side_effect = error

        assert main(["--vt", "tag", "--update"]) == 1
        assert "Error:" in capsys.readouterr().err


class TestAssetsCommand:
    """Tests for the docsync-assets command."""

    def test_lists_references(self, tmp_path: Path, capsys):
        """Test printing references found in the docs tree."""
        (tmp_path / "guide.md").write_text("![logo](../../assets/logo.png)\n")

        assert assets_cli.main([str(tmp_path)]) == 0

        out = capsys.readouterr().out
        assert "guide.md:1: ../../assets/logo.png" in out
        assert "1 asset reference(s) found" in out

    def test_no_references(self, tmp_path: Path, capsys):
        """Test the message for a clean docs tree."""
        (tmp_path / "guide.md").write_text("# Nothing here\n")

        assert assets_cli.main([str(tmp_path)]) == 0
        assert "No asset references found" in capsys.readouterr().out

    def test_missing_config_file(self, tmp_path: Path, capsys):
        """Test that a missing config file exits with 2."""
        argv = [str(tmp_path), "--config", str(tmp_path / "missing.yaml")]

        assert assets_cli.main(argv) == 2
        assert "invalid arguments" in capsys.readouterr().err

    def test_missing_directory(self, tmp_path: Path, capsys):
        """Test that a missing docs directory exits with 1."""
        assert assets_cli.main([str(tmp_path / "missing")]) == 1
        assert "not found" in capsys.readouterr().err
