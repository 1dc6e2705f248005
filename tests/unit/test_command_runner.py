"""Tests for the CommandRunner class."""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from docsync.clients.command_runner import CommandRunner
from docsync.core.exceptions import CommandError


class TestCommandRunner:
    """Test suite for CommandRunner."""

    @pytest.mark.asyncio
    async def test_run_success(self, tmp_path: Path):
        """Test that stdout is returned for a successful command."""
        runner = CommandRunner(timeout=10, cwd=tmp_path)
        process = AsyncMock()
        process.returncode = 0
        process.communicate = AsyncMock(return_value=(b"Tables built: 12\n", b""))

        with patch("asyncio.create_subprocess_exec", return_value=process) as mock_exec:
            output = await runner.run(["npm", "run", "build-md-tables-from-openapi"])

        assert output == "Tables built: 12\n"
        assert mock_exec.call_args[0] == ("npm", "run", "build-md-tables-from-openapi")
        assert mock_exec.call_args[1]["cwd"] == str(tmp_path)

    @pytest.mark.asyncio
    async def test_run_nonzero_exit(self):
        """Test that a non-zero exit raises CommandError with stderr."""
        runner = CommandRunner()
        process = AsyncMock()
        process.returncode = 2
        process.communicate = AsyncMock(return_value=(b"partial\n", b"missing script\n"))

        with patch("asyncio.create_subprocess_exec", return_value=process):
            with pytest.raises(CommandError) as exc_info:
                await runner.run(["npm", "run", "nope"])

        assert exc_info.value.returncode == 2
        assert "missing script" in exc_info.value.output

    @pytest.mark.asyncio
    async def test_run_empty_output(self):
        """Test that a command printing nothing counts as failed."""
        runner = CommandRunner()
        process = AsyncMock()
        process.returncode = 0
        process.communicate = AsyncMock(return_value=(b"  \n", b""))

        with patch("asyncio.create_subprocess_exec", return_value=process):
            with pytest.raises(CommandError):
                await runner.run(["npm", "run", "update-md-tables-in-doc"])

    @pytest.mark.asyncio
    async def test_run_command_not_found(self):
        """Test that a missing executable raises CommandError."""
        runner = CommandRunner()

        with patch("asyncio.create_subprocess_exec", side_effect=FileNotFoundError()):
            with pytest.raises(CommandError, match="not found"):
                await runner.run(["npm", "run", "build"])

    @pytest.mark.asyncio
    async def test_run_timeout(self):
        """Test that a timed out command is killed."""
        runner = CommandRunner(timeout=1)
        process = AsyncMock()
        process.communicate = AsyncMock(side_effect=asyncio.TimeoutError())
        process.kill = MagicMock()

        with patch("asyncio.create_subprocess_exec", return_value=process):
            with pytest.raises(CommandError, match="timed out"):
                await runner.run(["npm", "run", "build"])

        process.kill.assert_called_once()
        process.wait.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_run_empty_command(self):
        """Test that an empty command is rejected."""
        with pytest.raises(CommandError):
            await CommandRunner().run([])
