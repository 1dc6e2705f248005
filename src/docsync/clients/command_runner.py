"""Runner for the markdown table build/update commands."""

import asyncio
from pathlib import Path
from typing import List, Optional

import structlog

from ..core.exceptions import CommandError

logger = structlog.get_logger(__name__)


class CommandRunner:
    """
    Run a project command (such as an npm script) and require output from it.

    A command counts as successful when it exits 0 and writes something to
    stdout; the table scripts print a summary line when they did their work.

    Example:
        >>> runner = CommandRunner(timeout=300)
        >>> await runner.run(["npm", "run", "build-md-tables-from-openapi"])
    """

    def __init__(self, timeout: int = 300, cwd: Optional[Path] = None):
        self.timeout = timeout
        self.cwd = cwd
        self.logger = structlog.get_logger(__name__)

    async def run(self, command: List[str]) -> str:
        """
        Execute ``command`` and return its stdout.

        Raises:
            CommandError: If the command is missing, fails, times out or prints nothing
        """
        if not command:
            raise CommandError("Empty command")

        self.logger.debug("command_execute", command=" ".join(command))

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(self.cwd) if self.cwd else None,
            )
        except FileNotFoundError:
            raise CommandError(f"Command not found: {command[0]}")

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise CommandError(f"Command timed out after {self.timeout}s: {' '.join(command)}")

        output = stdout.decode("utf-8", errors="replace")
        if process.returncode != 0 or not output.strip():
            error_msg = stderr.decode("utf-8", errors="replace")
            self.logger.error(
                "command_failed",
                command=" ".join(command),
                returncode=process.returncode,
                stderr=error_msg[:500],
            )
            raise CommandError(
                f"Command failed with exit code {process.returncode}: {' '.join(command)}",
                returncode=process.returncode,
                output=error_msg,
            )

        return output
