"""rdme CLI client for bulk uploading OpenAPI documents and markdown docs."""

import asyncio
import os
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import structlog

from ..common.config import RdmeConfig
from ..core.exceptions import (
    CategoryNotFoundError,
    RdmeNotFoundError,
    SpecificationUploadError,
    UploadError,
)
from ..parsers.readme_models import UploadReport

logger = structlog.get_logger(__name__)


class RdmeClient:
    """
    Async client for the ``rdme`` CLI tool.

    rdme does not give structured results, so success and the known failure
    modes are recognised by text in its output:

    - ``rdme docs`` prints the configured success marker on stdout for every
      created doc.
    - A doc whose category is not visible to the upload endpoint yet produces
      the category-not-found marker; this is raised as CategoryNotFoundError
      so callers can retry.
    - ``rdme openapi`` succeeds when it exits 0 and prints anything on stdout.

    **Requirements:**
        The rdme binary must be installed separately and available in PATH.
        Install via: `npm install -g rdme`

    Example:
        >>> async with RdmeClient.from_config(RdmeConfig(), api_key=key) as rdme:
        ...     report = await rdme.upload_docs(Path("docs/guides"), "v2018-08-01-docs")
        ...     print(report.output)
    """

    def __init__(
        self,
        config: Optional[RdmeConfig] = None,
        rdme_path: str = "rdme",
        api_key: Optional[str] = None,
    ):
        """
        Initialize the rdme client.

        Args:
            config: RdmeConfig instance for client configuration
            rdme_path: Path to rdme binary (default: "rdme" from PATH)
            api_key: API key exported to rdme as RDME_API_KEY (optional)
        """
        self.config = config or RdmeConfig()
        self.rdme_path = rdme_path
        self.api_key = api_key
        self.logger = structlog.get_logger(__name__)
        self._verified = False

    async def __aenter__(self) -> "RdmeClient":
        """Async context manager entry."""
        await self._verify_binary()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        pass

    @classmethod
    def from_config(cls, config: RdmeConfig, api_key: Optional[str] = None) -> "RdmeClient":
        """Create RdmeClient from RdmeConfig."""
        return cls(config=config, rdme_path=config.rdme_path, api_key=api_key)

    async def _verify_binary(self) -> None:
        """
        Verify that the rdme binary exists.

        Raises:
            RdmeNotFoundError: If rdme binary not found in PATH
        """
        if self._verified:
            return

        if not shutil.which(self.rdme_path):
            raise RdmeNotFoundError(
                f"rdme binary not found at '{self.rdme_path}'. "
                "Please install rdme: npm install -g rdme",
                path=self.rdme_path,
            )

        self.logger.debug("rdme_binary_verified", path=self.rdme_path)
        self._verified = True

    def _build_env(self) -> Optional[Dict[str, str]]:
        if not self.api_key:
            return None
        return {**os.environ, "RDME_API_KEY": self.api_key}

    async def _execute(self, args: List[str]) -> Tuple[int, str, str]:
        """
        Run rdme and collect its output.

        Returns:
            Tuple of (returncode, stdout, stderr)

        Raises:
            RdmeNotFoundError: If rdme binary not found
            UploadError: If the command times out
        """
        await self._verify_binary()
        cmd = [self.rdme_path] + args

        self.logger.debug("rdme_execute", command=" ".join(cmd))

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=self._build_env(),
            )
        except FileNotFoundError:
            raise RdmeNotFoundError(
                f"rdme binary not found at '{self.rdme_path}'. "
                "Please install rdme: npm install -g rdme",
                path=self.rdme_path,
            )

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(),
                timeout=self.config.timeout,
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            self.logger.error("rdme_timeout", timeout=self.config.timeout)
            raise UploadError(f"rdme command timed out after {self.config.timeout}s")

        return (
            process.returncode,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

    async def upload_specification(self, file_path: Path, version: str) -> UploadReport:
        """
        Upload an OpenAPI document as a new specification of ``version``.

        Raises:
            SpecificationUploadError: If rdme fails or prints nothing
        """
        self.logger.info(
            "rdme_openapi_upload_start", file_path=str(file_path), version=version
        )
        returncode, stdout, stderr = await self._execute(
            ["openapi", str(file_path), f"--version={version}", "--create"]
        )
        output = "\n".join(part for part in (stdout, stderr) if part)

        if returncode != 0 or not stdout.strip():
            self.logger.error(
                "rdme_openapi_upload_failed",
                returncode=returncode,
                stderr=stderr[:500],
            )
            raise SpecificationUploadError(
                f"rdme openapi failed with exit code {returncode}",
                output=output,
                returncode=returncode,
            )

        return UploadReport(path=file_path, version=version, output=output)

    async def upload_docs(self, directory: Path, version: str) -> UploadReport:
        """
        Upload every markdown file of ``directory`` as docs of ``version``.

        Raises:
            CategoryNotFoundError: If a doc's category is not visible yet
            UploadError: If rdme does not report created docs
        """
        self.logger.info("rdme_docs_upload_start", directory=str(directory), version=version)
        returncode, stdout, stderr = await self._execute(
            ["docs", str(directory), f"--version={version}"]
        )
        output = "\n".join(part for part in (stdout, stderr) if part)

        if self.config.success_marker in stdout:
            return UploadReport(path=directory, version=version, output=output)

        if self.config.category_not_found_marker in output:
            self.logger.warning(
                "rdme_docs_category_not_found",
                directory=str(directory),
                version=version,
            )
            raise CategoryNotFoundError(
                f"Category not found while uploading {directory}",
                output=output,
                returncode=returncode,
            )

        self.logger.error(
            "rdme_docs_upload_failed",
            directory=str(directory),
            returncode=returncode,
            stderr=stderr[:500],
        )
        raise UploadError(
            f"rdme docs did not report created docs for {directory}",
            output=output,
            returncode=returncode,
        )
