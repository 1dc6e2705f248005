"""Version synchronizer: bring a documentation version into a clean state and repopulate it."""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional, Protocol

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_fixed,
)

from ..api.readme_client import ReadmeClient
from ..clients.command_runner import CommandRunner
from ..common.config import SyncConfig, TablesConfig
from ..common.logging_config import bind_context, clear_context
from .exceptions import (
    CategoryNotFoundError,
    CleanError,
    GuideUploadError,
    RdmeNotFoundError,
    ReferenceUploadError,
    SpecificationUploadError,
    UploadError,
)
from ..parsers.readme_models import Category, CategoryType, UploadReport

logger = structlog.get_logger(__name__)


class BulkUploader(Protocol):
    """Uploads local files to a version; implemented by RdmeClient."""

    async def upload_specification(self, file_path: Path, version: str) -> UploadReport:
        ...

    async def upload_docs(self, directory: Path, version: str) -> UploadReport:
        ...


class SyncPhase(str, Enum):
    """Steps of a synchronization run, in execution order."""

    FORK = "fork"
    CLEAN = "clean"
    UPLOAD_SPEC = "upload_spec"
    BUILD_TABLES = "build_tables"
    UPDATE_TABLES = "update_tables"
    UPLOAD_GUIDES = "upload_guides"
    UPLOAD_REFERENCE_DOCS = "upload_reference_docs"
    DONE = "done"


@dataclass
class SyncResult:
    """Result of a synchronization run."""

    version: str
    created: bool = False
    completed_phases: List[SyncPhase] = field(default_factory=list)
    specification_soft_success: bool = False
    reference_upload_attempts: int = 0
    url: Optional[str] = None
    duration_seconds: float = 0.0


class VersionSynchronizer:
    """
    Synchronize one documentation version with the local sources.

    A run is delete-then-recreate: every category and API specification of
    the version is removed, the configured categories are created again in
    display order, and the OpenAPI document, guides and reference docs are
    uploaded. Re-running from the start is the recovery path for any failure.

    Category creation is strictly sequential because the host orders
    categories by creation time. Deletes and type updates have no ordering
    constraint and run as concurrent fan-outs; if any of them fails the clean
    step fails once the whole batch has finished.

    Example:
        >>> async with ReadmeClient.from_config(config.readme) as client:
        ...     async with RdmeClient.from_config(config.rdme) as rdme:
        ...         synchronizer = VersionSynchronizer(
        ...             client=client,
        ...             uploader=rdme,
        ...             config=config.sync,
        ...             tables=config.tables,
        ...         )
        ...         result = await synchronizer.run("v2018-08-01-docs", create=True)
        ...         print(result.url)
    """

    def __init__(
        self,
        client: ReadmeClient,
        uploader: BulkUploader,
        config: Optional[SyncConfig] = None,
        tables: Optional[TablesConfig] = None,
        command_runner: Optional[CommandRunner] = None,
        root: Optional[Path] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Initialize the synchronizer.

        Args:
            client: Documentation host API client
            uploader: Bulk uploader for the specification and markdown docs
            config: SyncConfig with category lists, paths and retry settings
            tables: TablesConfig with the table commands (None skips both steps)
            command_runner: Runner for the table commands
            root: Project root that relative paths are resolved against
            sleep: Coroutine used to wait between reference upload attempts
        """
        self.client = client
        self.uploader = uploader
        self.config = config or SyncConfig()
        self.tables = tables
        self.root = root or Path.cwd()
        self.command_runner = command_runner or CommandRunner(
            timeout=tables.timeout if tables else 300,
            cwd=self.root,
        )
        self._sleep = sleep
        self.logger = structlog.get_logger(__name__)

    def _resolve(self, path: str) -> Path:
        candidate = Path(path)
        return candidate if candidate.is_absolute() else self.root / candidate

    async def _fan_out(self, operations: List[Awaitable[Any]], action: str) -> List[Any]:
        """
        Run independent operations concurrently and wait for all of them.

        Raises:
            CleanError: If any operation failed, after every operation finished
        """
        if not operations:
            return []

        results = await asyncio.gather(*operations, return_exceptions=True)
        failures = [result for result in results if isinstance(result, BaseException)]

        for failure in failures:
            self.logger.error(f"{action}_failed", error=str(failure))

        if failures:
            raise CleanError(
                f"{len(failures)} of {len(results)} {action} operations failed",
                failures=failures,
            )
        return list(results)

    async def create_version(self, base_version: str, new_version: str) -> None:
        """
        Fork ``base_version`` into ``new_version``.

        Raises:
            VersionAlreadyExistsError: If the host refuses the fork
        """
        await self.client.create_version(base_version, new_version)
        self.logger.info("fork_created", base_version=base_version, version=new_version)

    async def clean_version(self, version: str) -> List[Category]:
        """
        Reset the category tree and API specifications of a version.

        1. Delete every existing category (concurrently).
        2. Create guide categories, then reference categories, one at a time
           in configured order.
        3. Mark every category titled from the reference list as a reference
           category (concurrently).
        4. Delete every API specification (concurrently).

        Args:
            version: Version identifier

        Returns:
            Categories of the version after the type updates

        Raises:
            CleanError: If a delete or update fails, or a reference category
                is missing after creation
            ReadmeAPIError: If listing or creating categories fails
        """
        existing = await self.client.list_categories(version)
        await self._fan_out(
            [self.client.delete_category(version, category.slug) for category in existing],
            "category_delete",
        )
        self.logger.info("old_categories_deleted", count=len(existing))

        titles = self.config.guide_category_titles + self.config.reference_category_titles
        for title in titles:
            # Display order follows creation order.
            await self.client.create_category(version, title)
            self.logger.debug("category_created", title=title)
        self.logger.info("new_categories_created", count=len(titles))

        categories = await self.client.list_categories(version)
        reference_titles = set(self.config.reference_category_titles)
        to_update = [c for c in categories if c.title in reference_titles]

        missing = reference_titles - {c.title for c in to_update}
        if missing:
            raise CleanError(f"Reference categories not found after creation: {sorted(missing)}")

        updated = await self._fan_out(
            [
                self.client.update_category(version, c.slug, category_type=CategoryType.REFERENCE)
                for c in to_update
            ],
            "category_update",
        )
        updated_by_slug = {c.slug: c for c in updated}
        categories = [updated_by_slug.get(c.slug, c) for c in categories]
        self.logger.info("reference_categories_updated", count=len(updated))

        specifications = await self.client.list_api_specifications(version)
        await self._fan_out(
            [self.client.delete_api_specification(spec.id) for spec in specifications],
            "specification_delete",
        )
        self.logger.info("api_specifications_deleted", count=len(specifications))
        self.logger.info("version_cleaned")
        return categories

    async def upload_specification(
        self, version: str, file_path: Optional[Path] = None
    ) -> UploadReport:
        """
        Upload the OpenAPI document as the version's specification.

        The host may accept a large document but time out before answering.
        An upload error carrying the configured timeout message is therefore
        reported as a soft success.

        Raises:
            SpecificationUploadError: For any other upload failure
        """
        file_path = file_path or self._resolve(self.config.openapi_file)
        self.logger.info("specification_upload_start", file_path=str(file_path))

        try:
            report = await self.uploader.upload_specification(file_path, version)
        except UploadError as e:
            error_text = f"{e} {e.output}"
            if self.config.specification_timeout_message in error_text:
                self.logger.warning("specification_upload_timed_out_accepted")
                return UploadReport(
                    path=file_path,
                    version=version,
                    output=e.output,
                    soft_success=True,
                )
            if isinstance(e, SpecificationUploadError):
                raise
            raise SpecificationUploadError(
                f"OpenAPI file was not uploaded: {e}",
                output=e.output,
                returncode=e.returncode,
            ) from e

        self.logger.info("specification_uploaded")
        return report

    async def build_tables(self) -> bool:
        """Run the table build command; returns False when none is configured."""
        if not self.tables or not self.tables.build_command:
            return False
        await self.command_runner.run(self.tables.build_command)
        self.logger.info("md_tables_built")
        return True

    async def update_tables(self) -> bool:
        """Run the command writing tables into docs; returns False when none is configured."""
        if not self.tables or not self.tables.update_command:
            return False
        await self.command_runner.run(self.tables.update_command)
        self.logger.info("md_tables_updated")
        return True

    async def upload_guides(
        self, version: str, guides_dir: Optional[Path] = None
    ) -> UploadReport:
        """
        Upload the guide docs.

        Raises:
            GuideUploadError: If the uploader does not report success
        """
        guides_dir = guides_dir or self._resolve(self.config.guides_dir)
        try:
            report = await self.uploader.upload_docs(guides_dir, version)
        except UploadError as e:
            raise GuideUploadError(
                f"Guide docs were not uploaded: {e}",
                output=e.output,
                returncode=e.returncode,
            ) from e
        self.logger.info("guides_uploaded", directory=str(guides_dir))
        return report

    async def upload_reference_docs(
        self, version: str, reference_dir: Optional[Path] = None
    ) -> UploadReport:
        """Upload the reference docs once; uploader errors propagate unchanged."""
        reference_dir = reference_dir or self._resolve(self.config.reference_docs_dir)
        return await self.uploader.upload_docs(reference_dir, version)

    @staticmethod
    def _is_retryable_upload_error(exception: BaseException) -> bool:
        """Every upload failure uses up an attempt, except a missing rdme binary."""
        return isinstance(exception, UploadError) and not isinstance(
            exception, RdmeNotFoundError
        )

    def _log_reference_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        delay = retry_state.next_action.sleep if retry_state.next_action else None
        if isinstance(error, CategoryNotFoundError):
            self.logger.warning(
                "reference_upload_category_not_found",
                attempt=retry_state.attempt_number,
                delay=delay,
            )
            return
        self.logger.warning(
            "reference_upload_retry",
            attempt=retry_state.attempt_number,
            delay=delay,
            error=str(error),
        )

    async def upload_reference_docs_with_retry(
        self,
        version: str,
        max_attempts: Optional[int] = None,
        delay: Optional[float] = None,
        reference_dir: Optional[Path] = None,
    ) -> UploadReport:
        """
        Upload the reference docs, retrying with a fixed delay until they go through.

        Freshly created categories can take a moment to reach the upload
        endpoint, which shows up as CategoryNotFoundError. Every upload
        failure uses up one attempt; only a missing rdme binary stops at once.

        Args:
            version: Version identifier
            max_attempts: Attempt budget (default: config.max_upload_attempts)
            delay: Seconds between attempts (default: config.retry_delay)
            reference_dir: Reference docs directory (default from config)

        Returns:
            UploadReport of the successful attempt

        Raises:
            ReferenceUploadError: When the budget is exhausted or the rdme
                binary is missing
        """
        max_attempts = max_attempts or self.config.max_upload_attempts
        delay = self.config.retry_delay if delay is None else delay
        attempts = 0

        retrying = AsyncRetrying(
            stop=stop_after_attempt(max_attempts),
            wait=wait_fixed(delay),
            retry=retry_if_exception(self._is_retryable_upload_error),
            before_sleep=self._log_reference_retry,
            sleep=self._sleep,
            reraise=True,
        )

        self.logger.info("reference_upload_start", max_attempts=max_attempts)
        try:
            async for attempt in retrying:
                with attempt:
                    attempts += 1
                    report = await self.upload_reference_docs(version, reference_dir)
        except UploadError as e:
            self.logger.error("reference_upload_failed", attempts=attempts, error=str(e))
            raise ReferenceUploadError(
                f"Reference docs were not uploaded after {attempts} attempt(s): {e}",
                attempts=attempts,
                output=e.output,
            ) from e

        self.logger.info("reference_docs_uploaded", attempts=attempts)
        return report.model_copy(update={"attempts": attempts})

    async def run(self, version: str, create: bool = False) -> SyncResult:
        """
        Run the whole synchronization for one version.

        ``Start -> [Fork] -> Clean -> UploadSpec -> BuildTables ->
        UpdateTables -> UploadGuides -> UploadReferenceDocs -> Done``

        Any fatal error propagates and stops the run.

        Args:
            version: Version identifier
            create: Fork the version from the base version first

        Returns:
            SyncResult with the completed phases and published URL
        """
        start_time = time.time()
        result = SyncResult(version=version, created=create)
        bind_context(version=version)

        try:
            self.logger.info("sync_start", create=create)

            if create:
                await self.create_version(self.config.base_version_name, version)
                result.completed_phases.append(SyncPhase.FORK)

            await self.clean_version(version)
            result.completed_phases.append(SyncPhase.CLEAN)

            report = await self.upload_specification(version)
            result.specification_soft_success = report.soft_success
            result.completed_phases.append(SyncPhase.UPLOAD_SPEC)

            if await self.build_tables():
                result.completed_phases.append(SyncPhase.BUILD_TABLES)
            if await self.update_tables():
                result.completed_phases.append(SyncPhase.UPDATE_TABLES)

            await self.upload_guides(version)
            result.completed_phases.append(SyncPhase.UPLOAD_GUIDES)

            report = await self.upload_reference_docs_with_retry(version)
            result.reference_upload_attempts = report.attempts
            result.completed_phases.append(SyncPhase.UPLOAD_REFERENCE_DOCS)

            result.url = self.config.docs_url_template.format(version=version)
            result.completed_phases.append(SyncPhase.DONE)
            result.duration_seconds = time.time() - start_time

            self.logger.info(
                "sync_complete",
                url=result.url,
                duration_seconds=round(result.duration_seconds, 2),
            )
            return result
        finally:
            clear_context()
