"""Exceptions raised while synchronizing a documentation version."""

from typing import List, Optional


class DocSyncError(Exception):
    """Base exception for docsync errors."""

    pass


class ConfigurationError(DocSyncError):
    """Raised when required settings (such as the API key) are missing."""

    pass


# Documentation host API exceptions
class ReadmeAPIError(DocSyncError):
    """Raised when the documentation host API rejects a request."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class VersionAlreadyExistsError(ReadmeAPIError):
    """Raised when forking a version does not return 200."""

    pass


class CleanError(DocSyncError):
    """Raised when some deletes of a clean fan-out failed."""

    def __init__(self, message: str, failures: Optional[List[BaseException]] = None):
        super().__init__(message)
        self.failures = failures or []


# rdme / upload exceptions
class UploadError(DocSyncError):
    """Raised when the bulk-upload tool does not report success."""

    def __init__(
        self,
        message: str,
        output: str = "",
        returncode: Optional[int] = None,
    ):
        super().__init__(message)
        self.output = output
        self.returncode = returncode


class RdmeNotFoundError(UploadError):
    """Raised when the rdme binary is not found."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class CategoryNotFoundError(UploadError):
    """Raised when a doc targets a category the upload endpoint cannot see yet."""

    pass


class SpecificationUploadError(UploadError):
    """Raised when the OpenAPI document upload fails."""

    pass


class GuideUploadError(UploadError):
    """Raised when guide docs were not uploaded."""

    pass


class ReferenceUploadError(UploadError):
    """Raised when reference docs were not uploaded within the attempt budget."""

    def __init__(self, message: str, attempts: int, output: str = ""):
        super().__init__(message, output=output)
        self.attempts = attempts


# external command exceptions
class CommandError(DocSyncError):
    """Raised when a table build/update command fails."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        output: str = "",
    ):
        super().__init__(message)
        self.returncode = returncode
        self.output = output
