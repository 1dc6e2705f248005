"""API interaction layer for docsync.

Clients for the documentation host's management API.
"""

from .base_client import AuthenticatedAPIClient
from .readme_client import ReadmeClient

__all__ = [
    "AuthenticatedAPIClient",
    "ReadmeClient",
]
