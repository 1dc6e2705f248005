"""Base API client with authentication headers and concurrency control."""

from typing import Any, Optional, Dict

import httpx
import structlog

from ..common.http_client import AsyncHTTPClient
from ..common.concurrency_limiter import ConcurrencyLimiter
from ..common.config import HTTPConfig

logger = structlog.get_logger(__name__)


class AuthenticatedAPIClient(AsyncHTTPClient):
    """
    HTTP client that adds auth headers and concurrency control to every request.

    Features:
    - Static authentication headers merged into each request
    - Concurrent request limiting
    - All features from AsyncHTTPClient (retries, connection pooling, etc.)

    Example:
        >>> client = AuthenticatedAPIClient(
        ...     HTTPConfig(),
        ...     base_url="https://api.example.com",
        ...     concurrency_limiter=ConcurrencyLimiter(max_concurrent=10),
        ...     auth_headers={"Authorization": "Bearer token"},
        ... )
        >>> async with client:
        ...     response = await client.get("/users/octocat")
    """

    def __init__(
        self,
        http_config: HTTPConfig,
        base_url: str = "",
        concurrency_limiter: Optional[ConcurrencyLimiter] = None,
        auth_headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize the authenticated API client.

        Args:
            http_config: HTTP configuration (timeout, retries, etc.)
            base_url: Base URL for all requests
            concurrency_limiter: Optional concurrency limiter instance
            auth_headers: Optional authentication headers to include in all requests
        """
        super().__init__(http_config, base_url)
        self.concurrency_limiter = concurrency_limiter
        self.auth_headers = auth_headers or {}

    async def _apply_limiters_and_auth(
        self, method: str, url: str, **kwargs: Any
    ) -> httpx.Response:
        """
        Apply concurrency control and auth before making request.

        Args:
            method: HTTP method
            url: Request URL
            **kwargs: Additional request arguments

        Returns:
            httpx.Response object
        """
        if self.auth_headers:
            headers = dict(kwargs.get("headers") or {})
            headers.update(self.auth_headers)
            kwargs["headers"] = headers

        if self.concurrency_limiter:
            async with self.concurrency_limiter:
                return await self._make_request_with_retry(method, url, **kwargs)

        return await self._make_request_with_retry(method, url, **kwargs)

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Make a GET request with auth and concurrency control."""
        self.logger.debug("api_request", method="GET", url=str(url))
        return await self._apply_limiters_and_auth("GET", url, **kwargs)

    async def post(
        self,
        url: str,
        json: Optional[Dict[str, Any]] = None,
        data: Optional[Any] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make a POST request with auth and concurrency control."""
        self.logger.debug("api_request", method="POST", url=str(url))
        return await self._apply_limiters_and_auth(
            "POST", url, json=json, data=data, **kwargs
        )

    async def put(
        self,
        url: str,
        json: Optional[Dict[str, Any]] = None,
        data: Optional[Any] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make a PUT request with auth and concurrency control."""
        self.logger.debug("api_request", method="PUT", url=str(url))
        return await self._apply_limiters_and_auth(
            "PUT", url, json=json, data=data, **kwargs
        )

    async def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        """Make a DELETE request with auth and concurrency control."""
        self.logger.debug("api_request", method="DELETE", url=str(url))
        return await self._apply_limiters_and_auth("DELETE", url, **kwargs)
