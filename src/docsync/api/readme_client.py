"""ReadMe management API client for versions, categories and specifications."""

import base64
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
import structlog
from pydantic import BaseModel

from .base_client import AuthenticatedAPIClient
from ..common.concurrency_limiter import ConcurrencyLimiter
from ..common.config import ReadmeAPIConfig, ReadmeSettings
from ..core.exceptions import (
    ConfigurationError,
    ReadmeAPIError,
    VersionAlreadyExistsError,
)
from ..parsers.readme_models import ApiSpecification, Category, CategoryType

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

MIN_API_KEY_LENGTH = 10


class ReadmeClient(AuthenticatedAPIClient):
    """
    Client for the ReadMe documentation hosting management API.

    Every request is authenticated with HTTP Basic auth (API key as the user
    name, empty password). Category and specification calls are scoped to a
    version through the ``x-readme-version`` header.

    Authentication:
    - API key passed explicitly, or README_IO_AUTH from the environment / .env

    Example:
        >>> async with ReadmeClient.from_config(ReadmeAPIConfig()) as client:
        ...     categories = await client.list_categories("v2018-08-01-docs")
        ...     for category in categories:
        ...         print(category.slug, category.type)
    """

    def __init__(
        self,
        *args: Any,
        api_key: Optional[str] = None,
        per_page: int = 100,
        **kwargs: Any,
    ):
        """
        Initialize the ReadMe API client.

        Args:
            *args: Positional arguments for AuthenticatedAPIClient
            api_key: ReadMe API key (optional, falls back to README_IO_AUTH)
            per_page: Page size for listing endpoints
            **kwargs: Keyword arguments for AuthenticatedAPIClient

        Raises:
            ConfigurationError: If no usable API key is available
        """
        api_key = api_key or ReadmeSettings().readme_io_auth
        if not api_key or len(api_key) < MIN_API_KEY_LENGTH:
            raise ConfigurationError(
                "README_IO_AUTH was not provided in the environment or .env file"
            )

        token = base64.b64encode(f"{api_key}:".encode("utf-8")).decode("ascii")
        auth_headers = dict(kwargs.get("auth_headers") or {})
        auth_headers["Authorization"] = f"Basic {token}"
        auth_headers.setdefault("Accept", "application/json")
        kwargs["auth_headers"] = auth_headers

        super().__init__(*args, **kwargs)
        self.per_page = per_page

        self.logger.debug("readme_client_initialized", base_url=self.base_url)

    @classmethod
    def from_config(
        cls, config: ReadmeAPIConfig, api_key: Optional[str] = None
    ) -> "ReadmeClient":
        """
        Create ReadMe client from ReadmeAPIConfig.

        Args:
            config: API client configuration
            api_key: Optional API key overriding the environment

        Returns:
            Configured ReadmeClient instance
        """
        return cls(
            http_config=config.http,
            base_url=config.base_url,
            concurrency_limiter=ConcurrencyLimiter(
                max_concurrent=config.concurrency.max_concurrent_requests
            ),
            api_key=api_key,
            per_page=config.per_page,
        )

    @staticmethod
    def _version_headers(version: str) -> Dict[str, str]:
        return {"x-readme-version": version}

    @staticmethod
    def _raise_for_error(response: httpx.Response, action: str) -> None:
        """Raise ReadmeAPIError for any 4xx/5xx response."""
        if response.status_code >= 400:
            raise ReadmeAPIError(
                f"{action} failed with status {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

    async def _list_all(
        self, path: str, version: str, model: Type[ModelT], action: str
    ) -> List[ModelT]:
        """Fetch every page of a listing endpoint."""
        items: List[ModelT] = []
        page = 1
        while True:
            response = await self.get(
                path,
                params={"perPage": self.per_page, "page": page},
                headers=self._version_headers(version),
            )
            self._raise_for_error(response, action)
            payload = response.json()
            if not isinstance(payload, list):
                raise ReadmeAPIError(
                    f"{action} returned an unexpected payload",
                    status_code=response.status_code,
                    body=response.text,
                )
            items.extend(model.model_validate(item) for item in payload)
            if len(payload) < self.per_page:
                return items
            page += 1

    async def create_version(self, base_version: str, version: str) -> Dict[str, Any]:
        """
        Fork ``base_version`` into a new hidden version.

        Raises:
            VersionAlreadyExistsError: If the host does not answer 200
        """
        self.logger.info("readme_create_version", base_version=base_version, version=version)
        response = await self.post(
            "/version",
            json={
                "is_beta": False,
                "is_stable": False,
                "is_hidden": True,
                "is_deprecated": False,
                "from": base_version,
                "version": version,
            },
        )
        if response.status_code != 200:
            raise VersionAlreadyExistsError(
                f"Response status: {response.status_code}, "
                f"maybe version {version!r} is already created?",
                status_code=response.status_code,
                body=response.text,
            )
        return response.json()

    async def list_categories(self, version: str) -> List[Category]:
        """List every category of a version."""
        return await self._list_all("/categories", version, Category, "List categories")

    async def create_category(self, version: str, title: str) -> Category:
        """Create a category; the host gives it the default guide type."""
        response = await self.post(
            "/categories",
            json={"title": title},
            headers=self._version_headers(version),
        )
        self._raise_for_error(response, f"Create category {title!r}")
        return Category.model_validate(response.json())

    async def update_category(
        self,
        version: str,
        slug: str,
        category_type: Optional[CategoryType] = None,
        title: Optional[str] = None,
    ) -> Category:
        """Update a category's type and/or title."""
        data: Dict[str, Any] = {}
        if category_type is not None:
            data["type"] = category_type.value
        if title is not None:
            data["title"] = title

        response = await self.put(
            f"/categories/{slug}",
            json=data,
            headers=self._version_headers(version),
        )
        self._raise_for_error(response, f"Update category {slug!r}")
        return Category.model_validate(response.json())

    async def delete_category(self, version: str, slug: str) -> None:
        """Delete a category and the docs in it."""
        response = await self.delete(
            f"/categories/{slug}",
            headers=self._version_headers(version),
        )
        self._raise_for_error(response, f"Delete category {slug!r}")

    async def list_api_specifications(self, version: str) -> List[ApiSpecification]:
        """List every API specification attached to a version."""
        return await self._list_all(
            "/api-specification", version, ApiSpecification, "List API specifications"
        )

    async def delete_api_specification(self, spec_id: str) -> None:
        """Delete an API specification by ID."""
        response = await self.delete(f"/api-specification/{spec_id}")
        self._raise_for_error(response, f"Delete API specification {spec_id!r}")

    async def update_doc(
        self,
        version: str,
        slug: str,
        order: Optional[int] = None,
        doc_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Update a doc's position and/or type.

        Library API for maintenance scripts that reorder or retype docs after
        an upload; the synchronization run itself does not call it.

        The host sometimes answers 2xx with an ``error`` field in the body;
        that is reported as a failure too.

        Raises:
            ReadmeAPIError: On error status or an ``error`` field in the response
        """
        data: Dict[str, Any] = {}
        if order is not None:
            data["order"] = order
        if doc_type is not None:
            data["type"] = doc_type

        response = await self.put(
            f"/docs/{slug}",
            json=data,
            headers=self._version_headers(version),
        )
        self._raise_for_error(response, f"Update doc {slug!r}")
        payload = response.json()
        if payload.get("error"):
            raise ReadmeAPIError(
                f"Update doc {slug!r} failed: {payload['error']}",
                status_code=response.status_code,
                body=response.text,
            )
        return payload
