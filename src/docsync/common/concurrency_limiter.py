"""Concurrency limiting using asyncio semaphores."""

import asyncio
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


class ConcurrencyLimiter:
    """
    Limit the number of concurrent operations using a semaphore.

    Used to bound the delete fan-outs so a version with hundreds of
    categories does not open hundreds of connections at once.

    Example:
        >>> limiter = ConcurrencyLimiter(max_concurrent=10)
        >>> async with limiter:
        ...     await client.delete_category(version, slug)

    Attributes:
        max_concurrent: Maximum number of concurrent operations
        semaphore: Asyncio semaphore controlling access
    """

    def __init__(self, max_concurrent: int):
        """
        Initialize the concurrency limiter.

        Args:
            max_concurrent: Maximum number of concurrent operations

        Raises:
            ValueError: If max_concurrent is less than 1
        """
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")

        self.max_concurrent = max_concurrent
        self.semaphore = asyncio.Semaphore(max_concurrent)
        self._active_count = 0
        self._peak_count = 0

        logger.debug("concurrency_limiter_initialized", max_concurrent=max_concurrent)

    async def acquire(self) -> None:
        """Acquire permission to run a concurrent operation, waiting if needed."""
        await self.semaphore.acquire()
        self._active_count += 1
        self._peak_count = max(self._peak_count, self._active_count)
        logger.debug(
            "concurrency_acquired",
            active=self._active_count,
            max=self.max_concurrent,
        )

    def release(self) -> None:
        """Release a concurrent operation slot."""
        self.semaphore.release()
        self._active_count -= 1
        logger.debug(
            "concurrency_released",
            active=self._active_count,
            max=self.max_concurrent,
        )

    async def __aenter__(self) -> "ConcurrencyLimiter":
        """Context manager entry - acquire a slot."""
        await self.acquire()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Context manager exit - release the slot."""
        self.release()

    def get_active_count(self) -> int:
        """Get the current number of active concurrent operations."""
        return self._active_count

    def get_peak_count(self) -> int:
        """Get the highest number of operations that were active at once."""
        return self._peak_count
