"""Deduplication of concurrent identical async operations.

When several tasks ask for the same key at once, only the first runs the
operation; the rest await its result (or its exception).
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """Run at most one in-flight operation per key.

    Example:
        >>> flight: SingleFlight[bytes] = SingleFlight()
        >>> body = await flight.do(url, lambda: download(url))

    """

    def __init__(self) -> None:
        """Initialize with no operations in flight."""
        self._inflight: dict[str, asyncio.Future[T]] = {}

    def in_flight(self, key: str) -> bool:
        """Return True while an operation for key is running."""
        return key in self._inflight

    async def do(self, key: str, operation: Callable[[], Awaitable[T]]) -> T:
        """Run operation for key, or join the one already running.

        If the leader is cancelled, followers that were not cancelled
        themselves run the operation again (one becomes the new leader).

        Args:
            key: Deduplication key (the URL for fetches)
            operation: Zero-argument coroutine factory

        Returns:
            The operation's result, shared by every concurrent caller

        Raises:
            Exception: Whatever the shared operation raised

        """
        existing = self._inflight.get(key)
        if existing is not None:
            try:
                # shield: a cancelled follower must not cancel the leader
                return await asyncio.shield(existing)
            except asyncio.CancelledError:
                task = asyncio.current_task()
                if not existing.cancelled() or (
                    task is not None and task.cancelling()
                ):
                    raise
            return await self.do(key, operation)

        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        self._inflight[key] = future
        try:
            result = await operation()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as e:
            future.set_exception(e)
            # Mark retrieved so an unobserved failure is not reported
            future.exception()
            raise
        else:
            future.set_result(result)
            return result
        finally:
            del self._inflight[key]
