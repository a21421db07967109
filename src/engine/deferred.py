"""Fire-and-forget background writes.

Cache backfills and result caching run as detached tasks after the response is
built. The writer keeps strong references until each task finishes, logs (never
raises) failures, and is drained from the application lifespan on shutdown.
"""

import asyncio
from typing import Any, Awaitable, Optional

from src.core.logging import logger


class DeferredWriter:
    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(self, awaitable: Awaitable[Any], label: str = "write") -> asyncio.Task:
        task = asyncio.create_task(self._run(awaitable, label))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, awaitable: Awaitable[Any], label: str) -> None:
        try:
            await awaitable
        except asyncio.CancelledError:
            logger.warning(f"[DEFERRED] {label} cancelled")
            raise
        except Exception as e:
            logger.warning(f"[DEFERRED] {label} failed: {type(e).__name__}: {e}")

    async def drain(self, timeout: Optional[float] = None) -> int:
        """남은 작업을 기다립니다. timeout 이후 남은 작업은 취소하고 그 수를 반환."""
        if not self._tasks:
            return 0

        pending = list(self._tasks)
        logger.info(f"[DEFERRED] draining {len(pending)} background writes")
        _, still_pending = await asyncio.wait(pending, timeout=timeout)

        for task in still_pending:
            task.cancel()
        if still_pending:
            await asyncio.gather(*still_pending, return_exceptions=True)
            logger.warning(f"[DEFERRED] {len(still_pending)} writes cancelled at shutdown")
        return len(still_pending)


_deferred_writer: Optional[DeferredWriter] = None


def get_deferred_writer() -> DeferredWriter:
    global _deferred_writer
    if _deferred_writer is None:
        _deferred_writer = DeferredWriter()
    return _deferred_writer
