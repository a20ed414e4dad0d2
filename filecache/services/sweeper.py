"""Optional background sweeper for a long-running host.

The cache never sweeps on its own. A host that wants periodic eviction
starts a CacheSweeper, which calls FileCache.invalidate_expired() on a
fixed interval.
"""

import asyncio
from typing import Optional, TYPE_CHECKING

from filecache.core.logging import get_logger

if TYPE_CHECKING:
    from filecache.core.config import Settings
    from filecache.models.cache import SweepResult
    from filecache.services.file_cache import FileCache

logger = get_logger(__name__)


class CacheSweeper:
    """Background task that evicts expired entries."""

    def __init__(self, cache: "FileCache", sweep_interval: int = 300):
        self.cache = cache
        self.sweep_interval = sweep_interval
        self._running = False
        self._task: Optional[asyncio.Task] = None

    @classmethod
    def from_settings(cls, cache: "FileCache", settings: "Settings") -> "CacheSweeper":
        return cls(cache, sweep_interval=settings.sweep_interval)

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the sweep loop on the running event loop."""
        if self._running:
            logger.warning("Cache sweeper already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._sweep_loop())
        logger.info("Cache sweeper started",
                    base_path=str(self.cache.base_path),
                    sweep_interval=self.sweep_interval)

    async def stop(self) -> None:
        """Stop the sweep loop gracefully."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Cache sweeper stopped")

    async def _sweep_loop(self) -> None:
        while self._running:
            try:
                await self.run_once()
            except Exception as e:
                logger.error("Cache sweep failed", error=str(e))
            await asyncio.sleep(self.sweep_interval)

    async def run_once(self) -> "SweepResult":
        """Run a single sweep and return its result."""
        result = await self.cache.invalidate_expired()
        if result.files_invalidated:
            logger.info("Expired cache entries removed",
                        files_invalidated=result.files_invalidated,
                        total_size=result.total_size)
        return result
