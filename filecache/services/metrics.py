"""Request counters and sweep history for a FileCache."""

import asyncio
import time
from collections import deque
from typing import Deque, List, Optional

from filecache.core.logging import get_logger
from filecache.models.cache import SweepSnapshot

logger = get_logger(__name__)


class CacheMetrics:
    """Counters and sweep snapshots owned by one cache engine.

    Counters only ever increase. One snapshot is appended per completed
    sweep; with retention=None the history is never pruned and grows for
    the lifetime of this object.
    """

    def __init__(self, retention: Optional[int] = None):
        self.retention = retention
        self.invalidate_request_count = 0
        self.delete_request_count = 0
        self.delete_by_pattern_request_count = 0
        self._history: Deque[SweepSnapshot] = deque(maxlen=retention)
        self._lock = asyncio.Lock()

    async def record_sweep(self, total_bytes: int, now_ms: Optional[int] = None) -> SweepSnapshot:
        """Count a completed sweep and append its snapshot."""
        async with self._lock:
            self.invalidate_request_count += 1
            snapshot = SweepSnapshot(
                id=now_ms if now_ms is not None else int(time.time() * 1000),
                bytes=total_bytes,
                invalidate_request_count=self.invalidate_request_count,
                delete_request_count=self.delete_request_count,
                delete_by_pattern_request_count=self.delete_by_pattern_request_count,
            )
            self._history.append(snapshot)
        logger.debug("Sweep snapshot recorded", snapshot_id=snapshot.id,
                     bytes=total_bytes, history_size=len(self._history))
        return snapshot

    async def increment_flush(self) -> int:
        async with self._lock:
            self.delete_request_count += 1
            return self.delete_request_count

    async def increment_pattern_flush(self) -> int:
        async with self._lock:
            self.delete_by_pattern_request_count += 1
            return self.delete_by_pattern_request_count

    @property
    def history(self) -> List[SweepSnapshot]:
        """Snapshots oldest first."""
        return list(self._history)
