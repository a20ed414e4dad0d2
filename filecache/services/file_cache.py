"""Filesystem-backed cache with TTL expiration and pattern eviction.

Each entry is one JSON file under base_path named by its derived key.
Expiration is lazy: get() never checks TTL, expired entries are only
removed by invalidate_expired().
"""

import asyncio
import hashlib
import json
import re
import stat
import time
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple, TYPE_CHECKING

from pydantic import ValidationError

from filecache.core.config import DEFAULT_TTL_SECONDS
from filecache.core.exceptions import (
    CacheEntryFormatError,
    CacheEntryNotFoundError,
    CachePatternError,
)
from filecache.core.logging import get_logger, log_cache_operation
from filecache.models.cache import (
    CacheEntry,
    FlushResult,
    PatternFlushResult,
    SweepFileLog,
    SweepResult,
    format_size,
)
from filecache.services.metrics import CacheMetrics

if TYPE_CHECKING:
    from filecache.core.config import Settings

logger = get_logger(__name__)


class FileCache:
    """Async cache storing one JSON file per key.

    Blocking filesystem calls run in worker threads. There is no locking:
    concurrent writes to one key are last-write-wins.
    """

    def __init__(self, base_path: str, default_ttl: Optional[int] = None,
                 metrics: Optional[CacheMetrics] = None,
                 clock: Callable[[], float] = time.time):
        self.base_path = Path(base_path)
        self.default_ttl = default_ttl or DEFAULT_TTL_SECONDS
        self.metrics = metrics or CacheMetrics()
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: "Settings",
                      metrics: Optional[CacheMetrics] = None) -> "FileCache":
        return cls(
            base_path=settings.base_path,
            default_ttl=settings.default_ttl,
            metrics=metrics or CacheMetrics(retention=settings.snapshot_retention),
        )

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    @staticmethod
    def format_file_name(file_name: str, file_name_prefix: str = "") -> str:
        """Derive the on-disk key.

        Only file_name is hashed; the prefix is a literal label, so the same
        name under two prefixes shares a digest.
        """
        digest = hashlib.sha256(file_name.encode("utf-8")).hexdigest()
        if file_name_prefix:
            return f"{file_name_prefix} hash_{digest}"
        return f"hash_{digest}"

    # =========================================================================
    # READ / WRITE
    # =========================================================================

    async def set(self, file_name: str, payload: Any, file_name_prefix: str = "",
                  ttl: Optional[float] = None) -> str:
        """Write payload under (prefix, name), overwriting any existing entry.

        Args:
            file_name: Logical name, hashed into the key
            payload: Any JSON-serializable value
            file_name_prefix: Optional literal label prepended to the key
            ttl: Seconds until expiry; 0 never expires, None uses default_ttl

        Returns:
            Absolute path of the written entry
        """
        ttl = self.default_ttl if ttl is None else ttl
        key = self.format_file_name(file_name, file_name_prefix)
        entry = CacheEntry.build(payload, ttl, self._now_ms())

        try:
            path = await asyncio.to_thread(self._write_entry, key, entry)
        except Exception as e:
            logger.error("Cache set failed", cache_key=key, error=str(e))
            raise

        log_cache_operation(logger, "set", key, ttl=entry.ttl, expiration=entry.expiration)
        return path

    async def get(self, file_name: str, file_name_prefix: str = "") -> Any:
        """Return the stored payload for (prefix, name).

        Expired entries that have not been swept are still returned.

        Raises:
            CacheEntryNotFoundError: no regular file backs the key
            CacheEntryFormatError: stored content is not a valid entry
        """
        key = self.format_file_name(file_name, file_name_prefix)
        try:
            entry = await asyncio.to_thread(self._read_entry, key)
        except CacheEntryNotFoundError:
            log_cache_operation(logger, "get", key, hit=False)
            raise
        except Exception as e:
            logger.warning("Cache get failed", cache_key=key, error=str(e))
            raise

        log_cache_operation(logger, "get", key, hit=True)
        return entry.payload

    def _write_entry(self, key: str, entry: CacheEntry) -> str:
        folder = self.base_path.resolve()
        folder.mkdir(parents=True, exist_ok=True)
        path = folder / key
        path.write_text(json.dumps(entry.model_dump()), encoding="utf-8")
        return str(path)

    def _read_entry(self, key: str) -> CacheEntry:
        path = self.base_path.resolve() / key
        try:
            st = path.stat()
        except FileNotFoundError:
            raise CacheEntryNotFoundError(key, str(path)) from None
        if not stat.S_ISREG(st.st_mode):
            raise CacheEntryNotFoundError(key, str(path))

        content = path.read_bytes()
        try:
            return CacheEntry.model_validate_json(content.decode("utf-8"))
        except (UnicodeDecodeError, ValidationError) as e:
            raise CacheEntryFormatError(key, str(e)) from e

    def _validate_file(self, key: str, now_ms: int) -> Optional[Tuple[float, Optional[float]]]:
        """Return (ttl_seconds, expires_in) for an on-disk key, or None if unreadable."""
        try:
            entry = self._read_entry(key)
        except Exception as e:
            logger.debug("Skipping unreadable cache entry", cache_key=key, error=str(e))
            return None
        return entry.ttl / 1000, entry.expires_in(now_ms)

    def _list_entries(self) -> List[str]:
        try:
            return sorted(p.name for p in self.base_path.iterdir())
        except FileNotFoundError:
            return []

    # =========================================================================
    # EVICTION
    # =========================================================================

    async def invalidate_expired(self) -> SweepResult:
        """Delete every expired entry and record a metrics snapshot.

        Entries without an expiration are never deleted. A failure on one
        entry skips that entry only.
        """
        now_ms = self._now_ms()
        logs, total_bytes, deleted = await asyncio.to_thread(self._sweep, now_ms)
        snapshot = await self.metrics.record_sweep(total_bytes, now_ms)

        result = SweepResult(
            invalidate_request_count=snapshot.invalidate_request_count,
            files_invalidated=deleted,
            bytes=total_bytes,
            logs=logs,
            logs_over_time=self.metrics.history,
        )
        logger.info("Cache sweep completed",
                    files_inspected=len(logs),
                    files_invalidated=deleted,
                    total_size=result.total_size,
                    invalidate_request_count=result.invalidate_request_count)
        return result

    def _sweep(self, now_ms: int) -> Tuple[List[SweepFileLog], int, int]:
        logs: List[SweepFileLog] = []
        total_bytes = 0
        deleted = 0

        for name in self._list_entries():
            path = self.base_path / name
            try:
                st = path.stat()
            except OSError as e:
                logger.debug("Entry vanished during sweep", cache_key=name, error=str(e))
                continue
            if not stat.S_ISREG(st.st_mode):
                continue

            total_bytes += st.st_size
            validated = self._validate_file(name, now_ms)
            if validated is None:
                continue

            ttl_seconds, expires_in = validated
            expired = expires_in is not None and expires_in <= 0
            if expired:
                try:
                    path.unlink()
                    deleted += 1
                    log_cache_operation(logger, "invalidate", name, deleted=True)
                except OSError as e:
                    logger.warning("Failed to delete expired entry", cache_key=name, error=str(e))

            logs.append(SweepFileLog(
                file=name,
                ttl=ttl_seconds,
                diff=expires_in or 0,
                size=format_size(st.st_size),
                valid=not expired,
            ))

        return logs, total_bytes, deleted

    async def flush_all(self) -> FlushResult:
        """Delete every entry regardless of TTL. The first failure aborts the flush."""
        count = await self.metrics.increment_flush()
        try:
            deleted = await asyncio.to_thread(self._delete_all)
        except OSError as e:
            logger.error("Cache flush failed", error=str(e), delete_request_count=count)
            raise

        logger.info("Cache flushed", deleted=deleted, delete_request_count=count)
        return FlushResult(delete_request_count=count, deleted=deleted)

    async def flush_by_pattern(self, org_pattern: str, pattern: str = "") -> PatternFlushResult:
        """Delete entries whose on-disk name matches both regular expressions.

        Patterns are searched, not anchored. The default secondary pattern
        matches every name.

        Raises:
            CachePatternError: either pattern is not a valid regular expression
        """
        count = await self.metrics.increment_pattern_flush()
        org_re = self._compile_pattern(org_pattern)
        secondary_re = self._compile_pattern(pattern)

        try:
            deleted = await asyncio.to_thread(self._delete_matching, org_re, secondary_re)
        except OSError as e:
            logger.error("Cache pattern flush failed", org_pattern=org_pattern,
                         pattern=pattern, error=str(e))
            raise

        logger.info("Cache flushed by pattern", org_pattern=org_pattern, pattern=pattern,
                    deleted=deleted, delete_by_pattern_request_count=count)
        return PatternFlushResult(delete_by_pattern_request_count=count, deleted=deleted)

    @staticmethod
    def _compile_pattern(pattern: str) -> re.Pattern:
        try:
            return re.compile(pattern)
        except re.error as e:
            logger.error("Invalid flush pattern", pattern=pattern, error=str(e))
            raise CachePatternError(pattern, str(e)) from e

    def _delete_all(self) -> int:
        names = self._list_entries()
        for name in names:
            (self.base_path / name).unlink()
        return len(names)

    def _delete_matching(self, org_re: re.Pattern, secondary_re: re.Pattern) -> int:
        deleted = 0
        for name in self._list_entries():
            if org_re.search(name) and secondary_re.search(name):
                (self.base_path / name).unlink()
                deleted += 1
        return deleted
