"""Filesystem-backed key/value cache.

- One JSON file per entry, named by a SHA-256 derived key
- Per-entry TTL, enforced by an explicit expiry sweep
- Full and regex-based flushes
- Request counters and sweep history per cache instance
"""

from .core.config import Settings
from .core.exceptions import (
    CacheError,
    CacheEntryNotFoundError,
    CacheEntryFormatError,
    CachePatternError,
)
from .models.cache import (
    CacheEntry,
    SweepFileLog,
    SweepSnapshot,
    SweepResult,
    FlushResult,
    PatternFlushResult,
)
from .services.file_cache import FileCache
from .services.metrics import CacheMetrics
from .services.sweeper import CacheSweeper

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "CacheError",
    "CacheEntryNotFoundError",
    "CacheEntryFormatError",
    "CachePatternError",
    "CacheEntry",
    "SweepFileLog",
    "SweepSnapshot",
    "SweepResult",
    "FlushResult",
    "PatternFlushResult",
    "FileCache",
    "CacheMetrics",
    "CacheSweeper",
]
