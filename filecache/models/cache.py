"""Persisted cache entry and result models.

One JSON document per entry:
    {"payload": <any>, "ttl": <ms>, "expiration": <epoch-ms> | null}
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


def format_size(size_bytes: int) -> str:
    """Render a byte count as '<mb> MB | <bytes> bytes'."""
    return f"{size_bytes / (1024 * 1024):.2f} MB | {size_bytes} bytes"


class CacheEntry(BaseModel):
    """On-disk cache entry.

    ttl is in milliseconds; 0 means the entry never expires and
    expiration is None.
    """

    payload: Any = None
    ttl: int = Field(default=0, ge=0)
    expiration: Optional[int] = None

    @classmethod
    def build(cls, payload: Any, ttl_seconds: float, now_ms: int) -> "CacheEntry":
        ttl_ms = int(ttl_seconds * 1000)
        return cls(
            payload=payload,
            ttl=ttl_ms,
            expiration=now_ms + ttl_ms if ttl_ms else None,
        )

    def expires_in(self, now_ms: int) -> Optional[float]:
        """Seconds until expiration, floored at 0. None if never expiring."""
        if not self.expiration:
            return None
        return max(0, (self.expiration - now_ms) / 1000)


@dataclass
class SweepFileLog:
    """Diagnostic record for one entry inspected by a sweep."""
    file: str
    ttl: float
    diff: float
    size: str
    valid: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "ttl": self.ttl,
            "diff": self.diff,
            "size": self.size,
            "valid": self.valid,
        }


@dataclass
class SweepSnapshot:
    """Aggregate size and counters recorded when a sweep completes."""
    id: int
    bytes: int
    invalidate_request_count: int
    delete_request_count: int
    delete_by_pattern_request_count: int

    @property
    def mb(self) -> float:
        return self.bytes / (1024 * 1024)

    @property
    def total_size(self) -> str:
        return format_size(self.bytes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "bytes": self.bytes,
            "mb": self.mb,
            "total_size": self.total_size,
            "invalidate_request_count": self.invalidate_request_count,
            "delete_request_count": self.delete_request_count,
            "delete_by_pattern_request_count": self.delete_by_pattern_request_count,
        }


@dataclass
class SweepResult:
    invalidate_request_count: int
    files_invalidated: int
    bytes: int
    logs: List[SweepFileLog] = field(default_factory=list)
    logs_over_time: List[SweepSnapshot] = field(default_factory=list)

    @property
    def mb(self) -> float:
        return self.bytes / (1024 * 1024)

    @property
    def total_size(self) -> str:
        return format_size(self.bytes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "invalidate_request_count": self.invalidate_request_count,
            "files_invalidated": self.files_invalidated,
            "total_size": self.total_size,
            "bytes": self.bytes,
            "mb": self.mb,
            "logs": [log.to_dict() for log in self.logs],
            "logs_over_time": [snap.to_dict() for snap in self.logs_over_time],
        }


@dataclass
class FlushResult:
    delete_request_count: int
    deleted: int

    def to_dict(self) -> Dict[str, Any]:
        return {"delete_request_count": self.delete_request_count, "deleted": self.deleted}


@dataclass
class PatternFlushResult:
    delete_by_pattern_request_count: int
    deleted: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "delete_by_pattern_request_count": self.delete_by_pattern_request_count,
            "deleted": self.deleted,
        }
