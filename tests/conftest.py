"""Shared fixtures for the file cache tests."""

import pytest

from filecache.services.file_cache import FileCache
from filecache.services.metrics import CacheMetrics

START_TIME = 1_700_000_000.0


class FakeClock:
    """Wall clock that only moves when told to."""

    def __init__(self, start: float = START_TIME):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "cache"


@pytest.fixture
def metrics():
    return CacheMetrics()


@pytest.fixture
def cache(cache_dir, clock, metrics):
    return FileCache(str(cache_dir), default_ttl=60, metrics=metrics, clock=clock)
