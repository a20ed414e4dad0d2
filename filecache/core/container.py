"""Dependency injection container for hosts embedding the cache."""

from dependency_injector import containers, providers

from filecache.core.config import Settings
from filecache.services.file_cache import FileCache
from filecache.services.metrics import CacheMetrics
from filecache.services.sweeper import CacheSweeper


class Container(containers.DeclarativeContainer):
    """Cache dependency injection container."""

    settings = providers.Singleton(
        Settings,
    )

    # Metrics live as long as the container's cache
    metrics = providers.Singleton(
        CacheMetrics,
        retention=settings.provided.snapshot_retention,
    )

    file_cache = providers.Singleton(
        FileCache.from_settings,
        settings=settings,
        metrics=metrics,
    )

    # Not started automatically; hosts call sweeper().start()
    sweeper = providers.Singleton(
        CacheSweeper.from_settings,
        cache=file_cache,
        settings=settings,
    )


# Global container instance
container = Container()
