"""File cache exception hierarchy."""


class CacheError(Exception):
    """Base exception for all file cache errors."""


class CacheEntryNotFoundError(CacheError, FileNotFoundError):
    """No regular file backs the requested cache key."""

    def __init__(self, key: str, path: str):
        self.key = key
        self.path = path
        super().__init__(f"File {key} does not exist in the cache folder.")


class CacheEntryFormatError(CacheError, ValueError):
    """Stored entry is not valid JSON or not an entry object."""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Cache entry {key} is malformed: {reason}")


class CachePatternError(CacheError, ValueError):
    """Invalid regular expression passed to a pattern flush."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")
