"""Custom exceptions for artifact-cache."""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "ArtifactCacheError",
    "CacheArgumentError",
    "CacheProducerError",
    "CacheReadError",
    "CacheStorageError",
    "CacheWriteError",
    "DirectoryCreationError",
    "InvalidArgumentError",
    "InvalidKeyError",
    "ProducerError",
    "ProducerLoadError",
    "ProducerParseError",
]


class ArtifactCacheError(Exception):
    """Base exception for all artifact-cache errors."""


class InvalidArgumentError(ArtifactCacheError, ValueError):
    """Raised when a caller passes an argument the cache cannot accept."""


class InvalidKeyError(InvalidArgumentError):
    """Raised when a cache key is empty or not a string."""


class CacheArgumentError(InvalidArgumentError):
    """Raised when the cache is constructed with an invalid configuration."""


class CacheProducerError(ArtifactCacheError):
    """Raised by ``ArtifactCache.cache()`` when the producer fails.

    The original exception is available as ``original`` and is also
    chained as ``__cause__``.
    """

    def __init__(self, original: BaseException) -> None:
        super().__init__(f"Cache producer has raised an exception: {original!r}")
        self.original = original


class CacheStorageError(ArtifactCacheError):
    """Raised when the filesystem layer fails."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class DirectoryCreationError(CacheStorageError):
    """Raised when a directory cannot be created and does not already exist."""


class CacheWriteError(CacheStorageError):
    """Raised when an artifact cannot be locked or written."""


class CacheReadError(CacheStorageError):
    """Raised when an artifact exists but is structurally corrupt."""


class ProducerError(ArtifactCacheError):
    """Base exception for the bundled producers."""


class ProducerLoadError(ProducerError):
    """Raised when a producer cannot read its source."""


class ProducerParseError(ProducerError):
    """Raised when a producer reads its source but cannot parse it."""
