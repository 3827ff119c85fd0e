"""Data models for artifact-cache."""

from .artifact import ArtifactInfo
from .config import DEFAULT_DIRECTORY, DEFAULT_POOL, CacheConfig

__all__ = [
    "DEFAULT_DIRECTORY",
    "DEFAULT_POOL",
    "ArtifactInfo",
    "CacheConfig",
]
