"""File-backed cache engine."""

from .engine import ArtifactCache

__all__ = [
    "ArtifactCache",
]
