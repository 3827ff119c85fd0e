"""Artifact persistence: on-disk encoding, locked writes, and evaluation."""

from .reader import MISSING, ArtifactReader
from .writer import ArtifactWriter

__all__ = [
    "MISSING",
    "ArtifactReader",
    "ArtifactWriter",
]
