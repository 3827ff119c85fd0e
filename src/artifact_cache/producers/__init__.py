"""Bundled producers for ``ArtifactCache.cache()``."""

from .config import IniProducer, JsonProducer
from .file import FileProducer
from .output import OutputProducer

__all__ = [
    "FileProducer",
    "IniProducer",
    "JsonProducer",
    "OutputProducer",
]
