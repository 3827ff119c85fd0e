"""Protocol definitions for artifact-cache's pluggable collaborators."""

from .cache import CacheBackend
from .log_sink import LogSink
from .producer import Producer

__all__ = [
    "CacheBackend",
    "LogSink",
    "Producer",
]
