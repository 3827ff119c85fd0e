"""Protocol definition for value producers."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Producer(Protocol):
    """Zero-argument callable invoked by ``ArtifactCache.cache()`` on a miss.

    Plain functions and lambdas satisfy this protocol, as do the bundled
    producers in :mod:`artifact_cache.producers`. Any exception raised by a
    producer is wrapped in ``CacheProducerError`` by the cache.
    """

    def __call__(self) -> Any:
        """Produce the value to cache."""
        ...
