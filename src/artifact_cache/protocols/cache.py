"""Protocol definition for cache backends."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheBackend(Protocol):
    """Key/value cache with TTL support and batch operations.

    Implementations store values under string keys and report absent or
    expired entries by returning the caller's default.
    """

    def get(self, key: str, default: Any = None) -> Any:
        """Retrieve a cached value.

        Parameters:
            key: The cache key.
            default: Returned when the key is absent or expired.

        Returns:
            The cached value, or ``default``.
        """
        ...

    def set(self, key: str, value: Any, ttl: Any = None) -> bool:
        """Store a value.

        Parameters:
            key: The cache key.
            value: The value to cache.
            ttl: Time-to-live; ``None`` means the backend's default TTL.

        Returns:
            ``True`` if the value was stored.
        """
        ...

    def delete(self, key: str) -> bool:
        """Remove a key. Returns ``False`` if it was absent or not removed."""
        ...

    def clear(self) -> bool:
        """Remove every entry. Returns ``False`` if any removal failed."""
        ...

    def has(self, key: str) -> bool:
        """Return whether an entry exists for ``key``, regardless of expiry."""
        ...

    def get_multiple(self, keys: Iterable[str], default: Any = None) -> dict[str, Any]:
        """Retrieve several keys, preserving their order."""
        ...

    def set_multiple(
        self, values: Mapping[str, Any] | Iterable[tuple[str, Any]], ttl: Any = None
    ) -> bool:
        """Store several values, stopping at the first failure."""
        ...

    def delete_multiple(self, keys: Iterable[str]) -> bool:
        """Remove several keys, attempting every one of them."""
        ...
