"""Key validation, pool-scoped hashing, and artifact path derivation."""

from __future__ import annotations

import hashlib
import re
from pathlib import Path
from typing import Any

from artifact_cache._paths import combine
from artifact_cache.exceptions import InvalidArgumentError, InvalidKeyError

__all__ = [
    "ARTIFACT_NAME_PATTERN",
    "ARTIFACT_SUFFIX",
    "POOL_SEPARATOR",
    "SHARD_NAME_PATTERN",
    "artifact_path",
    "hash_key",
    "validate_key",
    "validate_pool",
]

ARTIFACT_SUFFIX = ".cache"

# Pools may never contain the separator, so the first "|" in the hash input
# always marks the pool/key boundary.
POOL_SEPARATOR = "|"

ARTIFACT_NAME_PATTERN = re.compile(r"^[0-9a-f]{32}\.cache$")
SHARD_NAME_PATTERN = re.compile(r"^[0-9a-f]{2}$")

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f\x85\u2028\u2029]")


def validate_key(key: Any) -> str:
    """Return ``key`` if it is a non-empty string.

    Raises:
        InvalidKeyError: If the key is not a string or is empty.
    """
    if not isinstance(key, str):
        msg = f"Cache key must be a string, got {type(key).__name__}"
        raise InvalidKeyError(msg)
    if not key:
        msg = "Cache key must not be empty"
        raise InvalidKeyError(msg)
    return key


def validate_pool(pool: Any) -> str:
    """Return ``pool`` if it is a usable pool name.

    Raises:
        InvalidArgumentError: If the pool is empty, not a string, or contains
            the separator or control characters.
    """
    if not isinstance(pool, str) or not pool:
        msg = "Pool name must be a non-empty string"
        raise InvalidArgumentError(msg)
    if POOL_SEPARATOR in pool:
        msg = f"Pool name must not contain {POOL_SEPARATOR!r}: {pool!r}"
        raise InvalidArgumentError(msg)
    if _CONTROL_CHARS.search(pool):
        msg = f"Pool name must not contain control characters: {pool!r}"
        raise InvalidArgumentError(msg)
    return pool


def hash_key(pool: str, key: str) -> str:
    """Return the 32-character hex MD5 digest of ``pool|key``."""
    data = f"{pool}{POOL_SEPARATOR}{key}".encode("utf-8", "surrogatepass")
    return hashlib.md5(data).hexdigest()  # noqa: S324


def artifact_path(base_dir: str | Path, pool: str, key: str, subdivide: bool = False) -> Path:
    """Map a (pool, key) pair to its artifact file.

    ``{base_dir}/{hash}.cache``, or ``{base_dir}/{hash[:2]}/{hash}.cache``
    when ``subdivide`` is enabled.
    """
    digest = hash_key(pool, key)
    name = digest + ARTIFACT_SUFFIX
    if subdivide:
        return Path(combine(base_dir, digest[:2], name))
    return Path(combine(base_dir, name))
