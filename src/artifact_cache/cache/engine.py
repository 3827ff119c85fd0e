"""File-backed artifact cache engine."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Callable, Iterable, Iterator, Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from artifact_cache._paths import ensure_path, normalize_directory
from artifact_cache.complexity import analyze
from artifact_cache.exceptions import (
    CacheArgumentError,
    CacheProducerError,
    CacheReadError,
    InvalidArgumentError,
)
from artifact_cache.keys import (
    ARTIFACT_NAME_PATTERN,
    SHARD_NAME_PATTERN,
    artifact_path,
    validate_key,
)
from artifact_cache.models.artifact import ArtifactInfo
from artifact_cache.models.config import CacheConfig
from artifact_cache.protocols.log_sink import LogSink
from artifact_cache.storage._memo import ArtifactMemo
from artifact_cache.storage.reader import MISSING, ArtifactReader
from artifact_cache.storage.writer import ArtifactWriter
from artifact_cache.ttl import normalize_ttl


class ArtifactCache:
    """Persistent cache storing each value as an evaluable artifact file.

    Every key maps to ``{directory}/{md5(pool|key)}.cache`` (or a
    two-character shard sub-directory when ``subdivide`` is enabled). The
    artifact embeds its own expiry check, so freshness is decided by reading
    the file alone; there is no index and no in-memory layer in front of
    the disk.

    Writes are serialized per artifact with an exclusive advisory lock.
    Reads take no lock. ``cache()`` does not de-duplicate concurrent misses:
    two callers missing the same key both run the producer and the last
    write wins.

    Implements the ``CacheBackend`` protocol.

    Usage::

        cache = ArtifactCache(directory=".cache", ttl="10 minutes")
        user = cache.cache("user:42", lambda: fetch_user(42))

    Parameters:
        config: A validated ``CacheConfig``. Keyword ``overrides`` are merged
            into it (or used alone when no config is given).
        logger: Logging sink; defaults to this module's logger, which is
            silent unless the application configures logging.

    Raises:
        CacheArgumentError: If the configuration or logger is invalid.
        DirectoryCreationError: If the cache directory cannot be created.
    """

    __slots__ = ("_config", "_directory", "_logger", "_memo", "_reader", "_writer")

    def __init__(
        self,
        config: CacheConfig | None = None,
        *,
        logger: LogSink | None = None,
        **overrides: Any,
    ) -> None:
        self._config = self._build_config(config, overrides)

        if logger is not None and not isinstance(logger, LogSink):
            msg = (
                "logger must provide log(level, msg, *args, **kwargs), "
                f"got {type(logger).__name__}"
            )
            raise CacheArgumentError(msg)
        self._logger: LogSink = logger if logger is not None else logging.getLogger(__name__)

        self._directory = Path(normalize_directory(self._config.directory))
        ensure_path(self._directory, self._config.directory_permissions)

        self._memo = ArtifactMemo()
        self._reader = ArtifactReader(self._memo)
        self._writer = ArtifactWriter(self._memo, self._config.directory_permissions)

    @staticmethod
    def _build_config(config: CacheConfig | None, overrides: dict[str, Any]) -> CacheConfig:
        if config is not None and not isinstance(config, CacheConfig):
            msg = f"config must be a CacheConfig, got {type(config).__name__}"
            raise CacheArgumentError(msg)
        try:
            if config is None:
                return CacheConfig(**overrides)
            if overrides:
                return CacheConfig.model_validate({**config.model_dump(), **overrides})
        except ValidationError as e:
            msg = f"Invalid cache configuration: {e}"
            raise CacheArgumentError(msg) from e
        return config

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def config(self) -> CacheConfig:
        return self._config

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def pool(self) -> str:
        return self._config.pool

    @property
    def default_ttl(self) -> int:
        return self._config.ttl

    @property
    def subdivide(self) -> bool:
        return self._config.subdivide

    # ------------------------------------------------------------------
    # Single-key operations
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value for ``key``, or ``default`` if absent or expired.

        Raises:
            InvalidKeyError: If the key is invalid.
            CacheReadError: If the artifact is corrupt.
        """
        path = self.artifact_path(key)
        value = self._reader.read(path)
        if value is MISSING:
            self._log(
                logging.DEBUG, "Cache miss for key %r", key, key=key, path=path, operation="get"
            )
            return default
        self._log(logging.DEBUG, "Cache hit for key %r", key, key=key, path=path, operation="get")
        return value

    def set(self, key: str, value: Any, ttl: Any = None) -> bool:
        """Store ``value`` under ``key``.

        Parameters:
            key: The cache key.
            value: Any picklable value. Storing ``MISSING`` is a no-op.
            ttl: TTL in any form ``normalize_ttl`` accepts; ``None`` uses the
                configured default.

        Returns:
            ``True`` if the artifact was written, ``False`` on storage failure.

        Raises:
            InvalidKeyError: If the key is invalid.
            InvalidArgumentError: If the TTL is invalid.
        """
        path = self.artifact_path(key)
        return self._store(key, path, value, self._resolve_ttl(ttl))

    def cache(self, key: str, producer: Callable[[], Any], ttl: Any = None) -> Any:
        """Return the cached value for ``key``, producing and storing it on a miss.

        On a hit the producer is not called and ``ttl`` is ignored. A value
        produced successfully is returned even if it could not be stored.

        Raises:
            InvalidKeyError: If the key is invalid.
            InvalidArgumentError: If the producer is not callable or the TTL
                is invalid.
            CacheProducerError: If the producer raises; the artifact is left
                untouched.
        """
        path = self.artifact_path(key)
        if not callable(producer):
            msg = f"producer must be callable, got {type(producer).__name__}"
            raise InvalidArgumentError(msg)
        effective_ttl = self._resolve_ttl(ttl)

        value = self._reader.read(path)
        if value is not MISSING:
            self._log(
                logging.DEBUG, "Cache hit for key %r", key, key=key, path=path, operation="cache"
            )
            return value

        try:
            value = producer()
        except Exception as e:
            self._log(
                logging.ERROR,
                "Producer for key %r raised %s",
                key,
                type(e).__name__,
                key=key,
                path=path,
                operation="cache",
                exc_info=True,
            )
            raise CacheProducerError(e) from e

        if not self._store(key, path, value, effective_ttl):
            self._log(
                logging.WARNING,
                "Returning produced value for key %r without persisting it",
                key,
                key=key,
                path=path,
                operation="cache",
            )
        return value

    def delete(self, key: str) -> bool:
        """Remove the artifact for ``key``.

        Returns:
            ``True`` if it was removed, ``False`` if it was absent or the
            removal failed.
        """
        return self._remove(self.artifact_path(key), key=key)

    def has(self, key: str) -> bool:
        """Return whether an artifact exists for ``key``.

        Expiry is not checked, and the answer may be stale as soon as it is
        returned since other processes can write or remove the artifact.
        """
        return self.artifact_path(key).is_file()

    def clear(self) -> bool:
        """Remove every artifact belonging to this cache's pool.

        Artifacts of other pools sharing the directory are kept. Artifact
        files whose header cannot be parsed (for example a file emptied by a
        writer that died mid-write) belong to no pool and are removed too.
        When ``subdivide`` is enabled, shard directories are searched as well.

        Returns:
            ``True`` if every matching artifact was removed; ``False`` on the
            first failed removal (earlier removals are not rolled back).
        """
        removed = 0
        for path in self._iter_artifacts():
            try:
                info = self._reader.inspect(path)
            except CacheReadError:
                self._log(
                    logging.WARNING,
                    "Removing unreadable artifact %s during clear",
                    path,
                    path=path,
                    operation="clear",
                )
                key = ""
            else:
                if info is None or info.pool != self.pool:
                    continue
                key = info.key
            if not self._remove(path, key=key, missing_ok=True):
                return False
            removed += 1

        self._log(
            logging.INFO,
            "Cleared %d artifact(s) from pool %r",
            removed,
            self.pool,
            operation="clear",
        )
        return True

    # ------------------------------------------------------------------
    # Batch operations
    # ------------------------------------------------------------------

    def get_multiple(self, keys: Iterable[str], default: Any = None) -> dict[str, Any]:
        """Return a mapping of each key to its value (or ``default``), in input order.

        Raises:
            InvalidArgumentError: If ``keys`` is not an iterable of valid keys.
        """
        return {key: self.get(key, default) for key in _key_list(keys)}

    def set_multiple(
        self,
        values: Mapping[str, Any] | Iterable[tuple[str, Any]],
        ttl: Any = None,
    ) -> bool:
        """Store several values; stops at the first value that fails to store.

        Parameters:
            values: A mapping, or an iterable of ``(key, value)`` pairs.
            ttl: TTL applied to every value; ``None`` uses the default.

        Returns:
            ``True`` if every value was stored. Values after the first
            failure are not attempted.

        Raises:
            InvalidArgumentError: If ``values`` is malformed, any key is
                invalid, or the TTL is invalid. Nothing is written in that case.
        """
        pairs = _pair_list(values)
        effective_ttl = self._resolve_ttl(ttl)
        for key, value in pairs:
            if not self._store(key, self.artifact_path(key), value, effective_ttl):
                return False
        return True

    def delete_multiple(self, keys: Iterable[str]) -> bool:
        """Remove several keys, attempting every one of them.

        Returns:
            ``True`` only if every key was present and removed.

        Raises:
            InvalidArgumentError: If ``keys`` is not an iterable of valid keys.
        """
        success = True
        for key in _key_list(keys):
            if not self.delete(key):
                success = False
        return success

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def artifact_path(self, key: str) -> Path:
        """Return the artifact file ``key`` maps to in this cache's pool."""
        validate_key(key)
        return artifact_path(self._directory, self.pool, key, self.subdivide)

    def inspect(self, key: str) -> ArtifactInfo | None:
        """Return header metadata for ``key``'s artifact, or ``None`` if absent."""
        return self._reader.inspect(self.artifact_path(key))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _resolve_ttl(self, ttl: Any) -> int:
        if ttl is None:
            return self._config.ttl
        return normalize_ttl(ttl)

    def _store(self, key: str, path: Path, value: Any, ttl: int) -> bool:
        if value is MISSING:
            return True

        complexity = analyze(value, self._config.max_entries, self._config.max_depth)
        created_at = round(time.time(), 3)
        ok = self._writer.write(
            path, value, ttl, created_at, complexity, key=key, pool=self.pool
        )
        if ok:
            self._log(
                logging.DEBUG,
                "Stored key %r as %s artifact",
                key,
                complexity.name,
                key=key,
                path=path,
                operation="set",
            )
        else:
            self._log(
                logging.WARNING,
                "Could not store key %r",
                key,
                key=key,
                path=path,
                operation="set",
            )
        return ok

    def _remove(self, path: Path, *, key: str, missing_ok: bool = False) -> bool:
        try:
            path.unlink()
        except FileNotFoundError:
            return missing_ok
        except OSError:
            self._log(
                logging.ERROR,
                "Could not remove artifact %s",
                path,
                key=key,
                path=path,
                operation="delete",
                exc_info=True,
            )
            return False
        finally:
            self._memo.invalidate(path)
        return True

    def _iter_artifacts(self) -> Iterator[Path]:
        try:
            entries = list(os.scandir(self._directory))
        except FileNotFoundError:
            return
        for entry in entries:
            if entry.is_file() and ARTIFACT_NAME_PATTERN.match(entry.name):
                yield Path(entry.path)
            elif self.subdivide and entry.is_dir() and SHARD_NAME_PATTERN.match(entry.name):
                try:
                    shard = list(os.scandir(entry.path))
                except FileNotFoundError:
                    continue
                for item in shard:
                    if item.is_file() and ARTIFACT_NAME_PATTERN.match(item.name):
                        yield Path(item.path)

    def _log(
        self,
        level: int,
        msg: str,
        *args: Any,
        exc_info: bool = False,
        **context: Any,
    ) -> None:
        context = {k: str(v) if isinstance(v, Path) else v for k, v in context.items()}
        context["pool"] = self.pool
        self._logger.log(level, msg, *args, exc_info=exc_info, extra={"cache": context})

    def __repr__(self) -> str:
        return (
            f"ArtifactCache(directory={str(self._directory)!r}, pool={self.pool!r}, "
            f"subdivide={self.subdivide})"
        )


def _key_list(keys: Any) -> list[str]:
    """Materialize and validate an iterable of keys."""
    if isinstance(keys, (str, bytes)) or not isinstance(keys, Iterable):
        msg = f"keys must be an iterable of strings, got {type(keys).__name__}"
        raise InvalidArgumentError(msg)
    return [validate_key(key) for key in keys]


def _pair_list(values: Any) -> list[tuple[str, Any]]:
    """Materialize and validate a mapping or iterable of ``(key, value)`` pairs."""
    if isinstance(values, Mapping):
        items: Iterable[Any] = values.items()
    elif isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        msg = f"values must be a mapping or an iterable of pairs, got {type(values).__name__}"
        raise InvalidArgumentError(msg)
    else:
        items = values

    pairs: list[tuple[str, Any]] = []
    for item in items:
        if not isinstance(item, tuple) or len(item) != 2:
            msg = f"Expected a (key, value) pair, got {item!r}"
            raise InvalidArgumentError(msg)
        pairs.append((validate_key(item[0]), item[1]))
    return pairs
