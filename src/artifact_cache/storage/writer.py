"""Artifact writer with exclusive-lock, truncate-in-place writes."""

from __future__ import annotations

import fcntl
import logging
import os
import pickle
from pathlib import Path
from typing import Any

from artifact_cache._paths import ensure_path
from artifact_cache.complexity import Complexity
from artifact_cache.exceptions import CacheStorageError, CacheWriteError
from artifact_cache.storage._format import (
    HALT_MARKER,
    PAYLOAD_NAME,
    render_code,
    render_expiry,
    render_header,
)
from artifact_cache.storage._memo import ArtifactMemo

logger = logging.getLogger(__name__)

DEFAULT_DIRECTORY_PERMISSIONS = 0o766
FILE_PERMISSIONS = 0o666


class ArtifactWriter:
    """Encodes values into artifacts and writes them under an exclusive lock.

    The target file is opened without truncation, locked with
    ``fcntl.flock(LOCK_EX)``, and only then truncated and rewritten, so a
    concurrent reader never sees a file emptied by a writer that has not
    acquired the lock yet. Lock acquisition blocks without a timeout.

    Parameters:
        memo: Compiled-code memo shared with the reader; the written path is
            invalidated after every successful write.
        directory_permissions: Mode for shard directories created on demand.
    """

    __slots__ = ("_directory_permissions", "_memo")

    def __init__(
        self,
        memo: ArtifactMemo | None = None,
        directory_permissions: int = DEFAULT_DIRECTORY_PERMISSIONS,
    ) -> None:
        self._memo = memo if memo is not None else ArtifactMemo()
        self._directory_permissions = directory_permissions

    def write(
        self,
        path: str | Path,
        value: Any,
        ttl: int,
        created_at: float,
        complexity: Complexity,
        *,
        key: str = "",
        pool: str = "",
    ) -> bool:
        """Write ``value`` to ``path`` as an artifact.

        Parameters:
            path: Target artifact file.
            value: The value to store.
            ttl: Normalized TTL in seconds, or ``EXPIRE_NEVER``.
            created_at: Creation time in seconds since the epoch.
            complexity: Encoding strategy chosen by the analyzer.
            key: Source key, recorded in the header for debugging.
            pool: Pool name, recorded in the header so ``clear()`` can
                select the pool's artifacts.

        Returns:
            ``True`` on success, ``False`` if the artifact could not be
            encoded, locked, or written. Prior content is left untouched
            when encoding or locking fails.
        """
        path = Path(path)
        try:
            data = self.encode(value, ttl, created_at, complexity, key=key, pool=pool)
            ensure_path(path.parent, self._directory_permissions)
            self._write_locked(path, data)
        except CacheStorageError:
            logger.debug("Could not write artifact %s for key %r", path, key, exc_info=True)
            return False
        finally:
            self._memo.invalidate(path)
        return True

    def encode(
        self,
        value: Any,
        ttl: int,
        created_at: float,
        complexity: Complexity,
        *,
        key: str = "",
        pool: str = "",
    ) -> bytes:
        """Render the complete artifact bytes for ``value``.

        Raises:
            CacheWriteError: If a COMPLEX value cannot be pickled.
        """
        literal: str | None = None
        if complexity is Complexity.SIMPLE:
            try:
                literal = repr(value)
            except (ValueError, RecursionError):
                # Integers beyond the interpreter's str conversion limit, or
                # nesting deeper than repr can follow.
                complexity = Complexity.COMPLEX

        header = render_header(complexity, key, created_at, ttl, pool)
        expiry = render_expiry(created_at, ttl)

        if literal is not None:
            return render_code(header, expiry, literal)

        try:
            blob = pickle.dumps(value, protocol=pickle.HIGHEST_PROTOCOL)
        except (pickle.PicklingError, TypeError, AttributeError, RecursionError) as e:
            msg = f"Value of type {type(value).__name__} cannot be serialized"
            raise CacheWriteError(msg) from e

        code = render_code(header, expiry, f"{PAYLOAD_NAME}()")
        return code.rstrip(b"\n") + HALT_MARKER + str(len(blob)).encode("ascii") + b"\n" + blob

    def _write_locked(self, path: Path, data: bytes) -> None:
        try:
            fd = os.open(path, os.O_RDWR | os.O_CREAT, FILE_PERMISSIONS)
        except OSError as e:
            msg = f"Artifact '{path}' could not be opened for writing"
            raise CacheWriteError(msg, path) from e

        with os.fdopen(fd, "r+b") as f:
            try:
                fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            except OSError as e:
                msg = f"Artifact '{path}' could not be locked"
                raise CacheWriteError(msg, path) from e

            try:
                f.truncate(0)
                f.write(data)
                f.flush()
            except OSError as e:
                msg = f"Artifact '{path}' could not be written"
                raise CacheWriteError(msg, path) from e
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)

    def __repr__(self) -> str:
        return f"ArtifactWriter(directory_permissions={oct(self._directory_permissions)})"
