"""Path helpers shared by the cache engine and the artifact writer."""

from __future__ import annotations

import os
from pathlib import Path

from artifact_cache.exceptions import DirectoryCreationError


def normalize_directory(path: str | os.PathLike[str]) -> str:
    """Strip trailing path separators (the filesystem root is kept as-is)."""
    text = os.fspath(path)
    stripped = text.rstrip("/" + os.sep)
    return stripped or text[:1]


def combine(*parts: str | os.PathLike[str]) -> str:
    """Join path parts with the platform separator."""
    return os.sep.join(os.fspath(p) for p in parts)


def ensure_path(path: str | os.PathLike[str], permissions: int) -> Path:
    """Create ``path`` recursively unless it already is a directory.

    Directories created by this call get exactly ``permissions`` (the
    process umask is not applied). Existing directories are left alone.

    Raises:
        DirectoryCreationError: If the path cannot be created, or exists
            but is not a directory.
    """
    target = Path(path)
    if target.is_dir():
        return target

    missing: list[Path] = []
    current = target
    while not current.exists() and current != current.parent:
        missing.append(current)
        current = current.parent

    try:
        target.mkdir(mode=permissions, parents=True, exist_ok=True)
        for created in reversed(missing):
            os.chmod(created, permissions)
    except OSError as e:
        # Another process may have won the race.
        if target.is_dir():
            return target
        msg = f"Directory '{target}' could not be created"
        raise DirectoryCreationError(msg, target) from e

    return target
