"""Per-process cache of compiled artifact code."""

from __future__ import annotations

import threading
from pathlib import Path
from types import CodeType


class ArtifactMemo:
    """Compiled artifact code keyed by artifact path.

    An entry is only reused when the code section read from disk is
    byte-identical to the one it was compiled from, so artifacts rewritten
    by other processes are recompiled. Writers in this process invalidate
    their path explicitly. Deserialized payloads are never memoized across
    reads; callers always get a fresh object.

    Parameters:
        max_size: Number of compiled artifacts kept before the memo is reset.
    """

    __slots__ = ("_entries", "_lock", "_max_size")

    def __init__(self, max_size: int = 4096) -> None:
        self._max_size = max_size
        self._entries: dict[Path, tuple[bytes, CodeType]] = {}
        self._lock = threading.Lock()

    def lookup(self, path: Path, source: bytes) -> CodeType | None:
        with self._lock:
            entry = self._entries.get(path)
        if entry is None or entry[0] != source:
            return None
        return entry[1]

    def store(self, path: Path, source: bytes, code: CodeType) -> None:
        with self._lock:
            if len(self._entries) >= self._max_size:
                self._entries.clear()
            self._entries[path] = (source, code)

    def invalidate(self, path: Path) -> None:
        with self._lock:
            self._entries.pop(path, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ArtifactMemo(max_size={self._max_size}, entries={len(self._entries)})"
