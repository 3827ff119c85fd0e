"""Artifact reader: loads, evaluates and unwraps artifacts."""

from __future__ import annotations

import logging
import os
import pickle
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from types import CodeType
from typing import Any, Final

from artifact_cache.complexity import Complexity
from artifact_cache.exceptions import CacheReadError
from artifact_cache.models.artifact import ArtifactInfo
from artifact_cache.storage._format import (
    ENCODING,
    EXPRESSION_PATTERN,
    HALT_MARKER,
    HEADER_PATTERN,
    eval_namespace,
)
from artifact_cache.storage._memo import ArtifactMemo
from artifact_cache.ttl import EXPIRE_NEVER

logger = logging.getLogger(__name__)


class _Missing:
    """Sentinel type for "no usable artifact"."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()


def _parse_ttl(text: str) -> int:
    if text == "never":
        return EXPIRE_NEVER
    hours, minutes, seconds = (int(part) for part in text.split(":"))
    return hours * 3600 + minutes * 60 + seconds


class ArtifactReader:
    """Reads artifacts written by :class:`ArtifactWriter`.

    Reads take no lock. Expired, absent and empty artifacts are reported as
    ``MISSING``; only structurally corrupt artifacts raise.

    Parameters:
        memo: Compiled-code memo shared with the writer.
    """

    __slots__ = ("_memo",)

    def __init__(self, memo: ArtifactMemo | None = None) -> None:
        self._memo = memo if memo is not None else ArtifactMemo()

    def read(self, path: str | Path) -> Any:
        """Return the value stored at ``path``, or ``MISSING``.

        Raises:
            CacheReadError: If the artifact exists but cannot be evaluated.
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return MISSING
        except OSError:
            logger.warning("Could not read artifact %s", path, exc_info=True)
            return MISSING

        if not data.strip():
            return MISSING

        source, _marker, tail = data.partition(HALT_MARKER)
        code = self._compile(path, source)
        loader = self._payload_loader(path, tail if _marker else None)

        try:
            result = eval(code, eval_namespace(loader))  # noqa: S307
        except CacheReadError:
            raise
        except Exception as e:
            msg = f"Artifact '{path}' could not be evaluated"
            raise CacheReadError(msg, path) from e

        # The value is wrapped in a one-element list so a stored falsy value
        # is distinguishable from an expired or empty artifact.
        if not result:
            return MISSING
        if not isinstance(result, list):
            msg = f"Artifact '{path}' evaluated to {type(result).__name__}, expected list"
            raise CacheReadError(msg, path)
        return result[0]

    def inspect(self, path: str | Path) -> ArtifactInfo | None:
        """Parse the header and expiry check of an artifact without loading it.

        Returns:
            The artifact metadata, or ``None`` if the file does not exist.

        Raises:
            CacheReadError: If the header or expression line is malformed.
        """
        path = Path(path)
        try:
            with path.open("rb") as f:
                size = os.fstat(f.fileno()).st_size
                header_line = f.readline().decode(ENCODING, "replace").rstrip("\n")
                expression_line = f.readline().decode(ENCODING, "replace")
        except FileNotFoundError:
            return None
        except OSError as e:
            msg = f"Artifact '{path}' could not be opened"
            raise CacheReadError(msg, path) from e

        header = HEADER_PATTERN.match(header_line)
        expression = EXPRESSION_PATTERN.match(expression_line)
        if header is None or expression is None:
            msg = f"Artifact '{path}' has a malformed header"
            raise CacheReadError(msg, path)

        try:
            created_at = datetime.fromisoformat(header["created"])
        except ValueError as e:
            msg = f"Artifact '{path}' has a malformed timestamp"
            raise CacheReadError(msg, path) from e

        return ArtifactInfo(
            path=path,
            kind=Complexity[header["kind"]],
            key=header["key"],
            pool=header["pool"],
            created_at=created_at,
            ttl=_parse_ttl(header["ttl"]),
            expiry=expression["expiry"],
            size=size,
        )

    def _compile(self, path: Path, source: bytes) -> CodeType:
        code = self._memo.lookup(path, source)
        if code is not None:
            return code
        try:
            code = compile(source.decode(ENCODING, "surrogatepass"), str(path), "eval")
        except (SyntaxError, ValueError, UnicodeDecodeError) as e:
            msg = f"Artifact '{path}' is not valid artifact code"
            raise CacheReadError(msg, path) from e
        self._memo.store(path, source, code)
        return code

    @staticmethod
    def _payload_loader(path: Path, tail: bytes | None) -> Callable[[], Any]:
        """Build the lazy, memoizing ``__payload__`` for one evaluation."""
        loaded: list[Any] = []

        def load() -> Any:
            if loaded:
                return loaded[0]
            if tail is None:
                msg = f"Artifact '{path}' references a payload but has none"
                raise CacheReadError(msg, path)
            length, _newline, blob = tail.partition(b"\n")
            if not length.isdigit() or int(length) != len(blob):
                msg = f"Artifact '{path}' has a truncated or oversized payload"
                raise CacheReadError(msg, path)
            try:
                loaded.append(pickle.loads(blob))  # noqa: S301
            except Exception as e:
                msg = f"Artifact '{path}' payload could not be deserialized"
                raise CacheReadError(msg, path) from e
            return loaded[0]

        return load

    def __repr__(self) -> str:
        return f"ArtifactReader(memo={self._memo!r})"
