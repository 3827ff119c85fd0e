"""Producer that loads a file's content."""

from __future__ import annotations

import os
from pathlib import Path

from artifact_cache.exceptions import ProducerLoadError


class FileProducer:
    """Loads a file and produces its content.

    Usage::

        template = cache.cache("template", FileProducer("views/index.html"))

    Parameters:
        path: File to load.
        binary: Produce ``bytes`` instead of decoded text.
        encoding: Text encoding used when ``binary`` is false.
    """

    __slots__ = ("_binary", "_encoding", "_path")

    def __init__(
        self,
        path: str | os.PathLike[str],
        *,
        binary: bool = False,
        encoding: str = "utf-8",
    ) -> None:
        self._path = Path(path)
        self._binary = binary
        self._encoding = encoding

    @property
    def path(self) -> Path:
        return self._path

    def __call__(self) -> str | bytes:
        """Read the whole file.

        Raises:
            ProducerLoadError: If the file cannot be read or decoded.
        """
        try:
            if self._binary:
                return self._path.read_bytes()
            return self._path.read_text(encoding=self._encoding)
        except (OSError, UnicodeDecodeError) as e:
            msg = f"Could not load file '{self._path}'"
            raise ProducerLoadError(msg) from e

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={str(self._path)!r})"
