"""Producer that captures what a routine prints."""

from __future__ import annotations

import io
from collections.abc import Callable
from contextlib import redirect_stdout
from typing import Any

from artifact_cache.exceptions import InvalidArgumentError


class OutputProducer:
    """Runs a routine and produces everything it wrote to ``sys.stdout``.

    If the routine raises, the captured text is discarded and the exception
    propagates (``ArtifactCache.cache()`` wraps it in ``CacheProducerError``).
    The routine's return value is ignored.

    Usage::

        page = cache.cache("report-page", OutputProducer(render_report), ttl="30 seconds")

    Parameters:
        routine: Zero-argument callable that prints its output.
    """

    __slots__ = ("_routine",)

    def __init__(self, routine: Callable[[], Any]) -> None:
        if not callable(routine):
            msg = f"routine must be callable, got {type(routine).__name__}"
            raise InvalidArgumentError(msg)
        self._routine = routine

    def __call__(self) -> str:
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            self._routine()
        return buffer.getvalue()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(routine={self._routine!r})"
