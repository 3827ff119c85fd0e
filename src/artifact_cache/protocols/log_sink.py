"""Protocol definition for the cache's logging sink."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class LogSink(Protocol):
    """Receives leveled, templated log records.

    ``logging.Logger`` and ``logging.LoggerAdapter`` satisfy this protocol.
    The cache passes a structured context map as ``extra={"cache": {...}}``.
    """

    def log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        """Record ``msg % args`` at ``level``.

        Parameters:
            level: A ``logging`` level such as ``logging.WARNING``.
            msg: %-style message template.
            *args: Template arguments.
            **kwargs: ``exc_info``, ``extra`` and the other keyword
                arguments accepted by ``logging.Logger.log``.
        """
        ...
