"""Time-to-live normalization.

Every accepted TTL representation normalizes to an integer number of
seconds, or to ``EXPIRE_NEVER``.
"""

from __future__ import annotations

import math
import re
from datetime import timedelta
from typing import Any

from pydantic import TypeAdapter, ValidationError

from artifact_cache.exceptions import InvalidArgumentError

__all__ = ["EXPIRE_IMMEDIATELY", "EXPIRE_NEVER", "TtlInput", "format_ttl", "normalize_ttl"]

EXPIRE_NEVER = -1
EXPIRE_IMMEDIATELY = 0

TtlInput = int | float | timedelta | str

_UNIT_SECONDS = {
    "s": 1,
    "sec": 1,
    "second": 1,
    "m": 60,
    "min": 60,
    "minute": 60,
    "h": 3600,
    "hour": 3600,
    "d": 86400,
    "day": 86400,
    "w": 604800,
    "week": 604800,
}
# Only spelled-out units take a plural "s"; "ms" is not minutes.
_UNIT_SECONDS.update(
    {f"{unit}s": factor for unit, factor in list(_UNIT_SECONDS.items()) if len(unit) > 1}
)

_PART = re.compile(r"(\d+)\s*([a-z]+)")
_PHRASE = re.compile(r"^\+?\s*(?:\d+\s*[a-z]+\s*(?:,|and)?\s*)+$")

_timedelta_adapter: TypeAdapter[timedelta] = TypeAdapter(timedelta)


def _from_seconds(seconds: float) -> int:
    if math.isnan(seconds) or math.isinf(seconds):
        msg = f"TTL must be finite, got {seconds!r}"
        raise InvalidArgumentError(msg)
    if seconds < 0:
        msg = f"TTL must not be negative, got {seconds!r}"
        raise InvalidArgumentError(msg)
    return math.ceil(seconds)


def _parse_phrase(text: str) -> int | None:
    """Parse relative phrases such as ``"10 seconds"`` or ``"1 hour 30 min"``."""
    if not _PHRASE.match(text):
        return None
    total = 0
    for amount, unit in _PART.findall(text):
        factor = _UNIT_SECONDS.get(unit)
        if factor is None:
            return None
        total += int(amount) * factor
    return total


def normalize_ttl(ttl: Any) -> int:
    """Normalize a TTL to integer seconds or ``EXPIRE_NEVER``.

    Parameters:
        ttl: ``EXPIRE_NEVER``, a non-negative ``int``, a ``float`` or
            ``timedelta`` (rounded up to whole seconds), or a string such as
            ``"never"``, ``"10 seconds"``, ``"2 days"``, ``"PT5M"`` or
            ``"00:05:00"``.

    Returns:
        The TTL in seconds, or ``EXPIRE_NEVER``.

    Raises:
        InvalidArgumentError: If the value cannot be interpreted.
    """
    if isinstance(ttl, bool):
        msg = "TTL must not be a boolean"
        raise InvalidArgumentError(msg)

    if isinstance(ttl, int):
        if ttl == EXPIRE_NEVER:
            return EXPIRE_NEVER
        if ttl < 0:
            msg = f"TTL must be non-negative or EXPIRE_NEVER, got {ttl}"
            raise InvalidArgumentError(msg)
        return ttl

    if isinstance(ttl, float):
        return _from_seconds(ttl)

    if isinstance(ttl, timedelta):
        return _from_seconds(ttl.total_seconds())

    if isinstance(ttl, str):
        text = ttl.strip().lower()
        if text == "never":
            return EXPIRE_NEVER
        if text.lstrip("+").isdigit():
            return int(text.lstrip("+"))
        seconds = _parse_phrase(text)
        if seconds is not None:
            return seconds
        try:
            delta = _timedelta_adapter.validate_python(ttl.strip())
        except ValidationError as e:
            msg = f"Could not interpret TTL {ttl!r}"
            raise InvalidArgumentError(msg) from e
        return _from_seconds(delta.total_seconds())

    msg = f"Unsupported TTL type: {type(ttl).__name__}"
    raise InvalidArgumentError(msg)


def format_ttl(ttl: int) -> str:
    """Render a normalized TTL as ``HH:MM:SS`` (or ``never``)."""
    if ttl == EXPIRE_NEVER:
        return "never"
    hours, remainder = divmod(ttl, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
