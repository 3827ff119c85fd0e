"""Value complexity classification.

A value is ``SIMPLE`` when it can be written into an artifact as a Python
literal and read back equal to the original:

- ``None``, ``bool``, ``int``, ``float``, ``str`` and ``bytes`` (exact types
  only, subclasses such as enums do not round-trip through ``repr``);
- ``list``, ``tuple`` and ``dict`` made exclusively of simple values, where
  dict keys are simple scalars.

Everything else is ``COMPLEX`` and gets serialized as a blob instead.
Composites are also ``COMPLEX`` once the traversal exceeds the configured
entry count or nesting depth, which keeps literal artifacts small and cheap
to parse. Nesting never exceeds ``MAX_LITERAL_DEPTH``, even with an
``UNLIMITED`` depth: the Python parser rejects deeper literals.

The traversal threads its depth and entry counters through the recursive
calls, so ``analyze`` is a pure function and safe to call concurrently.
"""

from __future__ import annotations

import math
from enum import StrEnum
from typing import Any

__all__ = ["MAX_LITERAL_DEPTH", "UNLIMITED", "Complexity", "analyze"]

UNLIMITED = -1

# The parser allows 200 nested brackets per expression; the artifact
# expression wraps the literal in one more.
MAX_LITERAL_DEPTH = 100

_SCALAR_TYPES = frozenset({type(None), bool, int, float, str, bytes})
_COMPOSITE_TYPES = frozenset({list, tuple, dict})


class Complexity(StrEnum):
    """Encoding strategy chosen for a cached value."""

    SIMPLE = "simple"
    COMPLEX = "complex"


def _limit(value: int) -> float:
    return math.inf if value == UNLIMITED else value


def _depth_limit(value: int) -> int:
    return MAX_LITERAL_DEPTH if value == UNLIMITED else min(value, MAX_LITERAL_DEPTH)


def analyze(
    value: Any,
    max_entries: int = UNLIMITED,
    max_depth: int = UNLIMITED,
) -> Complexity:
    """Classify ``value`` as SIMPLE or COMPLEX.

    Parameters:
        value: The value to classify.
        max_entries: Total number of composite entries allowed across the
            whole traversal, or ``UNLIMITED``.
        max_depth: Maximum composite nesting depth, or ``UNLIMITED``.
            A flat list has depth 1. Capped at ``MAX_LITERAL_DEPTH``.

    Returns:
        ``Complexity.SIMPLE`` or ``Complexity.COMPLEX``.
    """
    verdict, _count = _analyze(value, 0, 0, _limit(max_entries), _depth_limit(max_depth))
    return verdict


def _analyze(
    value: Any,
    depth: int,
    count: int,
    max_entries: float,
    max_depth: int,
) -> tuple[Complexity, int]:
    """Depth-first walk; returns the verdict and the updated entry count."""
    kind = type(value)
    if kind in _SCALAR_TYPES:
        return Complexity.SIMPLE, count
    if kind not in _COMPOSITE_TYPES:
        return Complexity.COMPLEX, count

    depth += 1
    if depth > max_depth:
        return Complexity.COMPLEX, count

    if kind is dict:
        for key, entry in value.items():
            count += 1
            if count > max_entries or type(key) not in _SCALAR_TYPES:
                return Complexity.COMPLEX, count
            verdict, count = _analyze(entry, depth, count, max_entries, max_depth)
            if verdict is Complexity.COMPLEX:
                return verdict, count
    else:
        for entry in value:
            count += 1
            if count > max_entries:
                return Complexity.COMPLEX, count
            verdict, count = _analyze(entry, depth, count, max_entries, max_depth)
            if verdict is Complexity.COMPLEX:
                return verdict, count

    return Complexity.SIMPLE, count
