"""On-disk artifact layout shared by the writer and the reader.

An artifact is Python source evaluated in ``eval`` mode::

    # SIMPLE 'counter' 2026-10-19T12:00:00.000+00:00 00:00:42 pool='default'
    None if __now__() > 1792411200.000 + 42 else [42]

COMPLEX artifacts call ``__payload__()`` instead of embedding a literal and
carry a length-prefixed pickle blob after the stop marker, which is never
compiled::

    # COMPLEX 'report' 2026-10-19T12:00:00.000+00:00 never pool='default'
    None if False else [__payload__()]
    #__HALT__
    1234
    <pickle bytes>
"""

from __future__ import annotations

import math
import re
import time
from datetime import UTC, datetime

from artifact_cache.complexity import Complexity
from artifact_cache.ttl import EXPIRE_IMMEDIATELY, EXPIRE_NEVER, format_ttl

ENCODING = "utf-8"

HALT_MARKER = b"\n#__HALT__\n"

NOW_NAME = "__now__"
PAYLOAD_NAME = "__payload__"

_UNSAFE_HEADER_CHARS = re.compile(r"[\x00-\x1f\x7f\x85\u2028\u2029]")

HEADER_PATTERN = re.compile(
    r"^# (?P<kind>SIMPLE|COMPLEX) '(?P<key>.*)' (?P<created>\S+) "
    r"(?P<ttl>never|\d+:\d{2}:\d{2}) pool='(?P<pool>.*)'$"
)
EXPRESSION_PATTERN = re.compile(r"^None if (?P<expiry>.+?) else \[")


def escape_comment(text: str) -> str:
    """Replace characters that would end or corrupt a ``#`` comment line."""
    return _UNSAFE_HEADER_CHARS.sub(" ", text)


def render_header(
    kind: Complexity,
    key: str,
    created_at: float,
    ttl: int,
    pool: str,
) -> str:
    timestamp = datetime.fromtimestamp(created_at, UTC).isoformat(timespec="milliseconds")
    return (
        f"# {kind.name} '{escape_comment(key)}' {timestamp} "
        f"{format_ttl(ttl)} pool='{escape_comment(pool)}'"
    )


def render_expiry(created_at: float, ttl: int) -> str:
    """Build the expiry check embedded in the artifact."""
    if ttl == EXPIRE_NEVER:
        return "False"
    if ttl == EXPIRE_IMMEDIATELY:
        return "True"
    return f"{NOW_NAME}() > {created_at:.3f} + {ttl}"


def render_code(header: str, expiry: str, payload: str) -> bytes:
    return f"{header}\nNone if {expiry} else [{payload}]\n".encode(ENCODING, "surrogatepass")


def eval_namespace(payload_loader: object | None = None) -> dict[str, object]:
    """Globals for evaluating an artifact: no builtins, only what it references."""
    return {
        "__builtins__": {},
        NOW_NAME: time.time,
        PAYLOAD_NAME: payload_loader,
        "inf": math.inf,
        "nan": math.nan,
    }
