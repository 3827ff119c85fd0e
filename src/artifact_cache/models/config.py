"""Cache configuration model."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from artifact_cache.complexity import UNLIMITED
from artifact_cache.exceptions import InvalidArgumentError
from artifact_cache.keys import validate_pool
from artifact_cache.ttl import EXPIRE_NEVER, normalize_ttl

DEFAULT_DIRECTORY = Path(".artifact-cache")
DEFAULT_POOL = "default"


class CacheConfig(BaseModel):
    """Construction-time settings for :class:`~artifact_cache.ArtifactCache`.

    Immutable once validated.

    Parameters:
        directory: Base directory for artifacts; created eagerly.
        pool: Namespace that partitions keys.
        ttl: Default TTL applied when ``set()`` receives none. Accepts
            anything ``normalize_ttl`` accepts and is stored as seconds
            (or ``EXPIRE_NEVER``).
        subdivide: Shard artifacts into two-character sub-directories.
        max_entries: Entry limit for literal (SIMPLE) encoding, or ``UNLIMITED``.
        max_depth: Nesting limit for literal (SIMPLE) encoding, or ``UNLIMITED``.
        directory_permissions: Mode for directories created by the cache.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    directory: Path = DEFAULT_DIRECTORY
    pool: str = DEFAULT_POOL
    ttl: int = EXPIRE_NEVER
    subdivide: bool = False
    max_entries: int = Field(default=1000, ge=UNLIMITED)
    max_depth: int = Field(default=16, ge=UNLIMITED)
    directory_permissions: int = Field(default=0o766, ge=0, le=0o7777)

    @field_validator("directory", mode="before")
    @classmethod
    def _check_directory(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            msg = "directory must not be empty"
            raise ValueError(msg)
        return value

    @field_validator("pool", mode="before")
    @classmethod
    def _check_pool(cls, value: Any) -> str:
        try:
            return validate_pool(value)
        except InvalidArgumentError as e:
            raise ValueError(str(e)) from None

    @field_validator("ttl", mode="before")
    @classmethod
    def _normalize_ttl(cls, value: Any) -> int:
        try:
            return normalize_ttl(value)
        except InvalidArgumentError as e:
            raise ValueError(str(e)) from None
