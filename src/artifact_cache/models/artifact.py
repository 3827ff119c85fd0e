"""Artifact metadata models."""

from __future__ import annotations

import time
from datetime import datetime, timedelta
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from artifact_cache.complexity import Complexity
from artifact_cache.ttl import EXPIRE_NEVER


class ArtifactInfo(BaseModel):
    """Metadata parsed from an artifact's header and expiry check.

    Produced by ``ArtifactReader.inspect()``; the payload itself is never
    loaded.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    kind: Complexity
    key: str
    pool: str
    created_at: datetime
    ttl: int = Field(ge=EXPIRE_NEVER)
    expiry: str
    size: int = Field(default=0, ge=0)

    @property
    def never_expires(self) -> bool:
        return self.ttl == EXPIRE_NEVER

    @property
    def expires_at(self) -> datetime | None:
        """Point in time after which the artifact reads as missing."""
        if self.never_expires:
            return None
        return self.created_at + timedelta(seconds=self.ttl)

    def is_expired(self, now: float | None = None) -> bool:
        """Evaluate the embedded expiry check at ``now`` (epoch seconds).

        Parameters:
            now: Evaluation time; defaults to the current time.
        """
        from artifact_cache.storage._format import NOW_NAME, eval_namespace

        at = time.time() if now is None else now
        namespace = eval_namespace()
        namespace[NOW_NAME] = lambda: at
        return bool(eval(self.expiry, namespace))  # noqa: S307
