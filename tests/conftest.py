"""Shared fixtures for artifact-cache tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from artifact_cache.cache.engine import ArtifactCache


class RecordingProducer:
    """Producer that counts its invocations and returns a fixed value.

    Set ``error`` to make every call raise it instead.
    """

    def __init__(self, value: Any = "produced", error: Exception | None = None) -> None:
        self.value = value
        self.error = error
        self.calls = 0

    def __call__(self) -> Any:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.value


class RecordingSink:
    """Logging sink that keeps every record it receives."""

    def __init__(self) -> None:
        self.records: list[tuple[int, str, dict[str, Any]]] = []

    def log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        text = msg % args if args else msg
        self.records.append((level, text, kwargs.get("extra", {}).get("cache", {})))

    def messages(self, level: int | None = None) -> list[str]:
        return [text for lvl, text, _ctx in self.records if level is None or lvl == level]


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Return a not-yet-existing cache directory under tmp_path."""
    return tmp_path / "cache"


@pytest.fixture
def make_cache(cache_dir: Path) -> Callable[..., ArtifactCache]:
    """Factory building caches in the shared temporary directory."""

    def _make(**overrides: Any) -> ArtifactCache:
        overrides.setdefault("directory", cache_dir)
        return ArtifactCache(**overrides)

    return _make


@pytest.fixture
def cache(make_cache: Callable[..., ArtifactCache]) -> ArtifactCache:
    """Return a cache with default settings."""
    return make_cache()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def make_producer() -> type[RecordingProducer]:
    """Return the RecordingProducer class so tests can build producers."""
    return RecordingProducer
