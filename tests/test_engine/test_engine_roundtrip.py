"""Tests for ArtifactCache single-key operations."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import pytest

from artifact_cache import MISSING, UNLIMITED, ArtifactCache, Complexity
from artifact_cache.exceptions import CacheReadError, InvalidArgumentError, InvalidKeyError
from artifact_cache.keys import hash_key
from artifact_cache.ttl import EXPIRE_NEVER


@dataclass
class Report:
    title: str
    rows: list[int]


class TestRoundTrip:
    @pytest.mark.parametrize(
        "value",
        [
            None,
            True,
            0,
            1.5,
            "text",
            b"raw",
            [1, [2, [3]]],
            {"foo": "bar", "xyz": 1234, "array": [10, 20, 30]},
            ("a", ("b",)),
        ],
    )
    def test_simple_values(self, cache: ArtifactCache, value: object) -> None:
        assert cache.set("k", value) is True
        assert cache.get("k") == value
        assert cache.inspect("k").kind is Complexity.SIMPLE

    def test_complex_object(self, cache: ArtifactCache) -> None:
        report = Report("sales", [1, 2, 3])
        cache.set("report", report)
        assert cache.get("report") == report
        assert cache.inspect("report").kind is Complexity.COMPLEX

    def test_list_containing_object(self, cache: ArtifactCache) -> None:
        value = [1, Report("a", []), "x"]
        cache.set("mixed", value)
        assert cache.get("mixed") == value

    def test_oversized_collection_uses_complex_encoding(
        self, make_cache: Callable[..., ArtifactCache]
    ) -> None:
        cache = make_cache(max_entries=3)
        cache.set("big", [1, 2, 3, 4])
        assert cache.get("big") == [1, 2, 3, 4]
        assert cache.inspect("big").kind is Complexity.COMPLEX

    def test_deeply_nested_list_with_unlimited_depth(
        self, make_cache: Callable[..., ArtifactCache]
    ) -> None:
        cache = make_cache(max_depth=UNLIMITED, max_entries=UNLIMITED)
        value: list = ["leaf"]
        for _ in range(250):
            value = [value]
        assert cache.set("deep", value) is True
        assert cache.get("deep") == value
        assert cache.inspect("deep").kind is Complexity.COMPLEX

    def test_overwrite(self, cache: ArtifactCache) -> None:
        cache.set("k", "first")
        cache.set("k", "second")
        assert cache.get("k") == "second"

    def test_unpicklable_value_returns_false(self, cache: ArtifactCache) -> None:
        assert cache.set("k", lambda: None) is False
        assert cache.has("k") is False


class TestFalsyValues:
    @pytest.mark.parametrize("value", [False, 0, "", [], {}, None])
    def test_falsy_values_are_hits(self, cache: ArtifactCache, value: object) -> None:
        cache.set("k", value)
        assert cache.has("k") is True
        assert cache.get("k", default="sentinel") == value

    def test_storing_missing_is_noop(self, cache: ArtifactCache) -> None:
        assert cache.set("k", MISSING) is True
        assert cache.has("k") is False


class TestGet:
    def test_absent_returns_default(self, cache: ArtifactCache) -> None:
        assert cache.get("nope") is None
        assert cache.get("nope", "fallback") == "fallback"

    def test_corrupt_artifact_raises(self, cache: ArtifactCache) -> None:
        cache.artifact_path("bad").write_text("None if False else [1,\n")
        with pytest.raises(CacheReadError):
            cache.get("bad")

    @pytest.mark.parametrize("key", ["", None, 5])
    def test_invalid_key(self, cache: ArtifactCache, key: object) -> None:
        with pytest.raises(InvalidKeyError):
            cache.get(key)  # type: ignore[arg-type]


class TestExpiry:
    def test_expires_after_ttl(self, cache: ArtifactCache) -> None:
        cache.set("k", "v", ttl=1)
        assert cache.get("k") == "v"
        time.sleep(1.2)
        assert cache.get("k", "expired") == "expired"
        # Expired artifacts stay on disk until overwritten or removed.
        assert cache.has("k") is True

    def test_immediate_expiry(self, cache: ArtifactCache) -> None:
        cache.set("k", "v", ttl=0)
        assert cache.get("k") is None

    def test_never_expires(self, cache: ArtifactCache) -> None:
        cache.set("k", "v", ttl=EXPIRE_NEVER)
        info = cache.inspect("k")
        assert info.never_expires
        assert info.expiry == "False"
        assert info.is_expired(now=time.time() + 100 * 365 * 86400) is False

    def test_default_ttl_from_config(self, make_cache: Callable[..., ArtifactCache]) -> None:
        cache = make_cache(ttl="10 minutes")
        cache.set("k", "v")
        info = cache.inspect("k")
        assert info.ttl == 600
        assert info.is_expired(now=time.time() + 599) is False
        assert info.is_expired(now=time.time() + 601) is True

    def test_explicit_ttl_overrides_default(
        self, make_cache: Callable[..., ArtifactCache]
    ) -> None:
        cache = make_cache(ttl=60)
        cache.set("k", "v", ttl="2 hours")
        assert cache.inspect("k").ttl == 7200

    def test_invalid_ttl(self, cache: ArtifactCache) -> None:
        with pytest.raises(InvalidArgumentError):
            cache.set("k", "v", ttl="whenever")
        assert cache.has("k") is False


class TestPools:
    def test_pool_isolation(self, make_cache: Callable[..., ArtifactCache]) -> None:
        a = make_cache(pool="a")
        b = make_cache(pool="b")
        a.set("x", "from a")
        b.set("x", "from b")
        assert a.get("x") == "from a"
        assert b.get("x") == "from b"

    def test_pool_paths_differ(self, make_cache: Callable[..., ArtifactCache]) -> None:
        assert make_cache(pool="a").artifact_path("x") != make_cache(pool="b").artifact_path("x")

    def test_delete_in_one_pool_keeps_other(
        self, make_cache: Callable[..., ArtifactCache]
    ) -> None:
        a = make_cache(pool="a")
        b = make_cache(pool="b")
        a.set("x", 1)
        b.set("x", 2)
        assert a.delete("x") is True
        assert b.get("x") == 2


class TestDeleteAndHas:
    def test_delete_present(self, cache: ArtifactCache) -> None:
        cache.set("k", 1)
        assert cache.delete("k") is True
        assert cache.has("k") is False
        assert cache.get("k") is None

    def test_delete_absent(self, cache: ArtifactCache) -> None:
        assert cache.delete("k") is False

    def test_has_absent(self, cache: ArtifactCache) -> None:
        assert cache.has("k") is False


class TestArtifactLayout:
    def test_flat_path(self, cache: ArtifactCache, cache_dir: Path) -> None:
        expected = cache_dir / f"{hash_key('default', 'counter')}.cache"
        assert cache.artifact_path("counter") == expected

    def test_sharded_path(self, make_cache: Callable[..., ArtifactCache], cache_dir: Path) -> None:
        cache = make_cache(subdivide=True)
        digest = hash_key("default", "counter")
        cache.set("counter", 1)
        path = cache.artifact_path("counter")
        assert path == cache_dir / digest[:2] / f"{digest}.cache"
        assert path.is_file()

    def test_counter_scenario(self, cache: ArtifactCache) -> None:
        cache.set("counter", 42)
        lines = cache.artifact_path("counter").read_text().splitlines()
        assert lines[0].startswith("# SIMPLE 'counter' ")
        assert lines[1].endswith("else [42]")
        assert cache.get("counter") == 42

    def test_inspect_absent(self, cache: ArtifactCache) -> None:
        assert cache.inspect("nope") is None

    def test_directory_created_eagerly(self, cache_dir: Path) -> None:
        ArtifactCache(directory=cache_dir / "nested" / "deeper")
        assert (cache_dir / "nested" / "deeper").is_dir()

    def test_trailing_separator_normalized(self, cache_dir: Path) -> None:
        cache = ArtifactCache(directory=f"{cache_dir}/")
        assert cache.directory == cache_dir
