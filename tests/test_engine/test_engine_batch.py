"""Tests for ArtifactCache batch operations and clear()."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest

from artifact_cache import ArtifactCache
from artifact_cache.exceptions import InvalidArgumentError, InvalidKeyError
from artifact_cache.storage.writer import ArtifactWriter


class TestGetMultiple:
    def test_preserves_order_and_defaults(self, cache: ArtifactCache) -> None:
        cache.set("b", 2)
        cache.set("a", 1)
        result = cache.get_multiple(["a", "missing", "b"], default=0)
        assert list(result) == ["a", "missing", "b"]
        assert result == {"a": 1, "missing": 0, "b": 2}

    def test_accepts_generators(self, cache: ArtifactCache) -> None:
        cache.set("a", 1)
        assert cache.get_multiple(k for k in ["a"]) == {"a": 1}

    @pytest.mark.parametrize("keys", ["abc", b"abc", 42, None])
    def test_rejects_non_iterables(self, cache: ArtifactCache, keys: object) -> None:
        with pytest.raises(InvalidArgumentError):
            cache.get_multiple(keys)  # type: ignore[arg-type]

    def test_rejects_invalid_member(self, cache: ArtifactCache) -> None:
        with pytest.raises(InvalidKeyError):
            cache.get_multiple(["a", ""])


class TestSetMultiple:
    def test_mapping(self, cache: ArtifactCache) -> None:
        assert cache.set_multiple({"a": 1, "b": [2]}) is True
        assert cache.get_multiple(["a", "b"]) == {"a": 1, "b": [2]}

    def test_pairs(self, cache: ArtifactCache) -> None:
        assert cache.set_multiple([("a", 1), ("b", 2)], ttl="1 minute") is True
        assert cache.inspect("b").ttl == 60

    def test_invalid_key_writes_nothing(self, cache: ArtifactCache) -> None:
        with pytest.raises(InvalidKeyError):
            cache.set_multiple([("a", 1), ("", 2)])
        assert cache.has("a") is False

    def test_malformed_pair(self, cache: ArtifactCache) -> None:
        with pytest.raises(InvalidArgumentError):
            cache.set_multiple([("a", 1, "extra")])  # type: ignore[list-item]

    def test_invalid_ttl_writes_nothing(self, cache: ArtifactCache) -> None:
        with pytest.raises(InvalidArgumentError):
            cache.set_multiple({"a": 1}, ttl=-3)
        assert cache.has("a") is False

    def test_stops_at_first_failure(self, cache: ArtifactCache) -> None:
        assert cache.set_multiple([("a", 1), ("b", lambda: None), ("c", 3)]) is False
        assert cache.get("a") == 1
        assert cache.has("b") is False
        assert cache.has("c") is False

    def test_write_failure(self, cache: ArtifactCache) -> None:
        with patch.object(ArtifactWriter, "write", return_value=False) as write:
            assert cache.set_multiple({"a": 1, "b": 2}) is False
        assert write.call_count == 1


class TestDeleteMultiple:
    def test_all_present(self, cache: ArtifactCache) -> None:
        cache.set_multiple({"a": 1, "b": 2})
        assert cache.delete_multiple(["a", "b"]) is True
        assert not cache.has("a")
        assert not cache.has("b")

    def test_partial_failure_still_attempts_every_key(self, cache: ArtifactCache) -> None:
        cache.set("present", 1)
        cache.set("later", 2)
        assert cache.delete_multiple(["present", "absent", "later"]) is False
        assert cache.has("present") is False
        assert cache.has("later") is False

    def test_rejects_string(self, cache: ArtifactCache) -> None:
        with pytest.raises(InvalidArgumentError):
            cache.delete_multiple("present")  # type: ignore[arg-type]


class TestClear:
    def test_removes_pool_artifacts(self, cache: ArtifactCache) -> None:
        cache.set_multiple({"a": 1, "b": 2, "c": 3})
        assert cache.clear() is True
        assert cache.get_multiple(["a", "b", "c"]) == {"a": None, "b": None, "c": None}

    def test_empty_directory(self, cache: ArtifactCache) -> None:
        assert cache.clear() is True

    def test_keeps_other_pools(self, make_cache: Callable[..., ArtifactCache]) -> None:
        a = make_cache(pool="a")
        b = make_cache(pool="b")
        a.set("x", 1)
        b.set("x", 2)
        assert a.clear() is True
        assert a.has("x") is False
        assert b.get("x") == 2

    def test_keeps_unrelated_files(self, cache: ArtifactCache, cache_dir: Path) -> None:
        (cache_dir / "notes.txt").write_text("keep me")
        cache.set("a", 1)
        cache.clear()
        assert (cache_dir / "notes.txt").read_text() == "keep me"

    def test_clears_all_shards(self, make_cache: Callable[..., ArtifactCache]) -> None:
        cache = make_cache(subdivide=True)
        keys = [f"key-{i}" for i in range(20)]
        cache.set_multiple({k: k for k in keys})
        shards = {cache.artifact_path(k).parent for k in keys}
        assert len(shards) > 1
        assert cache.clear() is True
        assert not any(cache.has(k) for k in keys)

    def test_removes_unreadable_artifacts(self, cache: ArtifactCache, cache_dir: Path) -> None:
        stray = cache_dir / ("0" * 32 + ".cache")
        stray.write_text("garbage without a header\n")
        cache.set("a", 1)
        assert cache.clear() is True
        assert not stray.exists()
        assert cache.has("a") is False

    def test_removes_emptied_artifact(self, cache: ArtifactCache) -> None:
        cache.set("k", 1)
        path = cache.artifact_path("k")
        path.write_bytes(b"")
        assert cache.clear() is True
        assert not path.exists()

    def test_keeps_non_artifact_names_with_bad_content(
        self, cache: ArtifactCache, cache_dir: Path
    ) -> None:
        other = cache_dir / "not-a-hash.cache"
        other.write_text("garbage\n")
        assert cache.clear() is True
        assert other.exists()

    def test_reports_failed_removal(self, cache: ArtifactCache) -> None:
        cache.set("a", 1)
        with patch.object(Path, "unlink", side_effect=PermissionError("denied")):
            assert cache.clear() is False
        assert cache.has("a") is True

    def test_tolerates_concurrent_removal(self, cache: ArtifactCache) -> None:
        cache.set("a", 1)
        real_unlink = Path.unlink

        def unlink_twice(self: Path, missing_ok: bool = False) -> None:
            real_unlink(self)
            os.remove(self)

        with patch.object(Path, "unlink", unlink_twice):
            assert cache.clear() is True
