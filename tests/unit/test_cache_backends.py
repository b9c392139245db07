"""
Unit tests for the memory and file cache backends.
"""

import json

import pytest

from api_connector import NOT_FOUND, CacheWriteError, FileCache, MemoryCache


@pytest.fixture(params=["memory", "file"])
def cache(request, tmp_path):
    """Fixture providing each cache backend."""
    if request.param == "memory":
        return MemoryCache()
    return FileCache(tmp_path / "cache")


class TestCacheBehavior:
    """Behavior shared by all cache backends."""

    def test_miss_returns_not_found(self, cache):
        assert cache.get("missing") is NOT_FOUND
        assert cache.has("missing") is False

    def test_set_and_get(self, cache):
        cache.set("entry", {"a": [1, 2]})

        assert cache.get("entry") == {"a": [1, 2]}
        assert cache.has("entry") is True

    def test_stored_empty_values_are_not_misses(self, cache):
        """Test None and empty strings are distinguishable from a miss."""
        cache.set("none", None)
        cache.set("empty", "")

        assert cache.get("none") is None
        assert cache.get("empty") == ""

    def test_set_replaces_value(self, cache):
        cache.set("entry", "old")
        cache.set("entry", "new")

        assert cache.get("entry") == "new"

    def test_remove(self, cache):
        cache.set("entry", "v")

        assert cache.remove("entry") is True
        assert cache.remove("entry") is False
        assert cache.get("entry") is NOT_FOUND

    def test_flush_by_tag(self, cache):
        cache.set("a", 1, ["group"])
        cache.set("b", 2, ["group", "other"])
        cache.set("c", 3, ["other"])

        assert cache.flush_by_tag("group") == 2
        assert cache.get("a") is NOT_FOUND
        assert cache.get("b") is NOT_FOUND
        assert cache.get("c") == 3

    def test_set_replaces_tags(self, cache):
        cache.set("a", 1, ["group"])
        cache.set("a", 2)

        assert cache.flush_by_tag("group") == 0
        assert cache.get("a") == 2

    def test_flush(self, cache):
        cache.set("a", 1)
        cache.set("b", 2)

        cache.flush()

        assert cache.get("a") is NOT_FOUND
        assert cache.get("b") is NOT_FOUND

    @pytest.mark.parametrize("key", ["", "has space", "slash/key", "a" * 251])
    def test_invalid_key(self, cache, key):
        with pytest.raises(ValueError):
            cache.get(key)

    def test_invalid_tag(self, cache):
        with pytest.raises(ValueError):
            cache.set("entry", 1, ["bad tag"])

    def test_sha1_keys_are_valid(self, cache):
        key = "a9993e364706816aba3e25717850c26c9cd0d89d"
        cache.set(key, "body")

        assert cache.get(key) == "body"


class TestNotFound:
    """Tests for the NOT_FOUND sentinel."""

    def test_is_falsy(self):
        assert not NOT_FOUND

    def test_repr(self):
        assert repr(NOT_FOUND) == "NOT_FOUND"


class TestFileCache:
    """Tests specific to FileCache."""

    def test_entries_survive_new_instance(self, tmp_path):
        """Test entries persist across cache instances."""
        FileCache(tmp_path).set("entry", "raw body", ["responses"])

        reopened = FileCache(tmp_path)

        assert reopened.get("entry") == "raw body"
        assert reopened.flush_by_tag("responses") == 1

    def test_file_layout(self, tmp_path):
        """Test one JSON file per entry with value and tags."""
        cache = FileCache(tmp_path)
        cache.set("entry", "v", ["b", "a"])

        content = json.loads((tmp_path / "entry.json").read_text(encoding="utf-8"))

        assert content["key"] == "entry"
        assert content["value"] == "v"
        assert content["tags"] == ["a", "b"]
        assert "written_at_utc" in content

    def test_creates_directory(self, tmp_path):
        base_dir = tmp_path / "nested" / "cache"

        FileCache(base_dir)

        assert base_dir.is_dir()

    def test_unserializable_value_raises_write_error(self, tmp_path):
        cache = FileCache(tmp_path)

        with pytest.raises(CacheWriteError):
            cache.set("entry", object())

        assert cache.get("entry") is NOT_FOUND

    def test_unwritable_directory_raises_write_error(self, tmp_path):
        """Test OS errors on write become CacheWriteError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        cache = FileCache(blocker / "cache", create_dirs=False)

        with pytest.raises(CacheWriteError):
            cache.set("entry", "v")

    def test_corrupt_file_is_a_miss(self, tmp_path):
        cache = FileCache(tmp_path)
        (tmp_path / "entry.json").write_text("{not json", encoding="utf-8")

        assert cache.get("entry") is NOT_FOUND

    def test_no_temp_files_left_behind(self, tmp_path):
        cache = FileCache(tmp_path)
        cache.set("entry", "v")

        assert [p.name for p in tmp_path.iterdir()] == ["entry.json"]
