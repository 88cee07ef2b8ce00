"""Tests for nanostudio.core.credentials - access-code caches."""

import pytest

from nanostudio.core.credentials import FileCredentialCache, MemoryCredentialCache


@pytest.fixture(params=["memory", "file"])
def cache(request, temp_dir):
    if request.param == "file":
        return FileCredentialCache(temp_dir / "data" / "access_code")
    return MemoryCredentialCache()


class TestCredentialCache:
    def test_empty_by_default(self, cache):
        assert cache.get() is None

    def test_set_then_get(self, cache):
        cache.set("xyz")
        assert cache.get() == "xyz"

    def test_set_strips_whitespace(self, cache):
        cache.set("  xyz \n")
        assert cache.get() == "xyz"

    def test_invalidate(self, cache):
        cache.set("xyz")
        cache.invalidate()
        assert cache.get() is None

    def test_invalidate_when_empty(self, cache):
        cache.invalidate()
        assert cache.get() is None

    def test_empty_value_invalidates(self, cache):
        cache.set("xyz")
        cache.set("")
        assert cache.get() is None


class TestFileCredentialCache:
    def test_survives_new_instance(self, temp_dir):
        path = temp_dir / "access_code"
        FileCredentialCache(path).set("xyz")
        assert FileCredentialCache(path).get() == "xyz"

    def test_invalidate_removes_file(self, temp_dir):
        path = temp_dir / "access_code"
        cache = FileCredentialCache(path)
        cache.set("xyz")
        cache.invalidate()
        assert not path.exists()
