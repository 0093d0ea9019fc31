"""Unit tests for RepositoryCache."""

import pytest

from difflens.repo.cache import RepositoryCache


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class TestRepositoryCache:
    """Tests for RepositoryCache."""

    def _cache(self, freshness_sec: float = 5.0):
        built = []

        def factory():
            built.append(object())
            return built[-1]

        clock = FakeClock()
        return RepositoryCache(factory, freshness_sec=freshness_sec, clock=clock), built, clock

    def test_builds_lazily(self):
        cache, built, _ = self._cache()
        assert built == []
        handle = cache.get()
        assert built == [handle]

    def test_reuses_fresh_handle(self):
        cache, built, clock = self._cache()
        first = cache.get()
        clock.now += 4.9
        assert cache.get() is first
        assert len(built) == 1

    def test_rebuilds_stale_handle(self):
        cache, built, clock = self._cache()
        first = cache.get()
        clock.now += 5.0
        second = cache.get()
        assert second is not first
        assert len(built) == 2

    def test_explicit_refresh(self):
        cache, built, _ = self._cache()
        first = cache.get()
        assert cache.refresh() is not first
        assert len(built) == 2

    def test_invalidate(self):
        cache, built, _ = self._cache()
        cache.get()
        cache.invalidate()
        assert not cache.is_fresh()
        cache.get()
        assert len(built) == 2

    def test_zero_window_always_rebuilds(self):
        cache, built, _ = self._cache(freshness_sec=0)
        cache.get()
        cache.get()
        assert len(built) == 2

    def test_negative_window_rejected(self):
        with pytest.raises(ValueError):
            RepositoryCache(object, freshness_sec=-1)
