# tests/test_core/test_cache.py

from moviereview.core.cache import TTLMap


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_entries_expire():
    clock = FakeClock()
    cache = TTLMap(clock=clock)
    cache.set("jwks", ["k1"], ttl_seconds=10)
    assert cache.get("jwks") == ["k1"]
    clock.now = 10
    assert cache.get("jwks") is None


def test_oldest_entry_evicted_at_capacity():
    cache = TTLMap(maxsize=2, clock=FakeClock())
    cache.set("a", 1, 60)
    cache.set("b", 2, 60)
    cache.set("c", 3, 60)
    assert cache.get("a") is None
    assert (cache.get("b"), cache.get("c")) == (2, 3)


def test_clear():
    cache = TTLMap(clock=FakeClock())
    cache.set("a", 1, 60)
    cache.clear()
    assert cache.get("a") is None
