"""Unit tests for the TTL keyed store and idempotent replay"""

import threading
from billing_engine.infrastructure.keyed_store import InMemoryKeyedStore, with_idempotency


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_get_returns_stored_value():
    store = InMemoryKeyedStore(ttl_seconds=60)
    store.set("k", {"v": 1})
    assert store.get("k") == {"v": 1}
    assert store.get("missing") is None


def test_entries_expire_after_ttl():
    clock = FakeClock()
    store = InMemoryKeyedStore(ttl_seconds=60, clock=clock)
    store.set("k", "value")

    clock.now = 59.9
    assert store.get("k") == "value"

    clock.now = 60.0
    assert store.get("k") is None
    assert len(store) == 0


def test_sweep_removes_only_expired():
    clock = FakeClock()
    store = InMemoryKeyedStore(ttl_seconds=10, clock=clock)
    store.set("old", 1)
    clock.now = 5
    store.set("new", 2)

    clock.now = 12
    assert store.sweep() == 1
    assert store.get("new") == 2
    assert len(store) == 1


def test_set_sweeps_past_threshold():
    clock = FakeClock()
    store = InMemoryKeyedStore(ttl_seconds=10, sweep_threshold=2, clock=clock)
    store.set("a", 1)
    store.set("b", 2)
    clock.now = 20
    store.set("c", 3)
    assert len(store) == 1


def test_stores_are_isolated():
    first, second = InMemoryKeyedStore(), InMemoryKeyedStore()
    first.set("k", 1)
    assert second.get("k") is None


def test_with_idempotency_replays_result():
    store = InMemoryKeyedStore()
    calls = []

    def work():
        calls.append(1)
        return len(calls)

    assert with_idempotency(store, "key-1", work) == (1, False)
    assert with_idempotency(store, "key-1", work) == (1, True)
    assert with_idempotency(store, "key-2", work) == (2, False)
    assert len(calls) == 2


def test_with_idempotency_without_key_always_runs():
    store = InMemoryKeyedStore()
    calls = []

    def work():
        calls.append(1)
        return "done"

    with_idempotency(store, None, work)
    with_idempotency(store, "", work)
    assert len(calls) == 2
    assert len(store) == 0


def test_concurrent_set_get_and_sweep():
    """Writers, readers and sweeps share one store without corrupting it"""
    store = InMemoryKeyedStore(ttl_seconds=0, sweep_threshold=10**9)
    for i in range(50_000):
        store.set(f"seed-{i}", i)

    errors = []

    def writer():
        try:
            for i in range(20_000):
                store.set(f"w-{i}", i)
        except Exception as exc:  # collected for the assertion below
            errors.append(exc)

    def reader():
        try:
            for i in range(20_000):
                store.get(f"w-{i}")
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=writer), threading.Thread(target=reader)]
    for thread in threads:
        thread.start()
    while any(thread.is_alive() for thread in threads):
        store.sweep()
    for thread in threads:
        thread.join()

    assert errors == []
    store.sweep()
    assert len(store) == 0
