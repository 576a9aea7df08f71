"""KeyedLock unit testleri."""

import threading

import pytest

from src.services.exceptions import LockTimeoutError
from src.services.locking import KeyedLock, inventory_key, sales_order_key


class TestKeyedLock:
    def test_hold_and_release(self):
        lock = KeyedLock()
        with lock.hold("inventory:P1:WH001"):
            assert lock.is_locked("inventory:P1:WH001") is True
        assert lock.is_locked("inventory:P1:WH001") is False

    def test_reentrant_for_same_thread(self):
        lock = KeyedLock(timeout=0.5)
        with lock.hold("k"):
            with lock.hold("k"):
                assert lock.is_locked("k") is True
            assert lock.is_locked("k") is True
        assert lock.is_locked("k") is False

    def test_other_thread_times_out(self):
        lock = KeyedLock(timeout=0.05)
        errors = []

        def contender():
            try:
                with lock.hold("k"):
                    pass
            except LockTimeoutError as e:
                errors.append(e)

        with lock.hold("k"):
            t = threading.Thread(target=contender)
            t.start()
            t.join()

        assert len(errors) == 1

    def test_partial_acquire_is_released_on_timeout(self):
        lock = KeyedLock(timeout=0.05)
        held = threading.Event()
        done = threading.Event()

        def holder():
            with lock.hold("b"):
                held.set()
                done.wait(timeout=5)

        t = threading.Thread(target=holder)
        t.start()
        held.wait(timeout=5)
        try:
            with pytest.raises(LockTimeoutError):
                with lock.hold("a", "b"):
                    pass
            assert lock.is_locked("a") is False
        finally:
            done.set()
            t.join()

    def test_exception_inside_hold_releases(self):
        lock = KeyedLock()
        with pytest.raises(RuntimeError):
            with lock.hold("x", "y"):
                raise RuntimeError("hata")
        assert lock.is_locked("x") is False
        assert lock.is_locked("y") is False


def test_key_formats():
    assert inventory_key("P1", "WH001") == "inventory:P1:WH001"
    assert sales_order_key("SO-1A2B3C4D") == "sales_order:SO-1A2B3C4D"


class TestLockTableCleanup:
    def test_idle_keys_are_discarded(self):
        lock = KeyedLock()
        for i in range(50):
            with lock.hold(inventory_key(f"P{i}", "WH001"), sales_order_key(f"SO-{i}")):
                pass
        assert lock.tracked_key_count() == 0

    def test_nested_hold_keeps_key_until_outermost_exit(self):
        lock = KeyedLock()
        with lock.hold("k"):
            with lock.hold("k"):
                pass
            assert lock.tracked_key_count() == 1
        assert lock.tracked_key_count() == 0

    def test_timed_out_waiter_leaves_no_entry(self):
        lock = KeyedLock(timeout=0.05)
        results = []

        def contender():
            results.append(lock.acquire("k"))

        with lock.hold("k"):
            t = threading.Thread(target=contender)
            t.start()
            t.join()
            assert lock.tracked_key_count() == 1

        assert results == [False]
        assert lock.tracked_key_count() == 0

    def test_waiting_thread_gets_same_lock_after_release(self):
        lock = KeyedLock()
        held = threading.Event()
        entered = []

        def contender():
            held.wait(timeout=5)
            with lock.hold("k"):
                entered.append(True)

        t = threading.Thread(target=contender)
        with lock.hold("k"):
            t.start()
            held.set()
        t.join(timeout=5)

        assert entered == [True]
        assert lock.tracked_key_count() == 0
