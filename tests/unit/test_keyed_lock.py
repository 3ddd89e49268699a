"""Unit tests for KeyedLock."""

import threading
import time

from wordwise.repository.locks import KeyedLock


class TestKeyedLock:
    def test_slot_released_after_use(self):
        locks = KeyedLock()
        with locks.hold(("u1", 1)):
            assert len(locks) == 1
        assert len(locks) == 0

    def test_slot_released_on_exception(self):
        locks = KeyedLock()
        try:
            with locks.hold("k"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert len(locks) == 0

    def test_same_key_serialized(self):
        locks = KeyedLock()
        inside = 0
        max_inside = 0
        counter_lock = threading.Lock()

        def worker():
            nonlocal inside, max_inside
            with locks.hold("same"):
                with counter_lock:
                    inside += 1
                    max_inside = max(max_inside, inside)
                time.sleep(0.005)
                with counter_lock:
                    inside -= 1

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert max_inside == 1
        assert len(locks) == 0

    def test_different_keys_do_not_block(self):
        locks = KeyedLock()
        acquired = threading.Event()

        def other_key():
            with locks.hold("b"):
                acquired.set()

        with locks.hold("a"):
            t = threading.Thread(target=other_key)
            t.start()
            assert acquired.wait(timeout=2)
            t.join()
