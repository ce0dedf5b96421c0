"""
Per-session generation lock: one cycle in flight per session.
"""
import threading
import unittest

from wahotrip.modules.state.session_lock import (
    acquire_generation_lock,
    generation_lock,
    is_generation_in_flight,
    release_generation_lock,
)


class GenerationLockTests(unittest.TestCase):
    def test_acquire_and_release(self):
        session_id = "lock-session-1"
        self.assertTrue(acquire_generation_lock(session_id))
        self.assertFalse(acquire_generation_lock(session_id))
        self.assertTrue(is_generation_in_flight(session_id))
        release_generation_lock(session_id)
        self.assertFalse(is_generation_in_flight(session_id))
        self.assertTrue(acquire_generation_lock(session_id))
        release_generation_lock(session_id)

    def test_sessions_are_independent(self):
        self.assertTrue(acquire_generation_lock("lock-session-a"))
        self.assertTrue(acquire_generation_lock("lock-session-b"))
        release_generation_lock("lock-session-a")
        release_generation_lock("lock-session-b")

    def test_context_manager_releases_on_exit(self):
        session_id = "lock-session-2"
        with generation_lock(session_id) as acquired:
            self.assertTrue(acquired)
            self.assertFalse(acquire_generation_lock(session_id))
        self.assertFalse(is_generation_in_flight(session_id))

    def test_context_manager_releases_on_error(self):
        session_id = "lock-session-3"
        with self.assertRaises(RuntimeError):
            with generation_lock(session_id):
                raise RuntimeError("boom")
        self.assertFalse(is_generation_in_flight(session_id))

    def test_context_manager_does_not_release_foreign_lock(self):
        session_id = "lock-session-4"
        self.assertTrue(acquire_generation_lock(session_id))
        with generation_lock(session_id) as acquired:
            self.assertFalse(acquired)
        self.assertTrue(is_generation_in_flight(session_id))
        release_generation_lock(session_id)

    def test_empty_session_id_never_locks(self):
        self.assertFalse(acquire_generation_lock(""))
        release_generation_lock("")

    def test_only_one_thread_wins(self):
        session_id = "lock-session-5"
        results = []
        start = threading.Barrier(8)

        def attempt():
            start.wait()
            results.append(acquire_generation_lock(session_id))

        threads = [threading.Thread(target=attempt) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertEqual(results.count(True), 1)
        release_generation_lock(session_id)

    def test_claims_never_overlap_across_release_cycles(self):
        session_id = "lock-session-6"
        counter = threading.Lock()
        state = {"active": 0, "peak": 0, "claims": 0}
        start = threading.Barrier(8)

        def worker():
            start.wait()
            for _ in range(300):
                if not acquire_generation_lock(session_id):
                    continue
                with counter:
                    state["active"] += 1
                    state["claims"] += 1
                    state["peak"] = max(state["peak"], state["active"])
                with counter:
                    state["active"] -= 1
                release_generation_lock(session_id)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        self.assertGreater(state["claims"], 0)
        self.assertEqual(state["peak"], 1)
        self.assertFalse(is_generation_in_flight(session_id))

    def test_release_of_an_unclaimed_session_is_a_no_op(self):
        release_generation_lock("lock-session-7")
        self.assertFalse(is_generation_in_flight("lock-session-7"))
        self.assertTrue(acquire_generation_lock("lock-session-7"))
        release_generation_lock("lock-session-7")


if __name__ == "__main__":
    unittest.main()
