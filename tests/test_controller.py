"""Tests for the AdmissionController class."""

import threading
import time
import unittest

from metascraper.controller import AdmissionController
from metascraper.errors import InvalidConfig


class TestAdmissionController(unittest.TestCase):
    """Verify the in-flight counter is bounded and always returns to zero."""

    def test_rejects_zero_limit(self):
        with self.assertRaises(InvalidConfig):
            AdmissionController(0)

    def test_counter_returns_to_zero_after_drain(self):
        controller = AdmissionController(2)
        futures = []
        for _ in range(6):
            controller.wait_for_slot()
            futures.append(controller.submit(time.sleep, 0.01))
        controller.drain()
        controller.shutdown()
        self.assertEqual(controller.active, 0)
        self.assertLessEqual(controller.peak, 2)
        self.assertTrue(all(f.done() for f in futures))

    def test_failing_task_still_signals_completion(self):
        controller = AdmissionController(1)

        def boom():
            raise RuntimeError("task failed")

        future = controller.submit(boom)
        controller.drain()
        controller.shutdown()
        self.assertEqual(controller.active, 0)
        self.assertIsInstance(future.exception(), RuntimeError)

    def test_wait_for_slot_blocks_at_limit(self):
        controller = AdmissionController(1)
        release = threading.Event()
        waits = []

        controller.submit(release.wait, 5)
        waiter = threading.Thread(target=controller.wait_for_slot, kwargs={"on_wait": lambda: waits.append(1)})
        waiter.start()
        time.sleep(0.05)
        self.assertTrue(waiter.is_alive())
        release.set()
        waiter.join(timeout=5)
        self.assertFalse(waiter.is_alive())
        self.assertGreaterEqual(len(waits), 1)
        controller.drain()
        controller.shutdown()


if __name__ == "__main__":
    unittest.main()
