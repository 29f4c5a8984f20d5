import threading
import unittest
from unittest.mock import MagicMock

from capacity_provisioner.infrastructure import ThreadPoller


class TestThreadPoller(unittest.TestCase):

    def test_polls_until_stopped(self):
        stop_event = threading.Event()
        calls = []

        def task():
            calls.append(1)
            if len(calls) == 3:
                stop_event.set()

        poller = ThreadPoller(task, stop_event, interval=0.01, name="test")
        thread = threading.Thread(target=poller.start_polling)
        thread.start()
        thread.join(timeout=5)

        self.assertFalse(thread.is_alive())
        self.assertEqual(3, len(calls))
        self.assertEqual(3, poller.runs)

    def test_failing_run_does_not_stop_the_poller(self):
        task = MagicMock(side_effect=[RuntimeError("boom"), None])
        poller = ThreadPoller(task, threading.Event(), interval=1, name="test")

        poller.run_once()
        poller.run_once()

        self.assertEqual(2, task.call_count)

    def test_invalid_interval(self):
        with self.assertRaises(ValueError):
            ThreadPoller(MagicMock(), threading.Event(), interval=0)


if __name__ == '__main__':
    unittest.main()
