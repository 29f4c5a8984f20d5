import threading
from typing import Callable

from ..utils.logging_utils import get_logger

logger = get_logger()


class ThreadPoller:
    """
    Runs `task` every `interval` seconds until `stop_event` is set.

    The interval is measured between the end of a run and the start of the next one,
    so a slow run never overlaps the following one.
    """

    def __init__(self,
                 task: Callable[[], None],
                 stop_event: threading.Event,
                 interval: float = 5,
                 name: str | None = None):
        if interval <= 0:
            raise ValueError(f"Invalid interval value: {interval}")

        self.task = task
        self.interval = interval
        self.stop_event = stop_event
        self.name = name or getattr(task, "__name__", "poller")

        self.runs = 0

    def run_once(self):
        self.runs += 1
        try:
            self.task()
        except Exception as e:
            logger.error(f"Poller {self.name} run #{self.runs} failed", exc_info=e)

    def start_polling(self):
        threading.current_thread().name = self.name
        logger.debug(f"Poller {self.name} started, every {self.interval}s")

        while not self.stop_event.is_set():
            self.run_once()
            self.stop_event.wait(self.interval)

        logger.debug(f"Poller {self.name} stopped after {self.runs} run(s)")
