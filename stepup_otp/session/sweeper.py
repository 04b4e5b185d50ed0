"""
Periodic Task
=============
Cancellable, restartable background timer.
"""

import threading
from typing import Callable, Optional

import structlog

logger = structlog.get_logger(__name__)


class PeriodicTask:
    """
    Runs a callable on a fixed interval in a single daemon thread.

    Exceptions raised by one cycle are logged and never stop the loop.

    Example:
        task = PeriodicTask("otp-sweep", 60.0, store.sweep)
        task.start()
        ...
        task.cancel()
    """

    def __init__(self, name: str, interval: float, func: Callable[[], object]):
        if interval <= 0:
            raise ValueError("Interval must be positive.")
        self.name = name
        self.interval = interval
        self._func = func
        self._lock = threading.Lock()
        self._stop: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self) -> None:
        """Start the timer. Does nothing if it is already running."""
        with self._lock:
            if self.is_running:
                return
            stop = threading.Event()
            thread = threading.Thread(
                target=self._run,
                args=(stop,),
                name=self.name,
                daemon=True,
            )
            self._stop = stop
            self._thread = thread
            thread.start()
        logger.debug("periodic_task_started", task=self.name, interval=self.interval)

    def cancel(self, timeout: Optional[float] = None) -> None:
        """Stop the timer and wait for an in-progress cycle to finish."""
        with self._lock:
            stop, thread = self._stop, self._thread
            self._stop = None
            self._thread = None

        if stop is None or thread is None:
            return

        stop.set()
        if thread is not threading.current_thread():
            thread.join(timeout)
        logger.debug("periodic_task_cancelled", task=self.name)

    def run_once(self) -> None:
        """Run a single cycle in the calling thread."""
        try:
            self._func()
        except Exception:
            logger.exception("periodic_task_failed", task=self.name)

    def _run(self, stop: threading.Event) -> None:
        # Event.wait returns True once cancelled, ending the loop.
        while not stop.wait(self.interval):
            self.run_once()
