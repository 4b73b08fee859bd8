"""
Delayed fire-and-forget task runner.

Used for deleting downloaded files after a grace period. Tasks are never
retried and their failures are only logged.
"""

import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)


class DeferredTaskScheduler:
    """Runs callables once after a delay on daemon timer threads."""

    def __init__(self, thread_name_prefix: str = "deferred_delete"):
        self._thread_name_prefix = thread_name_prefix
        self._timers: set[threading.Timer] = set()
        self._lock = threading.Lock()
        self._counter = 0

    def schedule(self, delay_seconds: float, fn: Callable[[], None]) -> None:
        """
        Run fn after delay_seconds.

        A delay of zero or less runs fn immediately in the calling thread.

        Args:
            delay_seconds: Seconds to wait before running fn
            fn: Task to run
        """
        if delay_seconds <= 0:
            self._run(fn, None)
            return

        with self._lock:
            self._counter += 1
            timer = threading.Timer(delay_seconds, lambda: self._run(fn, timer))
            timer.daemon = True
            timer.name = f"{self._thread_name_prefix}_{self._counter}"
            self._timers.add(timer)
        timer.start()

    def _run(self, fn: Callable[[], None], timer: threading.Timer | None) -> None:
        try:
            fn()
        except Exception:
            logger.exception("Deferred task failed")
        finally:
            if timer is not None:
                with self._lock:
                    self._timers.discard(timer)

    @property
    def pending(self) -> int:
        """Number of scheduled tasks that have not finished."""
        with self._lock:
            return len(self._timers)

    def cancel_all(self) -> int:
        """Cancel every pending task. Returns how many were cancelled."""
        with self._lock:
            timers = list(self._timers)
            self._timers.clear()
        for timer in timers:
            timer.cancel()
        return len(timers)
