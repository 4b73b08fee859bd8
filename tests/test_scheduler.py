"""Tests for the deferred task scheduler."""

import threading

from docpress.files import DeferredTaskScheduler


class TestDeferredTaskScheduler:
    """Tests for DeferredTaskScheduler."""

    def test_zero_delay_runs_immediately(self) -> None:
        scheduler = DeferredTaskScheduler()
        calls: list[str] = []
        scheduler.schedule(0, lambda: calls.append("ran"))
        assert calls == ["ran"]
        assert scheduler.pending == 0

    def test_runs_after_delay(self) -> None:
        scheduler = DeferredTaskScheduler()
        done = threading.Event()
        scheduler.schedule(0.05, done.set)
        assert done.wait(timeout=5)

    def test_failure_is_swallowed(self, caplog) -> None:
        scheduler = DeferredTaskScheduler()

        def boom() -> None:
            raise OSError("disk on fire")

        scheduler.schedule(0, boom)
        assert "Deferred task failed" in caplog.text

    def test_failure_in_timer_thread_clears_pending(self) -> None:
        scheduler = DeferredTaskScheduler()
        finished = threading.Event()

        def boom() -> None:
            finished.set()
            raise RuntimeError("nope")

        scheduler.schedule(0.01, boom)
        assert finished.wait(timeout=5)
        for _ in range(100):
            if scheduler.pending == 0:
                break
            threading.Event().wait(0.01)
        assert scheduler.pending == 0

    def test_cancel_all(self) -> None:
        scheduler = DeferredTaskScheduler()
        calls: list[int] = []
        scheduler.schedule(60, lambda: calls.append(1))
        scheduler.schedule(60, lambda: calls.append(2))
        assert scheduler.pending == 2

        assert scheduler.cancel_all() == 2
        assert scheduler.pending == 0
        assert calls == []
