"""
Tests for the background PollLoop.
"""

import queue
import threading

from core.dispatch import CommandDispatcher
from core.poll_loop import PollLoop


class OwnerThreadDispatcher(CommandDispatcher):
    """
    Commands run only when the owning thread calls :meth:`drain`; ``send``
    blocks the caller until then, like a blocking queued Qt connection.
    """

    def __init__(self):
        self._queue = queue.Queue()

    def post(self, command, description=""):
        self._queue.put((command, None))

    def send(self, command, description=""):
        done = threading.Event()
        self._queue.put((command, done))
        done.wait(10)

    def drain(self):
        while True:
            try:
                command, done = self._queue.get_nowait()
            except queue.Empty:
                return
            self.run_guarded(command)
            if done is not None:
                done.set()


class TestPollLoop:
    def test_keeps_ticking_after_errors(self):
        calls = []
        done = threading.Event()

        def tick():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("first tick fails")
            if len(calls) >= 3:
                done.set()

        loop = PollLoop(tick, interval_ms=5)
        loop.start()
        try:
            assert done.wait(5)
        finally:
            assert loop.stop()

        assert len(calls) >= 3
        assert not loop.is_running

    def test_stop_without_start(self):
        assert PollLoop(lambda: None).stop()

    def test_interval_is_at_least_one_ms(self):
        loop = PollLoop(lambda: None, interval_ms=300)
        loop.set_interval_ms(0)

        assert loop.interval_ms == 1

    def test_start_twice_runs_one_thread(self):
        started = threading.Event()
        loop = PollLoop(started.set, interval_ms=5)
        loop.start()
        loop.start()
        try:
            assert started.wait(5)
            names = [t.name for t in threading.enumerate()]
            assert names.count("activity-hud-poll") == 1
        finally:
            loop.stop()

    def test_stop_pumps_work_the_tick_is_waiting_for(self):
        dispatcher = OwnerThreadDispatcher()
        entered = threading.Event()
        ran = []

        def tick():
            entered.set()
            dispatcher.send(lambda: ran.append("teardown"), "teardown")

        loop = PollLoop(tick, interval_ms=5)
        loop.start()
        assert entered.wait(5)

        assert loop.stop(timeout=5, pump=dispatcher.drain)
        assert "teardown" in ran
        assert not loop.is_running
