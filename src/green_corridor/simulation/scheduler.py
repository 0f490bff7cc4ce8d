"""
Tick schedulers

A scheduler repeatedly invokes a callback with the elapsed milliseconds.
ThreadedTickScheduler runs on a background thread in wall-clock time;
ManualTickScheduler fires only when advanced, for tests and fast replays.
"""

import time
import threading
from typing import Callable, Optional

from ..utils.logger import setup_logger

logger = setup_logger("scheduler")

TickCallback = Callable[[float], None]


class TickScheduler:
    """Interface: at most one active timer per scheduler"""

    def start(self, callback: TickCallback, interval_ms: float) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        raise NotImplementedError

    @property
    def is_running(self) -> bool:
        raise NotImplementedError


class ThreadedTickScheduler(TickScheduler):
    """
    Background thread that calls the callback every interval_ms

    Starting while running restarts the timer. stop() may be called from
    inside the callback; it then only flags the loop to exit.
    """

    def __init__(self, join_timeout: float = 5.0):
        self.join_timeout = join_timeout
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self.ticks = 0

    def start(self, callback: TickCallback, interval_ms: float) -> None:
        self.stop()

        stop_event = threading.Event()
        self._stop_event = stop_event
        interval_s = interval_ms / 1000.0

        def tick_loop():
            while not stop_event.wait(interval_s):
                self.ticks += 1
                try:
                    callback(interval_ms)
                except Exception:
                    logger.exception("Tick callback failed, stopping timer")
                    stop_event.set()

        self._thread = threading.Thread(target=tick_loop, name="drive-timer", daemon=True)
        self._thread.start()
        logger.debug(f"Timer started ({interval_ms:.0f} ms)")

    def stop(self) -> None:
        self._stop_event.set()

        thread = self._thread
        if thread is None:
            return
        self._thread = None

        if thread is not threading.current_thread():
            thread.join(timeout=self.join_timeout)
        logger.debug("Timer stopped")

    @property
    def is_running(self) -> bool:
        return self._thread is not None and not self._stop_event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the timer stops; True if it stopped within timeout"""
        deadline = None if timeout is None else time.monotonic() + timeout
        while self.is_running:
            if deadline is not None and time.monotonic() >= deadline:
                return False
            time.sleep(0.01)
        return True


class ManualTickScheduler(TickScheduler):
    """Deterministic scheduler driven by explicit advance() calls"""

    def __init__(self):
        self._callback: Optional[TickCallback] = None
        self._interval_ms = 0.0
        self.starts = 0
        self.ticks = 0

    def start(self, callback: TickCallback, interval_ms: float) -> None:
        self.stop()
        self._callback = callback
        self._interval_ms = interval_ms
        self.starts += 1

    def stop(self) -> None:
        self._callback = None

    @property
    def is_running(self) -> bool:
        return self._callback is not None

    def advance(self, ticks: int = 1) -> int:
        """Fire up to ticks callbacks; returns how many actually fired"""
        fired = 0
        for _ in range(ticks):
            if self._callback is None:
                break
            self._callback(self._interval_ms)
            self.ticks += 1
            fired += 1
        return fired

    def run_until_stopped(self, max_ticks: int = 100000) -> int:
        """Fire ticks until the callback stops the timer or max_ticks is hit"""
        return self.advance(max_ticks)
