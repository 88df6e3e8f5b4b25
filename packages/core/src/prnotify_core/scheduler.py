"""Run the poll cycle now, then on a fixed interval until stopped.

Cycles never overlap: the interval is only armed once the previous cycle has
fully returned. stop() is honoured between cycles, never in the middle of
one, so shutdown can cost at most one interval of latency but never leaves a
half-applied snapshot behind.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)

RUNNING = "running"
STOPPED = "stopped"


class PollScheduler:
    """Two-state lifecycle (running -> stopped) around a cycle callable.

    The timer-versus-cancellation race is a threading.Event wait: it returns
    early when stop() sets the event and times out when the interval elapses.
    Signal handlers must call stop() from another thread, since the main
    thread may be holding the event's lock when the signal arrives.
    """

    def __init__(self, cycle: Callable[[], object], interval_seconds: float):
        if interval_seconds <= 0:
            raise ValueError(f"interval must be positive, got {interval_seconds!r}")
        self._cycle = cycle
        self._interval = interval_seconds
        self._stop = threading.Event()
        self._state = RUNNING

    @property
    def state(self) -> str:
        return self._state

    @property
    def interval(self) -> float:
        return self._interval

    def stop(self) -> None:
        self._stop.set()

    def run(self) -> int:
        """Block until stopped. Returns the number of cycles executed."""
        cycles = 0
        while self._state == RUNNING:
            self._tick()
            cycles += 1
            if self._stop.wait(self._interval):
                self._state = STOPPED
        logger.info("shutting down after %d cycle(s)", cycles)
        return cycles

    def _tick(self) -> None:
        try:
            self._cycle()
        except Exception:
            # run_cycle reports known failures itself; anything else is logged
            # and the loop keeps going.
            logger.exception("poll cycle crashed; retrying next tick")
