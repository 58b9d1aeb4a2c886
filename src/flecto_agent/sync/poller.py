"""Fixed-interval poll loop with cooperative cancellation.

The loop blocks on ``cancel.wait(interval)``: a timeout is a tick, a set event
is a stop request, so cancellation is observed immediately rather than at the
next tick. A refresh already running when the event is set finishes normally.

States: ``idle`` -> ``running`` -> ``stopped``. There is no way back from
``stopped``; create a new :class:`PollLoop` instead.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from enum import StrEnum

logger = logging.getLogger(__name__)


class PollState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class PollLoop:
    """Call ``refresh`` every ``interval`` seconds until cancelled."""

    def __init__(self, refresh: Callable[[], None], interval: float) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._refresh = refresh
        self.interval = interval
        self.ticks = 0
        self._state = PollState.IDLE
        self._state_lock = threading.Lock()

    @property
    def state(self) -> PollState:
        return self._state

    def run(self, cancel: threading.Event) -> None:
        """Block until ``cancel`` is set, refreshing on every tick.

        Errors raised by ``refresh`` are logged and dropped; the loop keeps
        its schedule.

        Raises
        ------
        RuntimeError
            If this loop already ran.
        """
        with self._state_lock:
            if self._state is not PollState.IDLE:
                raise RuntimeError(f"poll loop is {self._state}; create a new one")
            self._state = PollState.RUNNING

        logger.info("Polling every %.1fs", self.interval)
        try:
            while not cancel.wait(self.interval):
                self.ticks += 1
                try:
                    self._refresh()
                except Exception as exc:
                    logger.warning("Refresh failed, keeping current snapshot: %s", exc)
        finally:
            self._state = PollState.STOPPED
            logger.info("Polling stopped after %d tick(s)", self.ticks)

    def start(self, cancel: threading.Event, name: str = "flecto-poll") -> threading.Thread:
        """Run :meth:`run` on a daemon thread and return the started thread."""
        thread = threading.Thread(target=self.run, args=(cancel,), name=name, daemon=True)
        thread.start()
        return thread


__all__ = ["PollLoop", "PollState"]
