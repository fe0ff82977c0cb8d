"""Fixed-rate periodic timer run on a single worker."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Executor, Future
from threading import Event, Lock
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicTimer:
    """Runs ``action`` immediately and then every ``period`` seconds.

    Tick ``k`` is due at ``origin + k * period`` where ``origin`` is the moment
    the timer loop starts on its worker. A tick that overruns its slot delays
    the next one until the worker is free; ticks never overlap and missed slots
    are caught up back to back rather than shifting the cadence.
    """

    def __init__(
        self,
        action: Callable[[], None],
        period: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if period <= 0:
            raise ValueError(f"Timer period must be positive, got {period!r}.")
        self.action = action
        self.period = float(period)
        self._clock = clock
        self._cancelled = Event()
        self._state_lock = Lock()
        self._future: Optional[Future[None]] = None
        self._ticks = 0

    @property
    def ticks(self) -> int:
        """Number of ticks that have begun."""
        with self._state_lock:
            return self._ticks

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def future(self) -> Optional[Future[None]]:
        return self._future

    def schedule(self, executor: Executor) -> Future[None]:
        if self._future is not None:
            raise RuntimeError("Timer has already been scheduled.")
        self._future = executor.submit(self._run)
        return self._future

    def cancel(self) -> None:
        """Stop future ticks. A tick already running is left to finish."""
        with self._state_lock:
            self._cancelled.set()
        if self._future is not None:
            self._future.cancel()

    def _begin_tick(self) -> bool:
        with self._state_lock:
            if self._cancelled.is_set():
                return False
            self._ticks += 1
            return True

    def _run(self) -> None:
        origin = self._clock()
        index = 0
        while True:
            delay = origin + index * self.period - self._clock()
            if delay > 0 and self._cancelled.wait(delay):
                return
            if not self._begin_tick():
                return
            try:
                self.action()
            except Exception:
                logger.exception(
                    "Periodic action failed; keeping schedule.",
                    extra={"tick": index},
                )
            index += 1
