"""Cancellable fixed-interval tick driver."""
from __future__ import annotations

import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL_SECONDS = 1.0


class Ticker:
    """Runs a callback every interval on the calling thread until stopped.

    Each tick runs to completion before the next sleep; stop() only takes
    effect between ticks.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        *,
        interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive.")
        self._callback = callback
        self._interval = interval_seconds
        self._sleep = sleep
        self._running = False
        self._ticks = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def ticks(self) -> int:
        return self._ticks

    def stop(self) -> None:
        self._running = False

    def run(self, *, max_ticks: int | None = None) -> int:
        """Tick until stop() or max_ticks; return how many ticks ran."""
        self._running = True
        ran = 0
        logger.debug("ticker started (interval=%ss)", self._interval)
        try:
            while self._running and (max_ticks is None or ran < max_ticks):
                self._callback()
                ran += 1
                self._ticks += 1
                if not self._running or (max_ticks is not None and ran >= max_ticks):
                    break
                self._sleep(self._interval)
        finally:
            self._running = False
            logger.debug("ticker stopped after %d ticks", ran)
        return ran
