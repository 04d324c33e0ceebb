"""
Minimum-interval gate between two scrapes.
"""
import math
import time
from typing import Callable, Optional


class RunGate:
    """Refuses a new run until min_interval_ms has passed since the last one."""

    def __init__(self, min_interval_ms: int, clock: Callable[[], float] = time.monotonic) -> None:
        self.min_interval_ms = min_interval_ms
        self._clock = clock
        self._last_run: Optional[float] = None

    def remaining_ms(self) -> int:
        if self._last_run is None:
            return 0
        elapsed_ms = (self._clock() - self._last_run) * 1000
        return max(0, math.ceil(self.min_interval_ms - elapsed_ms))

    def mark(self) -> None:
        self._last_run = self._clock()
