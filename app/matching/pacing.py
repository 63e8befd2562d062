from __future__ import annotations

import threading
import time
from typing import Callable


class PacingGate:
    """Minimum-interval gate in front of the external scorer.

    ``wait()`` blocks until the cooldown set by the previous ``release()`` has
    elapsed. One gate serves one match run, so at most one scoring step is in
    flight and consecutive steps are spaced by at least the released cooldown.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._ready_at: float | None = None

    def wait(self) -> float:
        """Block until the next call may start; returns the seconds slept."""
        with self._lock:
            if self._ready_at is None:
                return 0.0
            remaining = self._ready_at - self._clock()
            if remaining <= 0:
                return 0.0
            self._sleep(remaining)
            return remaining

    def release(self, cooldown_s: float) -> None:
        with self._lock:
            self._ready_at = self._clock() + max(0.0, cooldown_s)
