# loadchart/util/deadline.py
from __future__ import annotations

import time
from typing import Callable, Optional

from ..errors import DeadlineExceeded


class Deadline:
    """Overall time budget for one run, measured on the monotonic clock."""

    def __init__(self, seconds: Optional[float], clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._t0 = clock()
        self._seconds = seconds

    def remaining(self) -> Optional[float]:
        if self._seconds is None:
            return None
        return self._seconds - (self._clock() - self._t0)

    def elapsed_ms(self) -> int:
        return int((self._clock() - self._t0) * 1000)

    def check(self, what: str) -> None:
        left = self.remaining()
        if left is not None and left <= 0:
            raise DeadlineExceeded(f"Run deadline of {self._seconds:.1f}s exceeded before {what}.")

    def timeout_for(self, per_request_s: float, what: str) -> float:
        """Per-request timeout capped by the time left; raises once the budget is spent."""
        self.check(what)
        left = self.remaining()
        if left is None:
            return float(per_request_s)
        return max(0.001, min(float(per_request_s), left))
