from __future__ import annotations

import time
from typing import Callable

Clock = Callable[[], float]


class TimeBudget:
    """Wall-clock budget checked between rollouts.

    Nothing is pre-empted: a rollout that starts before the deadline runs to
    its end.
    """

    def __init__(self, budget_ms: float, *, clock: Clock = time.perf_counter) -> None:
        self.budget_ms = max(0.0, float(budget_ms))
        self._clock = clock
        self._started = clock()

    def elapsed_ms(self) -> float:
        return (self._clock() - self._started) * 1000.0

    def expired(self) -> bool:
        return self.elapsed_ms() >= self.budget_ms
