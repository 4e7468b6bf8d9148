import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float:
        ...


class MonotonicClock:
    """Production clock using time.monotonic()."""

    def now(self) -> float:
        return time.monotonic()


class ManualClock:
    """Deterministic clock for tests, moved forward explicitly."""

    def __init__(self, value: float = 0.0) -> None:
        self.value = value

    def now(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError("ManualClock cannot move backwards")
        self.value += seconds
