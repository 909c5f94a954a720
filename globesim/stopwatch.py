"""Simple wall-clock stopwatch with a chosen unit."""

from __future__ import annotations

import time
from enum import Enum


class TimeUnit(Enum):
    """Units a stopwatch reports in, with their length in nanoseconds."""

    NANOSECONDS = ("nanoseconds", 1)
    MICROSECONDS = ("microseconds", 1_000)
    MILLISECONDS = ("milliseconds", 1_000_000)
    SECONDS = ("seconds", 1_000_000_000)
    MINUTES = ("minutes", 60_000_000_000)
    HOURS = ("hours", 3_600_000_000_000)

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def nanoseconds(self) -> int:
        return self.value[1]


class StopwatchError(RuntimeError):
    """Raised when a stopwatch is stopped without having been started."""


class Stopwatch:
    """Measures elapsed time, truncated to whole units."""

    def __init__(self, unit: TimeUnit = TimeUnit.MILLISECONDS) -> None:
        self.unit = unit
        self._start_ns = 0
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        self._start_ns = time.perf_counter_ns()
        self._running = True

    def stop(self) -> int:
        """Stop and return the elapsed time in whole units."""
        if not self._running:
            raise StopwatchError("Stopwatch has not been started!")
        elapsed = time.perf_counter_ns() - self._start_ns
        self._running = False
        return elapsed // self.unit.nanoseconds

    def report(self) -> str:
        """Stop, print and return the elapsed-time line."""
        line = f"Elapsed time: {self.stop()} {self.unit.label}"
        print(line)
        return line