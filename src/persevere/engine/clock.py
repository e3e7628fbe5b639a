# src/persevere/engine/clock.py
"""Clock abstraction for testable deadline logic.

The bounded-time retry mode measures its overall deadline through a Clock,
so tests can drive the deadline deterministically.

Production code uses SystemClock (the default).
Tests inject MockClock to control time advancement.
"""

from __future__ import annotations

import threading
import time
from typing import Protocol


class Clock(Protocol):
    """Abstract clock for deadline calculations.

    Implementations:
    - SystemClock: Uses time.monotonic() (production)
    - MockClock: Returns controllable times (testing)
    """

    def monotonic(self) -> float:
        """Return monotonic time in seconds.

        Must never go backwards. Corresponds to time.monotonic().
        """
        ...


class SystemClock:
    """Production clock using time.monotonic()."""

    def monotonic(self) -> float:
        """Return system monotonic time."""
        return time.monotonic()


class MockClock:
    """Controllable clock for deterministic testing.

    Safe to advance from the producer thread while the coordinator reads it.

    Example:
        clock = MockClock(start=0.0)
        engine = RetryEngine(clock=clock)

        def slow_failure() -> Exception:
            clock.advance(2.0)  # each attempt "takes" two seconds
            return RuntimeError("still down")

        result = engine.run(RetryPolicy(max_attempts=5, max_delay=1.0), slow_failure)
        assert result.outcome is RunOutcome.TIMED_OUT
    """

    def __init__(self, start: float = 0.0) -> None:
        """Initialize mock clock at a given time.

        Args:
            start: Initial monotonic time value (default 0.0).
        """
        self._current = start
        self._lock = threading.Lock()

    def monotonic(self) -> float:
        """Return current mock time."""
        with self._lock:
            return self._current

    def advance(self, seconds: float) -> None:
        """Advance mock time by specified seconds.

        Raises:
            ValueError: If seconds is negative.
        """
        if seconds < 0:
            raise ValueError(f"Cannot advance time by negative amount: {seconds}")
        with self._lock:
            self._current += seconds


# Default clock for production use
DEFAULT_CLOCK: Clock = SystemClock()
