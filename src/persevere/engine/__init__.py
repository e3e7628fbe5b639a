# src/persevere/engine/__init__.py
"""Retry execution engine.

This package provides:
- RetryEngine: attempt orchestration (sequential or raced against a deadline)
- wrap_operation: converts raised exceptions into failure values
- backoff_strategy / compute_delay: delay between attempts
- Clock: time abstraction for deterministic deadline tests

Example:
    from persevere.contracts import RetryPolicy
    from persevere.engine import RetryEngine

    policy = RetryPolicy(max_attempts=5, max_delay=10.0, wait_random_min=0.1, wait_random_max=0.5)
    result = RetryEngine().call(policy, fetch_status)
"""

from persevere.engine.backoff import backoff_strategy, compute_delay
from persevere.engine.clock import DEFAULT_CLOCK, Clock, MockClock, SystemClock
from persevere.engine.recovery import Operation, SafeOperation, capture_trace, wrap_operation
from persevere.engine.retry import PRODUCER_THREAD_NAME, RetryEngine

__all__ = [
    "DEFAULT_CLOCK",
    "PRODUCER_THREAD_NAME",
    "Clock",
    "MockClock",
    "Operation",
    "RetryEngine",
    "SafeOperation",
    "SystemClock",
    "backoff_strategy",
    "capture_trace",
    "compute_delay",
    "wrap_operation",
]
