# src/persevere/engine/backoff.py
"""Backoff calculation: the delay inserted between consecutive attempts.

Precedence:
1. wait_fixed > 0 wins unconditionally, even when random bounds are also set
2. wait_random_max > wait_random_min gives a uniform draw in [min, max)
3. otherwise no delay

The engine consumes the tenacity strategy from backoff_strategy();
compute_delay() evaluates the same strategy once, outside a retry loop.
"""

from tenacity import RetryCallState, wait_fixed, wait_none, wait_random
from tenacity.wait import wait_base

from persevere.contracts.config import RetryPolicy


def backoff_strategy(policy: RetryPolicy) -> wait_base:
    """Build the tenacity wait strategy for a policy.

    Random draws come from the process-wide ``random`` source, fresh on
    every call. Not cryptographic.
    """
    if policy.wait_fixed is not None and policy.wait_fixed > 0:
        return wait_fixed(policy.wait_fixed)

    minimum = policy.wait_random_min
    maximum = policy.wait_random_max
    if minimum is not None and maximum is not None and maximum > minimum:
        return wait_random(min=minimum, max=maximum)

    return wait_none()


def compute_delay(policy: RetryPolicy) -> float:
    """Return the delay in seconds before the next attempt.

    Args:
        policy: Validated retry policy

    Returns:
        Delay in seconds (0.0 when no wait is configured)
    """
    # Fixed/random/none strategies ignore call state
    state = RetryCallState(retry_object=None, fn=None, args=(), kwargs={})  # type: ignore[arg-type]
    return float(backoff_strategy(policy)(state))
