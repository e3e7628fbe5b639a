# tests/engine/test_backoff.py
"""Tests for backoff calculation."""

from tenacity import wait_fixed, wait_none, wait_random

from persevere.contracts import RetryPolicy
from persevere.engine.backoff import backoff_strategy, compute_delay


class TestBackoffStrategy:
    def test_fixed_wait(self) -> None:
        strategy = backoff_strategy(RetryPolicy(wait_fixed=0.3))

        assert isinstance(strategy, wait_fixed)

    def test_random_wait(self) -> None:
        strategy = backoff_strategy(RetryPolicy(wait_random_min=0.1, wait_random_max=0.2))

        assert isinstance(strategy, wait_random)

    def test_no_wait_configured(self) -> None:
        strategy = backoff_strategy(RetryPolicy())

        assert isinstance(strategy, wait_none)


class TestComputeDelay:
    def test_fixed_delay_returned_unchanged(self) -> None:
        assert compute_delay(RetryPolicy(wait_fixed=1.5)) == 1.5

    def test_fixed_wins_over_random_bounds(self) -> None:
        policy = RetryPolicy(wait_fixed=0.05, wait_random_min=10.0, wait_random_max=20.0)

        delays = {compute_delay(policy) for _ in range(50)}

        assert delays == {0.05}

    def test_random_delay_within_bounds(self) -> None:
        policy = RetryPolicy(wait_random_min=1.0, wait_random_max=2.0)

        for _ in range(200):
            delay = compute_delay(policy)
            assert 1.0 <= delay < 2.0

    def test_random_delay_drawn_independently(self) -> None:
        policy = RetryPolicy(wait_random_min=0.0, wait_random_max=1000.0)

        delays = {compute_delay(policy) for _ in range(20)}

        assert len(delays) > 1

    def test_zero_when_nothing_configured(self) -> None:
        assert compute_delay(RetryPolicy(max_attempts=3)) == 0.0
