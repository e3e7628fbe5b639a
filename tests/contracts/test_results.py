# tests/contracts/test_results.py
"""Tests for RunResult and the error taxonomy."""

import pytest

from persevere.contracts import (
    AbnormalTermination,
    ConfigurationInvalid,
    MaxRetriesExceeded,
    NoFunctionSpecified,
    PolicyViolation,
    RetryTimeout,
    RunOutcome,
    RunResult,
)


class TestRunResult:
    def test_success_has_no_error(self) -> None:
        result = RunResult.success(attempts=3)

        assert result.succeeded
        assert result.outcome is RunOutcome.SUCCESS
        assert result.error is None
        assert result.failures == ()
        result.raise_for_error()

    def test_exhausted_carries_failures_in_order(self) -> None:
        failures = [ValueError("first"), ValueError("second")]

        result = RunResult.exhausted(failures)

        assert not result.succeeded
        assert result.attempts == 2
        assert result.failures == tuple(failures)
        assert isinstance(result.error, MaxRetriesExceeded)
        with pytest.raises(MaxRetriesExceeded):
            result.raise_for_error()

    def test_timed_out_discards_failures(self) -> None:
        result = RunResult.timed_out(max_delay=1.5, attempts=2)

        assert result.outcome is RunOutcome.TIMED_OUT
        assert result.failures == ()
        assert isinstance(result.error, RetryTimeout)
        assert result.error.max_delay == 1.5

    def test_configuration_invalid(self) -> None:
        result = RunResult.configuration_invalid([NoFunctionSpecified()])

        assert result.outcome is RunOutcome.CONFIGURATION_INVALID
        assert result.attempts == 0
        assert isinstance(result.error, ConfigurationInvalid)
        assert len(result.errors) == 1


class TestMaxRetriesExceeded:
    def test_preserves_attempts(self) -> None:
        last = ValueError("three")
        exc = MaxRetriesExceeded([ValueError("one"), ValueError("two"), last])

        assert exc.attempts == 3
        assert exc.last_error is last

    def test_message_lists_every_attempt(self) -> None:
        exc = MaxRetriesExceeded([ValueError("X"), RuntimeError("Y")])

        assert str(exc) == "Retries exhausted after 2 attempt(s): attempt 1 failed with X; attempt 2 failed with Y"

    def test_requires_a_failure(self) -> None:
        with pytest.raises(ValueError):
            MaxRetriesExceeded([])


class TestErrorTaxonomy:
    def test_no_function_specified_is_a_violation(self) -> None:
        error = NoFunctionSpecified()

        assert isinstance(error, PolicyViolation)
        assert error.field == "function"
        assert str(error) == "no function is specified"

    def test_abnormal_termination_chains_payload(self) -> None:
        payload = RuntimeError("boom")
        error = AbnormalTermination(payload, trace="Traceback ...")

        assert error.__cause__ is payload
        assert "RuntimeError: boom" in str(error)
        assert "Traceback ..." in str(error)

    def test_timeout_distinct_from_exhaustion(self) -> None:
        assert not issubclass(RetryTimeout, MaxRetriesExceeded)
        assert not issubclass(MaxRetriesExceeded, RetryTimeout)
