# src/persevere/contracts/results.py
"""RunResult: the single value returned by every retry run."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from persevere.contracts.enums import RunOutcome
from persevere.contracts.errors import (
    ConfigurationInvalid,
    MaxRetriesExceeded,
    PersevereError,
    PolicyViolation,
    RetryTimeout,
)


@dataclass(frozen=True, slots=True)
class RunResult:
    """Outcome of one retry run.

    Use the factory classmethods rather than the constructor; they keep
    ``outcome`` and ``error`` consistent.

    Attributes:
        outcome: Terminal RunOutcome
        attempts: Invocations observed by the caller (0 when configuration was invalid)
        failures: Per-attempt failures in attempt order. Empty on success (prior
            failures are discarded once an attempt succeeds) and on timeout.
        errors: Validation violations, populated only for CONFIGURATION_INVALID
        elapsed: Wall-clock seconds spent in the run
        error: Terminal error, None on success
    """

    outcome: RunOutcome
    attempts: int = 0
    failures: tuple[BaseException, ...] = ()
    errors: tuple[PolicyViolation, ...] = ()
    elapsed: float = 0.0
    error: PersevereError | None = field(default=None, compare=False)

    @classmethod
    def success(cls, attempts: int, elapsed: float = 0.0) -> "RunResult":
        return cls(outcome=RunOutcome.SUCCESS, attempts=attempts, elapsed=elapsed)

    @classmethod
    def exhausted(cls, failures: Sequence[BaseException], elapsed: float = 0.0) -> "RunResult":
        return cls(
            outcome=RunOutcome.EXHAUSTED,
            attempts=len(failures),
            failures=tuple(failures),
            elapsed=elapsed,
            error=MaxRetriesExceeded(failures),
        )

    @classmethod
    def timed_out(cls, max_delay: float, attempts: int, elapsed: float = 0.0) -> "RunResult":
        return cls(
            outcome=RunOutcome.TIMED_OUT,
            attempts=attempts,
            elapsed=elapsed,
            error=RetryTimeout(max_delay, attempts),
        )

    @classmethod
    def configuration_invalid(cls, errors: Iterable[PolicyViolation]) -> "RunResult":
        violations = tuple(errors)
        return cls(
            outcome=RunOutcome.CONFIGURATION_INVALID,
            errors=violations,
            error=ConfigurationInvalid(violations),
        )

    @property
    def succeeded(self) -> bool:
        return self.outcome is RunOutcome.SUCCESS

    def raise_for_error(self) -> None:
        """Raise the terminal error if the run did not succeed.

        Raises:
            ConfigurationInvalid: Configuration was rejected before any attempt
            MaxRetriesExceeded: Every attempt failed
            RetryTimeout: Deadline elapsed first
        """
        if self.error is not None:
            raise self.error
