# src/persevere/contracts/errors.py
"""Exception taxonomy for retry runs.

Taxonomy:
- PolicyViolation: one configuration field breaks its invariant (fatal, zero attempts)
- ConfigurationInvalid: every PolicyViolation collected before the run
- AbnormalTermination: the operation raised; converted into an ordinary failure
- MaxRetriesExceeded: attempt budget consumed, composite of all attempt failures
- RetryTimeout: overall deadline elapsed before a success was observed

None of these are raised by the engine itself. RunResult carries them, and
callers decide whether to raise via RunResult.raise_for_error().
"""

from collections.abc import Iterable, Sequence


class PersevereError(Exception):
    """Base class for every error surfaced by a retry run."""


class PolicyViolation(PersevereError):
    """A single configuration field violates its invariant.

    Attributes:
        field: Name of the offending option (e.g. "max_attempts")
        message: Human-readable description of the violation
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(message)


class NoFunctionSpecified(PolicyViolation):
    """Raised into the violation list when no operation was bound."""

    def __init__(self) -> None:
        super().__init__("function", "no function is specified")


class InvalidOperation(PolicyViolation):
    """The bound operation does not have the zero-argument shape."""

    def __init__(self, message: str) -> None:
        super().__init__("function", message)


class ConfigurationInvalid(PersevereError):
    """One or more policy fields are invalid; the operation was never invoked."""

    def __init__(self, errors: Iterable[PolicyViolation]) -> None:
        self.errors: tuple[PolicyViolation, ...] = tuple(errors)
        details = "; ".join(str(error) for error in self.errors)
        super().__init__(f"Invalid retry configuration ({len(self.errors)} error(s)): {details}")


class AbnormalTermination(PersevereError):
    """The operation raised instead of returning.

    The original exception is kept as ``payload`` and chained as
    ``__cause__``; ``trace`` holds the bounded diagnostic text captured at
    the interception boundary.
    """

    def __init__(self, payload: BaseException, trace: str) -> None:
        self.payload = payload
        self.trace = trace
        super().__init__(f"{type(payload).__name__}: {payload}\n{trace}")
        self.__cause__ = payload


class MaxRetriesExceeded(PersevereError):
    """Raised when every attempt failed.

    Attributes:
        failures: Per-attempt failures in attempt order
        attempts: Number of attempts made
        last_error: Failure of the final attempt
    """

    def __init__(self, failures: Sequence[BaseException]) -> None:
        if not failures:
            raise ValueError("MaxRetriesExceeded requires at least one failure")
        self.failures: tuple[BaseException, ...] = tuple(failures)
        self.attempts = len(self.failures)
        self.last_error = self.failures[-1]
        details = "; ".join(
            f"attempt {number} failed with {failure}" for number, failure in enumerate(self.failures, start=1)
        )
        super().__init__(f"Retries exhausted after {self.attempts} attempt(s): {details}")


class RetryTimeout(PersevereError):
    """Overall deadline elapsed before any attempt succeeded."""

    def __init__(self, max_delay: float, attempts: int) -> None:
        self.max_delay = max_delay
        self.attempts = attempts
        super().__init__(f"timeout error: no success within {max_delay}s ({attempts} attempt(s) observed)")
