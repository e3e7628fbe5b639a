"""
Persevere: retry/backoff engine for fallible zero-argument operations.

Re-invokes an operation under a policy of attempt limits, fixed or
randomized backoff, and an optional overall deadline, then reports the
first success or an aggregated failure report.
"""

from persevere.builder import Retryable
from persevere.contracts import RetryPolicy, RunOutcome, RunResult

__version__ = "0.1.0"

__all__ = [
    "RetryPolicy",
    "Retryable",
    "RunOutcome",
    "RunResult",
    "__version__",
]
