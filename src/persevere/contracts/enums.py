"""Status codes reported across the engine/builder boundary."""

from enum import StrEnum


class RunOutcome(StrEnum):
    """Terminal outcome of a retry run.

    Exactly one outcome is produced per run. TIMED_OUT and EXHAUSTED are
    deliberately distinct: a timeout discards the partial failure history,
    exhaustion reports every attempt.
    """

    SUCCESS = "success"
    EXHAUSTED = "exhausted"
    TIMED_OUT = "timed_out"
    CONFIGURATION_INVALID = "configuration_invalid"
