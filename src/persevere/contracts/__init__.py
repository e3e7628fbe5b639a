"""Shared contracts for the builder/engine boundary.

This package is a LEAF MODULE with no outbound dependencies to core/engine.
Settings classes (RetrySettings, PersevereSettings) are NOT re-exported
here - import them from persevere.core.config.

Import patterns:
    from persevere.contracts import RetryPolicy, RunResult, RunOutcome
    from persevere.core.config import RetrySettings
"""

from persevere.contracts.config import POLICY_DEFAULTS, RetryPolicy
from persevere.contracts.enums import RunOutcome
from persevere.contracts.errors import (
    AbnormalTermination,
    ConfigurationInvalid,
    InvalidOperation,
    MaxRetriesExceeded,
    NoFunctionSpecified,
    PersevereError,
    PolicyViolation,
    RetryTimeout,
)
from persevere.contracts.results import RunResult

__all__ = [
    "POLICY_DEFAULTS",
    "AbnormalTermination",
    "ConfigurationInvalid",
    "InvalidOperation",
    "MaxRetriesExceeded",
    "NoFunctionSpecified",
    "PersevereError",
    "PolicyViolation",
    "RetryPolicy",
    "RetryTimeout",
    "RunOutcome",
    "RunResult",
]
