"""Ambient infrastructure: settings loading and structured logging."""

from persevere.core.config import (
    DiagnosticsSettings,
    LoggingSettings,
    PersevereSettings,
    RetrySettings,
    load_settings,
)
from persevere.core.logging import configure_from_settings, configure_logging, get_logger

__all__ = [
    "DiagnosticsSettings",
    "LoggingSettings",
    "PersevereSettings",
    "RetrySettings",
    "configure_from_settings",
    "configure_logging",
    "get_logger",
    "load_settings",
]
