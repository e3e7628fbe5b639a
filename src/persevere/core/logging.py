# src/persevere/core/logging.py
"""Structured logging for persevere.

Every persevere module logs through get_logger(__name__), which tags events
with the emitting component ("engine.retry", "builder", ...). Nothing is
configured on import: a host application that already configures structlog
keeps its own pipeline.

configure_logging() is for hosts that want persevere to own the setup. It
routes structlog AND stdlib records through one ProcessorFormatter so a
retry_scheduled event and a host's logging.getLogger(__name__) line share the
same JSON or console format.
"""

import logging
import sys
from typing import IO, TYPE_CHECKING, Any

import structlog
from structlog.stdlib import ProcessorFormatter

if TYPE_CHECKING:
    from persevere.core.config import LoggingSettings

_PACKAGE_PREFIX = "persevere."


def _component(name: str) -> str:
    """Module path relative to the package: persevere.engine.retry -> engine.retry."""
    return name.removeprefix(_PACKAGE_PREFIX)


def _drop_formatter_bookkeeping(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """ProcessorFormatter adds _record and _from_structlog to every event."""
    event_dict.pop("_record", None)
    event_dict.pop("_from_structlog", None)
    return event_dict


def _shared_processors() -> list[Any]:
    """Processors run for both structlog events and foreign stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]


def _renderer_chain(json_output: bool) -> list[Any]:
    if json_output:
        return [
            _drop_formatter_bookkeeping,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [_drop_formatter_bookkeeping, structlog.dev.ConsoleRenderer(colors=False)]


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
    stream: IO[str] | None = None,
) -> None:
    """Configure structlog and stdlib logging.

    Replaces the root handlers with a single stream handler.

    Args:
        json_output: If True, output JSON lines. If False, human-readable.
        level: Root log level (DEBUG, INFO, WARNING, ERROR).
        stream: Destination (default: sys.stdout, resolved at call time).
    """
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Module-level loggers are created at import; they must see reconfiguration
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(ProcessorFormatter(processors=_renderer_chain(json_output), foreign_pre_chain=shared))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper()))


def configure_from_settings(settings: "LoggingSettings") -> None:
    """Apply a validated LoggingSettings section."""
    configure_logging(json_output=settings.json_output, level=settings.level)


def get_logger(name: str) -> Any:
    """Lazy structlog logger tagged with the emitting component.

    The returned proxy resolves the structlog configuration on each use, so
    it is safe to create at module import.

    Args:
        name: Module name (typically __name__)
    """
    return structlog.get_logger(name, component=_component(name))
