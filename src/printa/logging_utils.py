"""Structured logging helpers shared by the scanner and the CLI."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TypeAlias

LogValue: TypeAlias = "str | int | float | bool | list[LogValue] | dict[str, LogValue] | None"

# -v maps to INFO, -vv and above to DEBUG
VERBOSE_DEBUG_THRESHOLD = 2
LOG_FORMAT = "%(levelname)s: %(message)s"


def _serialise_value(value: object) -> LogValue:
    """Convert ``value`` into a JSON/log-friendly representation."""
    if isinstance(value, Enum):
        return _serialise_value(value.value)
    if isinstance(value, Path):
        return value.as_posix()
    if isinstance(value, (set, frozenset)):
        return sorted(_serialise_value(v) for v in value)  # type: ignore[type-var]
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [_serialise_value(v) for v in value]
    if isinstance(value, Mapping):
        return {str(k): _serialise_value(v) for k, v in value.items()}
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


@dataclass(frozen=True, slots=True)
class StructuredLogEvent:
    """A named log event carrying a context payload."""

    name: str
    message: str
    context: dict[str, object] = field(default_factory=dict)
    level: int = logging.INFO

    def serialised_context(self) -> dict[str, LogValue]:
        """Return the context with every value converted for logging."""
        return {str(k): _serialise_value(v) for k, v in self.context.items()}


def get_logger(name: str) -> logging.Logger:
    """Return the configured logger for ``name``."""
    return logging.getLogger(name)


def log_event(logger: logging.Logger, event: StructuredLogEvent) -> None:
    """Emit ``event`` to ``logger`` with structured metadata."""
    logger.log(event.level, event.message, extra={"event": event.name, "context": event.serialised_context()})


def resolve_log_level(*, verbose: int, log_level: str | None) -> int:
    """Map CLI verbosity flags to a :mod:`logging` level."""
    if log_level:
        return getattr(logging, log_level.upper())
    if verbose >= VERBOSE_DEBUG_THRESHOLD:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(*, verbose: int = 0, log_level: str | None = None) -> None:
    """Route all diagnostics to stderr at the requested level."""
    level = resolve_log_level(verbose=verbose, log_level=log_level)
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


__all__ = ["StructuredLogEvent", "configure_logging", "get_logger", "log_event", "resolve_log_level"]
