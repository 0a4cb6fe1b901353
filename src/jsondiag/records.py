"""
Log records and level definitions.

Levels form a total order used for filtering:
    OFF < VERBOSE < DEBUG < INFO < WARN < ERROR

Numeric values sit on the stdlib ``logging`` scale where a counterpart
exists (DEBUG=10, INFO=20, WARN=30, ERROR=40).
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any


class LogLevel(IntEnum):
    """Severity domain. OFF is the never-emit sentinel."""
    OFF = 0
    VERBOSE = 5
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        """Resolve level from string name, case-insensitive."""
        name_upper = name.strip().upper()
        if name_upper == "WARNING":
            return cls.WARN
        try:
            return cls[name_upper]
        except KeyError:
            raise ValueError(
                f"Unknown log level '{name}'. "
                f"Valid levels: {', '.join(m.name for m in cls)}"
            )

    @classmethod
    def from_value(cls, value: "int | str | LogLevel") -> "LogLevel":
        """Resolve level from a member, int or string."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_name(value)
        if isinstance(value, int) and not isinstance(value, bool):
            for member in cls:
                if member.value == value:
                    return member
            raise ValueError(
                f"No level with value {value}. "
                f"Valid values: {', '.join(f'{m.name}={m.value}' for m in cls)}"
            )
        raise TypeError(f"Expected int or str, got {type(value).__name__}")


def rank(level: LogLevel) -> int:
    """Position of a level in the total order."""
    return int(level)


def is_at_least(level: LogLevel, minimum: LogLevel | None) -> bool:
    """
    True if ``level`` reaches the ``minimum`` floor.

    An unset floor lets everything through. A floor of OFF is the lowest
    rank, so it lets everything through as well; rejecting a level that
    *is* OFF is the gate's job, not the ordering's.
    """
    if minimum is None:
        return True
    return rank(level) >= rank(minimum)


def should_emit(level: LogLevel, min_log_level: LogLevel | None) -> bool:
    """The gate: OFF never emits, everything else is checked against the floor."""
    return level != LogLevel.OFF and is_at_least(level, min_log_level)


def utc_timestamp() -> str:
    """Current instant as ISO-8601 with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class LogEntryInput:
    """
    One candidate entry: the message, its raw arguments and the level it
    will be gated and emitted at.
    """
    message: Any
    log_arguments: tuple[Any, ...] = field(default_factory=tuple)
    level: LogLevel = LogLevel.INFO


@dataclass(frozen=True)
class LogRecord:
    """
    Immutable output record. Built only after the gate lets a call through.
    """
    logger: str
    service_name: str
    level: LogLevel
    message: str
    timestamp: str

    def to_dict(self) -> dict[str, Any]:
        """Wire mapping, in wire key order."""
        return {
            "level": self.level.name,
            "logger": self.logger,
            "message": self.message,
            "serviceName": self.service_name,
            "timestamp": self.timestamp,
        }
