"""
Log records and level definitions.

Levels follow the RFC 5424 severity ordering with widely spaced numeric
values, so a handler configured with ``level: 200`` accepts INFO and above.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, tzinfo
from enum import IntEnum
from typing import Any


class LogLevel(IntEnum):
    """Standard log levels, RFC 5424 ordered."""
    DEBUG = 100
    INFO = 200
    NOTICE = 250
    WARNING = 300
    ERROR = 400
    CRITICAL = 500
    ALERT = 550
    EMERGENCY = 600

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        """Resolve level from string name, case-insensitive."""
        name_upper = name.upper()
        if name_upper == "WARN":
            name_upper = "WARNING"
        try:
            return cls[name_upper]
        except KeyError:
            raise ValueError(
                f"Unknown log level '{name}'. "
                f"Valid levels: {', '.join(m.name for m in cls)}"
            )


# Map for display: level int → name string
LEVEL_NAMES: dict[int, str] = {member.value: member.name for member in LogLevel}


def level_name(level: int) -> str:
    """Get display name for a level value. Falls back to numeric string."""
    return LEVEL_NAMES.get(level, str(level))


def resolve_level(value: int | str) -> int:
    """Convert level name or int to numeric level. Arbitrary ints are kept."""
    if isinstance(value, bool):
        raise TypeError("Expected int or str for level, got bool")
    if isinstance(value, int):
        return int(value)
    if isinstance(value, str):
        if value.strip().isdigit():
            return int(value)
        return LogLevel.from_name(value).value
    raise TypeError(f"Expected int or str for level, got {type(value).__name__}")


@dataclass(frozen=True)
class LogRecord:
    """
    Immutable log record. Created by Logger.log(), transformed by processors,
    rendered by formatters and written by handlers.

    ``context`` carries the caller's keyword arguments; ``extra`` is where
    processors add their data.
    """
    datetime: datetime
    channel: str
    level: int
    level_name: str
    message: str
    context: dict[str, Any] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        level: int,
        message: str,
        channel: str = "app",
        tz: tzinfo | None = None,
        **context: Any,
    ) -> "LogRecord":
        """Factory method with auto-timestamp and level name resolution."""
        now = datetime.now(tz) if tz is not None else datetime.now().astimezone()
        return cls(
            datetime=now,
            channel=channel,
            level=level,
            level_name=level_name(level),
            message=message,
            context=context,
        )

    def with_extra(self, **extra: Any) -> "LogRecord":
        """Return a copy with ``extra`` merged in. Processors use this."""
        return replace(self, extra={**self.extra, **extra})

    def with_context(self, **context: Any) -> "LogRecord":
        """Return a copy with ``context`` merged in."""
        return replace(self, context={**self.context, **context})
