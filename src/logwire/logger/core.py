"""
Logger: a named channel with an ordered handler stack and processors.

A log call builds a record only when at least one handler accepts its
level; otherwise it returns immediately. Logger processors run first, in
order, then handlers receive the record in stack order until one of them
stops propagation (bubble=False).
"""

import threading
from datetime import datetime, tzinfo
from typing import Any, Iterable
from zoneinfo import ZoneInfo

from logwire.logger.records import LogRecord, LogLevel, level_name, resolve_level
from logwire.logger.handlers import Handler, Processor


class Logger:
    """
    Usage:
        log = Logger("app", [StreamHandler("stderr", LogLevel.INFO)])
        log.info("Security matched", symbol="AAPL")
        log.debug("Z-score computed", zscore=2.1)
    """

    # Re-export levels for convenience: Logger.DEBUG, etc.
    DEBUG = LogLevel.DEBUG
    INFO = LogLevel.INFO
    NOTICE = LogLevel.NOTICE
    WARNING = LogLevel.WARNING
    ERROR = LogLevel.ERROR
    CRITICAL = LogLevel.CRITICAL
    ALERT = LogLevel.ALERT
    EMERGENCY = LogLevel.EMERGENCY

    def __init__(
        self,
        name: str,
        handlers: Iterable[Handler] = (),
        processors: Iterable[Processor] = (),
        timezone: str | tzinfo | None = None,
    ) -> None:
        self.name = name
        self._handlers: list[Handler] = list(handlers)
        self._processors: list[Processor] = list(processors)
        self._timezone = _resolve_timezone(timezone)
        self._emit_lock = threading.Lock()

    # ── Handler / Processor Management ────────────────────────────

    @property
    def handlers(self) -> tuple[Handler, ...]:
        return tuple(self._handlers)

    @property
    def processors(self) -> tuple[Processor, ...]:
        return tuple(self._processors)

    def push_handler(self, handler: Handler) -> "Logger":
        """Append a handler to the end of the stack."""
        self._handlers.append(handler)
        return self

    def pop_handler(self) -> Handler:
        if not self._handlers:
            raise LookupError("You tried to pop from an empty handler stack.")
        return self._handlers.pop()

    def push_processor(self, processor: Processor) -> "Logger":
        if not callable(processor):
            raise TypeError(
                f"Processor must be callable, got {type(processor).__name__}"
            )
        self._processors.append(processor)
        return self

    @property
    def timezone(self) -> tzinfo | None:
        """Configured timezone; None means the system's local zone."""
        return self._timezone

    # ── Core Logging ──────────────────────────────────────────────

    def log(self, level: int | str, message: str, **context: Any) -> bool:
        """
        Core logging method. Returns True if any handler accepted the record.
        """
        level = resolve_level(level)

        # No interested handler → nothing to do
        if not self.is_handling(level):
            return False

        record = LogRecord.create(level, message, self.name, self._timezone)
        record = record.with_context(**context)
        for processor in self._processors:
            record = processor(record)

        with self._emit_lock:
            for handler in self._handlers:
                if handler.handle(record):
                    break
        return True

    def is_handling(self, level: int) -> bool:
        probe = LogRecord(
            datetime=datetime.min,
            channel=self.name,
            level=level,
            level_name=level_name(level),
            message="",
        )
        return any(handler.is_handling(probe) for handler in self._handlers)

    # ── Convenience Methods ───────────────────────────────────────

    def debug(self, message: str, **ctx: Any) -> bool:
        return self.log(LogLevel.DEBUG, message, **ctx)

    def info(self, message: str, **ctx: Any) -> bool:
        return self.log(LogLevel.INFO, message, **ctx)

    def notice(self, message: str, **ctx: Any) -> bool:
        return self.log(LogLevel.NOTICE, message, **ctx)

    def warning(self, message: str, **ctx: Any) -> bool:
        return self.log(LogLevel.WARNING, message, **ctx)

    def error(self, message: str, **ctx: Any) -> bool:
        return self.log(LogLevel.ERROR, message, **ctx)

    def critical(self, message: str, **ctx: Any) -> bool:
        return self.log(LogLevel.CRITICAL, message, **ctx)

    def alert(self, message: str, **ctx: Any) -> bool:
        return self.log(LogLevel.ALERT, message, **ctx)

    def emergency(self, message: str, **ctx: Any) -> bool:
        return self.log(LogLevel.EMERGENCY, message, **ctx)

    # ── Cleanup ───────────────────────────────────────────────────

    def close(self) -> None:
        """Close all handlers. Call during shutdown."""
        for handler in self._handlers:
            handler.close()

    def __repr__(self) -> str:
        return f"Logger(name={self.name!r}, handlers={len(self._handlers)})"


def _resolve_timezone(value: str | tzinfo | None) -> tzinfo | None:
    """IANA name or tzinfo → tzinfo. None keeps the system's local zone."""
    if value is None or isinstance(value, tzinfo):
        return value
    if isinstance(value, str):
        return ZoneInfo(value)
    raise TypeError(f"Expected str or tzinfo for timezone, got {type(value).__name__}")
