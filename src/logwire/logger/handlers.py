"""
Log handlers (output destinations).

One logger, many handlers. Each handler accepts records at or above its
minimum level, runs its own processors, formats the record and writes it.
``handle()`` returns True when the record must not bubble to the next
handler in the logger's stack.

Built-in sinks: stream (file path or stdout/stderr), the OS error log
(syslog or process stderr) and a null sink. BufferHandler keeps the last
N records in memory for diagnostics and tests.
"""

import fcntl
import os
import sys
import syslog
import threading
from abc import ABC, abstractmethod
from collections import deque
from enum import Enum
from pathlib import Path
from typing import Callable, TextIO

from logwire.logger.records import LogRecord, LogLevel
from logwire.logger.formatters import LogFormatter, LineFormatter


Processor = Callable[[LogRecord], LogRecord]


class Handler(ABC):
    """Base handler. Level gate, bubble flag, processor stack, formatter."""

    def __init__(
        self,
        level: int = LogLevel.DEBUG,
        bubble: bool = True,
        formatter: LogFormatter | None = None,
    ):
        self.level = int(level)
        self.bubble = bubble
        self._formatter = formatter
        self._processors: list[Processor] = []

    # ── Formatter ─────────────────────────────────────────────────

    @property
    def formatter(self) -> LogFormatter:
        if self._formatter is None:
            self._formatter = self._default_formatter()
        return self._formatter

    @formatter.setter
    def formatter(self, value: LogFormatter) -> None:
        self._formatter = value

    def _default_formatter(self) -> LogFormatter:
        """Subclass-specific default."""
        return LineFormatter()

    # ── Processors ────────────────────────────────────────────────

    def push_processor(self, processor: Processor) -> "Handler":
        """Attach a processor. Processors run in the order they were pushed."""
        if not callable(processor):
            raise TypeError(
                f"Processor must be callable, got {type(processor).__name__}"
            )
        self._processors.append(processor)
        return self

    def pop_processor(self) -> Processor:
        """Detach and return the most recently pushed processor."""
        if not self._processors:
            raise LookupError("You tried to pop from an empty processor stack.")
        return self._processors.pop()

    @property
    def processors(self) -> tuple[Processor, ...]:
        return tuple(self._processors)

    def process_record(self, record: LogRecord) -> LogRecord:
        for processor in self._processors:
            record = processor(record)
        return record

    # ── Handling ──────────────────────────────────────────────────

    def is_handling(self, record: LogRecord) -> bool:
        return record.level >= self.level

    def handle(self, record: LogRecord) -> bool:
        """
        Process, format and write a record.

        Returns True if the record was handled and must not bubble further.
        """
        if not self.is_handling(record):
            return False
        record = self.process_record(record)
        self.write(record, self.formatter.format(record))
        return not self.bubble

    @abstractmethod
    def write(self, record: LogRecord, formatted: str) -> None:
        """Write a formatted record. Called only after the level gate passes."""
        ...

    def close(self) -> None:
        """Cleanup. Override if the handler holds resources."""
        pass


class StreamHandler(Handler):
    """
    Appends formatted records to a stream.

    ``stream`` is a file path, a ``file://`` URI, or one of the aliases
    ``stdout``/``stderr`` (``-`` means stdout). Files are opened lazily on
    first write.
    """

    STREAM_ALIASES = {
        "stdout": "stdout",
        "stderr": "stderr",
        "-": "stdout",
    }

    def __init__(
        self,
        stream: str,
        level: int = LogLevel.DEBUG,
        bubble: bool = True,
        file_permission: int | None = None,
        use_locking: bool = False,
    ):
        super().__init__(level, bubble)
        self.stream = stream
        self.file_permission = file_permission
        self.use_locking = use_locking
        self._file: TextIO | None = None
        self._lock = threading.Lock()

    @property
    def url(self) -> str | None:
        """Resolved file path, or None when writing to stdout/stderr."""
        if self.stream in self.STREAM_ALIASES:
            return None
        if self.stream.startswith("file://"):
            return self.stream[len("file://"):]
        return self.stream

    def _target(self) -> TextIO:
        alias = self.STREAM_ALIASES.get(self.stream)
        if alias == "stdout":
            return sys.stdout
        if alias == "stderr":
            return sys.stderr
        if self._file is None:
            self._file = self._open(Path(self.url))
        return self._file

    def _open(self, path: Path) -> TextIO:
        path.parent.mkdir(parents=True, exist_ok=True)
        created = not path.exists()
        handle = open(path, "a", encoding="utf-8")
        if created and self.file_permission is not None:
            try:
                os.chmod(path, self.file_permission)
            except OSError:
                handle.close()
                raise
        return handle

    def write(self, record: LogRecord, formatted: str) -> None:
        with self._lock:
            target = self._target()
            if self.use_locking and self._file is not None:
                fcntl.flock(target.fileno(), fcntl.LOCK_EX)
                try:
                    target.write(formatted)
                    target.flush()
                finally:
                    fcntl.flock(target.fileno(), fcntl.LOCK_UN)
            else:
                target.write(formatted)
                target.flush()

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None


class ErrorLogMessageType(str, Enum):
    """Where an ErrorLogHandler sends its lines."""
    OPERATING_SYSTEM = "operating_system"  # syslog
    STDERR = "stderr"                      # the process's own stderr

    @classmethod
    def from_value(cls, value: "str | ErrorLogMessageType") -> "ErrorLogMessageType":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.upper()]
            except KeyError:
                raise ValueError(
                    f"Unknown message type '{value}'. "
                    f"Valid types: {', '.join(m.name for m in cls)}"
                )
        return cls(value)


# Handler level → syslog priority
SYSLOG_PRIORITIES: dict[int, int] = {
    LogLevel.DEBUG: syslog.LOG_DEBUG,
    LogLevel.INFO: syslog.LOG_INFO,
    LogLevel.NOTICE: syslog.LOG_NOTICE,
    LogLevel.WARNING: syslog.LOG_WARNING,
    LogLevel.ERROR: syslog.LOG_ERR,
    LogLevel.CRITICAL: syslog.LOG_CRIT,
    LogLevel.ALERT: syslog.LOG_ALERT,
    LogLevel.EMERGENCY: syslog.LOG_EMERG,
}


def syslog_priority(level: int) -> int:
    """Priority for a level, falling back to the nearest lower standard level."""
    for threshold in sorted(SYSLOG_PRIORITIES, reverse=True):
        if level >= threshold:
            return SYSLOG_PRIORITIES[threshold]
    return syslog.LOG_DEBUG


class ErrorLogHandler(Handler):
    """
    Writes records to the operating system's error log.

    OPERATING_SYSTEM sends each line to syslog at a priority matching the
    record level; STDERR writes to the process's stderr. With ``expand_newlines`` a
    multi-line record becomes one log call per line.
    """

    def __init__(
        self,
        message_type: str | ErrorLogMessageType = ErrorLogMessageType.OPERATING_SYSTEM,
        level: int = LogLevel.DEBUG,
        bubble: bool = True,
        expand_newlines: bool = False,
    ):
        super().__init__(level, bubble)
        self.message_type = ErrorLogMessageType.from_value(message_type)
        self.expand_newlines = expand_newlines

    def _default_formatter(self) -> LogFormatter:
        return LineFormatter("{channel}.{level_name}: {message} {context} {extra}")

    def write(self, record: LogRecord, formatted: str) -> None:
        text = formatted.rstrip("\n")
        lines = text.splitlines() if self.expand_newlines else [text]
        for line in lines:
            if self.message_type is ErrorLogMessageType.OPERATING_SYSTEM:
                syslog.syslog(syslog_priority(record.level), line)
            else:
                print(line, file=sys.stderr, flush=True)


class NullHandler(Handler):
    """
    Runs its processors on every record at or above its level, then
    discards the record.

    Handled records never bubble, so a NullHandler placed first in a stack
    silences the handlers after it.
    """

    def __init__(self, level: int = LogLevel.DEBUG):
        super().__init__(level, bubble=False)

    def handle(self, record: LogRecord) -> bool:
        if not self.is_handling(record):
            return False
        self.process_record(record)
        return True

    def write(self, record: LogRecord, formatted: str) -> None:
        pass


class BufferHandler(Handler):
    """
    Ring buffer of the last N processed records. Does not grow unbounded.
    """

    def __init__(
        self,
        level: int = LogLevel.DEBUG,
        bubble: bool = True,
        capacity: int = 10000,
    ):
        super().__init__(level, bubble)
        self._buffer: deque[LogRecord] = deque(maxlen=capacity)
        self._lines: deque[str] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def write(self, record: LogRecord, formatted: str) -> None:
        with self._lock:
            self._buffer.append(record)
            self._lines.append(formatted)

    @property
    def records(self) -> list[LogRecord]:
        with self._lock:
            return list(self._buffer)

    @property
    def lines(self) -> list[str]:
        with self._lock:
            return list(self._lines)

    def has_message(self, message: str, level: int | None = None) -> bool:
        return any(
            r.message == message and (level is None or r.level == level)
            for r in self.records
        )

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()
            self._lines.clear()

    @property
    def count(self) -> int:
        return len(self._buffer)
