"""
logwire logging layer.

The objects the factory builds: a named channel Logger, handlers for
streams, the OS error log and a null sink, the line formatter, and the
LogRecord that processors transform.
"""

from logwire.logger.core import Logger
from logwire.logger.records import LogRecord, LogLevel, level_name, resolve_level
from logwire.logger.handlers import (
    Handler,
    Processor,
    StreamHandler,
    ErrorLogHandler,
    ErrorLogMessageType,
    NullHandler,
    BufferHandler,
)
from logwire.logger.formatters import LogFormatter, LineFormatter

__all__ = [
    "Logger",
    "LogRecord",
    "LogLevel",
    "level_name",
    "resolve_level",
    "Handler",
    "Processor",
    "StreamHandler",
    "ErrorLogHandler",
    "ErrorLogMessageType",
    "NullHandler",
    "BufferHandler",
    "LogFormatter",
    "LineFormatter",
]
