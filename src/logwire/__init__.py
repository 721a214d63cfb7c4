"""
logwire: configuration-driven wiring for loggers, handlers, processors
and formatters.
"""

__version__ = "0.1.0"

from logwire.errors import (
    ArtifactKind,
    InvalidConfigError,
    LogwireError,
    NotRegisteredError,
    UnsupportedTypeError,
)
from logwire.factory import FormatterType, HandlerType, LoggerFactory
from logwire.config import FactoryConfig
from logwire.logger import (
    BufferHandler,
    ErrorLogHandler,
    ErrorLogMessageType,
    Handler,
    LineFormatter,
    LogFormatter,
    LogLevel,
    LogRecord,
    Logger,
    NullHandler,
    StreamHandler,
)

__all__ = [
    "LoggerFactory",
    "HandlerType",
    "FormatterType",
    "FactoryConfig",
    "ArtifactKind",
    "LogwireError",
    "NotRegisteredError",
    "InvalidConfigError",
    "UnsupportedTypeError",
    "Logger",
    "LogRecord",
    "LogLevel",
    "Handler",
    "StreamHandler",
    "ErrorLogHandler",
    "ErrorLogMessageType",
    "NullHandler",
    "BufferHandler",
    "LogFormatter",
    "LineFormatter",
]
