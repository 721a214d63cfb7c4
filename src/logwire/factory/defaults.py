"""
Built-in construction routines.

Maps each recognized type tag to the function that validates its options
and builds the artifact. LoggerFactory copies these tables per instance,
so register_*_type() on one factory never affects another.
"""

from enum import Enum
from typing import Any, Callable, Mapping

from logwire.config import (
    ErrorLogHandlerConfig,
    LineFormatterConfig,
    NullHandlerConfig,
    StreamHandlerConfig,
    validate_options,
)
from logwire.logger.formatters import LineFormatter, LogFormatter
from logwire.logger.handlers import (
    ErrorLogHandler,
    Handler,
    NullHandler,
    Processor,
    StreamHandler,
)


HandlerBuilder = Callable[[int, Mapping[str, Any]], Handler]
FormatterBuilder = Callable[[Mapping[str, Any]], LogFormatter]
ProcessorBuilder = Callable[[Mapping[str, Any]], Processor]


class HandlerType(str, Enum):
    STREAM = "stream"
    ERROR_LOG = "error_log"
    NULL = "null"


class FormatterType(str, Enum):
    LINE = "line"


# ═══════════════════════════════════════════════════════════════════
#  Handlers
# ═══════════════════════════════════════════════════════════════════

def build_stream_handler(level: int, options: Mapping[str, Any]) -> Handler:
    cfg = validate_options(StreamHandlerConfig, options)
    return StreamHandler(
        cfg.stream,
        level,
        bubble=cfg.bubble,
        file_permission=cfg.file_permission,
        use_locking=cfg.use_locking,
    )


def build_error_log_handler(level: int, options: Mapping[str, Any]) -> Handler:
    cfg = validate_options(ErrorLogHandlerConfig, options)
    return ErrorLogHandler(
        cfg.message_type,
        level,
        bubble=cfg.bubble,
        expand_newlines=cfg.expand_new_lines,
    )


def build_null_handler(level: int, options: Mapping[str, Any]) -> Handler:
    validate_options(NullHandlerConfig, options)
    return NullHandler(level)


# ═══════════════════════════════════════════════════════════════════
#  Formatters
# ═══════════════════════════════════════════════════════════════════

def build_line_formatter(options: Mapping[str, Any]) -> LogFormatter:
    cfg = validate_options(LineFormatterConfig, options)
    return LineFormatter(
        cfg.format,
        cfg.date_format,
        allow_inline_line_breaks=cfg.allow_inline_line_breaks,
        ignore_empty_context_and_extra=cfg.ignore_empty_context_and_extra,
    )


BUILTIN_HANDLER_TYPES: dict[str, HandlerBuilder] = {
    HandlerType.STREAM.value: build_stream_handler,
    HandlerType.ERROR_LOG.value: build_error_log_handler,
    HandlerType.NULL.value: build_null_handler,
}

BUILTIN_FORMATTER_TYPES: dict[str, FormatterBuilder] = {
    FormatterType.LINE.value: build_line_formatter,
}

# No built-in processors; register_processor_type() adds them per factory.
BUILTIN_PROCESSOR_TYPES: dict[str, ProcessorBuilder] = {}
