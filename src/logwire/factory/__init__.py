"""
Logger Factory.

Builds loggers, handlers, processors and formatters from declarative
config and memoizes them by ID, one namespace per artifact kind.

Usage:
    factory = LoggerFactory()
    factory.create_handler("app_file", "stream", LogLevel.INFO, {"stream": "logs/app.log"})
    factory.create_handler("quiet", "null", LogLevel.DEBUG, {})
    log = factory.create_logger("app", {"handlers": ["app_file"]})

    factory.get_logger("app") is log   # → True

A create_* call for an ID that is already registered returns the cached
instance and ignores its config. set_* overwrites a slot unconditionally.
Nothing is stored when construction fails.
"""

from __future__ import annotations

import threading
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Mapping
from zoneinfo import ZoneInfoNotFoundError

from logwire.config import (
    FactoryConfig,
    HandlerConfig,
    LoggerConfig,
    validate_options,
)
from logwire.errors import (
    ArtifactKind,
    InvalidConfigError,
    NotRegisteredError,
    UnsupportedTypeError,
)
from logwire.factory.defaults import (
    BUILTIN_FORMATTER_TYPES,
    BUILTIN_HANDLER_TYPES,
    BUILTIN_PROCESSOR_TYPES,
    FormatterBuilder,
    FormatterType,
    HandlerBuilder,
    HandlerType,
    ProcessorBuilder,
)
from logwire.logger.core import Logger
from logwire.logger.formatters import LogFormatter
from logwire.logger.handlers import Handler, Processor
from logwire.logger.records import resolve_level


class LoggerFactory:
    """
    Registry of loggers, handlers, processors and formatters.

    Not a singleton: construct one and pass it to whoever needs it.
    """

    def __init__(self, log: Logger | None = None) -> None:
        self._loggers: dict[str, Logger] = {}
        self._handlers: dict[str, Handler] = {}
        self._processors: dict[str, Processor] = {}
        self._formatters: dict[str, LogFormatter] = {}

        self._handler_types: dict[str, HandlerBuilder] = dict(BUILTIN_HANDLER_TYPES)
        self._formatter_types: dict[str, FormatterBuilder] = dict(BUILTIN_FORMATTER_TYPES)
        self._processor_types: dict[str, ProcessorBuilder] = dict(BUILTIN_PROCESSOR_TYPES)

        self._lock = threading.RLock()
        # Handler-less by default: every diagnostic call exits immediately
        self._log = log or Logger("logwire")

    # ── Construction from documents ───────────────────────────────

    @classmethod
    def from_config(
        cls,
        config: FactoryConfig | dict,
        log: Logger | None = None,
    ) -> "LoggerFactory":
        """Build a fresh factory and configure it from a document."""
        return cls(log=log).configure(config)

    @classmethod
    def from_yaml(cls, path: str | Path, log: Logger | None = None) -> "LoggerFactory":
        """Build a fresh factory from a YAML logging document."""
        return cls.from_config(FactoryConfig.from_yaml(path), log=log)

    def configure(self, config: FactoryConfig | dict) -> "LoggerFactory":
        """
        Bulk-create every artifact in a document.

        Order: formatters, processors, handlers, loggers, so that later
        sections can reference IDs from earlier ones. IDs that already
        exist keep their current instance.
        """
        if not isinstance(config, FactoryConfig):
            config = FactoryConfig.from_dict(config)

        for fid, entry in config.formatters.items():
            self.create_formatter(fid, entry.type, entry.options)
        for pid, entry in config.processors.items():
            self.create_processor(pid, entry.type, entry.options)
        for hid, entry in config.handlers.items():
            self.create_handler(hid, entry.type, entry.level, entry.options)
        for lid, logger_cfg in config.loggers.items():
            self.create_logger(lid, logger_cfg)

        self._log.info(
            "Logger factory configured",
            formatters=len(config.formatters),
            processors=len(config.processors),
            handlers=len(config.handlers),
            loggers=len(config.loggers),
        )
        return self

    # ── Type Registration ─────────────────────────────────────────

    def register_handler_type(self, type: str, builder: HandlerBuilder) -> "LoggerFactory":
        """
        Teach this factory a new handler type.

        ``builder(level, options)`` must return a Handler. Built-in tags can
        be overridden.
        """
        self._handler_types[_tag(type)] = builder
        return self

    def register_formatter_type(self, type: str, builder: FormatterBuilder) -> "LoggerFactory":
        """``builder(options)`` must return a LogFormatter."""
        self._formatter_types[_tag(type)] = builder
        return self

    def register_processor_type(self, type: str, builder: ProcessorBuilder) -> "LoggerFactory":
        """``builder(options)`` must return a callable record → record."""
        self._processor_types[_tag(type)] = builder
        return self

    @property
    def handler_types(self) -> list[str]:
        return sorted(self._handler_types)

    @property
    def formatter_types(self) -> list[str]:
        return sorted(self._formatter_types)

    @property
    def processor_types(self) -> list[str]:
        return sorted(self._processor_types)

    # ═══════════════════════════════════════════════════════════════
    #  Loggers
    # ═══════════════════════════════════════════════════════════════

    def create_logger(
        self,
        id: str,
        config: LoggerConfig | Mapping[str, Any] | None = None,
    ) -> Logger:
        """
        Create (or return the cached) logger.

        Handlers and processors are resolved by ID through get_handler()
        and get_processor(), so they must already be registered.

        Raises:
            NotRegisteredError: A referenced handler or processor is missing.
            InvalidConfigError: Bad option types or an unknown timezone.
        """
        with self._lock:
            if id in self._loggers:
                self._log.debug(f"Logger '{id}' already registered", logger_id=id)
                return self._loggers[id]

            cfg = validate_options(LoggerConfig, config)
            handlers = [self.get_handler(hid) for hid in cfg.handlers]
            processors = [self.get_processor(pid) for pid in cfg.processors]

            try:
                logger = Logger(id, handlers, processors, cfg.timezone)
            except (ZoneInfoNotFoundError, ValueError) as exc:
                raise InvalidConfigError(
                    "timezone", "string",
                    f'Unknown timezone "{cfg.timezone}".',
                ) from exc

            self.set_logger(id, logger)
            self._log.debug(
                f"Created logger '{id}'",
                logger_id=id,
                handlers=cfg.handlers,
                processors=cfg.processors,
            )
            return logger

    def set_logger(self, id: str, logger: Logger) -> "LoggerFactory":
        """Register a logger instance, replacing any previous one."""
        with self._lock:
            self._loggers[id] = logger
        return self

    def get_logger(self, id: str) -> Logger:
        """Raises NotRegisteredError if absent. Never constructs."""
        try:
            return self._loggers[id]
        except KeyError:
            raise NotRegisteredError(ArtifactKind.LOGGER, id) from None

    def get_loggers(self) -> Mapping[str, Logger]:
        """Read-only live view of the logger registry."""
        return MappingProxyType(self._loggers)

    # ═══════════════════════════════════════════════════════════════
    #  Handlers
    # ═══════════════════════════════════════════════════════════════

    def create_handler(
        self,
        id: str,
        type: str | HandlerType,
        level: int | str,
        config: Mapping[str, Any] | None = None,
    ) -> Handler:
        """
        Create (or return the cached) handler.

        ``processorIds`` in config attaches registered processors in the
        listed order.

        Raises:
            InvalidConfigError: Bad options, or an unknown processor ID.
            UnsupportedTypeError: No construction routine for ``type``.
        """
        with self._lock:
            if id in self._handlers:
                self._log.debug(f"Handler '{id}' already registered", handler_id=id)
                return self._handlers[id]

            options = dict(config or {})
            processor_ids = validate_options(HandlerConfig, options).processor_ids

            tag = _tag(type)
            builder = self._handler_types.get(tag)
            if builder is None:
                raise UnsupportedTypeError(
                    ArtifactKind.HANDLER, tag, self.handler_types
                )

            handler = builder(_level(level), options)

            processors = []
            for processor_id in processor_ids:
                if processor_id not in self._processors:
                    raise InvalidConfigError(
                        "processorIds", "array",
                        f'Additionally, processor ID "{processor_id}" does not exist.',
                    )
                processors.append(self._processors[processor_id])
            for processor in processors:
                handler.push_processor(processor)

            self.set_handler(id, handler)
            self._log.debug(
                f"Created {tag} handler '{id}'",
                handler_id=id,
                handler_level=handler.level,
                processors=processor_ids,
            )
            return handler

    def set_handler(self, id: str, handler: Handler) -> "LoggerFactory":
        with self._lock:
            self._handlers[id] = handler
        return self

    def get_handler(self, id: str) -> Handler:
        try:
            return self._handlers[id]
        except KeyError:
            raise NotRegisteredError(ArtifactKind.HANDLER, id) from None

    def get_handlers(self) -> Mapping[str, Handler]:
        return MappingProxyType(self._handlers)

    # ═══════════════════════════════════════════════════════════════
    #  Processors
    # ═══════════════════════════════════════════════════════════════

    def create_processor(
        self,
        id: str,
        type: str,
        config: Mapping[str, Any] | None = None,
    ) -> Processor:
        """
        Create (or return the cached) processor from a registered type.

        No processor types ship built in: register one with
        register_processor_type() or add instances with set_processor().
        """
        with self._lock:
            if id in self._processors:
                return self._processors[id]

            tag = _tag(type)
            builder = self._processor_types.get(tag)
            if builder is None:
                raise UnsupportedTypeError(
                    ArtifactKind.PROCESSOR, tag, self.processor_types
                )

            processor = builder(dict(config or {}))
            if not callable(processor):
                raise InvalidConfigError(
                    "type", "string",
                    f'Processor type "{tag}" did not build a callable.',
                )

            self.set_processor(id, processor)
            self._log.debug(f"Created {tag} processor '{id}'", processor_id=id)
            return processor

    def set_processor(self, id: str, processor: Processor) -> "LoggerFactory":
        if not callable(processor):
            raise InvalidConfigError(
                "processor", "callable",
                f'Processor "{id}" is a {type(processor).__name__}.',
            )
        with self._lock:
            self._processors[id] = processor
        return self

    def get_processor(self, id: str) -> Processor:
        try:
            return self._processors[id]
        except KeyError:
            raise NotRegisteredError(ArtifactKind.PROCESSOR, id) from None

    def get_processors(self) -> Mapping[str, Processor]:
        return MappingProxyType(self._processors)

    # ═══════════════════════════════════════════════════════════════
    #  Formatters
    # ═══════════════════════════════════════════════════════════════

    def create_formatter(
        self,
        id: str,
        type: str | FormatterType,
        config: Mapping[str, Any] | None = None,
    ) -> LogFormatter:
        """
        Create (or return the cached) formatter.

        Raises:
            InvalidConfigError: Bad options.
            UnsupportedTypeError: Unknown type; lists the allowed types.
        """
        with self._lock:
            if id in self._formatters:
                return self._formatters[id]

            tag = _tag(type)
            builder = self._formatter_types.get(tag)
            if builder is None:
                raise UnsupportedTypeError(
                    ArtifactKind.FORMATTER, tag, self.formatter_types
                )

            formatter = builder(dict(config or {}))
            self.set_formatter(id, formatter)
            self._log.debug(f"Created {tag} formatter '{id}'", formatter_id=id)
            return formatter

    def set_formatter(self, id: str, formatter: LogFormatter) -> "LoggerFactory":
        with self._lock:
            self._formatters[id] = formatter
        return self

    def get_formatter(self, id: str) -> LogFormatter:
        try:
            return self._formatters[id]
        except KeyError:
            raise NotRegisteredError(ArtifactKind.FORMATTER, id) from None

    def get_formatters(self) -> Mapping[str, LogFormatter]:
        return MappingProxyType(self._formatters)

    # ── Status ────────────────────────────────────────────────────

    def describe(self) -> dict[str, Any]:
        """Registered IDs and types per namespace, plus known type tags."""
        return {
            "loggers": {
                lid: {
                    "handlers": len(logger.handlers),
                    "processors": len(logger.processors),
                }
                for lid, logger in self._loggers.items()
            },
            "handlers": {
                hid: {
                    "type": type(handler).__name__,
                    "level": handler.level,
                    "bubble": handler.bubble,
                    "processors": len(handler.processors),
                }
                for hid, handler in self._handlers.items()
            },
            "processors": {
                pid: _callable_name(processor)
                for pid, processor in self._processors.items()
            },
            "formatters": {
                fid: type(formatter).__name__
                for fid, formatter in self._formatters.items()
            },
            "types": {
                "handlers": self.handler_types,
                "formatters": self.formatter_types,
                "processors": self.processor_types,
            },
        }


# ── Helpers ───────────────────────────────────────────────────────────

def _tag(value: str | HandlerType | FormatterType) -> str:
    return value.value if isinstance(value, (HandlerType, FormatterType)) else str(value)


def _level(value: int | str) -> int:
    try:
        return resolve_level(value)
    except (TypeError, ValueError) as exc:
        raise InvalidConfigError("level", "int or level name", str(exc)) from exc


def _callable_name(fn: Callable) -> str:
    return getattr(fn, "__qualname__", None) or type(fn).__name__


__all__ = ["LoggerFactory", "HandlerType", "FormatterType"]
