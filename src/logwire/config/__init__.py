"""
Pydantic configuration schemas for logwire.

Two layers:
  - Per-artifact option models (LoggerConfig, StreamHandlerConfig, ...)
    validated by the factory at create time. Keys are accepted in
    camelCase or snake_case.
  - FactoryConfig: a whole YAML document of formatters, processors,
    handlers and loggers keyed by ID, consumed by LoggerFactory.configure().

Usage:
    config = FactoryConfig.from_yaml("logging.yaml")
    factory = LoggerFactory.from_config(config)
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from logwire.errors import InvalidConfigError
from logwire.logger.handlers import ErrorLogMessageType
from logwire.logger.records import LogLevel, resolve_level


class OptionsModel(BaseModel):
    """Base for create-time option blocks. Unknown keys are ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ═══════════════════════════════════════════════════════════════════
#  Logger
# ═══════════════════════════════════════════════════════════════════

class LoggerConfig(OptionsModel):
    handlers: list[StrictStr] = Field(default_factory=list)
    processors: list[StrictStr] = Field(default_factory=list)
    timezone: Optional[StrictStr] = None


# ═══════════════════════════════════════════════════════════════════
#  Handlers
# ═══════════════════════════════════════════════════════════════════

class HandlerConfig(OptionsModel):
    """Options shared by every handler type."""
    processor_ids: list[StrictStr] = Field(default_factory=list)


class StreamHandlerConfig(HandlerConfig):
    stream: StrictStr
    bubble: StrictBool = True
    file_permission: Optional[StrictInt] = None
    use_locking: StrictBool = False


class ErrorLogHandlerConfig(HandlerConfig):
    message_type: ErrorLogMessageType = ErrorLogMessageType.OPERATING_SYSTEM
    bubble: StrictBool = True
    expand_new_lines: StrictBool = False

    @field_validator("message_type", mode="before")
    @classmethod
    def resolve_message_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return ErrorLogMessageType.from_value(v)
        return v


class NullHandlerConfig(HandlerConfig):
    pass


# ═══════════════════════════════════════════════════════════════════
#  Formatters
# ═══════════════════════════════════════════════════════════════════

class LineFormatterConfig(OptionsModel):
    format: Optional[StrictStr] = None
    date_format: Optional[StrictStr] = None
    allow_inline_line_breaks: StrictBool = False
    ignore_empty_context_and_extra: StrictBool = False


# ═══════════════════════════════════════════════════════════════════
#  Validation helpers
# ═══════════════════════════════════════════════════════════════════

# pydantic error type → the type name reported in InvalidConfigError
_EXPECTED_TYPES: dict[str, str] = {
    "string_type": "string",
    "list_type": "array",
    "bool_type": "bool",
    "int_type": "int",
    "int_parsing": "int",
    "dict_type": "mapping",
    "enum": "one of " + ", ".join(m.name for m in ErrorLogMessageType),
    "value_error": "valid",
}

# field name → expected type when the field is simply missing
_REQUIRED_TYPES: dict[str, str] = {
    "stream": "string",
    "type": "string",
}


def validate_options(model: type[OptionsModel], options: Any) -> OptionsModel:
    """
    Validate a create-time option mapping.

    Raises InvalidConfigError naming the first offending field, using the
    key spelling the caller is expected to write (camelCase).
    """
    if options is None:
        options = {}
    if isinstance(options, model):
        return options
    if isinstance(options, BaseModel):
        options = options.model_dump(by_alias=True, exclude_unset=True)
    if not isinstance(options, Mapping):
        raise InvalidConfigError("config", "mapping")
    options = dict(options)
    try:
        return model.model_validate(options)
    except ValidationError as exc:
        raise _to_invalid_config(exc) from exc


def _to_invalid_config(exc: ValidationError) -> InvalidConfigError:
    error = exc.errors()[0]
    loc = error.get("loc") or ("config",)
    field = str(loc[0])
    if error["type"] == "missing":
        expected = _REQUIRED_TYPES.get(field, "set")
    else:
        expected = _EXPECTED_TYPES.get(error["type"], error["type"])
    hint = ""
    if len(loc) > 1:
        hint = f"Offending entry: {'.'.join(str(p) for p in loc)}."
    return InvalidConfigError(field, expected, hint)


# ═══════════════════════════════════════════════════════════════════
#  Document Config
# ═══════════════════════════════════════════════════════════════════

class ArtifactEntry(BaseModel):
    """A typed entry in a FactoryConfig section. Extra keys are its options."""

    model_config = ConfigDict(extra="allow")

    type: str

    @field_validator("type", mode="before")
    @classmethod
    def unquoted_null(cls, v: Any) -> Any:
        # `type: null` in YAML parses to None
        return "null" if v is None else v

    @property
    def options(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class HandlerEntry(ArtifactEntry):
    level: int = LogLevel.DEBUG.value

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: Any) -> int:
        try:
            return resolve_level(v)
        except TypeError as exc:
            raise ValueError(str(exc)) from exc


class FactoryConfig(BaseModel):
    """
    Top-level logging document.

        formatters:
          plain: {type: line, format: "{level_name}: {message}"}
        handlers:
          app_file: {type: stream, level: INFO, stream: logs/app.log}
          quiet:    {type: "null", level: DEBUG}
        loggers:
          app: {handlers: [app_file], timezone: UTC}
    """

    formatters: dict[str, ArtifactEntry] = Field(default_factory=dict)
    processors: dict[str, ArtifactEntry] = Field(default_factory=dict)
    handlers: dict[str, HandlerEntry] = Field(default_factory=dict)
    loggers: dict[str, LoggerConfig] = Field(default_factory=dict)

    source_yaml: Optional[str] = Field(None, exclude=True)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "FactoryConfig":
        """Load and validate from a YAML file."""
        path = Path(path)
        raw = path.read_text(encoding="utf-8")
        config = cls.from_yaml_string(raw)
        return config

    @classmethod
    def from_yaml_string(cls, yaml_string: str) -> "FactoryConfig":
        """Load and validate from a YAML string."""
        data = yaml.safe_load(yaml_string) or {}
        config = cls.model_validate(data)
        config.source_yaml = yaml_string
        return config

    @classmethod
    def from_dict(cls, data: dict) -> "FactoryConfig":
        """Load and validate from a dict."""
        return cls.model_validate(data)

    def to_dict(self, exclude_none: bool = True) -> dict:
        return self.model_dump(exclude_none=exclude_none, by_alias=True)


__all__ = [
    "OptionsModel",
    "LoggerConfig",
    "HandlerConfig",
    "StreamHandlerConfig",
    "ErrorLogHandlerConfig",
    "NullHandlerConfig",
    "LineFormatterConfig",
    "ArtifactEntry",
    "HandlerEntry",
    "FactoryConfig",
    "validate_options",
]
