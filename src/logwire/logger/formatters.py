"""
Log formatters.

Formatters turn a LogRecord into text. Handlers own one formatter each and
fall back to a LineFormatter when none is assigned.

    line: "[{datetime}] {channel}.{level_name}: {message} {context} {extra}"
"""

import json
import re
from abc import ABC, abstractmethod
from typing import Any

from logwire.logger.records import LogRecord


class LogFormatter(ABC):
    """Base formatter. Transforms LogRecord → string."""

    @abstractmethod
    def format(self, record: LogRecord) -> str: ...


class LineFormatter(LogFormatter):
    """
    One line of text per record, rendered from a template.

    Placeholders: {datetime} {channel} {level_name} {level} {message}
    {context} {extra}, plus {context.KEY} and {extra.KEY} for single values.
    Unknown placeholders are left as-is.

    Example: [2026-02-12T14:32:05+00:00] app.INFO: Security matched [] []
    """

    SIMPLE_FORMAT = "[{datetime}] {channel}.{level_name}: {message} {context} {extra}"

    _PLACEHOLDER = re.compile(r"\{(\w+)(?:\.(\w+))?\}")

    def __init__(
        self,
        format: str | None = None,
        date_format: str | None = None,
        allow_inline_line_breaks: bool = False,
        ignore_empty_context_and_extra: bool = False,
    ):
        self.format_string = format or self.SIMPLE_FORMAT
        self.date_format = date_format
        self.allow_inline_line_breaks = allow_inline_line_breaks
        self.ignore_empty_context_and_extra = ignore_empty_context_and_extra

    def format(self, record: LogRecord) -> str:
        values: dict[str, Any] = {
            "datetime": self._format_date(record),
            "channel": record.channel,
            "level_name": record.level_name,
            "level": str(record.level),
            "message": self._stringify(record.message),
            "context": self._format_mapping(record.context),
            "extra": self._format_mapping(record.extra),
        }
        nested = {"context": record.context, "extra": record.extra}

        def substitute(match: re.Match) -> str:
            name, key = match.group(1), match.group(2)
            if key is not None:
                if name in nested and key in nested[name]:
                    return self._stringify(nested[name][key])
                return match.group(0)
            return values.get(name, match.group(0))

        template = self.format_string
        if self.ignore_empty_context_and_extra:
            for name, data in nested.items():
                if not data:
                    template = re.sub(r" ?\{" + name + r"\}", "", template)
        return self._PLACEHOLDER.sub(substitute, template).rstrip(" \t") + "\n"

    def _format_date(self, record: LogRecord) -> str:
        if self.date_format is None:
            return record.datetime.isoformat(timespec="seconds")
        return record.datetime.strftime(self.date_format)

    def _format_mapping(self, data: dict[str, Any]) -> str:
        if not data:
            return "" if self.ignore_empty_context_and_extra else "[]"
        return self._stringify(json.dumps(
            {str(k): _serialize_value(v) for k, v in data.items()},
            separators=(",", ":"),
            ensure_ascii=False,
            default=str,
        ))

    def _stringify(self, value: Any) -> str:
        text = value if isinstance(value, str) else json.dumps(
            _serialize_value(value), ensure_ascii=False, default=str
        )
        if self.allow_inline_line_breaks:
            return text
        return text.replace("\r\n", " ").replace("\r", " ").replace("\n", " ")


def _serialize_value(v: Any) -> Any:
    """Make a value JSON-serializable."""
    if isinstance(v, (str, int, float, bool, type(None))):
        return v
    if isinstance(v, (list, tuple)):
        return [_serialize_value(i) for i in v]
    if isinstance(v, dict):
        return {str(k): _serialize_value(val) for k, val in v.items()}
    return str(v)
