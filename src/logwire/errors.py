"""
Factory errors.

Every error carries structured fields (kind, id, field, expected type)
so callers can branch on them without parsing messages.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence


class ArtifactKind(str, Enum):
    LOGGER = "logger"
    HANDLER = "handler"
    PROCESSOR = "processor"
    FORMATTER = "formatter"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def setter(self) -> str:
        return f"set_{self.value}"


class LogwireError(Exception):
    """Base class for all logwire errors."""


class NotRegisteredError(LogwireError, KeyError):
    """An identifier is absent from its namespace."""

    def __init__(self, kind: ArtifactKind, id: str):
        self.kind = ArtifactKind(kind)
        self.id = id
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return (
            f'{self.kind.label} with ID "{self.id}" is not registered '
            f"on the logger factory."
        )

    def __str__(self) -> str:
        return self.message


class InvalidConfigError(LogwireError, ValueError):
    """A config field is missing, wrongly typed, or references an unknown ID."""

    def __init__(self, field: str, expected: str, hint: str = ""):
        self.field = field
        self.expected = expected
        self.hint = hint
        super().__init__(self.message)

    @property
    def message(self) -> str:
        msg = f'Invalid logger config "{self.field}". It must be {self.expected}.'
        if self.hint:
            msg = f"{msg} {self.hint}"
        return msg


class UnsupportedTypeError(InvalidConfigError):
    """A type tag has no construction routine for its artifact kind."""

    def __init__(self, kind: ArtifactKind, type_tag: str, allowed: Sequence[str] = ()):
        self.kind = ArtifactKind(kind)
        self.type_tag = type_tag
        self.allowed = tuple(allowed)
        hint = (
            f'{self.kind.label} type "{type_tag}" is not handled yet by this '
            f"component. Allowed types: {', '.join(self.allowed) or 'none'}. "
            f"You can set the {self.kind.value} instance manually using the "
            f'"{self.kind.setter}" method.'
        )
        super().__init__("type", "string", hint)

    @property
    def setter(self) -> str:
        return self.kind.setter
