# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""Exception hierarchy shared by the lexer, parser, mapper, and serializer.

Every failure raised by the library derives from :class:`ConfettiError`, so a
caller can catch the whole family at once or pick out a single variant.
"""

from __future__ import annotations

from pathlib import Path

# ###############
# Public Interface
# ###############


class ConfettiError(Exception):
    """Base class for all errors raised by the library."""


class SourceError(ConfettiError):
    """An error tied to a location in the source text.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
        offset: 0-based UTF-8 byte offset of the error.
    """

    def __init__(self, message: str, line: int, column: int, offset: int = 0) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.message = message
        self.line = line
        self.column = column
        self.offset = offset


class LexError(SourceError):
    """Raised on a malformed token: bad character, escape, or unterminated construct."""


class ParseError(SourceError):
    """Raised when the token stream violates the directive grammar."""


class ResourceLimitExceeded(ParseError):
    """Raised when the input exceeds a configured nesting depth or count limit."""


class MapperError(ConfettiError):
    """Base class for errors raised while mapping between directives and records."""


class MissingField(MapperError):
    """Raised when a required field has no corresponding directive or argument."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Missing required field: {name}")
        self.name = name


class ConversionError(MapperError):
    """Raised when a textual value cannot be converted to or from a field's type.

    Attributes:
        field: Name of the field being converted, or None outside a field context.
        value: The offending value.
        cause: The underlying reason, as a human-readable string.
    """

    def __init__(self, field: str | None, value: object, cause: str) -> None:
        prefix = f"field '{field}': " if field else ""
        super().__init__(f"Conversion error: {prefix}cannot convert {value!r}: {cause}")
        self.field = field
        self.value = value
        self.cause = cause

    def for_field(self, field: str) -> ConversionError:
        """Return a copy of this error attributed to *field*."""
        if self.field is not None:
            return self
        return ConversionError(field, self.value, self.cause)


class UnknownField(MapperError):
    """Raised in strict mode when a directive has no matching record field."""

    def __init__(self, name: str, record: str, line: int | None = None, column: int | None = None) -> None:
        where = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"Unknown field '{name}' for '{record}'{where}")
        self.name = name
        self.record = record
        self.line = line
        self.column = column


class SerializeError(MapperError):
    """Raised when a directive tree cannot be rendered as valid text."""


class IoError(MapperError):
    """Raised when reading or writing a configuration file fails."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"I/O error on '{path}': {cause}")
        self.path = path
        self.cause = cause
