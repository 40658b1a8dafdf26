# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""Value conversion between argument text and Python values.

A converter is any object satisfying the :class:`ValueConverter` protocol. The
mapper looks converters up by field type in a :class:`ConverterRegistry`, so new
scalar types plug in without touching the mapper. Every converter guarantees
that ``from_text(to_text(value)) == value``.
"""

from __future__ import annotations

import enum
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Generic, Protocol, TypeVar, get_origin, runtime_checkable

from confetti.errors import ConversionError

T = TypeVar("T")

# ###############
# Public Interface
# ###############


@runtime_checkable
class ValueConverter(Protocol[T]):
    """Capability to parse a value from argument text and render it back.

    Attributes:
        is_text: True when the semantic type is text. Textual arguments that
            look like numbers or booleans are quoted by the serializer so they
            keep their meaning when read by other tools.
    """

    is_text: bool

    def from_text(self, text: str) -> T:
        """Parse *text*; raise ConversionError on malformed input."""
        ...

    def to_text(self, value: T) -> str:
        """Render *value* as text accepted by :meth:`from_text`."""
        ...


class TextConverter:
    """Identity conversion for ``str``."""

    is_text = True

    def from_text(self, text: str) -> str:
        return text

    def to_text(self, value: str) -> str:
        if not isinstance(value, str):
            raise ConversionError(None, value, "expected a string")
        return value


class IntegerConverter:
    """Base-10 integers with optional sign and underscores."""

    is_text = False

    def from_text(self, text: str) -> int:
        try:
            return int(text, 10)
        except ValueError:
            raise ConversionError(None, text, "not a valid integer") from None

    def to_text(self, value: int) -> str:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConversionError(None, value, "expected an integer")
        return str(value)


class FloatConverter:
    """Floating-point numbers, rendered with ``repr`` so they round-trip exactly."""

    is_text = False

    def from_text(self, text: str) -> float:
        try:
            return float(text)
        except ValueError:
            raise ConversionError(None, text, "not a valid number") from None

    def to_text(self, value: float) -> str:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConversionError(None, value, "expected a number")
        return repr(float(value))


class BooleanConverter:
    """Booleans: true/yes/on/1 and false/no/off/0, case-insensitive."""

    is_text = False

    TRUE_WORDS = frozenset({"true", "yes", "on", "1"})
    FALSE_WORDS = frozenset({"false", "no", "off", "0"})

    def from_text(self, text: str) -> bool:
        lowered = text.lower()
        if lowered in self.TRUE_WORDS:
            return True
        if lowered in self.FALSE_WORDS:
            return False
        raise ConversionError(None, text, "not a valid boolean")

    def to_text(self, value: bool) -> str:
        if not isinstance(value, bool):
            raise ConversionError(None, value, "expected a boolean")
        return "true" if value else "false"


class DecimalConverter:
    """Arbitrary-precision decimals."""

    is_text = False

    def from_text(self, text: str) -> Decimal:
        try:
            return Decimal(text)
        except InvalidOperation:
            raise ConversionError(None, text, "not a valid decimal") from None

    def to_text(self, value: Decimal) -> str:
        return str(Decimal(value))


class PathConverter:
    """Filesystem paths, kept as text."""

    is_text = True

    def from_text(self, text: str) -> Path:
        if not text:
            raise ConversionError(None, text, "empty path")
        return Path(text)

    def to_text(self, value: Path) -> str:
        return str(value)


class EnumConverter(Generic[T]):
    """Enum members by value; member names are accepted on input as well."""

    def __init__(self, enum_type: type[enum.Enum]) -> None:
        self._enum_type = enum_type
        self.is_text = all(isinstance(member.value, str) for member in enum_type)

    def from_text(self, text: str) -> enum.Enum:
        for member in self._enum_type:
            if str(member.value) == text:
                return member
        try:
            return self._enum_type[text]
        except KeyError:
            choices = ", ".join(str(member.value) for member in self._enum_type)
            raise ConversionError(None, text, f"expected one of: {choices}") from None

    def to_text(self, value: enum.Enum) -> str:
        if not isinstance(value, self._enum_type):
            raise ConversionError(None, value, f"expected a {self._enum_type.__name__} member")
        return str(value.value)


class ConverterRegistry:
    """Maps Python types to value converters.

    Lookup tries the exact type, then builds an :class:`EnumConverter` for enum
    types, then walks the method resolution order so subclasses inherit the
    converter of their base class.
    """

    def __init__(self, converters: dict[type, ValueConverter[Any]] | None = None) -> None:
        self._converters: dict[type, ValueConverter[Any]] = dict(converters or {})

    @classmethod
    def with_builtins(cls) -> ConverterRegistry:
        """Return a registry holding the built-in converters."""
        return cls(
            {
                str: TextConverter(),
                int: IntegerConverter(),
                float: FloatConverter(),
                bool: BooleanConverter(),
                Decimal: DecimalConverter(),
                Path: PathConverter(),
            }
        )

    def register(self, target: type, converter: ValueConverter[Any] | None = None) -> Any:
        """Register *converter* for *target*, replacing any existing one.

        Without *converter* this returns a class decorator that instantiates
        the decorated converter class and registers the instance.
        """
        if converter is not None:
            self._check(converter)
            self._converters[target] = converter
            return converter

        def decorator(converter_class: type) -> type:
            self.register(target, converter_class())
            return converter_class

        return decorator

    def unregister(self, target: type) -> None:
        """Remove the converter registered for exactly *target*, if any."""
        self._converters.pop(target, None)

    def lookup(self, target: Any) -> ValueConverter[Any] | None:
        """Return the converter for *target*, or None if it has none."""
        if target in self._converters:
            return self._converters[target]
        if not isinstance(target, type) or get_origin(target) is not None:
            return None
        if issubclass(target, enum.Enum):
            converter = EnumConverter(target)
            self._converters[target] = converter
            return converter
        for base in target.__mro__[1:]:
            if base in self._converters:
                return self._converters[base]
        return None

    def __contains__(self, target: object) -> bool:
        return self.lookup(target) is not None

    def copy(self) -> ConverterRegistry:
        """Return an independent registry with the same converters."""
        return ConverterRegistry(self._converters)

    @staticmethod
    def _check(converter: object) -> None:
        if not isinstance(converter, ValueConverter):
            raise TypeError(f"{converter!r} does not implement from_text/to_text/is_text")


default_registry = ConverterRegistry.with_builtins()


def register_converter(target: type, converter: ValueConverter[Any] | None = None) -> Any:
    """Register a converter in the default registry.

    Usable directly, ``register_converter(Color, ColorConverter())``, or as a
    class decorator, ``@register_converter(Color)`` on the converter class.
    """
    return default_registry.register(target, converter)
