# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""Two-way mapping between directive trees and typed records.

Reading walks the record's fields and looks each one up among the children of
the record's directive (or among its arguments, for positional fields).
Writing is the inverse and produces a tree that the serializer renders as
text. With default options ``map_from(map_to(record), type(record)) == record``.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, ValidationError

from confetti.errors import ConversionError, MissingField, UnknownField
from confetti.mapping.converters import ConverterRegistry, ValueConverter, default_registry
from confetti.mapping.fields import FieldSpec, Shape, describe_fields, is_self_mapping, record_name
from confetti.model.directives import Argument, Directive, DirectiveTree
from confetti.model.options import MapperOptions
from confetti.parser.parser import parse
from confetti.writer.serializer import serialize

logger = logging.getLogger(__name__)

R = TypeVar("R")

# ###############
# Public Interface
# ###############


@runtime_checkable
class Mappable(Protocol):
    """A record type that converts itself to and from a directive.

    Implement this for records whose layout the field-based mapping cannot
    express. The mapper passed in can be used to map nested values.
    """

    @classmethod
    def from_directive(cls, directive: Directive, mapper: Mapper) -> Any: ...

    def to_directive(self, mapper: Mapper) -> Directive: ...


class Mapper:
    """Maps records to and from directives using one set of options and converters."""

    def __init__(self, options: MapperOptions | None = None, registry: ConverterRegistry | None = None) -> None:
        self.options = options or MapperOptions()
        self.registry = registry or default_registry

    def from_tree(self, source: DirectiveTree | Directive, record_type: type[R]) -> R:
        """Build a *record_type* instance from a tree or a single directive.

        For a tree, the first top-level directive named after the record is used.

        Raises:
            MissingField: If the record's directive or a required field is absent.
            ConversionError: If a value does not convert to its field's type.
            UnknownField: In strict mode, if a child directive matches no field.
        """
        if isinstance(source, DirectiveTree):
            name = record_name(record_type)
            directive = source.find(name)
            if directive is None:
                raise MissingField(name)
        else:
            directive = source
        return self.from_directive(directive, record_type)

    def from_directive(self, directive: Directive, record_type: type[R]) -> R:
        """Build a *record_type* instance from the contents of *directive*."""
        if is_self_mapping(record_type):
            return record_type.from_directive(directive, self)  # type: ignore[attr-defined]

        values: dict[str, Any] = {}
        known: set[str] = set()
        for spec in describe_fields(record_type, self.options.naming):
            if spec.setting.argument is not None:
                value = self._read_argument(directive, spec)
            else:
                known.add(spec.directive_name)
                value = self._read_child(directive, spec)
            if value is not _ABSENT:
                values[spec.key] = value

        self._check_unknown(directive, known, record_type)
        return _construct(record_type, values)

    def to_directive(self, record: Any, name: str | None = None) -> Directive:
        """Build a directive holding *record*, named *name* or after the record type.

        Raises:
            ConversionError: If a field value cannot be rendered by its converter.
        """
        if is_self_mapping(type(record)):
            directive = record.to_directive(self)
            if name is not None and directive.name.value != name:
                directive = directive.model_copy(update={"name": Argument(value=name)})
            return directive

        positional: list[tuple[int, str, list[Argument]]] = []
        children: list[Directive] = []
        for spec in describe_fields(type(record), self.options.naming):
            value = getattr(record, spec.attribute)
            if spec.setting.argument is not None:
                items = [] if value is None else (value if spec.shape is Shape.LIST else [value])
                rendered = [self._render(spec, item) for item in items]
                positional.append((spec.setting.argument, spec.directive_name, rendered))
            else:
                children.extend(self._write_child(spec, value))

        arguments = _join_positional(positional)
        return Directive(
            name=Argument(value=name or record_name(type(record))),
            arguments=tuple(arguments),
            children=tuple(children),
        )

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def _read_argument(self, directive: Directive, spec: FieldSpec) -> Any:
        index = spec.setting.argument or 0
        if spec.shape is Shape.LIST:
            remaining = directive.arguments[index:]
            if not remaining and not spec.required:
                return _ABSENT
            return [self._convert(spec, arg.value) for arg in remaining]
        if index >= len(directive.arguments):
            return self._absent(spec)
        return self._convert(spec, directive.arguments[index].value)

    def _read_child(self, directive: Directive, spec: FieldSpec) -> Any:
        matches = directive.children_named(spec.directive_name)
        if not matches:
            return self._absent(spec)

        if spec.shape is Shape.LIST:
            return [self._convert(spec, arg.value) for match in matches for arg in match.arguments]
        if spec.shape is Shape.RECORD_LIST:
            return [self._nested(match, spec) for match in matches]
        if spec.shape is Shape.RECORD:
            return self._nested(matches[0], spec)

        first = matches[0]
        if not first.arguments:
            if spec.optional:
                return None
            raise MissingField(spec.directive_name)
        return self._convert(spec, first.arguments[0].value)

    def _absent(self, spec: FieldSpec) -> Any:
        if not spec.required:
            return _ABSENT
        if spec.optional:
            return None
        if spec.shape in (Shape.LIST, Shape.RECORD_LIST):
            return []
        raise MissingField(spec.directive_name)

    def _nested(self, directive: Directive, spec: FieldSpec) -> Any:
        try:
            return self.from_directive(directive, spec.element_type)
        except MissingField as exc:
            raise MissingField(f"{spec.directive_name}.{exc.name}") from None
        except ConversionError as exc:
            if exc.field is None:
                raise exc.for_field(spec.directive_name) from exc
            raise ConversionError(f"{spec.directive_name}.{exc.field}", exc.value, exc.cause) from None

    def _convert(self, spec: FieldSpec, text: str) -> Any:
        converter = self._converter(spec, text)
        try:
            return converter.from_text(text)
        except ConversionError as exc:
            raise exc.for_field(spec.directive_name) from None
        except (ValueError, TypeError, ArithmeticError) as exc:
            raise ConversionError(spec.directive_name, text, str(exc)) from exc

    def _check_unknown(self, directive: Directive, known: set[str], record_type: type) -> None:
        for child in directive.children or ():
            name = child.name.value
            if name in known:
                continue
            position = child.name.position
            if self.options.strict:
                raise UnknownField(
                    name,
                    record_name(record_type),
                    position.line if position else None,
                    position.column if position else None,
                )
            logger.debug("Ignoring unknown directive '%s' in '%s'", name, record_name(record_type))

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def _write_child(self, spec: FieldSpec, value: Any) -> list[Directive]:
        if value is None:
            return []
        name = Argument(value=spec.directive_name)
        if spec.shape is Shape.RECORD:
            return [self.to_directive(value, spec.directive_name)]
        if spec.shape is Shape.RECORD_LIST:
            return [self.to_directive(item, spec.directive_name) for item in value]
        if spec.shape is Shape.LIST:
            arguments = [self._render(spec, item) for item in value]
            if spec.setting.repeated and arguments:
                return [Directive(name=name, arguments=(arg,)) for arg in arguments]
            return [Directive(name=name, arguments=tuple(arguments))]
        return [Directive(name=name, arguments=(self._render(spec, value),))]

    def _render(self, spec: FieldSpec, value: Any) -> Argument:
        converter = self._converter(spec, value)
        try:
            text = converter.to_text(value)
        except ConversionError as exc:
            raise exc.for_field(spec.directive_name) from None
        except (ValueError, TypeError, ArithmeticError) as exc:
            raise ConversionError(spec.directive_name, value, str(exc)) from exc
        return Argument(value=text, quoted=converter.is_text)

    def _converter(self, spec: FieldSpec, value: Any) -> ValueConverter[Any]:
        converter = self.registry.lookup(spec.element_type)
        if converter is None:
            raise ConversionError(spec.directive_name, value, f"no converter registered for {spec.element_type!r}")
        return converter


def map_from(
    source: DirectiveTree | Directive,
    record_type: type[R],
    options: MapperOptions | None = None,
    registry: ConverterRegistry | None = None,
) -> R:
    """Build a *record_type* instance from a directive tree or directive."""
    return Mapper(options, registry).from_tree(source, record_type)


def map_to(record: Any, options: MapperOptions | None = None, registry: ConverterRegistry | None = None) -> DirectiveTree:
    """Return a directive tree holding *record* as its single top-level directive."""
    return DirectiveTree(directives=(Mapper(options, registry).to_directive(record),))


def from_text(
    text: str,
    record_type: type[R],
    options: MapperOptions | None = None,
    registry: ConverterRegistry | None = None,
) -> R:
    """Parse *text* and map its first directive named after *record_type*."""
    options = options or MapperOptions()
    return map_from(parse(text, options.parser_options), record_type, options, registry)


def to_text(record: Any, options: MapperOptions | None = None, registry: ConverterRegistry | None = None) -> str:
    """Render *record* as Confetti text."""
    return serialize(map_to(record, options, registry), options)


# ################
# Implementation
# ################

_ABSENT = object()


def _join_positional(positional: list[tuple[int, str, list[Argument]]]) -> list[Argument]:
    """Concatenate positional field arguments in index order.

    Raises:
        ConversionError: If an empty field would shift a later field onto its index.
    """
    arguments: list[Argument] = []
    empty: str | None = None
    for _, field, args in sorted(positional, key=lambda entry: entry[0]):
        if not args:
            empty = empty or field
        elif empty is not None:
            raise ConversionError(empty, None, f"cannot be empty while a later argument '{field}' is set")
        else:
            arguments.extend(args)
    return arguments


def _construct(record_type: type[R], values: dict[str, Any]) -> R:
    if issubclass(record_type, BaseModel):
        try:
            return record_type.model_validate(values)
        except ValidationError as exc:
            error = exc.errors()[0]
            field = ".".join(str(part) for part in error["loc"]) or None
            raise ConversionError(field, error.get("input"), error["msg"]) from exc
    if dataclasses.is_dataclass(record_type):
        return record_type(**values)
    raise TypeError(f"{record_type!r} is not a dataclass or pydantic model")
