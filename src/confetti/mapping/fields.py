# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reflection over record types: which fields exist and how each one maps.

Records are dataclasses, pydantic models, or classes that map themselves (see
:class:`confetti.mapping.mapper.Mappable`). Per-field overrides are attached
with ``typing.Annotated``::

    @dataclass
    class Server:
        host: Annotated[str, Setting(argument=0)]
        ports: Annotated[list[int], Setting(name="port", repeated=True)]
"""

from __future__ import annotations

import dataclasses
import types
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel

from confetti.model.options import NamingPolicy

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class Setting:
    """Per-field mapping overrides.

    Attributes:
        name: Directive name to use instead of the policy-derived one.
        argument: Read the field from this argument index of the record's own
            directive instead of from a child directive. A list field takes
            every argument from the index onward.
        repeated: Write a list field as one child directive per element
            instead of a single child holding all elements as arguments.
    """

    name: str | None = None
    argument: int | None = None
    repeated: bool = False


class Shape(Enum):
    """How a field's value is laid out in the directive tree."""

    SCALAR = "scalar"
    LIST = "list"
    RECORD = "record"
    RECORD_LIST = "record-list"


@dataclass(frozen=True)
class FieldSpec:
    """Mapping metadata for one record field.

    Attributes:
        attribute: Python attribute name on record instances.
        key: Keyword used when constructing the record (a pydantic alias when set).
        directive_name: Name of the child directive holding the value.
        element_type: The scalar or record type, with Optional/list unwrapped.
        shape: Layout of the value.
        optional: True if the annotation admits None.
        required: True if construction fails without a value.
        setting: Explicit overrides from ``Annotated`` metadata.
    """

    attribute: str
    key: str
    directive_name: str
    element_type: Any
    shape: Shape
    optional: bool
    required: bool
    setting: Setting


def is_record_type(target: Any) -> bool:
    """Return True if *target* is a type the mapper treats as a nested record."""
    if not isinstance(target, type) or typing.get_origin(target) is not None:
        return False
    if dataclasses.is_dataclass(target) or issubclass(target, BaseModel):
        return True
    return is_self_mapping(target)


def is_self_mapping(target: Any) -> bool:
    """Return True if *target* implements ``from_directive``/``to_directive`` itself."""
    return callable(getattr(target, "from_directive", None)) and callable(getattr(target, "to_directive", None))


def record_name(record_type: type) -> str:
    """Return the directive name of a top-level record: ``__directive__`` or the class name."""
    return getattr(record_type, "__directive__", None) or record_type.__name__


def describe_fields(record_type: type, naming: NamingPolicy) -> list[FieldSpec]:
    """Return the mapping metadata for every constructor field of *record_type*.

    Raises:
        TypeError: If *record_type* is not a dataclass or pydantic model, or a
            field annotation has a shape the mapper does not support.
    """
    if isinstance(record_type, type) and issubclass(record_type, BaseModel):
        return [_pydantic_field(name, info, naming) for name, info in record_type.model_fields.items()]
    if dataclasses.is_dataclass(record_type):
        hints = typing.get_type_hints(record_type, include_extras=True)
        return [_dataclass_field(f, hints[f.name], naming) for f in dataclasses.fields(record_type) if f.init]
    raise TypeError(f"{record_type!r} is not a dataclass or pydantic model")


# ################
# Implementation
# ################


def _dataclass_field(field: dataclasses.Field, annotation: Any, naming: NamingPolicy) -> FieldSpec:
    required = field.default is dataclasses.MISSING and field.default_factory is dataclasses.MISSING
    return _build_spec(field.name, field.name, None, annotation, [], required, naming)


def _pydantic_field(name: str, info: Any, naming: NamingPolicy) -> FieldSpec:
    key = info.alias or name
    return _build_spec(name, key, info.alias, info.annotation, list(info.metadata), info.is_required(), naming)


def _build_spec(
    attribute: str,
    key: str,
    alias: str | None,
    annotation: Any,
    metadata: list[Any],
    required: bool,
    naming: NamingPolicy,
) -> FieldSpec:
    settings = [item for item in metadata if isinstance(item, Setting)]
    annotation, optional = _unwrap(annotation, settings)

    shape = Shape.SCALAR
    element_type = annotation
    if typing.get_origin(annotation) is list:
        (element_type,) = typing.get_args(annotation) or (str,)
        element_type, _ = _unwrap(element_type, settings)
        shape = Shape.RECORD_LIST if is_record_type(element_type) else Shape.LIST
    elif is_record_type(annotation):
        shape = Shape.RECORD

    setting = settings[-1] if settings else Setting()
    if setting.argument is not None and shape in (Shape.RECORD, Shape.RECORD_LIST):
        raise TypeError(f"field '{attribute}': a nested record cannot be read from an argument")

    directive_name = setting.name or alias or naming.apply(attribute)
    return FieldSpec(
        attribute=attribute,
        key=key,
        directive_name=directive_name,
        element_type=element_type,
        shape=shape,
        optional=optional,
        required=required,
        setting=setting,
    )


def _unwrap(annotation: Any, settings: list[Setting]) -> tuple[Any, bool]:
    """Strip ``Annotated`` and ``Optional`` layers, collecting Setting metadata."""
    optional = False
    while True:
        origin = typing.get_origin(annotation)
        if origin is typing.Annotated:
            annotation, *extras = typing.get_args(annotation)
            settings.extend(item for item in extras if isinstance(item, Setting))
        elif origin is typing.Union or origin is types.UnionType:
            members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
            if len(members) != 1:
                raise TypeError(f"unsupported union annotation: {annotation!r}")
            optional = True
            annotation = members[0]
        else:
            return annotation, optional
