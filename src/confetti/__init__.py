# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""Confetti: a parser, serializer, and typed mapper for the Confetti configuration language."""

from confetti.errors import (
    ConfettiError,
    ConversionError,
    IoError,
    LexError,
    MapperError,
    MissingField,
    ParseError,
    ResourceLimitExceeded,
    SerializeError,
    SourceError,
    UnknownField,
)
from confetti.files import OptionsFileError, dump_tree, load, load_options, parse_file, save, save_options
from confetti.mapping import (
    ConverterRegistry,
    Mappable,
    Mapper,
    Setting,
    ValueConverter,
    default_registry,
    from_text,
    map_from,
    map_to,
    register_converter,
    to_text,
)
from confetti.model import (
    Argument,
    Comment,
    Directive,
    DirectiveTree,
    MapperOptions,
    NamingPolicy,
    ParserOptions,
    SourcePosition,
)
from confetti.parser import parse, tokenize
from confetti.writer import serialize

__all__ = [
    "Argument",
    "Comment",
    "ConfettiError",
    "ConversionError",
    "ConverterRegistry",
    "Directive",
    "DirectiveTree",
    "IoError",
    "LexError",
    "Mappable",
    "Mapper",
    "MapperError",
    "MapperOptions",
    "MissingField",
    "NamingPolicy",
    "OptionsFileError",
    "ParseError",
    "ParserOptions",
    "ResourceLimitExceeded",
    "SerializeError",
    "Setting",
    "SourceError",
    "SourcePosition",
    "UnknownField",
    "ValueConverter",
    "default_registry",
    "dump_tree",
    "from_text",
    "load",
    "load_options",
    "map_from",
    "map_to",
    "parse",
    "parse_file",
    "register_converter",
    "save",
    "save_options",
    "serialize",
    "to_text",
    "tokenize",
]
