# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""Render directive trees as Confetti text.

The output re-parses, under the same parser options, to a tree equal to the
input once source positions are ignored. Comments are not reproduced.
"""

from __future__ import annotations

import re

from confetti.errors import SerializeError
from confetti.model.directives import Argument, Directive, DirectiveTree
from confetti.model.options import MapperOptions, ParserOptions
from confetti.parser.lexer import quote, requires_quotes

# ###############
# Public Interface
# ###############


def serialize(source: DirectiveTree | Directive, options: MapperOptions | None = None) -> str:
    """Render a tree (or a single directive) as text.

    Directives without a block end with ``;``, an empty block is written as
    ``{}``, and children are indented by ``options.indent`` per level. Output
    ends with a newline unless the tree is empty.

    Raises:
        SerializeError: If a value cannot be represented under the parser
            options (e.g. an expression argument while expressions are off),
            or the tree is nested too deeply to write.
    """
    options = options or MapperOptions()
    directives = source.directives if isinstance(source, DirectiveTree) else (source,)
    writer = _Writer(options)
    try:
        for directive in directives:
            writer.write(directive, depth=0)
    except RecursionError:
        raise SerializeError("Directive tree is nested too deeply to serialize") from None
    return writer.text()


def render_argument(argument: Argument, options: MapperOptions | None = None) -> str:
    """Return the textual form of a single argument."""
    options = options or MapperOptions()
    return _render(argument, options.parser_options, options.always_quote_text)


# ################
# Implementation
# ################

# Unquoted text that other readers would take for a number or a boolean.
_NUMBER = re.compile(r"[+-]?(\d[\d_]*(\.\d*)?|\.\d+)([eE][+-]?\d+)?|[+-]?(inf|infinity|nan)", re.IGNORECASE)
_BOOLEAN_WORDS = frozenset({"true", "false", "yes", "no", "on", "off"})

_LINE_BREAKS = frozenset("\n\x0b\x0c\r\x85\u2028\u2029")


def _looks_literal(text: str) -> bool:
    return text.lower() in _BOOLEAN_WORDS or _NUMBER.fullmatch(text) is not None


def _render(argument: Argument, options: ParserOptions, always_quote: bool) -> str:
    value = argument.value
    if argument.expression:
        if not options.allow_expression_arguments:
            raise SerializeError(f"Expression argument ({value}) requires allow_expression_arguments")
        return f"({value})"
    if argument.punctuator and value in options.punctuators:
        return value

    multi_line = any(char in _LINE_BREAKS for char in value)
    if options.allow_triple_quotes and (argument.triple_quoted or multi_line):
        return quote(value, options, triple=True)
    if argument.quoted and (always_quote or _looks_literal(value)):
        return quote(value, options)
    if requires_quotes(value, options):
        return quote(value, options)
    return value


class _Writer:
    """Accumulates output lines for one serialization."""

    def __init__(self, options: MapperOptions) -> None:
        self._options = options
        self._lines: list[str] = []

    def text(self) -> str:
        if not self._lines:
            return ""
        return "\n".join(self._lines) + "\n"

    def write(self, directive: Directive, depth: int) -> None:
        parser_options = self._options.parser_options
        always_quote = self._options.always_quote_text
        prefix = self._options.indent * depth
        parts = [_render(directive.name, parser_options, always_quote=False)]
        parts.extend(_render(arg, parser_options, always_quote) for arg in directive.arguments)
        head = prefix + " ".join(parts)

        if directive.children is None:
            self._lines.append(head + ";")
        elif not directive.children:
            self._lines.append(head + " {}")
        else:
            self._lines.append(head + " {")
            for child in directive.children:
                self.write(child, depth + 1)
            self._lines.append(prefix + "}")
