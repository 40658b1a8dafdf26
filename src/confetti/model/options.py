# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""Parser and mapper configuration records."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# ###############
# Public Interface
# ###############

# Characters with a fixed meaning in the grammar; they can never be punctuators.
RESERVED_CHARACTERS = frozenset('"{};#\\')

# Highest accepted max_depth; each open block costs the parser several stack frames.
MAX_DEPTH_LIMIT = 250


class NamingPolicy(Enum):
    """Translation from a record field identifier to a directive name."""

    IDENTITY = "identity"
    KEBAB_CASE = "kebab-case"

    def apply(self, identifier: str) -> str:
        """Return the directive name for *identifier* under this policy."""
        if self is NamingPolicy.KEBAB_CASE:
            return _to_kebab_case(identifier)
        return identifier


class ParserOptions(BaseModel):
    """Syntax extensions and resource limits applied while lexing and parsing.

    Attributes:
        allow_c_style_comments: Accept ``//`` line comments and ``/* */`` block comments.
        allow_triple_quotes: Accept ``\"\"\"...\"\"\"`` multi-line strings.
        allow_expression_arguments: Accept parenthesized arguments such as ``(x > y)``.
        allow_line_continuations: Accept a trailing backslash that joins two physical lines.
        allow_argument_separators: Treat ``,`` as a cosmetic separator between arguments.
        require_semicolons: Require an explicit ``;`` after every directive without a block.
        forbid_bidi_characters: Reject bidirectional formatting characters.
        punctuators: Single characters lexed as standalone punctuator tokens (e.g. ``=``).
        max_depth: Maximum number of simultaneously open blocks and expressions.
            At most ``MAX_DEPTH_LIMIT``.
        max_directives: Maximum number of directives in a document.
        max_arguments: Maximum number of arguments of a single directive.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    allow_c_style_comments: bool = Field(default=False, alias="allow-c-style-comments")
    allow_triple_quotes: bool = Field(default=True, alias="allow-triple-quotes")
    allow_expression_arguments: bool = Field(default=False, alias="allow-expression-arguments")
    allow_line_continuations: bool = Field(default=True, alias="allow-line-continuations")
    allow_argument_separators: bool = Field(default=True, alias="allow-argument-separators")
    require_semicolons: bool = Field(default=False, alias="require-semicolons")
    forbid_bidi_characters: bool = Field(default=True, alias="forbid-bidi-characters")
    punctuators: frozenset[str] = Field(default=frozenset())
    max_depth: int = Field(default=100, ge=0, le=MAX_DEPTH_LIMIT, alias="max-depth")
    max_directives: int = Field(default=100_000, ge=0, alias="max-directives")
    max_arguments: int = Field(default=10_000, ge=0, alias="max-arguments")

    @field_validator("punctuators")
    @classmethod
    def _check_punctuators(cls, value: frozenset[str]) -> frozenset[str]:
        for char in value:
            if len(char) != 1:
                raise ValueError(f"punctuator {char!r} must be a single character")
            if char.isspace() or char in RESERVED_CHARACTERS:
                raise ValueError(f"character {char!r} cannot be used as a punctuator")
        return value

    @model_validator(mode="after")
    def _check_punctuator_conflicts(self) -> ParserOptions:
        if self.allow_expression_arguments and self.punctuators & {"(", ")"}:
            raise ValueError("'(' and ')' cannot be punctuators when expression arguments are enabled")
        if self.allow_argument_separators and "," in self.punctuators:
            raise ValueError("',' cannot be a punctuator when argument separators are enabled")
        return self


class MapperOptions(BaseModel):
    """Settings for mapping records to directives and rendering them as text.

    Attributes:
        naming: Policy turning field identifiers into directive names.
        indent: Indentation string for one nesting level in serialized output.
        strict: Raise UnknownField for directives that match no record field.
        always_quote_text: Quote every textual argument, not only ambiguous ones.
        parser_options: Syntax used when round-tripping through text.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    naming: NamingPolicy = NamingPolicy.IDENTITY
    indent: str = "  "
    strict: bool = False
    always_quote_text: bool = Field(default=False, alias="always-quote-text")
    parser_options: ParserOptions = Field(default_factory=ParserOptions, alias="parser-options")

    @field_validator("indent")
    @classmethod
    def _check_indent(cls, value: str) -> str:
        if any(char not in " \t" for char in value):
            raise ValueError("indent may only contain spaces and tabs")
        return value


# ################
# Implementation
# ################


def _to_kebab_case(identifier: str) -> str:
    """Convert ``snake_case`` or ``camelCase`` to ``kebab-case``."""
    chars: list[str] = []
    previous = ""
    for char in identifier:
        if char == "_":
            chars.append("-")
        elif char.isupper():
            if previous.islower() or previous.isdigit():
                chars.append("-")
            chars.append(char.lower())
        else:
            chars.append(char)
        previous = char
    return "".join(chars)
