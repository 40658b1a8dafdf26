# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""Directive tree produced by the parser and consumed by the mapper and serializer.

All models are frozen and use tuples for their sequences: once the parser has
built a tree bottom-up it can be shared freely without copying.
"""

from __future__ import annotations

from collections.abc import Iterator

from pydantic import BaseModel, ConfigDict

# ###############
# Public Interface
# ###############


class SourcePosition(BaseModel):
    """A location in the source text (1-based line/column, 0-based byte offset)."""

    model_config = ConfigDict(frozen=True)

    line: int
    column: int
    offset: int = 0


class Argument(BaseModel):
    """A single decoded value: a directive name or one of its arguments.

    Attributes:
        value: Decoded text (escapes and continuations already processed).
        quoted: True if the value came from a quoted string or holds text-typed data.
        triple_quoted: True if the value came from a triple-quoted string.
        expression: True if the value is a flattened parenthesized expression.
        punctuator: True if the value is a custom punctuator character.
        position: Where the token started, or None for synthesized arguments.
    """

    model_config = ConfigDict(frozen=True)

    value: str
    quoted: bool = False
    triple_quoted: bool = False
    expression: bool = False
    punctuator: bool = False
    position: SourcePosition | None = None


class Directive(BaseModel):
    """A named entry with ordered arguments and an optional block of children.

    ``children`` is None when the directive has no block at all and an empty
    tuple when it has an empty ``{}`` block.
    """

    model_config = ConfigDict(frozen=True)

    name: Argument
    arguments: tuple[Argument, ...] = ()
    children: tuple[Directive, ...] | None = None

    @classmethod
    def of(
        cls,
        name: str,
        *arguments: str | Argument,
        children: tuple[Directive, ...] | list[Directive] | None = None,
    ) -> Directive:
        """Build a directive from plain strings; convenient in code and tests."""
        return cls(
            name=Argument(value=name),
            arguments=tuple(arg if isinstance(arg, Argument) else Argument(value=arg) for arg in arguments),
            children=tuple(children) if children is not None else None,
        )

    @property
    def has_block(self) -> bool:
        """Return True if the directive opened a block, even an empty one."""
        return self.children is not None

    @property
    def argument_values(self) -> list[str]:
        """Return the decoded values of all arguments in order."""
        return [arg.value for arg in self.arguments]

    def children_named(self, name: str) -> list[Directive]:
        """Return all child directives called *name*, in document order."""
        return [child for child in self.children or () if child.name.value == name]

    def first_child(self, name: str) -> Directive | None:
        """Return the first child directive called *name*, or None."""
        for child in self.children or ():
            if child.name.value == name:
                return child
        return None

    def strip_positions(self) -> Directive:
        """Return an equal directive with every source position removed."""
        return Directive(
            name=_strip(self.name),
            arguments=tuple(_strip(arg) for arg in self.arguments),
            children=tuple(child.strip_positions() for child in self.children) if self.children is not None else None,
        )


class Comment(BaseModel):
    """A comment encountered while parsing, kept for tooling."""

    model_config = ConfigDict(frozen=True)

    text: str
    multi_line: bool = False
    position: SourcePosition | None = None


class DirectiveTree(BaseModel):
    """The parsed document: top-level directives in order, plus comments."""

    model_config = ConfigDict(frozen=True)

    directives: tuple[Directive, ...] = ()
    comments: tuple[Comment, ...] = ()

    def __iter__(self) -> Iterator[Directive]:  # type: ignore[override]
        return iter(self.directives)

    def __len__(self) -> int:
        return len(self.directives)

    @property
    def root(self) -> Directive:
        """The implicit unnamed directive whose children are the top-level directives."""
        return Directive(name=Argument(value=""), children=self.directives)

    def find(self, name: str) -> Directive | None:
        """Return the first top-level directive called *name*, or None."""
        return self.root.first_child(name)

    def strip_positions(self) -> DirectiveTree:
        """Return an equal tree with source positions and comments removed."""
        return DirectiveTree(directives=tuple(d.strip_positions() for d in self.directives))


# ################
# Implementation
# ################


def _strip(argument: Argument) -> Argument:
    if argument.position is None:
        return argument
    return argument.model_copy(update={"position": None})


# Resolve the self-reference in Directive.children.
Directive.model_rebuild()
