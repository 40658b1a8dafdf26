# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests demonstrating how to construct and query directive trees."""

import pytest
from pydantic import ValidationError

from confetti.model import Argument, Comment, Directive, DirectiveTree, SourcePosition


def test_directive_of_builds_plain_arguments() -> None:
    """Directive.of wraps strings into unquoted arguments."""
    d = Directive.of("listen", "localhost", Argument(value="80", quoted=True))
    assert d.name == Argument(value="listen")
    assert d.arguments == (Argument(value="localhost"), Argument(value="80", quoted=True))
    assert d.argument_values == ["localhost", "80"]
    assert not d.has_block


def test_empty_block_is_distinct_from_no_block() -> None:
    """children=() marks an empty block, children=None marks no block at all."""
    empty = Directive.of("a", children=[])
    bare = Directive.of("a")
    assert empty.has_block
    assert not bare.has_block
    assert empty != bare


def test_child_lookup() -> None:
    """Children can be looked up by name, in document order."""
    d = Directive.of(
        "server",
        children=[Directive.of("port", "80"), Directive.of("name", "web"), Directive.of("port", "443")],
    )
    assert d.first_child("port") == Directive.of("port", "80")
    assert [c.argument_values[0] for c in d.children_named("port")] == ["80", "443"]
    assert d.first_child("missing") is None
    assert Directive.of("leaf").children_named("port") == []


def test_strip_positions_is_recursive() -> None:
    """strip_positions removes positions from names, arguments, and children."""
    pos = SourcePosition(line=1, column=1)
    d = Directive(
        name=Argument(value="a", position=pos),
        arguments=(Argument(value="b", position=pos),),
        children=(Directive(name=Argument(value="c", position=pos)),),
    )
    assert d.strip_positions() == Directive.of("a", "b", children=[Directive.of("c")])


def test_tree_iteration_and_lookup() -> None:
    """A tree iterates over its top-level directives and finds them by name."""
    tree = DirectiveTree(directives=(Directive.of("a"), Directive.of("b", "1"), Directive.of("b", "2")))
    assert [d.name.value for d in tree] == ["a", "b", "b"]
    assert len(tree) == 3
    assert tree.find("b") == Directive.of("b", "1")
    assert tree.find("z") is None


def test_tree_root_is_unnamed() -> None:
    """The implicit root directive has an empty name and the top-level directives as children."""
    tree = DirectiveTree(directives=(Directive.of("a"),))
    assert tree.root.name.value == ""
    assert tree.root.children == tree.directives


def test_tree_strip_positions_drops_comments() -> None:
    """Comparison-friendly trees carry neither positions nor comments."""
    tree = DirectiveTree(directives=(Directive.of("a"),), comments=(Comment(text="# c"),))
    assert tree.strip_positions() == DirectiveTree(directives=(Directive.of("a"),))


def test_models_are_immutable() -> None:
    """Directive trees are frozen once built."""
    d = Directive.of("a")
    with pytest.raises(ValidationError):
        d.name = Argument(value="b")  # type: ignore[misc]
