# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""Directive tree and option records shared by every stage."""

from confetti.model.directives import Argument, Comment, Directive, DirectiveTree, SourcePosition
from confetti.model.options import MapperOptions, NamingPolicy, ParserOptions

__all__ = [
    # Directive tree
    "SourcePosition",
    "Argument",
    "Directive",
    "Comment",
    "DirectiveTree",
    # Options
    "ParserOptions",
    "MapperOptions",
    "NamingPolicy",
]
