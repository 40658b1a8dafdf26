# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexer and parser for Confetti configuration text."""

from confetti.errors import LexError, ParseError, ResourceLimitExceeded
from confetti.parser.lexer import Token, TokenType, quote, requires_quotes, tokenize
from confetti.parser.parser import parse

__all__ = [
    "parse",
    "tokenize",
    "Token",
    "TokenType",
    "requires_quotes",
    "quote",
    "LexError",
    "ParseError",
    "ResourceLimitExceeded",
]
