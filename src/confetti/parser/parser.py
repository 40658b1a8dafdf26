# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser for Confetti configuration text.

Converts the token stream produced by the lexer into an immutable DirectiveTree.
One Python stack frame is used per open block or expression, and both are
bounded by ``ParserOptions.max_depth``.
"""

import logging
from collections.abc import Iterator

from confetti.errors import ParseError, ResourceLimitExceeded
from confetti.model.directives import Argument, Comment, Directive, DirectiveTree, SourcePosition
from confetti.model.options import ParserOptions
from confetti.parser.lexer import Token, TokenType, quote, requires_quotes, tokenize

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def parse(source: str, options: ParserOptions | None = None) -> DirectiveTree:
    """Parse Confetti source text into a DirectiveTree.

    An empty document yields a tree without directives.

    Args:
        source: The full configuration text.
        options: Syntax extensions and resource limits; defaults to ``ParserOptions()``.

    Returns:
        The parsed DirectiveTree.

    Raises:
        LexError: If the source contains a malformed token.
        ParseError: If the source is syntactically invalid.
        ResourceLimitExceeded: If nesting depth, directive count, or argument
            count exceeds the configured limits.
    """
    options = options or ParserOptions()
    tree = _Parser(tokenize(source, options), options).parse()
    logger.debug("Parsed %d top-level directive(s), %d comment(s)", len(tree.directives), len(tree.comments))
    return tree


# ################
# Implementation
# ################

_VALUE_TYPES: frozenset[TokenType] = frozenset(
    {
        TokenType.WORD,
        TokenType.QUOTED_STRING,
        TokenType.TRIPLE_QUOTED_STRING,
    }
)


def _position(tok: Token) -> SourcePosition:
    return SourcePosition(line=tok.line, column=tok.column, offset=tok.offset)


def _describe(tok: Token) -> str:
    """Return a human-readable description of a token for error messages."""
    if tok.type == TokenType.EOF:
        return "end of input"
    if tok.type == TokenType.END_OF_DIRECTIVE:
        return "';'" if tok.value == ";" else "end of line"
    return repr(tok.text)


class _Parser:
    """Recursive-descent parser for Confetti token streams."""

    def __init__(self, tokens: Iterator[Token], options: ParserOptions) -> None:
        self._tokens = tokens
        self._options = options
        self._comments: list[Comment] = []
        self._depth = 0
        self._directive_count = 0
        self._current_token = self._fetch()

    def parse(self) -> DirectiveTree:
        """Parse the full token stream and return a DirectiveTree."""
        directives = self._parse_directives(block_open=None)
        return DirectiveTree(directives=tuple(directives), comments=tuple(self._comments))

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _fetch(self) -> Token:
        """Pull the next significant token, collecting comments on the way."""
        for tok in self._tokens:
            if tok.type == TokenType.COMMENT:
                multi_line = tok.text.startswith("/*")
                self._comments.append(Comment(text=tok.text, multi_line=multi_line, position=_position(tok)))
            elif tok.type != TokenType.LINE_CONTINUATION:
                return tok
        return self._current_token

    def _current(self) -> Token:
        """Return the current (un-consumed) token."""
        return self._current_token

    def _check(self, *types: TokenType) -> bool:
        """Return True if the current token matches any of the given types."""
        return self._current_token.type in types

    def _advance(self) -> Token:
        """Consume and return the current token, stopping at EOF."""
        tok = self._current_token
        if tok.type != TokenType.EOF:
            self._current_token = self._fetch()
        return tok

    def _expect(self, *types: TokenType) -> Token:
        """Consume the current token if it matches any of the given types.

        Raises ParseError if the current token does not match.
        """
        tok = self._current_token
        if tok.type not in types:
            expected = ", ".join(repr(t.value) for t in types)
            raise ParseError(f"Expected {expected}, got {_describe(tok)}", tok.line, tok.column, tok.offset)
        return self._advance()

    # ------------------------------------------------------------------
    # Resource limits
    # ------------------------------------------------------------------

    def _enter(self, tok: Token) -> None:
        """Open a block or expression, enforcing the nesting limit."""
        if self._depth >= self._options.max_depth:
            raise ResourceLimitExceeded(
                f"Maximum nesting depth of {self._options.max_depth} exceeded",
                tok.line,
                tok.column,
                tok.offset,
            )
        self._depth += 1

    def _count_directive(self, tok: Token) -> None:
        self._directive_count += 1
        if self._directive_count > self._options.max_directives:
            raise ResourceLimitExceeded(
                f"Maximum directive count of {self._options.max_directives} exceeded",
                tok.line,
                tok.column,
                tok.offset,
            )

    # ------------------------------------------------------------------
    # Directives and blocks
    # ------------------------------------------------------------------

    def _parse_directives(self, block_open: Token | None) -> list[Directive]:
        """Parse directives until EOF (top level) or the closing brace of a block."""
        directives: list[Directive] = []
        while True:
            tok = self._current()
            if tok.type == TokenType.END_OF_DIRECTIVE:
                self._advance()
            elif tok.type == TokenType.EOF:
                if block_open is not None:
                    raise ParseError("Unclosed block", block_open.line, block_open.column, block_open.offset)
                return directives
            elif tok.type == TokenType.BLOCK_CLOSE:
                if block_open is None:
                    raise ParseError("Unmatched '}'", tok.line, tok.column, tok.offset)
                return directives
            else:
                directives.append(self._parse_directive())

    def _parse_directive(self) -> Directive:
        """Parse: <name> <argument>* ( '{' <directive>* '}' | ';' | newline )"""
        tok = self._current()
        if tok.type not in _VALUE_TYPES:
            raise ParseError(f"Expected directive name, got {_describe(tok)}", tok.line, tok.column, tok.offset)
        self._count_directive(tok)
        name = self._make_argument(self._advance())

        arguments: list[Argument] = []
        while True:
            arg_tok = self._current()
            if self._check(*_VALUE_TYPES, TokenType.PUNCTUATOR):
                arguments.append(self._make_argument(self._advance()))
            elif self._check(TokenType.EXPRESSION_OPEN):
                arguments.append(self._parse_expression())
            elif self._check(TokenType.ARGUMENT_SEPARATOR):
                self._advance()
                continue
            else:
                break
            if len(arguments) > self._options.max_arguments:
                raise ResourceLimitExceeded(
                    f"Maximum argument count of {self._options.max_arguments} exceeded",
                    arg_tok.line,
                    arg_tok.column,
                    arg_tok.offset,
                )

        children: tuple[Directive, ...] | None = None
        end = self._current()
        if end.type == TokenType.BLOCK_OPEN:
            children = self._parse_block()
        elif end.type == TokenType.END_OF_DIRECTIVE:
            if self._options.require_semicolons and end.value != ";":
                raise ParseError("Expected ';' before end of line", end.line, end.column, end.offset)
            self._advance()
        elif end.type in (TokenType.EOF, TokenType.BLOCK_CLOSE):
            if self._options.require_semicolons:
                raise ParseError(f"Expected ';', got {_describe(end)}", end.line, end.column, end.offset)
        else:
            raise ParseError(f"Unexpected {_describe(end)} in directive", end.line, end.column, end.offset)

        return Directive(name=name, arguments=tuple(arguments), children=children)

    def _parse_block(self) -> tuple[Directive, ...]:
        """Parse: '{' <directive>* '}'"""
        open_tok = self._expect(TokenType.BLOCK_OPEN)
        self._enter(open_tok)
        children = self._parse_directives(block_open=open_tok)
        self._expect(TokenType.BLOCK_CLOSE)
        self._depth -= 1
        return tuple(children)

    # ------------------------------------------------------------------
    # Arguments and expressions
    # ------------------------------------------------------------------

    def _make_argument(self, tok: Token) -> Argument:
        return Argument(
            value=tok.value,
            quoted=tok.type in (TokenType.QUOTED_STRING, TokenType.TRIPLE_QUOTED_STRING),
            triple_quoted=tok.type == TokenType.TRIPLE_QUOTED_STRING,
            punctuator=tok.type == TokenType.PUNCTUATOR,
            position=_position(tok),
        )

    def _parse_expression(self) -> Argument:
        """Parse: '(' ( <argument> | <expression> )* ')' and flatten it into one Argument.

        Inner values are joined by single spaces, rendered the way the
        serializer would write them, so the flattened text re-parses to the
        same expression.
        """
        open_tok = self._expect(TokenType.EXPRESSION_OPEN)
        self._enter(open_tok)
        parts: list[str] = []
        while not self._check(TokenType.EXPRESSION_CLOSE):
            tok = self._current()
            if tok.type == TokenType.WORD:
                self._advance()
                parts.append(quote(tok.value, self._options) if requires_quotes(tok.value, self._options) else tok.value)
            elif tok.type in (TokenType.QUOTED_STRING, TokenType.TRIPLE_QUOTED_STRING):
                self._advance()
                parts.append(quote(tok.value, self._options, triple=tok.type == TokenType.TRIPLE_QUOTED_STRING))
            elif tok.type == TokenType.PUNCTUATOR:
                self._advance()
                parts.append(tok.value)
            elif tok.type == TokenType.ARGUMENT_SEPARATOR:
                self._advance()
                if parts:
                    parts[-1] += ","
                else:
                    parts.append(",")
            elif tok.type == TokenType.EXPRESSION_OPEN:
                parts.append(f"({self._parse_expression().value})")
            elif tok.type == TokenType.END_OF_DIRECTIVE and tok.value != ";":
                self._advance()
            elif tok.type == TokenType.EOF:
                raise ParseError("Unclosed expression", open_tok.line, open_tok.column, open_tok.offset)
            else:
                raise ParseError(f"Unexpected {_describe(tok)} inside expression", tok.line, tok.column, tok.offset)
        self._advance()  # )
        self._depth -= 1
        return Argument(value=" ".join(parts), expression=True, position=_position(open_tok))
