# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for Confetti configuration text.

Converts raw source text into a lazy sequence of tokens for subsequent parsing.
The quoting helpers at the bottom of the public interface are the inverse of
the word rules used here and must change together with them.
"""

import enum
import unicodedata
from collections.abc import Iterator
from dataclasses import dataclass

from confetti.errors import LexError, SerializeError
from confetti.model.options import ParserOptions

# ###############
# Public Interface
# ###############


class TokenType(enum.Enum):
    """All token types produced by the Confetti lexer."""

    WORD = "word"
    QUOTED_STRING = "quoted string"
    TRIPLE_QUOTED_STRING = "triple-quoted string"
    PUNCTUATOR = "punctuator"
    COMMENT = "comment"

    BLOCK_OPEN = "{"
    BLOCK_CLOSE = "}"
    ARGUMENT_SEPARATOR = ","
    LINE_CONTINUATION = "\\"
    END_OF_DIRECTIVE = ";"
    EXPRESSION_OPEN = "("
    EXPRESSION_CLOSE = ")"

    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A lexical token with its source location.

    Attributes:
        type: The kind of token.
        text: The raw source text of the token.
        value: The decoded value (escapes and continuations processed for words and strings).
        line: 1-based line number where the token starts.
        column: 1-based column number where the token starts.
        offset: 0-based UTF-8 byte offset where the token starts.
    """

    type: TokenType
    text: str
    value: str
    line: int
    column: int
    offset: int


def tokenize(source: str, options: ParserOptions | None = None) -> Iterator[Token]:
    """Tokenize Confetti source text.

    Tokens are produced lazily; the final token is always EOF. Whitespace is
    consumed, comments are produced as COMMENT tokens. Each call starts over
    from the beginning of *source*.

    Args:
        source: The full configuration text.
        options: Syntax extensions to honour; defaults to ``ParserOptions()``.

    Returns:
        An iterator of Token objects ending with a single EOF token.

    Raises:
        LexError: On forbidden or unexpected characters, invalid escapes,
            unterminated strings, or unterminated block comments. Raised when
            the offending token is reached.
    """
    return _Lexer(source, options or ParserOptions()).tokens()


def requires_quotes(text: str, options: ParserOptions | None = None) -> bool:
    """Return True if *text* would not lex back as a single word with the same value."""
    options = options or ParserOptions()
    if not text or text[0] == "\ufeff":
        return True
    if options.allow_c_style_comments and text.startswith(("//", "/*")):
        return True
    for char in text:
        if (
            char in _WORD_BREAKS
            or char in _LINE_TERMINATORS
            or char == "\\"
            or _is_whitespace(char)
            or _is_control(char)
            or (char == "," and options.allow_argument_separators)
            or char in options.punctuators
        ):
            return True
    return False


def quote(text: str, options: ParserOptions | None = None, triple: bool = False) -> str:
    """Render *text* as a quoted string literal that lexes back to *text*.

    Raises:
        SerializeError: If *text* holds a character that has no escape and may
            not appear literally (forbidden characters, or a line terminator
            other than LF/CR in a single-quoted string).
    """
    options = options or ParserOptions()
    chars: list[str] = []
    for index, char in enumerate(text):
        if triple and char in "\n\r\t":
            chars.append(char)
        elif triple and char == '"':
            # An unescaped quote must not start a closing delimiter.
            is_last = index == len(text) - 1
            chars.append('\\"' if is_last or text[index + 1] == '"' else '"')
        elif char in _RENDER_ESCAPES:
            chars.append(_RENDER_ESCAPES[char])
        elif char in _LINE_TERMINATORS and not triple:
            raise SerializeError(f"Cannot represent U+{ord(char):04X} in a single-quoted string")
        elif _is_forbidden(char, options.forbid_bidi_characters) and char not in _LINE_TERMINATORS:
            raise SerializeError(f"Cannot represent forbidden character U+{ord(char):04X}")
        else:
            chars.append(char)
    delimiter = '"""' if triple else '"'
    return delimiter + "".join(chars) + delimiter


# ################
# Implementation
# ################

_LINE_TERMINATORS = frozenset("\n\x0b\x0c\r\x85\u2028\u2029")

# Characters that always end a word.
_WORD_BREAKS = frozenset('"{};#()')

_BIDI_CHARACTERS = frozenset("\u061c\u200e\u200f\u202a\u202b\u202c\u202d\u202e\u2066\u2067\u2068\u2069")

_DECODE_ESCAPES: dict[str, str] = {
    "\\": "\\",
    '"': '"',
    "'": "'",
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}

_RENDER_ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
    "\0": "\\0",
}


def _is_whitespace(char: str) -> bool:
    """Horizontal whitespace; line terminators are handled separately."""
    return char == "\t" or unicodedata.category(char) == "Zs"


def _is_control(char: str) -> bool:
    return unicodedata.category(char) in ("Cc", "Cs", "Cn")


def _is_forbidden(char: str, forbid_bidi: bool) -> bool:
    if _is_control(char) and char != "\t" and char not in _LINE_TERMINATORS:
        return True
    return forbid_bidi and char in _BIDI_CHARACTERS


class _Lexer:
    """Internal scanner state machine."""

    def __init__(self, source: str, options: ParserOptions) -> None:
        self._source = source
        self._options = options
        self._pos = 0
        self._line = 1
        self._column = 1
        self._offset = 0

    def tokens(self) -> Iterator[Token]:
        """Yield all tokens including the terminal EOF."""
        if self._current() == "\ufeff":
            self._advance()
            self._column = 1
        while True:
            self._skip_whitespace()
            if self._at_end():
                break
            yield self._scan_token()
        yield Token(TokenType.EOF, "", "", self._line, self._column, self._offset)

    # ------------------------------------------------------------------
    # Low-level character access helpers
    # ------------------------------------------------------------------

    def _at_end(self) -> bool:
        return self._pos >= len(self._source)

    def _current(self) -> str:
        """Return the character at the current position, or '' at end of input."""
        if self._pos < len(self._source):
            return self._source[self._pos]
        return ""

    def _peek(self, distance: int = 1) -> str:
        """Return the character *distance* positions ahead, or '' past the end."""
        if self._pos + distance < len(self._source):
            return self._source[self._pos + distance]
        return ""

    def _advance(self) -> str:
        """Consume the current character, update position tracking, and return it."""
        ch = self._source[self._pos]
        self._pos += 1
        self._offset += 1 if ch < "\x80" else len(ch.encode("utf-8"))
        if ch in _LINE_TERMINATORS and not (ch == "\r" and self._current() == "\n"):
            self._line += 1
            self._column = 1
        else:
            self._column += 1
        return ch

    def _advance_line_terminator(self) -> None:
        """Consume one line terminator, treating CRLF as a single one."""
        if self._advance() == "\r" and self._current() == "\n":
            self._advance()

    def _make(self, token_type: TokenType, start: int, line: int, col: int, offset: int, value: str) -> Token:
        return Token(token_type, self._source[start : self._pos], value, line, col, offset)

    def _check_forbidden(self) -> None:
        ch = self._current()
        if _is_forbidden(ch, self._options.forbid_bidi_characters):
            raise LexError(f"Forbidden character U+{ord(ch):04X}", self._line, self._column, self._offset)

    # ------------------------------------------------------------------
    # Whitespace skipping
    # ------------------------------------------------------------------

    def _skip_whitespace(self) -> None:
        """Skip horizontal whitespace; line terminators are significant."""
        while not self._at_end() and _is_whitespace(self._current()):
            self._advance()

    # ------------------------------------------------------------------
    # Token scanning dispatcher
    # ------------------------------------------------------------------

    def _scan_token(self) -> Token:
        """Dispatch to the appropriate handler based on the current character."""
        ch = self._current()
        start, line, col, offset = self._pos, self._line, self._column, self._offset
        options = self._options

        if ch in _LINE_TERMINATORS or ch == ";":
            return self._scan_terminators(start, line, col, offset)
        if ch == "{":
            self._advance()
            return self._make(TokenType.BLOCK_OPEN, start, line, col, offset, ch)
        if ch == "}":
            self._advance()
            return self._make(TokenType.BLOCK_CLOSE, start, line, col, offset, ch)
        if ch == "," and options.allow_argument_separators:
            self._advance()
            return self._make(TokenType.ARGUMENT_SEPARATOR, start, line, col, offset, ch)
        if ch in "()" and options.allow_expression_arguments:
            self._advance()
            token_type = TokenType.EXPRESSION_OPEN if ch == "(" else TokenType.EXPRESSION_CLOSE
            return self._make(token_type, start, line, col, offset, ch)
        if ch in options.punctuators:
            self._advance()
            return self._make(TokenType.PUNCTUATOR, start, line, col, offset, ch)
        if ch == "#" or (ch == "/" and self._peek() in ("/", "*") and options.allow_c_style_comments):
            return self._scan_comment(start, line, col, offset)
        if ch == "\\" and self._peek() in _LINE_TERMINATORS:
            return self._scan_continuation(start, line, col, offset)
        if ch == '"':
            return self._scan_string(start, line, col, offset)
        if ch in "()":
            raise LexError(f"Unexpected character: {ch!r}", line, col, offset)
        self._check_forbidden()
        return self._scan_word(start, line, col, offset)

    # ------------------------------------------------------------------
    # Terminators, comments, and continuations
    # ------------------------------------------------------------------

    def _scan_terminators(self, start: int, line: int, col: int, offset: int) -> Token:
        """Collapse a run of newlines, semicolons, and blanks into one END_OF_DIRECTIVE."""
        has_semicolon = False
        while not self._at_end():
            ch = self._current()
            if ch == ";":
                has_semicolon = True
                self._advance()
            elif ch in _LINE_TERMINATORS:
                self._advance_line_terminator()
            elif _is_whitespace(ch):
                self._advance()
            else:
                break
        value = ";" if has_semicolon else "\n"
        return self._make(TokenType.END_OF_DIRECTIVE, start, line, col, offset, value)

    def _scan_comment(self, start: int, line: int, col: int, offset: int) -> Token:
        """Consume a '#', '//' or '/* */' comment.

        Line comments stop before the line terminator; a backslash inside a
        comment is literal, so a comment never continues onto the next line.
        """
        if self._current() == "/" and self._peek() == "*":
            self._advance()  # /
            self._advance()  # *
            while not self._at_end():
                if self._current() == "*" and self._peek() == "/":
                    self._advance()  # *
                    self._advance()  # /
                    text = self._source[start : self._pos]
                    return Token(TokenType.COMMENT, text, text, line, col, offset)
                if self._current() not in _LINE_TERMINATORS:
                    self._check_forbidden()
                self._advance()
            raise LexError("Unterminated block comment", line, col, offset)

        while not self._at_end() and self._current() not in _LINE_TERMINATORS:
            self._check_forbidden()
            self._advance()
        text = self._source[start : self._pos]
        return Token(TokenType.COMMENT, text, text, line, col, offset)

    def _scan_continuation(self, start: int, line: int, col: int, offset: int) -> Token:
        """Consume a backslash followed by a line terminator."""
        if not self._options.allow_line_continuations:
            raise LexError("Line continuations are not enabled", line, col, offset)
        self._advance()  # backslash
        self._advance_line_terminator()
        return self._make(TokenType.LINE_CONTINUATION, start, line, col, offset, "")

    # ------------------------------------------------------------------
    # Literal scanners
    # ------------------------------------------------------------------

    def _scan_escape(self, chars: list[str], in_string: bool) -> bool:
        """Decode the escape sequence at a backslash and append it to *chars*.

        Returns False if the source ended right after the backslash.
        """
        line, col, offset = self._line, self._column, self._offset
        self._advance()  # backslash
        if self._at_end():
            return False
        esc = self._current()
        if esc in _LINE_TERMINATORS:
            if not self._options.allow_line_continuations:
                raise LexError("Line continuations are not enabled", line, col, offset)
            self._advance_line_terminator()
        elif in_string:
            if esc not in _DECODE_ESCAPES:
                raise LexError(f"Invalid escape sequence: '\\{esc}'", line, col, offset)
            chars.append(_DECODE_ESCAPES[esc])
            self._advance()
        else:
            if _is_whitespace(esc):
                raise LexError("Invalid escape sequence: backslash before whitespace", line, col, offset)
            self._check_forbidden()
            chars.append(esc)
            self._advance()
        return True

    def _scan_string(self, start: int, line: int, col: int, offset: int) -> Token:
        """Scan a quoted or triple-quoted string literal with escape sequences."""
        triple = self._options.allow_triple_quotes and self._peek(1) == '"' and self._peek(2) == '"'
        for _ in range(3 if triple else 1):
            self._advance()
        chars: list[str] = []
        while not self._at_end():
            ch = self._current()
            if ch == "\\":
                if not self._scan_escape(chars, in_string=True):
                    break
            elif ch == '"':
                if not triple:
                    self._advance()
                    return self._make(TokenType.QUOTED_STRING, start, line, col, offset, "".join(chars))
                if self._peek(1) == '"' and self._peek(2) == '"':
                    for _ in range(3):
                        self._advance()
                    return self._make(TokenType.TRIPLE_QUOTED_STRING, start, line, col, offset, "".join(chars))
                chars.append(ch)
                self._advance()
            elif ch in _LINE_TERMINATORS:
                if not triple:
                    break
                chars.append(ch)
                self._advance()
            else:
                self._check_forbidden()
                chars.append(ch)
                self._advance()
        kind = "triple-quoted string" if triple else "string literal"
        raise LexError(f"Unterminated {kind}", line, col, offset)

    def _scan_word(self, start: int, line: int, col: int, offset: int) -> Token:
        """Scan a bare run of non-special characters."""
        options = self._options
        chars: list[str] = []
        while not self._at_end():
            ch = self._current()
            if (
                ch in _WORD_BREAKS
                or ch in _LINE_TERMINATORS
                or _is_whitespace(ch)
                or (ch == "," and options.allow_argument_separators)
                or ch in options.punctuators
            ):
                break
            if ch == "\\":
                if not self._scan_escape(chars, in_string=False):
                    raise LexError("Unterminated escape sequence", self._line, self._column, self._offset)
                continue
            self._check_forbidden()
            chars.append(ch)
            self._advance()
        return self._make(TokenType.WORD, start, line, col, offset, "".join(chars))
