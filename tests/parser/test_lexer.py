# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the Confetti lexical scanner."""

import pytest

from confetti.errors import LexError, SerializeError
from confetti.model.options import ParserOptions
from confetti.parser.lexer import Token, TokenType, quote, requires_quotes, tokenize

# ###############
# Test Helpers
# ###############


def _tokens(source: str, **options: object) -> list[Token]:
    """Return all tokens including the terminal EOF."""
    return list(tokenize(source, ParserOptions(**options)))


def _tokens_no_eof(source: str, **options: object) -> list[Token]:
    """Return all tokens except the terminal EOF token."""
    result = _tokens(source, **options)
    assert result[-1].type == TokenType.EOF
    return result[:-1]


def _types(source: str, **options: object) -> list[TokenType]:
    """Return the token types for all tokens except EOF."""
    return [tok.type for tok in _tokens_no_eof(source, **options)]


def _values(source: str, **options: object) -> list[str]:
    """Return the decoded token values for all tokens except EOF."""
    return [tok.value for tok in _tokens_no_eof(source, **options)]


# ###############
# EOF Handling
# ###############


class TestEof:
    def test_empty_string_produces_eof(self) -> None:
        tokens = _tokens("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF

    def test_eof_at_line_1_column_1_for_empty_input(self) -> None:
        tokens = _tokens("")
        assert (tokens[0].line, tokens[0].column, tokens[0].offset) == (1, 1, 0)

    def test_blank_only_input_produces_eof(self) -> None:
        assert _types("   \t  ") == []

    def test_tokenize_is_lazy(self) -> None:
        stream = tokenize("first \x01")
        assert next(stream).value == "first"
        with pytest.raises(LexError):
            next(stream)

    def test_tokenize_restarts_from_scratch(self) -> None:
        first = [tok.value for tok in tokenize("a b")]
        second = [tok.value for tok in tokenize("a b")]
        assert first == second == ["a", "b", ""]


# ###############
# Words
# ###############


class TestWords:
    def test_whitespace_separates_words(self) -> None:
        assert _values("server  localhost\t8080") == ["server", "localhost", "8080"]
        assert _types("server localhost") == [TokenType.WORD, TokenType.WORD]

    def test_word_may_contain_non_ascii(self) -> None:
        assert _values("grüße 名前") == ["grüße", "名前"]

    def test_word_stops_at_block_and_terminator(self) -> None:
        assert _types("a{b}c;") == [
            TokenType.WORD,
            TokenType.BLOCK_OPEN,
            TokenType.WORD,
            TokenType.BLOCK_CLOSE,
            TokenType.WORD,
            TokenType.END_OF_DIRECTIVE,
        ]

    def test_word_adjacent_to_string_is_two_tokens(self) -> None:
        assert _values('a"b"') == ["a", "b"]

    def test_escape_in_word_yields_literal_character(self) -> None:
        assert _values("a\\;b") == ["a;b"]
        assert _values("a\\nb") == ["anb"]

    def test_escape_before_whitespace_in_word_is_rejected(self) -> None:
        with pytest.raises(LexError, match="backslash before whitespace"):
            _tokens("a\\ b")

    def test_equals_sign_is_part_of_word_by_default(self) -> None:
        assert _values("key=value") == ["key=value"]

    def test_slashes_are_word_characters_without_c_comments(self) -> None:
        assert _values("//path") == ["//path"]

    def test_raw_text_is_kept(self) -> None:
        (tok,) = _tokens_no_eof("a\\;b")
        assert tok.text == "a\\;b"


# ###############
# Quoted Strings
# ###############


class TestQuotedStrings:
    def test_quoted_string_value_excludes_quotes(self) -> None:
        (tok,) = _tokens_no_eof('"hello world"')
        assert tok.type == TokenType.QUOTED_STRING
        assert tok.value == "hello world"
        assert tok.text == '"hello world"'

    def test_empty_quoted_string(self) -> None:
        assert _values('""') == [""]

    @pytest.mark.parametrize(
        ("source", "expected"),
        [
            ('"a\\"b"', 'a"b'),
            ('"a\\\\b"', "a\\b"),
            ('"a\\nb"', "a\nb"),
            ('"a\\tb"', "a\tb"),
            ('"a\\rb"', "a\rb"),
            ('"\\0"', "\0"),
            ('"it\\\'s"', "it's"),
        ],
    )
    def test_escape_sequences(self, source: str, expected: str) -> None:
        assert _values(source) == [expected]

    def test_invalid_escape_reports_backslash_position(self) -> None:
        with pytest.raises(LexError, match="Invalid escape sequence") as exc_info:
            _tokens('x "ab\\q"')
        assert (exc_info.value.line, exc_info.value.column) == (1, 6)

    def test_unterminated_string_reports_opening_quote(self) -> None:
        with pytest.raises(LexError, match="Unterminated string literal") as exc_info:
            _tokens('key "abc')
        assert (exc_info.value.line, exc_info.value.column, exc_info.value.offset) == (1, 5, 4)

    def test_newline_ends_string_as_unterminated(self) -> None:
        with pytest.raises(LexError, match="Unterminated"):
            _tokens('"abc\ndef"')

    def test_backslash_newline_continues_string(self) -> None:
        assert _values('"abc\\\ndef"') == ["abcdef"]

    def test_reserved_characters_are_literal_inside_quotes(self) -> None:
        assert _values('"{;} # x"') == ["{;} # x"]


# ###############
# Triple-Quoted Strings
# ###############


class TestTripleQuotedStrings:
    def test_triple_quoted_string_keeps_newlines(self) -> None:
        (tok,) = _tokens_no_eof('"""line one\nline two"""')
        assert tok.type == TokenType.TRIPLE_QUOTED_STRING
        assert tok.value == "line one\nline two"

    def test_embedded_quote_is_literal(self) -> None:
        assert _values('"""say "hi" now"""') == ['say "hi" now']

    def test_escapes_are_processed(self) -> None:
        assert _values('"""a\\tb"""') == ["a\tb"]

    def test_unterminated_triple_quote(self) -> None:
        with pytest.raises(LexError, match="Unterminated triple-quoted string") as exc_info:
            _tokens('\n  """abc\n')
        assert (exc_info.value.line, exc_info.value.column) == (2, 3)

    def test_disabled_triple_quotes_lex_as_plain_strings(self) -> None:
        assert _types('"""x"""', allow_triple_quotes=False) == [TokenType.QUOTED_STRING] * 3
        assert _values('"""x"""', allow_triple_quotes=False) == ["", "x", ""]

    def test_lines_are_counted_inside_triple_quotes(self) -> None:
        tokens = _tokens_no_eof('"""a\nb\nc""" next')
        assert (tokens[1].line, tokens[1].column) == (3, 6)


# ###############
# Terminators
# ###############


class TestTerminators:
    def test_semicolon_and_newline_end_a_directive(self) -> None:
        tokens = _tokens_no_eof("a;b\nc")
        assert [t.type for t in tokens] == [
            TokenType.WORD,
            TokenType.END_OF_DIRECTIVE,
            TokenType.WORD,
            TokenType.END_OF_DIRECTIVE,
            TokenType.WORD,
        ]
        assert tokens[1].value == ";"
        assert tokens[3].value == "\n"

    def test_consecutive_terminators_collapse(self) -> None:
        tokens = _tokens_no_eof("a;\n\n ;  \n\nb")
        assert [t.type for t in tokens] == [TokenType.WORD, TokenType.END_OF_DIRECTIVE, TokenType.WORD]
        assert tokens[1].value == ";"

    def test_crlf_counts_as_one_line(self) -> None:
        tokens = _tokens_no_eof("a\r\nb")
        assert (tokens[2].line, tokens[2].column) == (2, 1)

    def test_unicode_line_separator_ends_directive(self) -> None:
        assert _types("a\u2028b") == [TokenType.WORD, TokenType.END_OF_DIRECTIVE, TokenType.WORD]


# ###############
# Comments
# ###############


class TestComments:
    def test_hash_comment_runs_to_end_of_line(self) -> None:
        tokens = _tokens_no_eof("# note\nkey")
        assert [t.type for t in tokens] == [TokenType.COMMENT, TokenType.END_OF_DIRECTIVE, TokenType.WORD]
        assert tokens[0].text == "# note"

    def test_hash_after_word_starts_comment(self) -> None:
        assert _types("key value # trailing") == [TokenType.WORD, TokenType.WORD, TokenType.COMMENT]

    def test_backslash_in_comment_does_not_continue_line(self) -> None:
        tokens = _tokens_no_eof("# note \\\nkey")
        assert [t.type for t in tokens] == [TokenType.COMMENT, TokenType.END_OF_DIRECTIVE, TokenType.WORD]
        assert tokens[0].text == "# note \\"

    def test_c_style_line_comment(self) -> None:
        assert _types("key // note", allow_c_style_comments=True) == [TokenType.WORD, TokenType.COMMENT]

    def test_c_style_block_comment_spans_lines(self) -> None:
        tokens = _tokens_no_eof("/* a\n b */ key", allow_c_style_comments=True)
        assert tokens[0].type == TokenType.COMMENT
        assert tokens[0].text == "/* a\n b */"
        assert (tokens[1].line, tokens[1].column) == (2, 7)

    def test_block_comments_do_not_nest(self) -> None:
        assert _values("/* /* x */ y", allow_c_style_comments=True) == ["/* /* x */", "y"]

    def test_unterminated_block_comment_reports_start(self) -> None:
        with pytest.raises(LexError, match="Unterminated block comment") as exc_info:
            _tokens("key /* never closed", allow_c_style_comments=True)
        assert (exc_info.value.line, exc_info.value.column) == (1, 5)


# ###############
# Line Continuations
# ###############


class TestLineContinuations:
    def test_continuation_between_arguments(self) -> None:
        assert _types("a \\\n b") == [TokenType.WORD, TokenType.LINE_CONTINUATION, TokenType.WORD]

    def test_continuation_inside_word_joins_it(self) -> None:
        assert _values("ab\\\ncd") == ["abcd"]

    def test_disabled_continuation_is_rejected(self) -> None:
        with pytest.raises(LexError, match="Line continuations are not enabled"):
            _tokens("a \\\n b", allow_line_continuations=False)


# ###############
# Extensions
# ###############


class TestExtensions:
    def test_commas_are_argument_separators(self) -> None:
        assert _types("a 1, 2") == [
            TokenType.WORD,
            TokenType.WORD,
            TokenType.ARGUMENT_SEPARATOR,
            TokenType.WORD,
        ]

    def test_commas_are_word_characters_when_separators_disabled(self) -> None:
        assert _values("a 1,2", allow_argument_separators=False) == ["a", "1,2"]

    def test_punctuator_splits_words(self) -> None:
        tokens = _tokens_no_eof("key=value", punctuators=frozenset({"="}))
        assert [(t.type, t.value) for t in tokens] == [
            (TokenType.WORD, "key"),
            (TokenType.PUNCTUATOR, "="),
            (TokenType.WORD, "value"),
        ]

    def test_parentheses_are_expression_tokens_when_enabled(self) -> None:
        assert _types("(a)", allow_expression_arguments=True) == [
            TokenType.EXPRESSION_OPEN,
            TokenType.WORD,
            TokenType.EXPRESSION_CLOSE,
        ]

    def test_parentheses_are_rejected_by_default(self) -> None:
        with pytest.raises(LexError, match="Unexpected character"):
            _tokens("f(x)")


# ###############
# Characters and Positions
# ###############


class TestCharactersAndPositions:
    def test_control_character_is_forbidden(self) -> None:
        with pytest.raises(LexError, match="Forbidden character U\\+0001") as exc_info:
            _tokens("ab\x01")
        assert exc_info.value.column == 3

    def test_bidi_character_is_forbidden_by_default(self) -> None:
        with pytest.raises(LexError, match="U\\+202E"):
            _tokens("a\u202eb")

    def test_bidi_character_allowed_when_not_forbidden(self) -> None:
        assert _values("a\u202eb", forbid_bidi_characters=False) == ["a\u202eb"]

    def test_leading_byte_order_mark_is_skipped(self) -> None:
        (tok,) = _tokens_no_eof("\ufeffkey")
        assert tok.value == "key"
        assert tok.column == 1

    def test_offset_counts_utf8_bytes(self) -> None:
        tokens = _tokens_no_eof("é x")
        assert (tokens[1].column, tokens[1].offset) == (3, 3)

    def test_positions_across_lines(self) -> None:
        tokens = _tokens_no_eof("a\n  bb c")
        assert [(t.line, t.column, t.offset) for t in tokens] == [(1, 1, 0), (1, 2, 1), (2, 3, 4), (2, 6, 7)]


# ###############
# Quoting Helpers
# ###############


class TestRequiresQuotes:
    @pytest.mark.parametrize("text", ["plain", "8080", "a=b", "/etc/hosts", "grüße", "x.y-z_1"])
    def test_bare_words(self, text: str) -> None:
        assert not requires_quotes(text)

    @pytest.mark.parametrize("text", ["", "a b", "a;b", "{", "a}", "#x", 'say"', "a\\b", "a\nb", "a,b", "\ufeffx"])
    def test_text_needing_quotes(self, text: str) -> None:
        assert requires_quotes(text)

    def test_comma_is_bare_without_separators(self) -> None:
        assert not requires_quotes("a,b", ParserOptions(allow_argument_separators=False))

    def test_comment_prefix_needs_quotes_with_c_comments(self) -> None:
        assert not requires_quotes("//x")
        assert requires_quotes("//x", ParserOptions(allow_c_style_comments=True))

    def test_punctuator_needs_quotes(self) -> None:
        assert requires_quotes("a=b", ParserOptions(punctuators=frozenset({"="})))


class TestQuote:
    def test_quote_escapes_specials(self) -> None:
        assert quote('a"b\\c') == '"a\\"b\\\\c"'
        assert quote("a\nb\tc") == '"a\\nb\\tc"'

    def test_triple_quote_keeps_newlines(self) -> None:
        assert quote("a\nb", triple=True) == '"""a\nb"""'

    def test_triple_quote_escapes_trailing_and_doubled_quotes(self) -> None:
        assert quote('x"', triple=True) == '"""x\\""""'
        assert quote('a""b', triple=True) == '"""a\\""b"""'

    def test_unicode_line_separator_cannot_be_single_quoted(self) -> None:
        with pytest.raises(SerializeError):
            quote("a\u2028b")

    def test_forbidden_character_cannot_be_quoted(self) -> None:
        with pytest.raises(SerializeError):
            quote("a\x01b")

    @pytest.mark.parametrize("text", ["", "a b", 'q"q', "a\\b", "tab\there", "{;}"])
    def test_quoted_text_lexes_back_to_itself(self, text: str) -> None:
        assert _values(quote(text)) == [text]
