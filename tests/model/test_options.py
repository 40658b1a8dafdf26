# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for parser and mapper option records."""

import pytest
from pydantic import ValidationError

from confetti.model.options import MAX_DEPTH_LIMIT, MapperOptions, NamingPolicy, ParserOptions


class TestParserOptions:
    def test_defaults(self) -> None:
        options = ParserOptions()
        assert not options.allow_c_style_comments
        assert options.allow_triple_quotes
        assert not options.allow_expression_arguments
        assert options.allow_line_continuations
        assert options.allow_argument_separators
        assert not options.require_semicolons
        assert options.forbid_bidi_characters
        assert options.punctuators == frozenset()
        assert (options.max_depth, options.max_directives, options.max_arguments) == (100, 100_000, 10_000)

    def test_hyphenated_aliases(self) -> None:
        options = ParserOptions.model_validate({"allow-c-style-comments": True, "max-depth": 5})
        assert options.allow_c_style_comments
        assert options.max_depth == 5

    def test_unknown_keys_are_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ParserOptions.model_validate({"allow-everything": True})

    def test_negative_limits_are_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ParserOptions(max_depth=-1)

    def test_depth_limit_is_bounded(self) -> None:
        ParserOptions(max_depth=MAX_DEPTH_LIMIT)
        with pytest.raises(ValidationError):
            ParserOptions(max_depth=MAX_DEPTH_LIMIT + 1)

    @pytest.mark.parametrize("punctuator", ["==", "", " ", "{", "}", ";", "#", '"', "\\"])
    def test_invalid_punctuators(self, punctuator: str) -> None:
        with pytest.raises(ValidationError):
            ParserOptions(punctuators=frozenset({punctuator}))

    def test_parentheses_conflict_with_expressions(self) -> None:
        ParserOptions(punctuators=frozenset({"("}))
        with pytest.raises(ValidationError, match="expression"):
            ParserOptions(punctuators=frozenset({"("}), allow_expression_arguments=True)

    def test_comma_conflicts_with_separators(self) -> None:
        ParserOptions(punctuators=frozenset({","}), allow_argument_separators=False)
        with pytest.raises(ValidationError, match="separators"):
            ParserOptions(punctuators=frozenset({","}))

    def test_frozen(self) -> None:
        with pytest.raises(ValidationError):
            ParserOptions().max_depth = 3  # type: ignore[misc]


class TestMapperOptions:
    def test_defaults(self) -> None:
        options = MapperOptions()
        assert options.naming is NamingPolicy.IDENTITY
        assert options.indent == "  "
        assert not options.strict
        assert not options.always_quote_text
        assert options.parser_options == ParserOptions()

    def test_nested_parser_options_from_mapping(self) -> None:
        options = MapperOptions.model_validate(
            {"naming": "kebab-case", "parser-options": {"require-semicolons": True}}
        )
        assert options.naming is NamingPolicy.KEBAB_CASE
        assert options.parser_options.require_semicolons

    @pytest.mark.parametrize("indent", ["", "\t", "    "])
    def test_valid_indent(self, indent: str) -> None:
        assert MapperOptions(indent=indent).indent == indent

    def test_indent_must_be_blank(self) -> None:
        with pytest.raises(ValidationError, match="indent"):
            MapperOptions(indent="--")


class TestNamingPolicy:
    @pytest.mark.parametrize(
        ("identifier", "expected"),
        [
            ("port", "port"),
            ("max_connections", "max-connections"),
            ("maxConnections", "max-connections"),
            ("server2Name", "server2-name"),
            ("ListenAddress", "listen-address"),
        ],
    )
    def test_kebab_case(self, identifier: str, expected: str) -> None:
        assert NamingPolicy.KEBAB_CASE.apply(identifier) == expected

    def test_identity(self) -> None:
        assert NamingPolicy.IDENTITY.apply("max_connections") == "max_connections"
