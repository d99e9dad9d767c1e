"""Tests for the binding expression tokenizer."""

import pytest

from vellum.errors import ExpressionError
from vellum.expr.lexer import TokenType, tokenize


def types(source):
    return [token.type for token in tokenize(source)]


class TestTokenize:
    """Token streams for representative expressions."""

    def test_identifier_path(self):
        """Dotted paths are identifiers separated by dots."""
        assert types("user.name") == [
            TokenType.IDENTIFIER, TokenType.DOT, TokenType.IDENTIFIER, TokenType.EOF,
        ]

    def test_integer_and_float(self):
        """A decimal point makes a float."""
        tokens = tokenize("42 3.14")
        assert tokens[0].type == TokenType.INTEGER
        assert tokens[0].value == "42"
        assert tokens[1].type == TokenType.FLOAT
        assert tokens[1].value == "3.14"

    def test_trailing_dot_is_not_a_float(self):
        """``1.`` followed by a name is an integer and a member access."""
        assert types("1.x")[:3] == [TokenType.INTEGER, TokenType.DOT, TokenType.IDENTIFIER]

    def test_keywords(self):
        assert types("if true then false else x")[:6] == [
            TokenType.IF, TokenType.TRUE, TokenType.THEN,
            TokenType.FALSE, TokenType.ELSE, TokenType.IDENTIFIER,
        ]

    def test_two_character_operators_win(self):
        """``<=`` is one token, not ``<`` followed by ``=``."""
        assert types("a <= b >= c == d != e")[1::2][:4] == [
            TokenType.LE, TokenType.GE, TokenType.EQ, TokenType.NE,
        ]

    def test_logical_operators(self):
        assert types("a && b || !c") == [
            TokenType.IDENTIFIER, TokenType.AND, TokenType.IDENTIFIER, TokenType.OR,
            TokenType.BANG, TokenType.IDENTIFIER, TokenType.EOF,
        ]

    def test_offsets_are_character_positions(self):
        tokens = tokenize("a  +  bb")
        assert [token.offset for token in tokens] == [0, 3, 6, 8]
        assert tokens[2].length == 2


class TestStrings:
    """String literal handling."""

    def test_single_quoted(self):
        tokens = tokenize("'hello world'")
        assert tokens[0].type == TokenType.STRING
        assert tokens[0].value == "hello world"

    def test_double_quoted(self):
        assert tokenize('"hi"')[0].value == "hi"

    def test_escapes(self):
        assert tokenize(r"'a\'b\nc'")[0].value == "a'b\nc"

    def test_unterminated_string(self):
        with pytest.raises(ExpressionError) as exc_info:
            tokenize("name == 'abc")
        assert "Unterminated string" in exc_info.value.message
        assert exc_info.value.offset == 8


class TestLexerErrors:
    """Characters outside the expression alphabet."""

    def test_unexpected_character(self):
        with pytest.raises(ExpressionError) as exc_info:
            tokenize("a @ b")
        assert exc_info.value.message == "Unexpected character '@'"
        assert exc_info.value.offset == 2

    def test_single_ampersand_is_rejected(self):
        with pytest.raises(ExpressionError):
            tokenize("a & b")
