"""Lexical analyzer for binding expressions.

Converts the text between ``{`` and ``}`` into a stream of tokens. Token
positions are character offsets relative to the start of the expression.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from vellum.errors import ExpressionError


class TokenType(Enum):
    """Token types for binding expressions."""

    # Literals
    STRING = auto()
    INTEGER = auto()
    FLOAT = auto()

    # Identifiers and keywords
    IDENTIFIER = auto()
    TRUE = auto()
    FALSE = auto()
    IF = auto()
    THEN = auto()
    ELSE = auto()

    # Operators
    EQ = auto()
    NE = auto()
    LT = auto()
    LE = auto()
    GT = auto()
    GE = auto()
    AND = auto()
    OR = auto()
    PLUS = auto()
    MINUS = auto()
    STAR = auto()
    SLASH = auto()
    BANG = auto()

    # Delimiters
    DOT = auto()
    COMMA = auto()
    LPAREN = auto()
    RPAREN = auto()

    EOF = auto()


@dataclass
class Token:
    """A single token with its position in the expression text."""

    type: TokenType
    value: str
    offset: int
    length: int = 0

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, @{self.offset})"


KEYWORDS = {
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "if": TokenType.IF,
    "then": TokenType.THEN,
    "else": TokenType.ELSE,
}

# Longest spellings first so "<=" wins over "<"
OPERATORS = [
    ("==", TokenType.EQ),
    ("!=", TokenType.NE),
    ("<=", TokenType.LE),
    (">=", TokenType.GE),
    ("&&", TokenType.AND),
    ("||", TokenType.OR),
    ("<", TokenType.LT),
    (">", TokenType.GT),
    ("+", TokenType.PLUS),
    ("-", TokenType.MINUS),
    ("*", TokenType.STAR),
    ("/", TokenType.SLASH),
    ("!", TokenType.BANG),
    (".", TokenType.DOT),
    (",", TokenType.COMMA),
    ("(", TokenType.LPAREN),
    (")", TokenType.RPAREN),
]

ESCAPES = {"n": "\n", "t": "\t", "r": "\r"}


class Lexer:
    """Tokenizer for binding expression source."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.tokens: List[Token] = []

    def error(self, message: str, offset: Optional[int] = None) -> ExpressionError:
        return ExpressionError(message, offset=self.pos if offset is None else offset)

    def peek(self, offset: int = 0) -> Optional[str]:
        pos = self.pos + offset
        if pos < len(self.source):
            return self.source[pos]
        return None

    def advance(self) -> Optional[str]:
        if self.pos >= len(self.source):
            return None
        char = self.source[self.pos]
        self.pos += 1
        return char

    def read_string(self) -> str:
        start = self.pos
        quote = self.advance()
        chars = []
        while True:
            char = self.peek()
            if char is None:
                raise self.error("Unterminated string literal", start)
            if char == quote:
                self.advance()
                break
            if char == "\\":
                self.advance()
                escape = self.advance()
                if escape is None:
                    raise self.error("Unterminated string literal", start)
                chars.append(ESCAPES.get(escape, escape))
            else:
                chars.append(self.advance())
        return "".join(chars)

    def read_number(self) -> tuple[TokenType, str]:
        chars = []
        while self.peek() is not None and self.peek().isdigit():
            chars.append(self.advance())
        if self.peek() == "." and self.peek(1) is not None and self.peek(1).isdigit():
            chars.append(self.advance())
            while self.peek() is not None and self.peek().isdigit():
                chars.append(self.advance())
            return TokenType.FLOAT, "".join(chars)
        return TokenType.INTEGER, "".join(chars)

    def read_identifier(self) -> str:
        chars = []
        while self.peek() is not None and (self.peek().isalnum() or self.peek() == "_"):
            chars.append(self.advance())
        return "".join(chars)

    def add_token(self, token_type: TokenType, value: str, start: int) -> None:
        self.tokens.append(Token(token_type, value, start, self.pos - start))

    def tokenize(self) -> List[Token]:
        while self.pos < len(self.source):
            char = self.peek()
            if char.isspace():
                self.advance()
                continue

            start = self.pos

            if char in ("'", '"'):
                value = self.read_string()
                self.add_token(TokenType.STRING, value, start)
                continue

            if char.isdigit():
                token_type, value = self.read_number()
                self.add_token(token_type, value, start)
                continue

            if char.isalpha() or char == "_":
                word = self.read_identifier()
                self.add_token(KEYWORDS.get(word, TokenType.IDENTIFIER), word, start)
                continue

            for spelling, token_type in OPERATORS:
                if self.source.startswith(spelling, self.pos):
                    self.pos += len(spelling)
                    self.add_token(token_type, spelling, start)
                    break
            else:
                raise self.error(f"Unexpected character '{char}'")

        self.tokens.append(Token(TokenType.EOF, "", self.pos))
        return self.tokens


def tokenize(source: str) -> List[Token]:
    """Tokenize binding expression source."""
    return Lexer(source).tokenize()


__all__ = ["Token", "TokenType", "Lexer", "tokenize"]
