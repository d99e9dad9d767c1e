"""Binding expression tokenizer and parser."""

from .lexer import Lexer, Token, TokenType, tokenize
from .parser import ExprParser, parse_binding_expr, parse_expression

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "tokenize",
    "ExprParser",
    "parse_binding_expr",
    "parse_expression",
]
