"""Recursive-descent parser for binding expressions.

Grammar, lowest precedence first::

    expression     := conditional
    conditional    := "if" or "then" expression "else" expression | or
    or             := and ("||" and)*
    and            := comparison ("&&" comparison)*
    comparison     := additive (("==" | "!=" | "<" | "<=" | ">" | ">=") additive)*
    additive       := multiplicative (("+" | "-") multiplicative)*
    multiplicative := unary (("*" | "/") unary)*
    unary          := ("!" | "-") unary | postfix
    postfix        := primary ("." IDENT ("(" args ")")?)*
    primary        := STRING | INTEGER | FLOAT | "true" | "false"
                    | path ("(" args ")")? | "(" expression ")"
"""

from __future__ import annotations

import logging
from typing import List, Optional

from vellum.errors import ExpressionError
from vellum.ir.expr import (
    BinaryOp,
    BinaryOperator,
    BindingExpr,
    Conditional,
    Expr,
    FieldAccess,
    Literal,
    MethodCall,
    SharedFieldAccess,
    UnaryOp,
    UnaryOperator,
)
from vellum.ir.span import Span

from .lexer import Lexer, Token, TokenType

logger = logging.getLogger(__name__)

SHARED_ROOT = "shared"
SELF_RECEIVER = "self"

COMPARISON_OPERATORS = {
    TokenType.EQ: BinaryOperator.EQ,
    TokenType.NE: BinaryOperator.NE,
    TokenType.LT: BinaryOperator.LT,
    TokenType.LE: BinaryOperator.LE,
    TokenType.GT: BinaryOperator.GT,
    TokenType.GE: BinaryOperator.GE,
}

ADDITIVE_OPERATORS = {
    TokenType.PLUS: BinaryOperator.ADD,
    TokenType.MINUS: BinaryOperator.SUB,
}

MULTIPLICATIVE_OPERATORS = {
    TokenType.STAR: BinaryOperator.MUL,
    TokenType.SLASH: BinaryOperator.DIV,
}


class ExprParser:
    """Parses a token stream into an :class:`Expr` tree."""

    def __init__(self, source: str):
        self.source = source
        self.tokens: List[Token] = Lexer(source).tokenize()
        self.pos = 0

    # ------------------------------------------------------------------
    # Token helpers
    # ------------------------------------------------------------------

    def current(self) -> Token:
        return self.tokens[self.pos]

    def peek(self, offset: int = 1) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def advance(self) -> Token:
        token = self.tokens[self.pos]
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def match(self, *types: TokenType) -> bool:
        return self.current().type in types

    def consume_if(self, token_type: TokenType) -> Optional[Token]:
        if self.match(token_type):
            return self.advance()
        return None

    def expect(self, token_type: TokenType, description: str) -> Token:
        if not self.match(token_type):
            raise self.error(f"Expected {description}")
        return self.advance()

    def error(self, message: str, token: Optional[Token] = None) -> ExpressionError:
        token = token or self.current()
        if token.type == TokenType.EOF:
            detail = f"{message}, found end of expression"
        else:
            detail = f"{message}, found '{token.value}'"
        return ExpressionError(detail, offset=token.offset)

    # ------------------------------------------------------------------
    # Grammar
    # ------------------------------------------------------------------

    def parse(self) -> Expr:
        if self.match(TokenType.EOF):
            raise ExpressionError("Empty expression")
        expr = self.parse_expression()
        if not self.match(TokenType.EOF):
            raise self.error("Unexpected trailing input")
        return expr

    def parse_expression(self) -> Expr:
        return self.parse_conditional()

    def parse_conditional(self) -> Expr:
        if not self.consume_if(TokenType.IF):
            return self.parse_or()
        condition = self.parse_or()
        self.expect(TokenType.THEN, "'then'")
        then_branch = self.parse_expression()
        self.expect(TokenType.ELSE, "'else'")
        else_branch = self.parse_expression()
        return Conditional(condition, then_branch, else_branch)

    def parse_or(self) -> Expr:
        left = self.parse_and()
        while self.consume_if(TokenType.OR):
            left = BinaryOp(BinaryOperator.OR, left, self.parse_and())
        return left

    def parse_and(self) -> Expr:
        left = self.parse_comparison()
        while self.consume_if(TokenType.AND):
            left = BinaryOp(BinaryOperator.AND, left, self.parse_comparison())
        return left

    def parse_comparison(self) -> Expr:
        left = self.parse_additive()
        while self.current().type in COMPARISON_OPERATORS:
            op = COMPARISON_OPERATORS[self.advance().type]
            left = BinaryOp(op, left, self.parse_additive())
        return left

    def parse_additive(self) -> Expr:
        left = self.parse_multiplicative()
        while self.current().type in ADDITIVE_OPERATORS:
            op = ADDITIVE_OPERATORS[self.advance().type]
            left = BinaryOp(op, left, self.parse_multiplicative())
        return left

    def parse_multiplicative(self) -> Expr:
        left = self.parse_unary()
        while self.current().type in MULTIPLICATIVE_OPERATORS:
            op = MULTIPLICATIVE_OPERATORS[self.advance().type]
            left = BinaryOp(op, left, self.parse_unary())
        return left

    def parse_unary(self) -> Expr:
        if self.consume_if(TokenType.BANG):
            return UnaryOp(UnaryOperator.NOT, self.parse_unary())
        if self.consume_if(TokenType.MINUS):
            return UnaryOp(UnaryOperator.NEG, self.parse_unary())
        return self.parse_postfix()

    def parse_postfix(self) -> Expr:
        expr = self.parse_primary()
        while self.match(TokenType.DOT):
            self.advance()
            name = self.expect(TokenType.IDENTIFIER, "method name after '.'").value
            if not self.match(TokenType.LPAREN):
                raise self.error(f"Expected '(' after method name '{name}'")
            expr = MethodCall(expr, name, self.parse_arguments())
        return expr

    def parse_primary(self) -> Expr:
        token = self.current()

        if token.type == TokenType.STRING:
            self.advance()
            return Literal.of_string(token.value)
        if token.type == TokenType.INTEGER:
            self.advance()
            return Literal.of_int(int(token.value))
        if token.type == TokenType.FLOAT:
            self.advance()
            return Literal.of_float(float(token.value))
        if token.type == TokenType.TRUE:
            self.advance()
            return Literal.of_bool(True)
        if token.type == TokenType.FALSE:
            self.advance()
            return Literal.of_bool(False)
        if token.type == TokenType.IDENTIFIER:
            return self.parse_path()
        if token.type == TokenType.LPAREN:
            self.advance()
            expr = self.parse_expression()
            self.expect(TokenType.RPAREN, "')'")
            return expr

        raise self.error("Expected expression")

    def parse_path(self) -> Expr:
        segments = [self.advance().value]
        while self.match(TokenType.DOT) and self.peek().type == TokenType.IDENTIFIER:
            self.advance()
            segments.append(self.advance().value)

        shared = segments[0] == SHARED_ROOT and len(segments) > 1
        if shared:
            segments = segments[1:]

        if not self.match(TokenType.LPAREN):
            if shared:
                return SharedFieldAccess(tuple(segments))
            return FieldAccess(tuple(segments))

        args = self.parse_arguments()
        method = segments.pop()
        if shared:
            receiver: Expr = SharedFieldAccess(tuple(segments))
        elif segments:
            receiver = FieldAccess(tuple(segments))
        else:
            receiver = Literal.of_string(SELF_RECEIVER)
        return MethodCall(receiver, method, args)

    def parse_arguments(self) -> tuple:
        self.expect(TokenType.LPAREN, "'('")
        args: List[Expr] = []
        if self.consume_if(TokenType.RPAREN):
            return tuple(args)
        while True:
            args.append(self.parse_expression())
            if self.consume_if(TokenType.COMMA):
                continue
            self.expect(TokenType.RPAREN, "',' or ')'")
            return tuple(args)


def parse_expression(source: str) -> Expr:
    """Parse expression text with no source position attached."""
    return ExprParser(source).parse()


def parse_binding_expr(source: str, start: int = 0, line: int = 1, column: int = 1) -> BindingExpr:
    """
    Parse the text found between ``{`` and ``}``.

    ``start``, ``line`` and ``column`` locate the first character of
    ``source`` in the document; the returned span and any raised
    :class:`ExpressionError` are expressed in document coordinates.
    """
    end = start + len(source.encode("utf-8"))
    try:
        expr = ExprParser(source).parse()
    except ExpressionError as exc:
        char_offset = exc.offset
        byte_offset = start + len(source[:char_offset].encode("utf-8"))
        exc.span = Span(byte_offset, end, line, column + char_offset)
        logger.debug(f"Expression '{source}' failed at offset {char_offset}: {exc.message}")
        raise
    return BindingExpr(expr, Span(start, end, line, column))


__all__ = ["ExprParser", "parse_expression", "parse_binding_expr"]
