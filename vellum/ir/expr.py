"""Binding expression AST.

Expressions appear inside ``{...}`` in attribute values and are evaluated
against application state by a renderer. Every node is an immutable
dataclass that owns its children, so trees are never shared or cyclic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Tuple, Union

from .span import Span


class LiteralKind(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOL = "bool"


class BinaryOperator(str, Enum):
    """Binary operators, valued by their source spelling."""
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    AND = "&&"
    OR = "||"
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


class UnaryOperator(str, Enum):
    NOT = "!"
    NEG = "-"


class Expr:
    """Base class for expression nodes."""

    def children(self) -> Tuple["Expr", ...]:
        return ()

    def walk(self) -> Iterator["Expr"]:
        """Yield this node and every descendant, depth first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children()))

    def uses_shared(self) -> bool:
        """True when any part of the expression reads shared state."""
        return any(isinstance(node, SharedFieldAccess) for node in self.walk())

    def uses_model(self) -> bool:
        """True when any part of the expression reads the local model."""
        return any(isinstance(node, FieldAccess) for node in self.walk())


@dataclass(frozen=True)
class Literal(Expr):
    kind: LiteralKind
    value: Union[str, int, float, bool]

    @classmethod
    def of_string(cls, value: str) -> "Literal":
        return cls(LiteralKind.STRING, value)

    @classmethod
    def of_int(cls, value: int) -> "Literal":
        return cls(LiteralKind.INTEGER, value)

    @classmethod
    def of_float(cls, value: float) -> "Literal":
        return cls(LiteralKind.FLOAT, value)

    @classmethod
    def of_bool(cls, value: bool) -> "Literal":
        return cls(LiteralKind.BOOL, value)


@dataclass(frozen=True)
class FieldAccess(Expr):
    """Path into the local model: ``{user.name}``."""
    path: Tuple[str, ...]


@dataclass(frozen=True)
class SharedFieldAccess(Expr):
    """Path into shared state: ``{shared.theme}``. The ``shared`` prefix is implied."""
    path: Tuple[str, ...]


@dataclass(frozen=True)
class MethodCall(Expr):
    receiver: Expr
    method: str
    args: Tuple[Expr, ...] = ()

    def children(self) -> Tuple[Expr, ...]:
        return (self.receiver,) + tuple(self.args)


@dataclass(frozen=True)
class BinaryOp(Expr):
    op: BinaryOperator
    left: Expr
    right: Expr

    def children(self) -> Tuple[Expr, ...]:
        return (self.left, self.right)


@dataclass(frozen=True)
class UnaryOp(Expr):
    op: UnaryOperator
    operand: Expr

    def children(self) -> Tuple[Expr, ...]:
        return (self.operand,)


@dataclass(frozen=True)
class Conditional(Expr):
    condition: Expr
    then_branch: Expr
    else_branch: Expr

    def children(self) -> Tuple[Expr, ...]:
        return (self.condition, self.then_branch, self.else_branch)


@dataclass(frozen=True)
class BindingExpr:
    """A parsed expression together with its absolute source span."""
    expr: Expr
    span: Span = field(default_factory=Span, compare=False)

    def uses_shared(self) -> bool:
        return self.expr.uses_shared()

    def uses_model(self) -> bool:
        return self.expr.uses_model()


__all__ = [
    "LiteralKind",
    "BinaryOperator",
    "UnaryOperator",
    "Expr",
    "Literal",
    "FieldAccess",
    "SharedFieldAccess",
    "MethodCall",
    "BinaryOp",
    "UnaryOp",
    "Conditional",
    "BindingExpr",
]
