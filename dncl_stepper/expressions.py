"""Expression AST — literal, identifier, index, unary and binary nodes."""

from __future__ import annotations

from pydantic import BaseModel


class Expr(BaseModel):
    """Base class for expression tree nodes."""


class Number(Expr):
    value: int | float

    def __str__(self) -> str:
        return str(self.value)


class Name(Expr):
    name: str

    def __str__(self) -> str:
        return self.name


class Index(Expr):
    name: str
    index: Expr

    def __str__(self) -> str:
        return f"{self.name}[{self.index}]"


class UnaryOp(Expr):
    op: str
    operand: Expr

    def __str__(self) -> str:
        return f"({self.op} {self.operand})"


class BinaryOp(Expr):
    op: str
    left: Expr
    right: Expr

    def __str__(self) -> str:
        return f"({self.left} {self.op} {self.right})"


class Expression(BaseModel):
    """An expression as written in the source, with its parse result.

    ``tree`` is None when the text could not be parsed; ``error`` then holds
    the reason. Evaluation of such an expression is an evaluation failure.
    """

    source: str
    tree: Expr | None = None
    error: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.tree is not None

    def __str__(self) -> str:
        return self.source

    def array_names(self) -> list[str]:
        """Names of every array read through an index, in source order."""
        return list(_array_names(self.tree)) if self.tree is not None else []


def _array_names(node: Expr):
    if isinstance(node, Index):
        yield node.name
        yield from _array_names(node.index)
    elif isinstance(node, UnaryOp):
        yield from _array_names(node.operand)
    elif isinstance(node, BinaryOp):
        yield from _array_names(node.left)
        yield from _array_names(node.right)
