"""Statement tree — one tagged variant per classified source line."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from .expressions import Expression


class StatementKind(str, Enum):
    ASSIGN = "ASSIGN"
    ARRAY_DECLARE = "ARRAY_DECLARE"
    INDEX_ASSIGN = "INDEX_ASSIGN"
    FOR_LOOP = "FOR_LOOP"
    WHILE_LOOP = "WHILE_LOOP"
    CONDITIONAL = "CONDITIONAL"
    OUTPUT = "OUTPUT"
    COMMENT = "COMMENT"
    BLANK = "BLANK"
    UNRECOGNIZED = "UNRECOGNIZED"
    # Markers: produced by the classifier, consumed by the parser.
    ELSE = "ELSE"
    ELSE_IF = "ELSE_IF"


CONTROL_KINDS: frozenset[StatementKind] = frozenset(
    {
        StatementKind.FOR_LOOP,
        StatementKind.WHILE_LOOP,
        StatementKind.CONDITIONAL,
        StatementKind.ELSE,
        StatementKind.ELSE_IF,
    }
)


class Statement(BaseModel):
    kind: StatementKind
    line: int = 0
    text: str = ""

    @property
    def is_control(self) -> bool:
        return self.kind in CONTROL_KINDS

    def __str__(self) -> str:
        return f"{self.kind.value.lower()} {self.text}".rstrip()


class Assign(Statement):
    kind: StatementKind = StatementKind.ASSIGN
    target: str
    value: Expression


class ArrayDeclare(Statement):
    kind: StatementKind = StatementKind.ARRAY_DECLARE
    target: str
    elements: list[Expression] = []


class IndexAssign(Statement):
    kind: StatementKind = StatementKind.INDEX_ASSIGN
    target: str
    index: Expression
    value: Expression


class ForLoop(Statement):
    kind: StatementKind = StatementKind.FOR_LOOP
    counter: str
    start: Expression
    end: Expression
    step: Expression
    descending: bool = False
    body: list[Statement] = []


class WhileLoop(Statement):
    kind: StatementKind = StatementKind.WHILE_LOOP
    condition: Expression
    body: list[Statement] = []


class Conditional(Statement):
    kind: StatementKind = StatementKind.CONDITIONAL
    condition: Expression
    body: list[Statement] = []
    else_body: list[Statement] | None = None


class OutputPart(BaseModel):
    """One comma-separated operand: a string literal or an expression."""

    literal: str | None = None
    expression: Expression | None = None


class Output(Statement):
    kind: StatementKind = StatementKind.OUTPUT
    parts: list[OutputPart] = []


class ElseIf(Statement):
    kind: StatementKind = StatementKind.ELSE_IF
    condition: Expression
