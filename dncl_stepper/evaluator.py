"""Expression Evaluator — tree-walking evaluation against an Environment."""

from __future__ import annotations

import logging
from typing import Any, Callable

from .environment import Environment
from .expressions import BinaryOp, Expr, Expression, Index, Name, Number, UnaryOp
from .run_types import Diagnostic, DiagnosticKind, ErrorPolicy

logger = logging.getLogger(__name__)

DEFAULT_VALUE = 0


class EvaluationError(Exception):
    """Raised when an expression cannot produce a value."""

    def __init__(self, message: str, line: int = 0):
        super().__init__(message)
        self.message = message
        self.line = line


def _real_div(a: Any, b: Any) -> Any:
    if b == 0:
        return Operators.UNCOMPUTABLE
    quotient = a / b
    if isinstance(quotient, float) and quotient.is_integer():
        return int(quotient)
    return quotient


def _floor_div(a: Any, b: Any) -> Any:
    if b == 0:
        return Operators.UNCOMPUTABLE
    return int(a // b)


class Operators:
    """Binary and unary operator evaluation with an explicit UNCOMPUTABLE sentinel.

    Comparison and logical operators yield the integers 1 and 0. ``//`` floors
    toward negative infinity; ``/`` is real division.
    """

    class _Uncomputable:
        """Sentinel value indicating an operation could not be computed."""

        def __repr__(self) -> str:
            return "UNCOMPUTABLE"

    UNCOMPUTABLE = _Uncomputable()

    BINOP_TABLE: dict[str, Any] = {
        "+": lambda a, b: a + b,
        "-": lambda a, b: a - b,
        "*": lambda a, b: a * b,
        "/": _real_div,
        "//": _floor_div,
        "%": lambda a, b: a % b if b != 0 else Operators.UNCOMPUTABLE,
        "==": lambda a, b: int(a == b),
        "!=": lambda a, b: int(a != b),
        "<": lambda a, b: int(a < b),
        ">": lambda a, b: int(a > b),
        "<=": lambda a, b: int(a <= b),
        ">=": lambda a, b: int(a >= b),
        "&&": lambda a, b: int(bool(a) and bool(b)),
        "||": lambda a, b: int(bool(a) or bool(b)),
    }

    @classmethod
    def eval_binop(cls, op: str, lhs: Any, rhs: Any) -> Any:
        fn = cls.BINOP_TABLE.get(op)
        if fn is None:
            return cls.UNCOMPUTABLE
        try:
            return fn(lhs, rhs)
        except (ArithmeticError, TypeError):
            return cls.UNCOMPUTABLE

    @classmethod
    def eval_unop(cls, op: str, operand: Any) -> Any:
        try:
            if op == "-":
                return -operand
            if op == "+":
                return +operand
            if op == "!":
                return int(not operand)
        except TypeError:
            pass
        return cls.UNCOMPUTABLE


class Evaluator:
    """Evaluates parsed expressions against a read-only view of an Environment.

    Under ``ErrorPolicy.LENIENT`` a failed evaluation yields 0 and is reported
    through *on_diagnostic*; under ``ErrorPolicy.STRICT`` it raises
    EvaluationError.
    """

    def __init__(
        self,
        env: Environment,
        policy: ErrorPolicy = ErrorPolicy.LENIENT,
        on_diagnostic: Callable[[Diagnostic], None] | None = None,
    ):
        self._env = env
        self._policy = policy
        self._on_diagnostic = on_diagnostic
        self._EXPR_DISPATCH: dict[type, Callable[[Any], Any]] = {
            Number: self._eval_number,
            Name: self._eval_name,
            Index: self._eval_index,
            UnaryOp: self._eval_unary,
            BinaryOp: self._eval_binary,
        }

    def evaluate(self, expression: Expression, line: int = 0) -> Any:
        """Evaluate *expression*, degrading to 0 on failure when lenient."""
        try:
            return self.evaluate_strict(expression, line)
        except EvaluationError as exc:
            if self._policy == ErrorPolicy.STRICT:
                raise
            logger.debug("Line %d: %s -> %d", line, exc.message, DEFAULT_VALUE)
            if self._on_diagnostic is not None:
                self._on_diagnostic(
                    Diagnostic(
                        line=line,
                        kind=DiagnosticKind.EVALUATION_FAILURE,
                        message=f"『{expression.source}』: {exc.message}",
                    )
                )
            return DEFAULT_VALUE

    def evaluate_strict(self, expression: Expression, line: int = 0) -> Any:
        if expression.tree is None:
            raise EvaluationError(expression.error or "式を解釈できません", line)
        try:
            return self._eval(expression.tree)
        except EvaluationError as exc:
            exc.line = line
            raise

    # ── node evaluation ──────────────────────────────────────────

    def _eval(self, node: Expr) -> Any:
        handler = self._EXPR_DISPATCH.get(type(node))
        if handler is None:
            raise EvaluationError(f"未対応の式です: {type(node).__name__}")
        return handler(node)

    def _eval_number(self, node: Number) -> Any:
        return node.value

    def _eval_name(self, node: Name) -> Any:
        if node.name not in self._env.variables:
            raise EvaluationError(f"変数『{node.name}』は定義されていません")
        return self._env.variables[node.name]

    def _eval_index(self, node: Index) -> Any:
        index = self._eval(node.index)
        return self._env.read_index(node.name, index)

    def _eval_unary(self, node: UnaryOp) -> Any:
        result = Operators.eval_unop(node.op, self._eval(node.operand))
        if result is Operators.UNCOMPUTABLE:
            raise EvaluationError(f"演算 {node.op} を計算できません")
        return result

    def _eval_binary(self, node: BinaryOp) -> Any:
        lhs = self._eval(node.left)
        rhs = self._eval(node.right)
        result = Operators.eval_binop(node.op, lhs, rhs)
        if result is Operators.UNCOMPUTABLE:
            raise EvaluationError(f"{lhs} {node.op} {rhs} を計算できません")
        return result
