"""Executor / Trace Builder — recursive execution over the Statement tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from .environment import Environment, format_value
from .evaluator import EvaluationError, Evaluator
from .parser import ParsedProgram
from .run_types import (
    Diagnostic,
    DiagnosticKind,
    ErrorPolicy,
    ExecutionStats,
    StepperConfig,
)
from .statements import (
    ArrayDeclare,
    Assign,
    Conditional,
    ForLoop,
    IndexAssign,
    Output,
    Statement,
    StatementKind,
    WhileLoop,
)
from .trace_types import ExecutionTrace, Snapshot
from . import constants

logger = logging.getLogger(__name__)


class _StepBudgetExhausted(Exception):
    """Raised internally when the global step budget runs out."""

    pass


@dataclass
class RunState:
    """Everything one compilation mutates; created fresh per execute() call."""

    env: Environment
    evaluator: Evaluator
    snapshots: list[Snapshot] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    steps: int = 0
    loop_iterations: int = 0
    current_line: int = constants.INITIAL_LINE


class Executor:
    """Walks a ParsedProgram and records one Snapshot per observable action.

    Assignments, array writes and output append a Snapshot right after the
    mutation; loops append one per iteration and conditionals one per
    evaluation. A single step budget, shared by every statement and loop
    iteration of the run, bounds the total work.
    """

    def __init__(self, config: StepperConfig = StepperConfig()):
        self._config = config
        self._STMT_DISPATCH: dict[StatementKind, Callable[[Any, RunState], None]] = {
            StatementKind.ASSIGN: self._exec_assign,
            StatementKind.ARRAY_DECLARE: self._exec_array_declare,
            StatementKind.INDEX_ASSIGN: self._exec_index_assign,
            StatementKind.FOR_LOOP: self._exec_for,
            StatementKind.WHILE_LOOP: self._exec_while,
            StatementKind.CONDITIONAL: self._exec_conditional,
            StatementKind.OUTPUT: self._exec_output,
        }

    def execute(self, parsed: ParsedProgram) -> ExecutionTrace:
        """Execute *parsed* from an empty Environment and return its trace.

        Args:
            parsed: Statement tree produced by the parser.

        Returns:
            An ExecutionTrace. When the step budget runs out the trace stops
            at that point and ``truncated`` is set; otherwise its last
            Snapshot marks completion.
        """
        env = Environment()
        diagnostics: list[Diagnostic] = list(parsed.diagnostics)
        state = RunState(
            env=env,
            evaluator=Evaluator(env, self._config.policy, diagnostics.append),
            diagnostics=diagnostics,
        )
        initial_state = env.snapshot(-1, constants.INITIAL_LINE, constants.DESC_INITIAL)

        truncated = False
        try:
            self._exec_block(parsed.statements, state)
        except _StepBudgetExhausted:
            truncated = True
            logger.warning(
                "Step budget of %d exhausted at line %d; trace truncated",
                self._config.max_steps,
                state.current_line,
            )
            state.diagnostics.append(
                Diagnostic(
                    line=state.current_line,
                    kind=DiagnosticKind.STEP_BUDGET_EXHAUSTED,
                    message=f"実行ステップが上限 ({self._config.max_steps}) に達しました",
                )
            )

        if not truncated:
            self._record(
                state, parsed.program.last_line_number, constants.DESC_FINISHED
            )

        stats = ExecutionStats(
            steps=state.steps,
            snapshots=len(state.snapshots),
            loop_iterations=state.loop_iterations,
            console_lines=len(env.console),
            truncated=truncated,
        )

        if self._config.verbose:
            print(f"\n({stats.steps} steps, {stats.snapshots} snapshots)")

        return ExecutionTrace(
            snapshots=tuple(state.snapshots),
            stats=stats,
            initial_state=initial_state,
            truncated=truncated,
            diagnostics=tuple(state.diagnostics),
        )

    # ── helpers ──────────────────────────────────────────────────

    def _tick(self, state: RunState, line: int):
        state.current_line = line
        state.steps += 1
        if state.steps > self._config.max_steps:
            raise _StepBudgetExhausted()

    def _record(self, state: RunState, line: int, description: str):
        snapshot = state.env.snapshot(len(state.snapshots), line, description)
        state.snapshots.append(snapshot)
        if self._config.verbose:
            print(f"[step {snapshot.step_index}] line {line}: {description}")

    def _absorb(self, state: RunState, statement: Statement, kind, message: str):
        """No-op a statement: strict runs fail, lenient runs log a diagnostic."""
        if self._config.policy == ErrorPolicy.STRICT:
            raise EvaluationError(message, statement.line)
        logger.debug("Line %d: %s", statement.line, message)
        state.diagnostics.append(
            Diagnostic(line=statement.line, kind=kind, message=message)
        )

    def _arrays_declared(self, state: RunState, statement: Statement, expressions) -> bool:
        """False (after absorbing) if an operand indexes an undeclared array."""
        for expression in expressions:
            for name in expression.array_names():
                if not state.env.has_array(name):
                    self._absorb(
                        state,
                        statement,
                        DiagnosticKind.UNDECLARED_ARRAY,
                        f"配列『{name}』は宣言されていません",
                    )
                    return False
        return True

    def _eval(self, state: RunState, expression, line: int) -> Any:
        return state.evaluator.evaluate(expression, line)

    # ── dispatch ─────────────────────────────────────────────────

    def _exec_block(self, statements: list[Statement], state: RunState):
        for statement in statements:
            handler = self._STMT_DISPATCH.get(statement.kind)
            if handler is None:
                continue  # comment, blank or unrecognized
            self._tick(state, statement.line)
            handler(statement, state)

    # ── simple statements ────────────────────────────────────────

    def _exec_assign(self, stmt: Assign, state: RunState):
        if not self._arrays_declared(state, stmt, (stmt.value,)):
            return
        value = self._eval(state, stmt.value, stmt.line)
        state.env.variables[stmt.target] = value
        self._record(
            state,
            stmt.line,
            constants.DESC_ASSIGN.format(name=stmt.target, value=format_value(value)),
        )

    def _exec_array_declare(self, stmt: ArrayDeclare, state: RunState):
        if not self._arrays_declared(state, stmt, stmt.elements):
            return
        values = [self._eval(state, e, stmt.line) for e in stmt.elements]
        state.env.arrays[stmt.target] = values
        rendered = "[" + ", ".join(format_value(v) for v in values) + "]"
        self._record(
            state,
            stmt.line,
            constants.DESC_ARRAY_DECLARE.format(name=stmt.target, values=rendered),
        )

    def _exec_index_assign(self, stmt: IndexAssign, state: RunState):
        if not state.env.has_array(stmt.target):
            self._absorb(
                state,
                stmt,
                DiagnosticKind.UNDECLARED_ARRAY,
                f"配列『{stmt.target}』は宣言されていません",
            )
            return
        if not self._arrays_declared(state, stmt, (stmt.index, stmt.value)):
            return
        index = self._eval(state, stmt.index, stmt.line)
        value = self._eval(state, stmt.value, stmt.line)
        if not state.env.write_index(stmt.target, index, value):
            self._absorb(
                state,
                stmt,
                DiagnosticKind.INDEX_OUT_OF_RANGE,
                f"『{stmt.target}[{format_value(index)}]』は範囲外です",
            )
            return
        self._record(
            state,
            stmt.line,
            constants.DESC_INDEX_ASSIGN.format(
                name=stmt.target, index=format_value(index), value=format_value(value)
            ),
        )

    def _exec_output(self, stmt: Output, state: RunState):
        expressions = [p.expression for p in stmt.parts if p.expression is not None]
        if not self._arrays_declared(state, stmt, expressions):
            return
        pieces: list[str] = []
        for part in stmt.parts:
            if part.literal is not None:
                pieces.append(part.literal)
            else:
                pieces.append(format_value(self._eval(state, part.expression, stmt.line)))
        text = "".join(pieces)
        state.env.console.append(text)
        self._record(state, stmt.line, constants.DESC_OUTPUT.format(text=text))

    # ── control statements ───────────────────────────────────────

    def _exec_for(self, stmt: ForLoop, state: RunState):
        start = self._eval(state, stmt.start, stmt.line)
        end = self._eval(state, stmt.end, stmt.line)
        step = self._eval(state, stmt.step, stmt.line)
        if stmt.descending:
            step = -step

        counter = start
        while counter <= end if step >= 0 else counter >= end:
            self._tick(state, stmt.line)
            state.loop_iterations += 1
            state.env.variables[stmt.counter] = counter
            self._record(
                state,
                stmt.line,
                constants.DESC_FOR_ITERATION.format(
                    name=stmt.counter, value=format_value(counter)
                ),
            )
            self._exec_block(stmt.body, state)
            counter += step

    def _exec_while(self, stmt: WhileLoop, state: RunState):
        while self._eval(state, stmt.condition, stmt.line):
            self._tick(state, stmt.line)
            state.loop_iterations += 1
            self._record(
                state,
                stmt.line,
                constants.DESC_WHILE_ITERATION.format(condition=stmt.condition.source),
            )
            self._exec_block(stmt.body, state)

    def _exec_conditional(self, stmt: Conditional, state: RunState):
        taken = bool(self._eval(state, stmt.condition, stmt.line))
        template = (
            constants.DESC_CONDITION_TRUE if taken else constants.DESC_CONDITION_FALSE
        )
        self._record(
            state, stmt.line, template.format(condition=stmt.condition.source)
        )
        if taken:
            self._exec_block(stmt.body, state)
        elif stmt.else_body is not None:
            self._exec_block(stmt.else_body, state)
