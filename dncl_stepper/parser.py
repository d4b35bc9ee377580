"""Program parsing — classifies every line once and builds the Statement tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .blocks import resolve_block
from .classifier import classify_line
from .program import Program
from .run_types import Diagnostic, DiagnosticKind, ErrorPolicy
from .statements import Conditional, Statement, StatementKind

logger = logging.getLogger(__name__)


class UnrecognizedStatementError(Exception):
    """Raised under the strict policy for a line that matches no statement form."""

    def __init__(self, diagnostic: Diagnostic):
        super().__init__(str(diagnostic))
        self.diagnostic = diagnostic


@dataclass(frozen=True)
class ParsedProgram:
    program: Program
    statements: list[Statement]
    diagnostics: tuple[Diagnostic, ...] = ()


class StatementParser:
    """Builds the Statement tree for a Program.

    Each control line's body is resolved exactly once here; the executor
    recurses over the resulting children and never rescans source lines.
    """

    def __init__(self, policy: ErrorPolicy = ErrorPolicy.LENIENT):
        self._policy = policy
        self._lines = ()
        self._classified: list[Statement] = []
        self._kinds: list[StatementKind] = []
        self._diagnostics: list[Diagnostic] = []

    def parse(self, program: Program) -> ParsedProgram:
        self._lines = program.lines
        self._classified = [classify_line(l.text, l.number) for l in program.lines]
        self._kinds = [s.kind for s in self._classified]
        self._diagnostics = []
        statements = self._parse_range(list(range(len(program.lines))))
        logger.info(
            "Parsed %d lines into %d top-level statements",
            len(program.lines),
            len(statements),
        )
        return ParsedProgram(
            program=program,
            statements=statements,
            diagnostics=tuple(self._diagnostics),
        )

    # ── helpers ──────────────────────────────────────────────────

    def _report(self, statement: Statement, kind: DiagnosticKind, message: str):
        diagnostic = Diagnostic(line=statement.line, kind=kind, message=message)
        if self._policy == ErrorPolicy.STRICT:
            raise UnrecognizedStatementError(diagnostic)
        logger.debug("Skipping line: %s", diagnostic)
        self._diagnostics.append(diagnostic)

    def _parse_range(self, indices: list[int]) -> list[Statement]:
        statements: list[Statement] = []
        pos = 0
        while pos < len(indices):
            index = indices[pos]
            statement = self._classified[index]
            resume = index + 1

            if statement.kind in (StatementKind.FOR_LOOP, StatementKind.WHILE_LOOP):
                block = resolve_block(self._lines, index)
                statement.body = self._parse_range(block.body)
                resume = block.next_index
            elif statement.kind == StatementKind.CONDITIONAL:
                resume = self._parse_conditional(statement, index)
            elif statement.kind in (StatementKind.ELSE, StatementKind.ELSE_IF):
                self._report(
                    statement,
                    DiagnosticKind.STRAY_ELSE,
                    f"対応する「もし」がありません: {statement.text}",
                )
                resume = resolve_block(self._lines, index).next_index
                statement = Statement(
                    kind=StatementKind.UNRECOGNIZED,
                    line=statement.line,
                    text=statement.text,
                )
            elif statement.kind == StatementKind.UNRECOGNIZED:
                self._report(
                    statement,
                    DiagnosticKind.UNRECOGNIZED_LINE,
                    f"解釈できない行です: {statement.text}",
                )

            statements.append(statement)
            while pos < len(indices) and indices[pos] < resume:
                pos += 1
        return statements

    def _parse_conditional(self, statement: Conditional, index: int) -> int:
        """Attach then/else bodies to *statement*; returns the resume index."""
        block = resolve_block(self._lines, index, self._kinds)
        statement.body = self._parse_range(block.body)
        if block.else_index < 0:
            return block.next_index

        marker = self._classified[block.else_index]
        if marker.kind == StatementKind.ELSE:
            statement.else_body = self._parse_range(block.else_body)
            return block.next_index

        chained = Conditional(
            line=marker.line, text=marker.text, condition=marker.condition
        )
        statement.else_body = [chained]
        return self._parse_conditional(chained, block.else_index)


def parse_program(
    source: str, policy: ErrorPolicy = ErrorPolicy.LENIENT
) -> ParsedProgram:
    """Split *source* into lines and build its Statement tree."""
    return StatementParser(policy).parse(Program.from_source(source))
