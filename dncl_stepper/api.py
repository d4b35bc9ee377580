"""Composable API functions for the DNCL stepper pipelines.

Each function corresponds to a CLI workflow (--parse-only, --stats, full run)
but is callable programmatically without argparse.
"""

from __future__ import annotations

import logging

from .parser import ParsedProgram, parse_program
from .run import run
from .run_types import ErrorPolicy
from .statements import Statement
from .stats import count_kinds
from .trace_types import ExecutionTrace
from . import constants

logger = logging.getLogger(__name__)


def _policy(strict: bool) -> ErrorPolicy:
    return ErrorPolicy.STRICT if strict else ErrorPolicy.LENIENT


def parse_source(source: str, strict: bool = False) -> ParsedProgram:
    """Classify every line of *source* and build its Statement tree.

    Args:
        source: DNCL source text.
        strict: Raise on unrecognized lines instead of skipping them.

    Returns:
        A ParsedProgram holding the root statement list.
    """
    logger.info("Parsing source (%d chars, strict=%s)", len(source), strict)
    return parse_program(source, _policy(strict))


def format_statements(statements: list[Statement], depth: int = 0) -> str:
    """Render a Statement tree as indented text, one statement per line."""
    lines: list[str] = []
    pad = "  " * depth
    for statement in statements:
        lines.append(f"{pad}{statement.line:>3}: {statement}")
        body = getattr(statement, "body", None)
        if body:
            lines.append(format_statements(body, depth + 1))
        else_body = getattr(statement, "else_body", None)
        if else_body:
            lines.append(f"{pad}     else:")
            lines.append(format_statements(else_body, depth + 1))
    return "\n".join(lines)


def dump_statements(source: str, strict: bool = False) -> str:
    """Parse *source* and return a human-readable dump of its Statement tree.

    Args:
        source: DNCL source text.
        strict: Raise on unrecognized lines instead of skipping them.

    Returns:
        A multi-line string with one statement per line, nested bodies
        indented beneath their header.
    """
    return format_statements(parse_source(source, strict).statements)


def statement_stats(source: str, strict: bool = False) -> dict[str, int]:
    """Parse *source* and return statement kind frequency counts.

    Args:
        source: DNCL source text.
        strict: Raise on unrecognized lines instead of skipping them.

    Returns:
        A dict mapping statement kind names to their occurrence counts.
    """
    return count_kinds(parse_source(source, strict).statements)


def compile_source(
    source: str,
    max_steps: int = constants.DEFAULT_MAX_STEPS,
    strict: bool = False,
) -> ExecutionTrace:
    """Compile *source* eagerly into a replayable ExecutionTrace.

    Args:
        source: DNCL source text.
        max_steps: Global step budget shared by all statements and loops.
        strict: Fail on unrecognized lines and evaluation failures instead
            of absorbing them.

    Returns:
        An ExecutionTrace with initial_state, snapshots and diagnostics.

    Raises:
        CompilationError: On any failure not absorbed by the policy.
    """
    logger.info("compile_source: max_steps=%d, strict=%s", max_steps, strict)
    return run(source, max_steps=max_steps, policy=_policy(strict))
