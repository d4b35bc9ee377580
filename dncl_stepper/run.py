"""Orchestrator — run() entry point."""

from __future__ import annotations

import logging
import time

from .evaluator import EvaluationError
from .executor import Executor
from .parser import StatementParser, UnrecognizedStatementError
from .program import Program
from .run_types import (
    Diagnostic,
    DiagnosticKind,
    ErrorPolicy,
    PipelineStats,
    StepperConfig,
)
from .stats import walk_statements
from .trace_types import ExecutionTrace
from . import constants

logger = logging.getLogger(__name__)


class CompilationError(Exception):
    """The single coarse failure signal of a compilation.

    The message is always COMPILE_ERROR_MESSAGE; ``diagnostics`` names the
    offending line when the failure came from a known problem.
    """

    def __init__(self, diagnostics: tuple[Diagnostic, ...] = ()):
        super().__init__(constants.COMPILE_ERROR_MESSAGE)
        self.message = constants.COMPILE_ERROR_MESSAGE
        self.diagnostics = diagnostics


def run(
    source: str,
    max_steps: int = constants.DEFAULT_MAX_STEPS,
    policy: ErrorPolicy = ErrorPolicy.LENIENT,
    verbose: bool = False,
) -> ExecutionTrace:
    """End-to-end: split lines → classify → build tree → execute.

    Args:
        source: DNCL source text.
        max_steps: Global step budget for the whole compilation.
        policy: LENIENT absorbs per-line problems, STRICT fails on them.
        verbose: Print the statement tree, every snapshot and stage timings.

    Returns:
        The complete ExecutionTrace.

    Raises:
        CompilationError: On any failure not absorbed by the policy.
    """
    config = StepperConfig(max_steps=max_steps, policy=policy, verbose=verbose)
    pipeline_start = time.perf_counter()
    program = Program.from_source(source)
    stats = PipelineStats(
        source_bytes=len(source.encode("utf-8")),
        source_lines=len(program),
    )

    try:
        t0 = time.perf_counter()
        parsed = StatementParser(config.policy).parse(program)
        stats.parse_time = time.perf_counter() - t0
        stats.statement_count = sum(1 for _ in walk_statements(parsed.statements))

        if verbose:
            from .api import format_statements

            print("═══ Statements ═══")
            print(format_statements(parsed.statements))
            print()

        t0 = time.perf_counter()
        trace = Executor(config).execute(parsed)
        stats.execution_time = time.perf_counter() - t0
    except UnrecognizedStatementError as exc:
        logger.error("Compilation failed: %s", exc.diagnostic)
        raise CompilationError((exc.diagnostic,)) from exc
    except EvaluationError as exc:
        diagnostic = Diagnostic(
            line=exc.line,
            kind=DiagnosticKind.EVALUATION_FAILURE,
            message=exc.message,
        )
        logger.error("Compilation failed: %s", diagnostic)
        raise CompilationError((diagnostic,)) from exc
    except Exception as exc:
        logger.exception("Compilation failed")
        raise CompilationError() from exc

    stats.snapshot_count = len(trace.snapshots)
    stats.diagnostic_count = len(trace.diagnostics)
    stats.execution_steps = trace.stats.steps
    stats.truncated = trace.truncated
    stats.total_time = time.perf_counter() - pipeline_start
    logger.info(
        "Compiled %d lines into %d snapshots in %.1fms",
        stats.source_lines,
        stats.snapshot_count,
        stats.total_time * 1000,
    )

    if verbose:
        print()
        print(stats.report())

    return trace
