"""Run pipeline data types (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel

from . import constants


class ErrorPolicy(Enum):
    """How fine-grained problems are handled during compilation."""

    LENIENT = "lenient"
    STRICT = "strict"


class DiagnosticKind(str, Enum):
    UNRECOGNIZED_LINE = "UNRECOGNIZED_LINE"
    EVALUATION_FAILURE = "EVALUATION_FAILURE"
    UNDECLARED_ARRAY = "UNDECLARED_ARRAY"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    STRAY_ELSE = "STRAY_ELSE"
    STEP_BUDGET_EXHAUSTED = "STEP_BUDGET_EXHAUSTED"


class Diagnostic(BaseModel):
    """A problem found on one source line."""

    line: int
    kind: DiagnosticKind
    message: str

    def __str__(self) -> str:
        return f"{self.line}行目: {self.message} ({self.kind.value})"


@dataclass(frozen=True)
class StepperConfig:
    """Groups compilation configuration."""

    max_steps: int = constants.DEFAULT_MAX_STEPS
    policy: ErrorPolicy = ErrorPolicy.LENIENT
    verbose: bool = False


@dataclass
class ExecutionStats:
    """Returned execution metrics from Executor.execute."""

    steps: int = 0
    snapshots: int = 0
    loop_iterations: int = 0
    console_lines: int = 0
    truncated: bool = False


@dataclass
class PipelineStats:
    """Timing and size statistics for each pipeline stage."""

    source_bytes: int = 0
    source_lines: int = 0

    # Stage timings (seconds)
    parse_time: float = 0.0
    execution_time: float = 0.0
    total_time: float = 0.0

    # Output sizes
    statement_count: int = 0
    snapshot_count: int = 0
    diagnostic_count: int = 0

    # Execution stats
    execution_steps: int = 0
    truncated: bool = False

    def report(self) -> str:
        lines = [
            "═══ Pipeline Statistics ═══",
            f"  Source: {self.source_lines} lines, {self.source_bytes} bytes",
            "",
            f"  {'Stage':<20} {'Time':>10}  {'Output':>30}",
            f"  {'─' * 20} {'─' * 10}  {'─' * 30}",
        ]

        stages = [
            ("Parse", self.parse_time, f"{self.statement_count} statements"),
            (
                "Execute",
                self.execution_time,
                f"{self.execution_steps} steps, {self.snapshot_count} snapshots",
            ),
        ]
        for name, t, output in stages:
            time_str = f"{t * 1000:>8.1f}ms"
            lines.append(f"  {name:<20} {time_str:>10}  {output:>30}")

        lines.append(f"  {'─' * 20} {'─' * 10}  {'─' * 30}")
        lines.append(f"  {'Total':<20} {self.total_time * 1000:>8.1f}ms")
        lines.append("")
        lines.append(
            f"  Diagnostics: {self.diagnostic_count}"
            + ("  (truncated by step budget)" if self.truncated else "")
        )
        return "\n".join(lines)
