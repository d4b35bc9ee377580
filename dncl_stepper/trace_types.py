"""Trace data types for step-by-step execution replay."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .run_types import Diagnostic, ExecutionStats


@dataclass(frozen=True)
class Snapshot:
    """A single step in the execution trace.

    Captures the source line that produced the step, a description of the
    action, and read-only copies of the variables, arrays and console after
    the action was applied. Arrays are tuples and the console is a tuple of
    lines, so a snapshot cannot be changed through its containers.
    """

    step_index: int
    line: int
    variables: Mapping[str, Any]
    arrays: Mapping[str, tuple[Any, ...]]
    console: tuple[str, ...]
    description: str

    def to_dict(self) -> dict:
        return {
            "line": self.line,
            "variables": dict(self.variables),
            "arrays": {name: list(values) for name, values in self.arrays.items()},
            "console": list(self.console),
            "description": self.description,
        }


@dataclass(frozen=True)
class ExecutionTrace:
    """Complete trace of one compilation.

    Contains the initial (empty) state, one Snapshot per observable action,
    and the problems that were absorbed along the way.
    """

    snapshots: tuple[Snapshot, ...] = ()
    stats: ExecutionStats = field(default_factory=ExecutionStats)
    initial_state: Snapshot | None = None
    truncated: bool = False
    diagnostics: tuple[Diagnostic, ...] = ()

    def __len__(self) -> int:
        return len(self.snapshots)

    @property
    def final_state(self) -> Snapshot | None:
        if self.snapshots:
            return self.snapshots[-1]
        return self.initial_state

    def to_dict(self) -> dict:
        return {
            "snapshots": [s.to_dict() for s in self.snapshots],
            "truncated": self.truncated,
            "diagnostics": [d.model_dump(mode="json") for d in self.diagnostics],
        }
