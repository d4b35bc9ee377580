"""Playback cursor — read-only forward/backward scrubbing over a trace."""

from __future__ import annotations

from .trace_types import ExecutionTrace, Snapshot


class TraceCursor:
    """A position within a finished ExecutionTrace.

    Moves are clamped to the trace bounds. The trace itself is never
    modified, so any number of cursors may share one trace.
    """

    def __init__(self, trace: ExecutionTrace):
        self._trace = trace
        self._position = 0

    @property
    def position(self) -> int:
        return self._position

    @property
    def at_end(self) -> bool:
        return self._position >= len(self._trace.snapshots) - 1

    @property
    def current(self) -> Snapshot | None:
        if not self._trace.snapshots:
            return self._trace.initial_state
        return self._trace.snapshots[self._position]

    def step_forward(self) -> Snapshot | None:
        self._position = min(self._position + 1, max(len(self._trace.snapshots) - 1, 0))
        return self.current

    def step_backward(self) -> Snapshot | None:
        self._position = max(self._position - 1, 0)
        return self.current

    def seek(self, position: int) -> Snapshot | None:
        last = max(len(self._trace.snapshots) - 1, 0)
        self._position = min(max(position, 0), last)
        return self.current

    def reset(self) -> Snapshot | None:
        self._position = 0
        return self.current

    def __iter__(self):
        """Replay from the current position to the end."""
        while True:
            yield self.current
            if self.at_end:
                return
            self.step_forward()
