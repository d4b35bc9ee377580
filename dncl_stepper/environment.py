"""Machine state — scalars, arrays and console lines for one compilation."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from .trace_types import Snapshot


def format_value(value: Any) -> str:
    """Render a value the way the console shows it."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass
class Environment:
    variables: dict[str, Any] = field(default_factory=dict)
    arrays: dict[str, list[Any]] = field(default_factory=dict)
    console: list[str] = field(default_factory=list)

    def has_array(self, name: str) -> bool:
        return name in self.arrays

    def read_index(self, name: str, index: Any) -> Any:
        """Value stored at ``name[index]``, or 0 if there is none."""
        values = self.arrays.get(name)
        if values is None:
            return 0
        position = _as_position(index)
        if position is None or not 0 <= position < len(values):
            return 0
        return values[position]

    def write_index(self, name: str, index: Any, value: Any) -> bool:
        """Store *value* at ``name[index]``; False if the slot does not exist."""
        values = self.arrays.get(name)
        position = _as_position(index)
        if values is None or position is None or not 0 <= position < len(values):
            return False
        values[position] = value
        return True

    def snapshot(self, step_index: int, line: int, description: str) -> Snapshot:
        """Freeze the current state into read-only copies."""
        arrays = copy.deepcopy(self.arrays)
        return Snapshot(
            step_index=step_index,
            line=line,
            variables=MappingProxyType(copy.deepcopy(self.variables)),
            arrays=MappingProxyType(
                {name: tuple(values) for name, values in arrays.items()}
            ),
            console=tuple(self.console),
            description=description,
        )


def _as_position(index: Any) -> int | None:
    if isinstance(index, bool):
        return int(index)
    if isinstance(index, int):
        return index
    if isinstance(index, float) and index.is_integer():
        return int(index)
    return None
