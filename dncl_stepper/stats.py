"""Pure functions for computing statistics over Statement trees."""

from __future__ import annotations

from collections import Counter
from typing import Iterator

from dncl_stepper.statements import Statement


def walk_statements(statements: list[Statement]) -> Iterator[Statement]:
    """Yield every statement in the tree, parents before their bodies."""
    for statement in statements:
        yield statement
        yield from walk_statements(getattr(statement, "body", []))
        yield from walk_statements(getattr(statement, "else_body", None) or [])


def count_kinds(statements: list[Statement]) -> dict[str, int]:
    """Return a frequency map of statement kind names in the given tree.

    Args:
        statements: Root statement list of a parsed program.

    Returns:
        A dict mapping kind name strings to their occurrence counts.
        Empty dict for an empty input list.
    """
    return dict(Counter(s.kind.value for s in walk_statements(statements)))
