"""Block Resolver — indentation-based body lookup for control lines."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .program import SourceLine
from .statements import StatementKind


@dataclass
class ResolvedBlock:
    """Line indices forming a control statement's body (and else-body).

    ``else_index`` is the index of the else / else-if marker line when one
    follows the body at the control line's own indentation, else -1.
    ``next_index`` is the first index after everything that was consumed.
    """

    body: list[int] = field(default_factory=list)
    else_index: int = -1
    else_body: list[int] = field(default_factory=list)
    next_index: int = 0


def resolve_body(lines: tuple[SourceLine, ...], index: int, indent: int) -> list[int]:
    """Indices of the contiguous lines after *index* indented deeper than *indent*.

    Blank lines are skipped; the first non-blank line at or below *indent*
    ends the body.
    """
    body: list[int] = []
    for i in range(index + 1, len(lines)):
        line = lines[i]
        if line.is_blank:
            continue
        if line.indent <= indent:
            break
        body.append(i)
    return body


def _next_non_blank(lines: tuple[SourceLine, ...], start: int) -> int:
    for i in range(start, len(lines)):
        if not lines[i].is_blank:
            return i
    return len(lines)


def resolve_block(
    lines: tuple[SourceLine, ...],
    index: int,
    else_kinds: Sequence[StatementKind] | None = None,
) -> ResolvedBlock:
    """Resolve the body of the control line at *index*.

    Args:
        lines: All source lines of the program.
        index: Index of the control line in *lines*.
        else_kinds: Classification of every line, by index.
            When given (conditionals only), an ELSE marker at the control
            line's indentation directly after the body opens a second body,
            and an ELSE_IF marker there is reported through ``else_index``.

    Returns:
        A ResolvedBlock with the body indices and where parsing resumes.
    """
    indent = lines[index].indent
    body = resolve_body(lines, index, indent)
    after = body[-1] + 1 if body else index + 1
    block = ResolvedBlock(body=body, next_index=after)
    if else_kinds is None:
        return block

    candidate = _next_non_blank(lines, after)
    if candidate >= len(lines) or lines[candidate].indent != indent:
        return block
    kind = else_kinds[candidate]
    if kind == StatementKind.ELSE:
        block.else_index = candidate
        block.else_body = resolve_body(lines, candidate, indent)
        block.next_index = block.else_body[-1] + 1 if block.else_body else candidate + 1
    elif kind == StatementKind.ELSE_IF:
        block.else_index = candidate
        block.next_index = candidate
    return block
