"""Program — source lines with their indentation depth and line numbers."""

from __future__ import annotations

from dataclasses import dataclass

from . import constants


@dataclass(frozen=True)
class SourceLine:
    number: int  # 1-based
    indent: int
    text: str  # trimmed

    @property
    def is_blank(self) -> bool:
        return not self.text


def indentation_of(raw: str) -> int:
    """Column count of the leading whitespace; a tab counts as TAB_WIDTH."""
    columns = 0
    for ch in raw:
        if ch == "\t":
            columns += constants.TAB_WIDTH
        elif ch.isspace():
            columns += 1
        else:
            break
    return columns


@dataclass(frozen=True)
class Program:
    lines: tuple[SourceLine, ...] = ()

    @classmethod
    def from_source(cls, source: str) -> Program:
        return cls(
            lines=tuple(
                SourceLine(number=i + 1, indent=indentation_of(raw), text=raw.strip())
                for i, raw in enumerate(source.splitlines())
            )
        )

    def __len__(self) -> int:
        return len(self.lines)

    @property
    def last_line_number(self) -> int:
        return self.lines[-1].number if self.lines else constants.INITIAL_LINE
