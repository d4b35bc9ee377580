"""Statement Classifier — maps one trimmed line to exactly one Statement."""

from __future__ import annotations

import re

from .expr_parser import parse_expression
from .statements import (
    ArrayDeclare,
    Assign,
    Conditional,
    ElseIf,
    ForLoop,
    IndexAssign,
    Output,
    OutputPart,
    Statement,
    StatementKind,
    WhileLoop,
)
from . import constants

_IDENT = constants.IDENT_PATTERN
_ASSIGN = constants.ASSIGN_OPERATORS
_COLON = constants.HEADER_COLON

_ARRAY_DECLARE_RE = re.compile(rf"^({_IDENT})\s*{_ASSIGN}\s*[\[{{](.*)[\]}}]$")
_INDEX_TARGET_RE = re.compile(rf"^({_IDENT})\s*\[")
_INDEX_VALUE_RE = re.compile(rf"^\s*{_ASSIGN}\s*(.+)$")
_FOR_RE = re.compile(
    rf"^({_IDENT})\s*を\s*(.+?)\s*から\s*(.+?)\s*まで\s*(.+?)\s*"
    rf"ずつ(増やし|減らし)ながら[、,]?\s*繰り返す{_COLON}$"
)
_WHILE_RE = re.compile(rf"^(.+?)\s*が成り立つ間[、,]?\s*繰り返す{_COLON}$")
_IF_RE = re.compile(rf"^もし\s*(.+?)\s*ならば{_COLON}$")
_ELSE_IF_RE = re.compile(rf"^そうでなくもし\s*(.+?)\s*ならば{_COLON}$")
_ELSE_RE = re.compile(rf"^そうでなければ{_COLON}$")
_ASSIGN_RE = re.compile(rf"^({_IDENT})\s*{_ASSIGN}\s*(.+)$")

_CONTROL_HEADER_RES = (_FOR_RE, _WHILE_RE, _IF_RE, _ELSE_IF_RE, _ELSE_RE)

_OPEN_BRACKETS = "([{"
_CLOSE_BRACKETS = ")]}"


# ── lexical helpers ──────────────────────────────────────────────


def is_comment(text: str) -> bool:
    return text.startswith(constants.COMMENT_PREFIXES)


def strip_inline_comment(text: str) -> str:
    """Drop a trailing ``//`` comment that lies outside string literals."""
    closing = ""
    marker = constants.INLINE_COMMENT_MARKER
    for i, ch in enumerate(text):
        if closing:
            if ch == closing:
                closing = ""
        elif ch in constants.STRING_DELIMITERS:
            closing = constants.STRING_DELIMITERS[ch]
        elif text.startswith(marker, i):
            return text[:i].rstrip()
    return text


def split_top_level(text: str, separators: str = ",，") -> list[str]:
    """Split on *separators* that are outside brackets and string literals."""
    parts: list[str] = []
    depth = 0
    closing = ""
    start = 0
    for i, ch in enumerate(text):
        if closing:
            if ch == closing:
                closing = ""
        elif ch in constants.STRING_DELIMITERS:
            closing = constants.STRING_DELIMITERS[ch]
        elif ch in _OPEN_BRACKETS:
            depth += 1
        elif ch in _CLOSE_BRACKETS:
            depth -= 1
        elif ch in separators and depth == 0:
            parts.append(text[start:i].strip())
            start = i + 1
    parts.append(text[start:].strip())
    return parts


def _matching_bracket(text: str, open_pos: int) -> int:
    """Index of the ``]`` closing the ``[`` at *open_pos*, or -1."""
    depth = 0
    for i in range(open_pos, len(text)):
        if text[i] == "[":
            depth += 1
        elif text[i] == "]":
            depth -= 1
            if depth == 0:
                return i
    return -1


def is_control_header(text: str) -> bool:
    return any(pattern.match(text) for pattern in _CONTROL_HEADER_RES)


def _string_literal(part: str) -> str | None:
    closing = constants.STRING_DELIMITERS.get(part[:1])
    if closing and len(part) >= 2 and part.endswith(closing):
        return part[1:-1]
    return None


# ── per-form recognizers ─────────────────────────────────────────


def _classify_array_declare(text: str, line: int) -> Statement | None:
    match = _ARRAY_DECLARE_RE.match(text)
    if match is None:
        return None
    inner = match.group(2).strip()
    elements = [parse_expression(e) for e in split_top_level(inner)] if inner else []
    return ArrayDeclare(line=line, text=text, target=match.group(1), elements=elements)


def _classify_index_assign(text: str, line: int) -> Statement | None:
    match = _INDEX_TARGET_RE.match(text)
    if match is None:
        return None
    close = _matching_bracket(text, match.end() - 1)
    if close < 0:
        return None
    value_match = _INDEX_VALUE_RE.match(text[close + 1 :])
    if value_match is None:
        return None
    return IndexAssign(
        line=line,
        text=text,
        target=match.group(1),
        index=parse_expression(text[match.end() : close]),
        value=parse_expression(value_match.group(1)),
    )


def _classify_for(text: str, line: int) -> Statement | None:
    match = _FOR_RE.match(text)
    if match is None:
        return None
    counter, start, end, step, direction = match.groups()
    return ForLoop(
        line=line,
        text=text,
        counter=counter,
        start=parse_expression(start),
        end=parse_expression(end),
        step=parse_expression(step),
        descending=direction == "減らし",
    )


def _classify_while(text: str, line: int) -> Statement | None:
    match = _WHILE_RE.match(text)
    if match is None:
        return None
    return WhileLoop(line=line, text=text, condition=parse_expression(match.group(1)))


def _classify_if(text: str, line: int) -> Statement | None:
    match = _IF_RE.match(text)
    if match is None:
        return None
    return Conditional(
        line=line, text=text, condition=parse_expression(match.group(1))
    )


def _classify_else(text: str, line: int) -> Statement | None:
    match = _ELSE_IF_RE.match(text)
    if match is not None:
        return ElseIf(line=line, text=text, condition=parse_expression(match.group(1)))
    if _ELSE_RE.match(text):
        return Statement(kind=StatementKind.ELSE, line=line, text=text)
    return None


def _classify_assign(text: str, line: int) -> Statement | None:
    match = _ASSIGN_RE.match(text)
    if match is None:
        return None
    return Assign(
        line=line,
        text=text,
        target=match.group(1),
        value=parse_expression(match.group(2)),
    )


def _classify_output(text: str, line: int) -> Statement | None:
    if not text.endswith(constants.OUTPUT_SUFFIX):
        return None
    operands = text[: -len(constants.OUTPUT_SUFFIX)].strip()
    if not operands:
        return None
    parts: list[OutputPart] = []
    for raw in split_top_level(operands):
        literal = _string_literal(raw)
        if literal is not None:
            parts.append(OutputPart(literal=literal))
        else:
            parts.append(OutputPart(expression=parse_expression(raw)))
    return Output(line=line, text=text, parts=parts)


def _reject_headers(recognizer):
    """Wrap a recognizer so it declines lines that are control headers."""

    def recognize(text: str, line: int) -> Statement | None:
        if is_control_header(text):
            return None
        return recognizer(text, line)

    return recognize


# Order is precedence: the first recognizer that accepts the line wins.
_RECOGNIZERS = (
    _reject_headers(_classify_array_declare),
    _reject_headers(_classify_index_assign),
    _classify_for,
    _classify_while,
    _classify_if,
    _classify_else,
    _reject_headers(_classify_assign),
    _classify_output,
)


def classify_line(text: str, line: int = 0) -> Statement:
    """Classify a trimmed source line into exactly one Statement.

    Args:
        text: The line with leading and trailing whitespace removed.
        line: 1-based source line number recorded on the Statement.

    Returns:
        A Statement whose ``kind`` tags the recognized form. Lines matching
        no form come back as ``StatementKind.UNRECOGNIZED``.
    """
    if not text:
        return Statement(kind=StatementKind.BLANK, line=line)
    if is_comment(text):
        return Statement(kind=StatementKind.COMMENT, line=line, text=text)
    code = strip_inline_comment(text)
    if not code:
        return Statement(kind=StatementKind.COMMENT, line=line, text=text)
    for recognize in _RECOGNIZERS:
        statement = recognize(code, line)
        if statement is not None:
            return statement
    return Statement(kind=StatementKind.UNRECOGNIZED, line=line, text=text)
