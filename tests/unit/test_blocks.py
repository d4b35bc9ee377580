"""Tests for indentation handling and block resolution."""

from dncl_stepper.blocks import resolve_block, resolve_body
from dncl_stepper.classifier import classify_line
from dncl_stepper.program import Program, indentation_of


def _program(source: str) -> Program:
    return Program.from_source(source)


def _kinds(program: Program):
    return [classify_line(l.text, l.number).kind for l in program.lines]


IF_ELSE_SOURCE = """\
もし x > 1 ならば:
    a = 1

    b = 2
そうでなければ:
    c = 3
d = 4
"""

NESTED_SOURCE = """\
i を 1 から 2 まで 1 ずつ増やしながら繰り返す:
    j を 1 から 2 まで 1 ずつ増やしながら繰り返す:
        x = i + j
    y = i
z = 0
"""


class TestIndentation:
    def test_spaces(self):
        assert indentation_of("    x = 1") == 4

    def test_tab_counts_as_four_columns(self):
        assert indentation_of("\tx = 1") == 4

    def test_ideographic_space_counts_as_one_column(self):
        assert indentation_of("　x = 1") == 1

    def test_program_lines_are_numbered_from_one(self):
        program = _program("a = 1\n  b = 2\n")
        assert [l.number for l in program.lines] == [1, 2]
        assert [l.indent for l in program.lines] == [0, 2]
        assert program.lines[1].text == "b = 2"
        assert program.last_line_number == 2


class TestResolveBody:
    def test_body_skips_blank_lines(self):
        program = _program(IF_ELSE_SOURCE)
        assert resolve_body(program.lines, 0, 0) == [1, 3]

    def test_body_includes_deeper_nesting(self):
        program = _program(NESTED_SOURCE)
        assert resolve_body(program.lines, 0, 0) == [1, 2, 3]
        assert resolve_body(program.lines, 1, 4) == [2]

    def test_empty_body(self):
        program = _program("x < 3 が成り立つ間繰り返す:\ny = 1\n")
        assert resolve_body(program.lines, 0, 0) == []


class TestResolveBlock:
    def test_loop_block_ignores_else(self):
        program = _program(IF_ELSE_SOURCE)
        block = resolve_block(program.lines, 0)
        assert block.body == [1, 3]
        assert block.else_index == -1
        assert block.next_index == 4

    def test_conditional_picks_up_else_body(self):
        program = _program(IF_ELSE_SOURCE)
        block = resolve_block(program.lines, 0, _kinds(program))
        assert block.else_index == 4
        assert block.else_body == [5]
        assert block.next_index == 6

    def test_else_at_other_indentation_is_not_attached(self):
        source = "もし x > 1 ならば:\n    a = 1\n    そうでなければ:\n"
        program = _program(source)
        block = resolve_block(program.lines, 0, _kinds(program))
        assert block.body == [1, 2]
        assert block.else_index == -1

    def test_else_if_reports_marker_and_stops_there(self):
        source = (
            "もし x > 1 ならば:\n"
            "    a = 1\n"
            "そうでなくもし x > 0 ならば:\n"
            "    a = 2\n"
        )
        program = _program(source)
        block = resolve_block(program.lines, 0, _kinds(program))
        assert block.else_index == 2
        assert block.else_body == []
        assert block.next_index == 2
