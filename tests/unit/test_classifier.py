"""Tests for line classification into statement forms."""

from dncl_stepper.classifier import (
    classify_line,
    is_control_header,
    split_top_level,
    strip_inline_comment,
)
from dncl_stepper.statements import StatementKind


class TestCommentAndBlank:
    def test_blank(self):
        assert classify_line("").kind == StatementKind.BLANK

    def test_slash_comment(self):
        assert classify_line("// メモ").kind == StatementKind.COMMENT

    def test_hash_comment(self):
        assert classify_line("# メモ").kind == StatementKind.COMMENT


class TestAssignments:
    def test_plain_assignment(self):
        stmt = classify_line("合計 = 合計 + i", line=3)
        assert stmt.kind == StatementKind.ASSIGN
        assert stmt.target == "合計"
        assert stmt.value.source == "合計 + i"
        assert stmt.line == 3

    def test_arrow_assignment(self):
        stmt = classify_line("x ← 5")
        assert stmt.kind == StatementKind.ASSIGN
        assert stmt.value.source == "5"

    def test_array_declare(self):
        stmt = classify_line("A = [1, 2, 3]")
        assert stmt.kind == StatementKind.ARRAY_DECLARE
        assert stmt.target == "A"
        assert [e.source for e in stmt.elements] == ["1", "2", "3"]

    def test_array_declare_with_braces(self):
        stmt = classify_line("Tokuten ← {87, 45, 72}")
        assert stmt.kind == StatementKind.ARRAY_DECLARE
        assert len(stmt.elements) == 3

    def test_empty_array_declare(self):
        stmt = classify_line("A = []")
        assert stmt.kind == StatementKind.ARRAY_DECLARE
        assert stmt.elements == []

    def test_index_assign(self):
        stmt = classify_line("A[1] = 99")
        assert stmt.kind == StatementKind.INDEX_ASSIGN
        assert stmt.target == "A"
        assert stmt.index.source == "1"
        assert stmt.value.source == "99"

    def test_index_assign_with_nested_brackets(self):
        stmt = classify_line("A[B[0]] = A[j + 1]")
        assert stmt.kind == StatementKind.INDEX_ASSIGN
        assert stmt.index.source == "B[0]"
        assert stmt.value.source == "A[j + 1]"

    def test_assignment_reading_an_array_is_plain_assignment(self):
        stmt = classify_line("一時 = A[j]")
        assert stmt.kind == StatementKind.ASSIGN
        assert stmt.value.source == "A[j]"

    def test_trailing_comment_is_ignored(self):
        stmt = classify_line("商 = 10 ÷ 3  // 3になります")
        assert stmt.kind == StatementKind.ASSIGN
        assert stmt.value.source == "10 ÷ 3"


class TestControlHeaders:
    def test_for_header(self):
        stmt = classify_line("i を 1 から 3 まで 1 ずつ増やしながら繰り返す:")
        assert stmt.kind == StatementKind.FOR_LOOP
        assert stmt.counter == "i"
        assert (stmt.start.source, stmt.end.source, stmt.step.source) == ("1", "3", "1")
        assert stmt.descending is False
        assert stmt.body == []

    def test_for_header_with_expressions(self):
        stmt = classify_line("j を 0 から 3 - i まで 1 ずつ増やしながら繰り返す:")
        assert stmt.end.source == "3 - i"

    def test_descending_for_header(self):
        stmt = classify_line("i を 10 から 1 まで 2 ずつ減らしながら繰り返す:")
        assert stmt.kind == StatementKind.FOR_LOOP
        assert stmt.descending is True

    def test_while_header(self):
        stmt = classify_line("x < 100 が成り立つ間繰り返す:")
        assert stmt.kind == StatementKind.WHILE_LOOP
        assert stmt.condition.source == "x < 100"

    def test_while_header_with_equals_is_not_assignment(self):
        stmt = classify_line("x = 1 が成り立つ間繰り返す:")
        assert stmt.kind == StatementKind.WHILE_LOOP

    def test_if_header(self):
        stmt = classify_line("もし 合計 > 10 ならば:")
        assert stmt.kind == StatementKind.CONDITIONAL
        assert stmt.condition.source == "合計 > 10"
        assert stmt.else_body is None

    def test_colon_is_optional_and_may_be_fullwidth(self):
        assert classify_line("もし x > 1 ならば").kind == StatementKind.CONDITIONAL
        assert classify_line("もし x > 1 ならば：").kind == StatementKind.CONDITIONAL

    def test_else_marker(self):
        assert classify_line("そうでなければ:").kind == StatementKind.ELSE

    def test_else_if_marker(self):
        stmt = classify_line("そうでなくもし 点数 ≧ 60 ならば:")
        assert stmt.kind == StatementKind.ELSE_IF
        assert stmt.condition.source == "点数 ≧ 60"

    def test_is_control_header(self):
        assert is_control_header("x < 3 が成り立つ間繰り返す:")
        assert not is_control_header("x = 3")


class TestOutput:
    def test_literal_and_expression(self):
        stmt = classify_line("「x = 」, x を表示する")
        assert stmt.kind == StatementKind.OUTPUT
        assert stmt.parts[0].literal == "x = "
        assert stmt.parts[1].expression.source == "x"

    def test_comma_inside_literal_does_not_split(self):
        stmt = classify_line("「a, b」, 1 を表示する")
        assert len(stmt.parts) == 2
        assert stmt.parts[0].literal == "a, b"

    def test_double_quoted_literal(self):
        stmt = classify_line('"合格" を表示する')
        assert stmt.parts[0].literal == "合格"

    def test_bare_expression(self):
        stmt = classify_line("n を表示する")
        assert stmt.kind == StatementKind.OUTPUT
        assert stmt.parts[0].expression.source == "n"

    def test_comment_marker_inside_literal_is_kept(self):
        stmt = classify_line("「a//b」を表示する")
        assert stmt.parts[0].literal == "a//b"


class TestUnrecognized:
    def test_unrecognized_line(self):
        stmt = classify_line("foo bar", line=7)
        assert stmt.kind == StatementKind.UNRECOGNIZED
        assert stmt.line == 7
        assert stmt.text == "foo bar"

    def test_output_keyword_alone(self):
        assert classify_line("を表示する").kind == StatementKind.UNRECOGNIZED


class TestHelpers:
    def test_split_top_level(self):
        assert split_top_level("「a, b」, A[1, 2], c") == ["「a, b」", "A[1, 2]", "c"]

    def test_strip_inline_comment(self):
        assert strip_inline_comment("x = 1 // note") == "x = 1"
        assert strip_inline_comment("「//」を表示する") == "「//」を表示する"
