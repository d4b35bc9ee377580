"""Lesson: Euclid's algorithm with a while loop."""

SOURCE = """\
a = 48
b = 18
b ≠ 0 が成り立つ間繰り返す:
    余り = a % b
    a = b
    b = 余り
「最大公約数は 」, a, 「 です」を表示する
"""


class TestGcd:
    def test_result(self, run_lesson):
        trace = run_lesson(SOURCE)
        assert trace.final_state.console == ("最大公約数は 6 です",)
        assert trace.final_state.variables["b"] == 0

    def test_iterations(self, run_lesson):
        assert run_lesson(SOURCE).stats.loop_iterations == 3
