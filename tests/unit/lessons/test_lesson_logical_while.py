"""Lesson: a while loop guarded by a compound condition."""

SOURCE = """\
合計 = 0
i = 0
(i ≦ 10) かつ (合計 < 30) が成り立つ間繰り返す:
    i = i + 1
    合計 = 合計 + i
"""


class TestLogicalWhile:
    def test_stops_when_either_side_fails(self, run_lesson):
        trace = run_lesson(SOURCE)
        assert trace.final_state.variables == {"合計": 36, "i": 8}
        assert trace.stats.loop_iterations == 8
