"""Tests for run(): the single compile entry point and its failure signal."""

import importlib
import logging

import pytest

from dncl_stepper import constants
from dncl_stepper.run import CompilationError, run
from dncl_stepper.run_types import DiagnosticKind, ErrorPolicy


class TestRun:
    def test_runs_demo_program(self):
        trace = run(constants.DEMO_PROGRAM)
        assert trace.final_state.console[-1] == "10を超えました"
        assert trace.final_state.description == constants.DESC_FINISHED

    def test_empty_source_has_only_completion(self):
        trace = run("")
        assert len(trace) == 1
        assert trace.snapshots[0].line == constants.INITIAL_LINE
        assert trace.snapshots[0].description == constants.DESC_FINISHED

    def test_lenient_run_keeps_diagnostics(self):
        trace = run("x = 1\nfoo bar\ny = q\n")
        kinds = [d.kind for d in trace.diagnostics]
        assert kinds == [
            DiagnosticKind.UNRECOGNIZED_LINE,
            DiagnosticKind.EVALUATION_FAILURE,
        ]
        assert trace.final_state.variables == {"x": 1, "y": 0}

    def test_deeply_nested_expression_degrades_to_zero(self):
        source = "x = " + "(" * 1500 + "1" + ")" * 1500 + "\n"
        trace = run(source)
        assert trace.final_state.variables == {"x": 0}
        assert trace.diagnostics[0].kind == DiagnosticKind.EVALUATION_FAILURE

    def test_max_steps_is_forwarded(self):
        trace = run("1 = 1 が成り立つ間繰り返す:\n    x = 1\n", max_steps=20)
        assert trace.truncated
        assert trace.stats.steps == 21

    def test_info_log_on_success(self, caplog):
        with caplog.at_level(logging.INFO, logger="dncl_stepper.run"):
            run("x = 1\n")
        assert any("snapshots" in r.getMessage() for r in caplog.records)


class TestCompilationError:
    def test_strict_unrecognized_line(self):
        with pytest.raises(CompilationError) as excinfo:
            run("x = 1\nfoo bar\n", policy=ErrorPolicy.STRICT)
        error = excinfo.value
        assert str(error) == constants.COMPILE_ERROR_MESSAGE
        assert error.message == constants.COMPILE_ERROR_MESSAGE
        assert error.diagnostics[0].line == 2
        assert error.diagnostics[0].kind == DiagnosticKind.UNRECOGNIZED_LINE

    def test_strict_evaluation_failure(self):
        with pytest.raises(CompilationError) as excinfo:
            run("x = 1 ÷ 0\n", policy=ErrorPolicy.STRICT)
        assert excinfo.value.diagnostics[0].line == 1
        assert excinfo.value.diagnostics[0].kind == DiagnosticKind.EVALUATION_FAILURE

    def test_unexpected_failure_is_wrapped(self, monkeypatch):
        class _Broken:
            def __init__(self, config):
                pass

            def execute(self, parsed):
                raise RuntimeError("boom")

        run_module = importlib.import_module("dncl_stepper.run")
        monkeypatch.setattr(run_module, "Executor", _Broken)
        with pytest.raises(CompilationError) as excinfo:
            run("x = 1\n")
        assert isinstance(excinfo.value.__cause__, RuntimeError)
        assert excinfo.value.diagnostics == ()


class TestVerbose:
    def test_prints_statements_and_pipeline_statistics(self, capsys):
        run("x = 1\n", verbose=True)
        out = capsys.readouterr().out
        assert "═══ Statements ═══" in out
        assert "Pipeline Statistics" in out
        assert "[step 0] line 1" in out
