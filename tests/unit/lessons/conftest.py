"""Shared fixtures for the whole-program lesson suite."""

import logging

import pytest

from dncl_stepper import constants, run

logger = logging.getLogger(__name__)


@pytest.fixture
def run_lesson():
    """Compile a lesson program and check that it ran to completion."""

    def _run(source: str):
        trace = run(source)
        logger.info(
            "lesson: %d snapshots, %d steps", len(trace), trace.stats.steps
        )
        assert not trace.truncated
        assert trace.final_state.description == constants.DESC_FINISHED
        return trace

    return _run
