"""DNCL stepper package."""

from .run import run, CompilationError  # noqa: F401
from .api import (  # noqa: F401
    parse_source,
    dump_statements,
    statement_stats,
    compile_source,
)
from .playback import TraceCursor  # noqa: F401
