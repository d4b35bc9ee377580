#!/usr/bin/env python3
"""DNCL Studio — step through a DNCL program from the command line.

Compiles the program once, eagerly, then prints every snapshot of the
resulting trace (or the whole trace as JSON).
"""
from __future__ import annotations

import argparse
import json
import logging
import sys

from dncl_stepper import CompilationError, TraceCursor, compile_source, run
from dncl_stepper.api import dump_statements, statement_stats
from dncl_stepper.parser import UnrecognizedStatementError
from dncl_stepper.run_types import ErrorPolicy
from dncl_stepper import constants


def _print_snapshot(snapshot) -> None:
    print(f"[{snapshot.step_index:>4}] line {snapshot.line:>3}  {snapshot.description}")
    if snapshot.variables:
        rendered = ", ".join(f"{k}={v}" for k, v in snapshot.variables.items())
        print(f"        vars: {rendered}")
    for name, values in snapshot.arrays.items():
        print(f"        {name}: {list(values)}")


def _fail(diagnostics) -> None:
    print(constants.COMPILE_ERROR_MESSAGE, file=sys.stderr)
    for diagnostic in diagnostics:
        print(f"  {diagnostic}", file=sys.stderr)
    sys.exit(1)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="DNCL step-by-step interpreter")
    parser.add_argument("file", nargs="?",
                        help="DNCL source file (default: built-in demo)")
    parser.add_argument("--max-steps", "-n", type=int,
                        default=constants.DEFAULT_MAX_STEPS,
                        help=f"Global step budget (default: {constants.DEFAULT_MAX_STEPS})")
    parser.add_argument("--strict", action="store_true",
                        help="Fail on unrecognized lines and evaluation errors")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Print the statement tree, each step and timings")
    parser.add_argument("--json", action="store_true",
                        help="Print the whole trace as JSON")
    parser.add_argument("--parse-only", action="store_true",
                        help="Only print the statement tree (no execution)")
    parser.add_argument("--stats", action="store_true",
                        help="Only print statement kind counts (no execution)")
    parser.add_argument("--log-level", default="WARNING",
                        help="Logging level (default: WARNING)")

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(),
                        format="%(levelname)s %(name)s: %(message)s")

    if not args.file:
        source = constants.DEMO_PROGRAM
        print("No file provided. Using built-in demo:\n")
        print(source)
    else:
        with open(args.file, encoding="utf-8") as f:
            source = f.read()

    try:
        if args.parse_only:
            dump = dump_statements(source, strict=args.strict)
            print("═══ Statements ═══")
            print(dump)
            return

        if args.stats:
            counts = statement_stats(source, strict=args.strict)
            print(json.dumps(counts, indent=2))
            return
    except UnrecognizedStatementError as exc:
        _fail((exc.diagnostic,))

    try:
        if args.verbose:
            policy = ErrorPolicy.STRICT if args.strict else ErrorPolicy.LENIENT
            trace = run(source, max_steps=args.max_steps, policy=policy,
                        verbose=True)
        else:
            trace = compile_source(source, max_steps=args.max_steps,
                                   strict=args.strict)
    except CompilationError as exc:
        _fail(exc.diagnostics)

    if args.json:
        print(json.dumps(trace.to_dict(), indent=2, ensure_ascii=False))
        return

    if not args.verbose:
        for snapshot in TraceCursor(trace):
            _print_snapshot(snapshot)

    print("\n═══ Console ═══")
    final = trace.final_state
    for line in final.console if final else []:
        print(f"  ❯ {line}")
    for diagnostic in trace.diagnostics:
        print(f"  ! {diagnostic}")


if __name__ == "__main__":
    main()
