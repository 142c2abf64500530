#!/usr/bin/env python3
# Copyright 2026 catsdecl Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run all CI checks locally: format, lint, type check, tests, corpus smoke test, and build."""

import argparse
import subprocess
import sys
import time
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    ("Type check", ["uv", "run", "ty", "check", "src/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=catsdecl", "--cov-report=term-missing"]),
    ("Bundled corpus", ["uv", "run", "catsdecl", "call", "--bundled", 'peripheral.wrap("top")']),
    ("Build", ["uv", "build"]),
]


def main() -> int:
    """Run the CI steps and report a summary."""
    parser = argparse.ArgumentParser(description="Run the catsdecl CI steps locally.")
    parser.add_argument("--fail-fast", action="store_true", help="Stop at the first failing step")
    args = parser.parse_args()

    results: list[tuple[str, bool, float]] = []
    for name, cmd in STEPS:
        _banner(name)
        start = time.monotonic()
        proc = subprocess.run(cmd, cwd=_REPO_ROOT)
        results.append((name, proc.returncode == 0, time.monotonic() - start))
        if args.fail_fast and proc.returncode != 0:
            break

    _banner("  Summary")
    for name, passed, elapsed in results:
        color = chalk.green if passed else chalk.red
        print(color(f"  {'PASS' if passed else 'FAIL'}  {name} ({elapsed:.1f}s)"))
    skipped = [name for name, _ in STEPS[len(results) :]]
    for name in skipped:
        print(chalk.yellow(f"  SKIP  {name}"))

    print()
    return 0 if all(passed for _, passed, _ in results) and not skipped else 1


# ################
# Implementation
# ################

_REPO_ROOT = Path(__file__).parent.parent


def _banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue(title))
    print(sep)


if __name__ == "__main__":
    sys.exit(main())
