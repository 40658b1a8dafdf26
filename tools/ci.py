#!/usr/bin/env python3
# Copyright 2026 Confetti Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the Confetti checks locally: formatting, lint, type check, tests, and packaging."""

import argparse
import subprocess
import sys
import time
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: dict[str, list[str]] = {
    "format": ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"],
    "lint": ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"],
    "types": ["uv", "run", "ty", "check", "src/"],
    "tests": ["uv", "run", "pytest", "--cov=confetti", "--cov-report=term-missing"],
    "build": ["uv", "build"],
}


def main() -> int:
    """Run the selected steps and print a coloured summary."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("steps", nargs="*", metavar="STEP", help=f"Steps to run: {', '.join(STEPS)} (default: all)")
    parser.add_argument("--fail-fast", action="store_true", help="Stop after the first failing step")
    args = parser.parse_args()
    unknown = [name for name in args.steps if name not in STEPS]
    if unknown:
        parser.error(f"unknown step(s): {', '.join(unknown)}")

    selected = args.steps or list(STEPS)
    results: list[tuple[str, bool, float]] = []
    for name in selected:
        _banner(f"Running {name}")
        start = time.monotonic()
        proc = subprocess.run(STEPS[name], cwd=_repo_root())
        results.append((name, proc.returncode == 0, time.monotonic() - start))
        if args.fail_fast and proc.returncode != 0:
            break

    _banner("Summary")
    for name, passed, elapsed in results:
        colour = chalk.green if passed else chalk.red
        print(colour(f"  {'PASS' if passed else 'FAIL'}  {name} ({elapsed:.1f}s)"))
    skipped = [name for name in selected if name not in {result[0] for result in results}]
    for name in skipped:
        print(chalk.yellow(f"  SKIP  {name}"))
    print()
    return 0 if results and all(passed for _, passed, _ in results) and not skipped else 1


# ################
# Implementation
# ################


def _banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}\n{chalk.blue(title)}\n{sep}")


def _repo_root() -> Path:
    return Path(__file__).resolve().parent.parent


if __name__ == "__main__":
    sys.exit(main())
