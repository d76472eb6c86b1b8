"""Command line entry point for the thieves simulation."""

from __future__ import annotations

import argparse
import sys

from dumbthieves.logic import run_simulation


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dumbthieves",
        description="Simulate thieves sharing houses and fences with Lamport clocks.",
    )
    parser.add_argument("num_houses", type=int)
    parser.add_argument("num_fences", type=int)
    parser.add_argument("--processes", type=int, default=4, help="number of thieves")
    parser.add_argument(
        "--rounds", type=int, default=None, help="jobs per thief (default: forever)"
    )
    parser.add_argument("--log-dir", default="logs", help="directory for log_<rank>.txt")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return 1 if exc.code else 0
    try:
        run_simulation(
            args.processes,
            args.num_houses,
            args.num_fences,
            args.rounds,
            args.log_dir,
            sys.stdout,
        )
    except (ValueError, OSError) as exc:
        print(f"{parser.prog}: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())