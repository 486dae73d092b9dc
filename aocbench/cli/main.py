# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for aocbench.

Every operation is a subcommand of `aocbench`. The global options
(--config, --log-level, --dry-run) are inherited by every subcommand through
argparse's parent parser mechanism.

Usage:
    aocbench tally
    aocbench tally --runs 10 --days 1-5,9
    aocbench discover --root ~/aoc/2023
    aocbench run --day 3 --assert
"""

import argparse
import sys

from aocbench.cli.commands import handle_discover, handle_run, handle_tally
from aocbench.cli.exit_codes import USER_ERROR
from aocbench.logging.logger import set_log_stream


def _build_global_parser() -> argparse.ArgumentParser:
    """
    Options shared by every subcommand. add_help=False keeps the help text
    from colliding with the subcommand parsers.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file.",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=None,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level (default: from config, else INFO).",
    )
    parent.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Show what would be built and run without doing it.",
    )
    return parent


def _add_selection_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        type=str,
        default=None,
        help="Year folder holding the day folders (default: nearest year folder above the cwd).",
    )
    parser.add_argument(
        "--days",
        type=str,
        default=None,
        help="Days to include, e.g. '1,2,5' or '1-10' (default: every released day).",
    )


def _register_subcommands(
    subparsers: argparse._SubParsersAction,  # type: ignore[type-arg]
    parent: argparse.ArgumentParser,
) -> None:
    """Register every subcommand and point it at its handler via set_defaults(func=...)."""
    tally = subparsers.add_parser(
        "tally",
        parents=[parent],
        help="Build, run and benchmark every day, then print the report.",
    )
    _add_selection_arguments(tally)
    tally.add_argument(
        "--runs",
        type=int,
        default=None,
        help="How many times to run each day; timings are averaged.",
    )
    tally.add_argument(
        "--max-workers",
        type=int,
        default=None,
        dest="max_workers",
        help="Upper bound on days built or run at the same time.",
    )
    tally.add_argument(
        "--output-dir",
        type=str,
        default=None,
        dest="output_dir",
        help="Also write report.json / report.txt into this directory.",
    )
    tally.set_defaults(func=handle_tally)

    discover = subparsers.add_parser(
        "discover",
        parents=[parent],
        help="List which day folders would be picked up.",
    )
    _add_selection_arguments(discover)
    discover.set_defaults(func=handle_discover)

    run = subparsers.add_parser(
        "run",
        parents=[parent],
        help="Run one day with its output on the terminal.",
    )
    run.add_argument(
        "--root",
        type=str,
        default=None,
        help="Year folder holding the day folders (default: nearest year folder above the cwd).",
    )
    run.add_argument(
        "--day",
        type=int,
        required=True,
        help="Which day to run.",
    )
    run.add_argument(
        "--assert",
        action="store_true",
        default=False,
        dest="assert_answers",
        help="Check the printed answers against the accepted ones.",
    )
    run.set_defaults(func=handle_run)


def build_parser() -> argparse.ArgumentParser:
    parent = _build_global_parser()
    root_parser = argparse.ArgumentParser(
        prog="aocbench",
        description="aocbench: build, run and benchmark a year of puzzle solutions.",
        parents=[parent],
    )
    subparsers = root_parser.add_subparsers(dest="command")
    _register_subcommands(subparsers, parent)
    return root_parser


def main() -> None:
    """
    Main CLI entrypoint, what pyproject.toml's [project.scripts] points to.

    If no subcommand is given, we show help and exit with USER_ERROR. Logs go
    to stderr so stdout stays clean for the report.
    """
    set_log_stream(sys.stderr)
    root_parser = build_parser()
    args = root_parser.parse_args()

    if not hasattr(args, "func") or args.func is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
