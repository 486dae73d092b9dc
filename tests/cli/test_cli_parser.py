# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Argument parsing for the aocbench CLI, without running any handler."""

import pytest

from aocbench.cli.commands import handle_discover, handle_run, handle_tally
from aocbench.cli.main import build_parser


class TestTallyArguments:
    def test_defaults(self) -> None:
        args = build_parser().parse_args(["tally"])
        assert args.func is handle_tally
        assert args.runs is None
        assert args.max_workers is None
        assert args.output_dir is None
        assert args.root is None
        assert args.days is None
        assert args.log_level is None
        assert args.dry_run is False

    def test_all_options(self) -> None:
        args = build_parser().parse_args(
            [
                "tally",
                "--runs", "5",
                "--max-workers", "3",
                "--output-dir", "out",
                "--root", "2023",
                "--days", "1-3,7",
                "--log-level", "DEBUG",
                "--dry-run",
            ]
        )
        assert args.runs == 5
        assert args.max_workers == 3
        assert args.output_dir == "out"
        assert args.root == "2023"
        assert args.days == "1-3,7"
        assert args.log_level == "DEBUG"
        assert args.dry_run is True

    def test_runs_must_be_an_integer(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["tally", "--runs", "many"])

    def test_unknown_log_level_is_rejected(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["tally", "--log-level", "LOUD"])


class TestDiscoverArguments:
    def test_discover_has_no_runs_option(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["discover", "--runs", "2"])

    def test_discover_dispatches_to_its_handler(self) -> None:
        args = build_parser().parse_args(["discover", "--days", "4"])
        assert args.func is handle_discover
        assert args.days == "4"


class TestRunArguments:
    def test_day_is_required(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["run"])

    def test_assert_flag(self) -> None:
        args = build_parser().parse_args(["run", "--day", "3", "--assert"])
        assert args.func is handle_run
        assert args.day == 3
        assert args.assert_answers is True

    def test_assert_defaults_off(self) -> None:
        args = build_parser().parse_args(["run", "--day", "3"])
        assert args.assert_answers is False
        assert args.root is None


def test_no_subcommand_leaves_func_unset() -> None:
    args = build_parser().parse_args([])
    assert getattr(args, "func", None) is None
