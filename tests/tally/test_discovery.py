# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Tests for matching requested days to folders."""

import os
from pathlib import Path

import pytest

from aocbench.tally.discovery.scanner import discover_units
from aocbench.tally.exceptions import DiscoveryError


def _folders(root: Path, *names: str) -> None:
    for name in names:
        (root / name).mkdir()


class TestDiscoverUnits:
    def test_padded_and_bare_names(self, year_root: Path) -> None:
        _folders(year_root, "day_01", "day-2", "03 - Rucksacks")

        units = discover_units(year_root, [1, 2, 3])
        assert [(u.index, u.folder.name) for u in units] == [
            (1, "day_01"),
            (2, "day-2"),
            (3, "03 - Rucksacks"),
        ]

    def test_digits_must_be_bounded(self, year_root: Path) -> None:
        _folders(year_root, "day_21", "day_13")

        assert discover_units(year_root, [1, 2, 3]) == []

    def test_missing_days_are_left_out(self, year_root: Path) -> None:
        _folders(year_root, "day_05")

        units = discover_units(year_root, [4, 5, 6])
        assert [u.index for u in units] == [5]

    def test_first_folder_in_name_order_wins(self, year_root: Path) -> None:
        _folders(year_root, "day_07_old", "day_07")

        units = discover_units(year_root, [7])
        assert units[0].folder.name == "day_07"

    def test_results_follow_request_order(self, year_root: Path) -> None:
        _folders(year_root, "day_01", "day_02")

        assert [u.index for u in discover_units(year_root, [2, 1])] == [2, 1]

    def test_hidden_and_build_folders_are_ignored(self, year_root: Path) -> None:
        _folders(year_root, ".day_01", "target")
        (year_root / "day_01.txt").write_text("", encoding="utf-8")

        assert discover_units(year_root, [1]) == []

    def test_unreadable_root_is_fatal(self, tmp_path: Path) -> None:
        with pytest.raises(DiscoveryError):
            discover_units(tmp_path / "does-not-exist", [1])

    @pytest.mark.skipif(os.name == "nt", reason="symlinks need privileges on Windows")
    def test_symlinked_day_folder(self, year_root: Path, tmp_path: Path) -> None:
        real = tmp_path / "elsewhere"
        real.mkdir()
        (year_root / "day_09").symlink_to(real, target_is_directory=True)

        units = discover_units(year_root, [9])
        assert [u.index for u in units] == [9]
