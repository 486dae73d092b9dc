# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Tests for year detection and day selection."""

from datetime import date
from pathlib import Path

import pytest

from aocbench.tally.exceptions import SelectionError
from aocbench.tally.selection import (
    find_batch_root,
    parse_day_list,
    possible_days,
    select_days,
    year_from_path,
)

TODAY = date(2026, 10, 19)


class TestFindBatchRoot:
    def test_walks_up_to_year_folder(self, tmp_path: Path) -> None:
        start = tmp_path / "aoc_2022_rust" / "day_03" / "src"
        start.mkdir(parents=True)

        assert find_batch_root(start, TODAY) == (tmp_path / "aoc_2022_rust").resolve()

    def test_no_year_folder(self, tmp_path: Path) -> None:
        start = tmp_path / "code" / "puzzles"
        start.mkdir(parents=True)
        with pytest.raises(SelectionError):
            find_batch_root(start, date(2014, 1, 1))

    def test_future_year_is_not_a_year_folder(self, tmp_path: Path) -> None:
        with pytest.raises(SelectionError):
            year_from_path(tmp_path / "2099", TODAY)

    def test_year_from_path(self) -> None:
        assert year_from_path(Path("/home/me/aoc 2017"), TODAY) == 2017

    def test_embedded_digits_do_not_count(self) -> None:
        with pytest.raises(SelectionError):
            year_from_path(Path("/x/120221"), TODAY)


class TestPossibleDays:
    def test_full_length_year(self) -> None:
        assert possible_days(2019, TODAY) == list(range(1, 26))

    def test_short_year_in_the_past(self) -> None:
        assert possible_days(2025, TODAY) == list(range(1, 13))

    def test_current_year_before_december(self) -> None:
        with pytest.raises(SelectionError, match="December"):
            possible_days(2026, TODAY)

    def test_current_year_in_december(self) -> None:
        assert possible_days(2026, date(2026, 12, 4)) == [1, 2, 3, 4]
        assert possible_days(2026, date(2026, 12, 20)) == list(range(1, 13))

    def test_out_of_range(self) -> None:
        with pytest.raises(SelectionError):
            possible_days(2014, TODAY)
        with pytest.raises(SelectionError):
            possible_days(2030, TODAY)


class TestDayLists:
    def test_parse_list_and_ranges(self) -> None:
        assert parse_day_list("1,2, 5-7") == [1, 2, 5, 6, 7]

    def test_parse_rejects_garbage(self) -> None:
        with pytest.raises(SelectionError):
            parse_day_list("1,two")

    def test_explicit_days_are_sorted_and_unique(self) -> None:
        assert select_days(2020, [5, 1, 5], TODAY) == [1, 5]

    def test_explicit_day_out_of_range(self) -> None:
        with pytest.raises(SelectionError):
            select_days(2020, [0, 3], TODAY)

    def test_default_is_release_calendar(self) -> None:
        assert select_days(2015, None, TODAY) == list(range(1, 26))

    def test_empty_explicit_list(self) -> None:
        with pytest.raises(SelectionError):
            select_days(2020, [], TODAY)
