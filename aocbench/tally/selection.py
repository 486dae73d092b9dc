# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Working out which year folder we're in and which days to tally.

The year folder is found by walking up from the current directory to the
first folder whose name contains a plausible year (`2024`, `aoc 2024`,
`aoc_2024_rust`). The days default to every puzzle released so far: all 25
for 2015-2024, twelve from 2025 on, and for a year still in progress only
the days already unlocked in December.
"""

import re
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

from aocbench.tally.exceptions import SelectionError

FIRST_YEAR = 2015
LAST_FULL_LENGTH_YEAR = 2024
DAYS_IN_FULL_YEAR = 25
DAYS_FROM_2025 = 12

_YEAR_RE = re.compile(r"(?<!\d)(\d{4})(?!\d)")


def _year_in_name(name: str, today: date) -> Optional[int]:
    for match in _YEAR_RE.finditer(name):
        year = int(match.group(1))
        if FIRST_YEAR <= year <= today.year:
            return year
    return None


def find_batch_root(start: Path, today: Optional[date] = None) -> Path:
    """
    Walk up from `start` to the nearest folder named after a year.

    Raises:
        SelectionError: If no ancestor looks like a year folder.
    """
    today = today or date.today()
    current = start.resolve()
    for candidate in (current, *current.parents):
        if _year_in_name(candidate.name, today) is not None:
            return candidate
    raise SelectionError(
        f"No year folder found above {start}; run from inside a folder like '2024/'"
    )


def year_from_path(root: Path, today: Optional[date] = None) -> int:
    """
    Raises:
        SelectionError: If the folder name has no year in it.
    """
    today = today or date.today()
    year = _year_in_name(root.name, today)
    if year is None:
        raise SelectionError(f"Folder name {root.name!r} does not contain a year")
    return year


def possible_days(year: int, today: Optional[date] = None) -> list[int]:
    """
    Every day that has been released for `year`.

    Raises:
        SelectionError: For the current year before December, or a year
            outside the range the puzzles exist for.
    """
    today = today or date.today()

    if year < FIRST_YEAR or year > today.year:
        raise SelectionError(f"Year must be between {FIRST_YEAR} and {today.year}, got {year}")

    if year <= LAST_FULL_LENGTH_YEAR:
        return list(range(1, DAYS_IN_FULL_YEAR + 1))

    if year == today.year:
        if today.month != 12:
            raise SelectionError(f"It's not December yet, no {year} puzzles are out")
        return list(range(1, min(today.day, DAYS_FROM_2025) + 1))

    return list(range(1, DAYS_FROM_2025 + 1))


def parse_day_list(text: str) -> list[int]:
    """
    Parse a day list like "1,2,5-7".

    Raises:
        SelectionError: On anything that isn't a day number or range.
    """
    days: list[int] = []
    for chunk in text.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        start, sep, end = chunk.partition("-")
        try:
            if sep:
                days.extend(range(int(start), int(end) + 1))
            else:
                days.append(int(chunk))
        except ValueError as err:
            raise SelectionError(f"Invalid day list entry {chunk!r}") from err
    return days


def select_days(
    year: int,
    explicit: Optional[Iterable[int]] = None,
    today: Optional[date] = None,
) -> list[int]:
    """
    The sorted, de-duplicated days to tally.

    An explicit list wins over the release calendar but every entry must
    still be a valid day.

    Raises:
        SelectionError: If the list is empty or has an out-of-range day.
    """
    if explicit is None:
        return possible_days(year, today)

    days = sorted(set(explicit))
    if not days:
        raise SelectionError("No days requested")
    for day in days:
        if not 1 <= day <= DAYS_IN_FULL_YEAR:
            raise SelectionError(f"Day must be between 1 and {DAYS_IN_FULL_YEAR}, got {day}")
    return days
