# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Finding the day folders inside a year folder.

A year folder looks something like:

    2024/
    ├── day_01/
    ├── day_02/
    ├── day-3/
    └── target/

Day N matches the first folder (in name order) containing N as a standalone
number: zero-padded ("03") or bare ("3"), with no digit directly before or
after it. So `day_03`, `day-3` and `03 - Rucksacks` are all day 3, while
`day_13` and `day 23` are not. Days with no folder are simply left out;
the pipeline reports them as missing.
"""

import re
from pathlib import Path
from typing import Iterable

from aocbench.logging.logger import get_logger
from aocbench.tally.exceptions import DiscoveryError
from aocbench.tally.models import DiscoveredUnit

logger = get_logger(__name__)

# Build output and VCS folders are never day folders.
_IGNORED_FOLDERS: frozenset[str] = frozenset({"target", "node_modules", "__pycache__"})


def _day_pattern(index: int) -> "re.Pattern[str]":
    return re.compile(rf"(?<!\d)(?:{index:02d}|{index})(?!\d)")


def _list_folders(root: Path) -> list[Path]:
    try:
        entries = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as err:
        raise DiscoveryError(f"Cannot read year folder {root}: {err}") from err

    return [
        entry
        for entry in entries
        if entry.is_dir()
        and not entry.name.startswith(".")
        and entry.name not in _IGNORED_FOLDERS
    ]


def discover_units(root: Path, indices: Iterable[int]) -> list[DiscoveredUnit]:
    """
    Match requested days to folders under `root`.

    Returns one DiscoveredUnit per day that has a folder, in the order the
    days were requested.

    Raises:
        DiscoveryError: If `root` can't be listed.
    """
    folders = _list_folders(root)
    discovered: list[DiscoveredUnit] = []

    for index in indices:
        pattern = _day_pattern(index)
        match = next((f for f in folders if pattern.search(f.name)), None)
        if match is None:
            logger.debug("No folder for day", extra={"day": index, "root": str(root)})
            continue
        discovered.append(DiscoveredUnit(index=index, folder=match))

    logger.info(
        "Discovery finished",
        extra={
            "root": str(root),
            "discovered": [u.index for u in discovered],
        },
    )
    return discovered
