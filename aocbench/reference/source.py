# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Where titles and accepted answers come from.

The pipeline only needs `get_info(day)`. Two implementations live here:

  - CachedReferenceSource: looks in a small on-disk cache first and asks a
    fetcher (normally the HTTP client) only on a miss. Once both answers for
    a day are known they never change, so the cache is written only then.
  - OfflineReferenceSource: the cache alone, for runs without network.

Cache files are three lines: title, part one answer, part two answer.
"""

from pathlib import Path
from typing import Optional, Protocol

from aocbench.logging.logger import get_logger
from aocbench.tally.models import ReferenceInfo
from aocbench.utils.filesystem import atomic_write

logger = get_logger(__name__)


class ReferenceUnavailableError(Exception):
    """No reference info could be obtained for a day."""


class InputUnavailableError(Exception):
    """A day's puzzle input could not be obtained."""


class ReferenceSource(Protocol):
    def get_info(self, index: int) -> ReferenceInfo: ...


class InputSource(Protocol):
    def download_input(self, index: int, folder: Path) -> Path: ...


def cache_path(cache_dir: Path, index: int) -> Path:
    return cache_dir / f"day_{index:02d}.answers"


def read_cached_info(cache_dir: Path, index: int) -> Optional[ReferenceInfo]:
    """Return the cached info for a day, or None if there's no usable cache file."""
    path = cache_path(cache_dir, index)
    if not path.is_file():
        return None

    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as err:
        logger.warning("Unreadable answer cache", extra={"path": str(path), "error": str(err)})
        return None

    if len(lines) < 3:
        logger.warning("Truncated answer cache ignored", extra={"path": str(path)})
        return None

    return ReferenceInfo(title=lines[0], part_one=lines[1], part_two=lines[2])


def write_cached_info(cache_dir: Path, index: int, info: ReferenceInfo) -> bool:
    """Cache a day's info if both answers are known. Returns whether it was written."""
    if info.part_one is None or info.part_two is None:
        return False

    atomic_write(
        cache_path(cache_dir, index),
        f"{info.title}\n{info.part_one}\n{info.part_two}\n",
    )
    return True


class OfflineReferenceSource:
    """Serve reference info from the cache only."""

    def __init__(self, cache_dir: Path) -> None:
        self._cache_dir = cache_dir

    def get_info(self, index: int) -> ReferenceInfo:
        info = read_cached_info(self._cache_dir, index)
        if info is None:
            raise ReferenceUnavailableError(f"No cached answers for day {index}")
        return info


class CachedReferenceSource:
    """Cache in front of another ReferenceSource."""

    def __init__(self, fetcher: ReferenceSource, cache_dir: Path) -> None:
        self._fetcher = fetcher
        self._cache_dir = cache_dir

    def get_info(self, index: int) -> ReferenceInfo:
        cached = read_cached_info(self._cache_dir, index)
        if cached is not None:
            return cached

        info = self._fetcher.get_info(index)
        try:
            write_cached_info(self._cache_dir, index, info)
        except OSError as err:
            # The info is still good for this run.
            logger.warning(
                "Could not write answer cache",
                extra={"day": index, "error": str(err)},
            )
        return info
