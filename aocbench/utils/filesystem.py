# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Filesystem helpers for aocbench.

Reports and cached answers are written atomically: the content goes to a
temporary file in the same directory, which is then renamed over the target.
A crash mid-write leaves a stray temp file, never a half-written report.

`find_file` is the lookup used for a day's entry file and its `.parse.yaml`:
the day folder first, then its subfolders, smallest subfolder first.
"""

import tempfile
from pathlib import Path
from typing import Collection, Optional


def atomic_write(target_path: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Write content to a file atomically.

    Raises:
        OSError: If the write or rename fails.
    """
    target_path.parent.mkdir(parents=True, exist_ok=True)

    # dir= same directory as target so the rename stays on one filesystem.
    temp_fd = tempfile.NamedTemporaryFile(
        mode="w",
        encoding=encoding,
        dir=str(target_path.parent),
        prefix=".aocbench_tmp_",
        suffix=".tmp",
        delete=False,
    )
    temp_path = Path(temp_fd.name)

    try:
        temp_fd.write(content)
        temp_fd.flush()
        temp_fd.close()
        temp_path.replace(target_path)
    except BaseException:
        temp_fd.close()
        if temp_path.exists():
            temp_path.unlink()
        raise


def _entry_count(directory: Path) -> int:
    try:
        return sum(1 for _ in directory.iterdir())
    except OSError:
        return -1


def find_file(
    start_dir: Path,
    prefix: str,
    extensions: Optional[Collection[str]] = None,
) -> Optional[Path]:
    """
    Find the first file whose name starts with `prefix`.

    When `extensions` is given, only files with one of those suffixes (no
    leading dot) count as a match.

    Files directly inside `start_dir` are checked first (in name order), then
    each subdirectory is searched recursively, the ones with the fewest
    entries first. Build output folders such as `target/` are big, so they
    naturally end up last.

    Returns None if nothing matches or `start_dir` can't be read.
    """
    try:
        entries = sorted(start_dir.iterdir())
    except OSError:
        return None

    subdirs: list[Path] = []
    for path in entries:
        if path.is_file() and path.name.startswith(prefix):
            if extensions is None or path.suffix.lstrip(".") in extensions:
                return path
        if path.is_dir():
            subdirs.append(path)

    # Unreadable directories sort last.
    subdirs.sort(key=lambda d: (_entry_count(d) < 0, _entry_count(d), d.name))

    for subdir in subdirs:
        found = find_file(subdir, prefix, extensions)
        if found is not None:
            return found

    return None
