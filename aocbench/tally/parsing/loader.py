# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Layered lookup for `.parse.yaml` extraction files.

The first file found wins:
  1. inside the day folder (searched the same way as the entry file)
  2. at the root of the year folder
  3. ~/.config/aocbench/.parse.yaml

If none exists the day gets the default config: first two non-empty lines.
A file that exists but doesn't parse is a hard error, not a silent fallback.
"""

from pathlib import Path
from typing import Optional

from aocbench.config.loader import load_extraction_file
from aocbench.logging.logger import get_logger
from aocbench.tally.parsing.extraction import ExtractionConfig
from aocbench.utils.filesystem import find_file

logger = get_logger(__name__)

PARSE_FILE = ".parse.yaml"


def _user_config_dir() -> Optional[Path]:
    try:
        return Path.home() / ".config" / "aocbench"
    except RuntimeError:
        return None


def find_extraction_file(
    root: Path,
    folder: Path,
    user_config_dir: Optional[Path] = None,
) -> Optional[Path]:
    """Return the extraction file that applies to `folder`, if any."""
    in_folder = find_file(folder, PARSE_FILE)
    if in_folder is not None:
        return in_folder

    at_root = root / PARSE_FILE
    if at_root.is_file():
        return at_root

    user_dir = user_config_dir if user_config_dir is not None else _user_config_dir()
    if user_dir is not None and (user_dir / PARSE_FILE).is_file():
        return user_dir / PARSE_FILE

    return None


def load_extraction_config(
    root: Path,
    folder: Path,
    user_config_dir: Optional[Path] = None,
) -> ExtractionConfig:
    """
    Resolve the extraction config for one day folder.

    Raises:
        ConfigLoadError / ConfigValidationError: If the chosen file is malformed.
    """
    path = find_extraction_file(root, folder, user_config_dir)
    if path is None:
        return ExtractionConfig()

    config = ExtractionConfig.from_file(load_extraction_file(path))
    logger.debug(
        "Extraction config loaded",
        extra={"folder": str(folder), "path": str(path)},
    )
    return config
