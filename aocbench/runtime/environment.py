# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Environment checks for aocbench.

A tally shells out to compilers and interpreters, so it helps to know up
front which ones are on PATH. None of them is required: a missing tool only
fails the days that need it.
"""

import platform
import shutil
import sys
from typing import NamedTuple

MINIMUM_PYTHON_MAJOR = 3
MINIMUM_PYTHON_MINOR = 10

# Tools the built-in languages use.
KNOWN_TOOLS = ("cargo", "rustc")


class SystemInfo(NamedTuple):
    """Snapshot of the current system environment."""

    python_version: str
    platform: str
    architecture: str
    tools: dict[str, bool]


def check_minimum_python() -> None:
    """
    Raises:
        RuntimeError: If Python is older than 3.10.
    """
    major, minor = sys.version_info[:2]
    if (major, minor) < (MINIMUM_PYTHON_MAJOR, MINIMUM_PYTHON_MINOR):
        raise RuntimeError(
            f"aocbench requires Python >= {MINIMUM_PYTHON_MAJOR}.{MINIMUM_PYTHON_MINOR}, "
            f"but you're running {major}.{minor}."
        )


def available_tools() -> dict[str, bool]:
    return {tool: shutil.which(tool) is not None for tool in KNOWN_TOOLS}


def get_system_info() -> SystemInfo:
    """Collect basic system information for logging and diagnostics."""
    return SystemInfo(
        python_version=platform.python_version(),
        platform=platform.system(),
        architecture=platform.machine(),
        tools=available_tools(),
    )
