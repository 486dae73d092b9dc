# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for aocbench tests.

Day folders used by the end-to-end tests hold tiny Python solutions, run with
the interpreter that's running pytest, so no compiler has to be installed.
"""

import textwrap
from pathlib import Path
from typing import Callable, Optional

import pytest

from aocbench.languages.registry import CapabilityRegistry, PythonCapability
from aocbench.reference.source import ReferenceUnavailableError
from aocbench.tally.models import ReferenceInfo


class StaticReferenceSource:
    """Reference info from a dict; days not in it are unavailable."""

    def __init__(self, infos: dict[int, ReferenceInfo]) -> None:
        self.infos = infos
        self.requested: list[int] = []

    def get_info(self, index: int) -> ReferenceInfo:
        self.requested.append(index)
        if index not in self.infos:
            raise ReferenceUnavailableError(f"no info for day {index}")
        return self.infos[index]


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """The smallest config that passes schema validation."""
    config_content = textwrap.dedent("""\
        global:
          config_version: "1.0.0"
          log_level: "DEBUG"
    """)
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """Valid YAML, but missing the required config_version."""
    config_content = textwrap.dedent("""\
        global:
          log_level: "INFO"
    """)
    config_file = tmp_path / "invalid_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file


@pytest.fixture()
def year_root(tmp_path: Path) -> Path:
    """An empty year folder."""
    root = tmp_path / "2023"
    root.mkdir()
    return root


@pytest.fixture()
def make_day(year_root: Path) -> Callable[..., Path]:
    """
    Factory for day folders holding a Python solution.

    `make_day(3, "print(1)")` creates `<root>/day_03/main.py` and an `input`
    file, and returns the folder.
    """

    def _make(
        index: int,
        source: Optional[str] = None,
        input_text: Optional[str] = "example input\n",
        name: Optional[str] = None,
        entry: str = "main.py",
    ) -> Path:
        folder = year_root / (name or f"day_{index:02d}")
        folder.mkdir(parents=True, exist_ok=True)
        if source is not None:
            (folder / entry).write_text(textwrap.dedent(source), encoding="utf-8")
        if input_text is not None:
            (folder / "input").write_text(input_text, encoding="utf-8")
        return folder

    return _make


@pytest.fixture()
def python_registry() -> CapabilityRegistry:
    registry = CapabilityRegistry()
    registry.register(PythonCapability())
    return registry


@pytest.fixture()
def static_source() -> Callable[[dict[int, ReferenceInfo]], StaticReferenceSource]:
    return StaticReferenceSource


@pytest.fixture()
def user_config_dir(tmp_path: Path) -> Path:
    """An empty stand-in for ~/.config/aocbench so a real one never leaks in."""
    path = tmp_path / "user-config"
    path.mkdir()
    return path
