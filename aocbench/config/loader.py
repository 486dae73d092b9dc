# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Config loader: reads YAML from disk and produces validated, frozen models.

The pipeline is the same for every file aocbench reads:
  1. Read the text from disk
  2. Parse it as YAML into a plain dict
  3. Hand the dict to pydantic for schema validation
  4. Return the frozen model

Any failure is raised immediately. A config that can't be trusted stops the
run before any day is built.
"""

from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from aocbench.config.exceptions import ConfigLoadError, ConfigValidationError
from aocbench.config.schema import AocBenchConfig, ExtractionFile, ToolchainFile

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def _read_yaml_file(config_path: Path, allow_empty: bool = False) -> dict[str, Any]:
    """
    Read a YAML file and return the parsed dict.

    An empty file is an error for the run config but fine for the optional
    per-day files, where it simply means "use the defaults".

    Raises:
        ConfigLoadError: If the file doesn't exist, isn't readable, or isn't a YAML mapping.
    """
    if not config_path.exists():
        raise ConfigLoadError(f"Config file not found: {config_path}")

    if not config_path.is_file():
        raise ConfigLoadError(f"Config path is not a file: {config_path}")

    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except OSError as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err

    try:
        parsed = yaml.safe_load(raw_text)
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if parsed is None and allow_empty:
        return {}

    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"Config file must contain a YAML mapping (dict), got {type(parsed).__name__}"
        )

    return parsed


def _validate(model: type[_ModelT], raw_data: dict[str, Any], config_path: Path) -> _ModelT:
    try:
        return model.model_validate(raw_data)
    except ValidationError as err:
        raise ConfigValidationError(
            f"Config validation failed for {config_path}:\n{err}"
        ) from err


def load_config(config_path: Path) -> AocBenchConfig:
    """
    Load and validate the run config passed with --config.

    Raises:
        ConfigLoadError: File I/O or YAML parse failures.
        ConfigValidationError: Schema violations.
    """
    return _validate(AocBenchConfig, _read_yaml_file(config_path), config_path)


def load_extraction_file(path: Path) -> ExtractionFile:
    """Load a `.parse.yaml` file. Bad regexes surface as ConfigValidationError."""
    return _validate(ExtractionFile, _read_yaml_file(path, allow_empty=True), path)


def load_toolchain_file(path: Path) -> ToolchainFile:
    """Load a `.languages.yaml` toolchain file."""
    return _validate(ToolchainFile, _read_yaml_file(path, allow_empty=True), path)
