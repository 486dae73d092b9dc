# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for aocbench.

There are three kinds of YAML file aocbench reads, and each gets its own
frozen pydantic model here:

  - the run config passed with --config (AocBenchConfig)
  - `.parse.yaml` extraction files that say how to find answers and timings
    in a program's output (ExtractionFile)
  - `.languages.yaml` toolchain files that teach aocbench new languages
    (ToolchainFile)

All models use pydantic v2's ConfigDict with:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_ANSWER_PATTERN = r"^(.*)$"


class GlobalConfig(BaseModel):
    """Cross-cutting settings: schema version and logging."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        description="Schema version for compatibility tracking, e.g. '1.0.0'"
    )
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for a copy of the JSON log",
    )


class TallyConfig(BaseModel):
    """
    Everything the tally pipeline needs to build and benchmark a year.

    Command-line flags override the matching fields here.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    runs: int = Field(
        default=1,
        ge=1,
        description="How many times each day is executed; timings are averaged",
    )
    days: Optional[list[int]] = Field(
        default=None,
        description="Explicit list of days to tally instead of every released day",
    )
    max_workers: Optional[int] = Field(
        default=None,
        ge=1,
        le=64,
        description="Upper bound on days built or run at the same time (default: one per day)",
    )
    compile_timeout_seconds: Optional[int] = Field(
        default=None,
        ge=1,
        description="Give up on a build step after this long; unset waits forever",
    )
    run_timeout_seconds: Optional[int] = Field(
        default=None,
        ge=1,
        description="Give up on a single run after this long; unset waits forever",
    )
    release: bool = Field(
        default=True,
        description="Build in release mode where the toolchain supports it",
    )
    toolchain_file: Optional[str] = Field(
        default=None,
        description="Toolchain file to merge over the built-ins (default: <root>/.languages.yaml)",
    )
    output_directory: Optional[str] = Field(
        default=None,
        description="Where report.json / report.txt are written; unset skips writing files",
    )
    cache_directory: str = Field(
        default=".aocbench/answers",
        description="Answer cache location, relative to the year folder",
    )
    time_unit: str = Field(
        default="ms",
        description="Unit the solutions print their timings in (TASKUNIT env var wins)",
    )
    fetch_missing: bool = Field(
        default=True,
        description="Fetch answers and inputs from adventofcode.com when not cached",
    )

    @field_validator("days")
    @classmethod
    def _days_in_range(cls, value: Optional[list[int]]) -> Optional[list[int]]:
        if value is None:
            return value
        for day in value:
            if not 1 <= day <= 25:
                raise ValueError(f"day {day} is outside 1..25")
        return value


class AocBenchConfig(BaseModel):
    """
    Top-level run config. A file may hold only `global:`; a missing `tally:`
    section means all the defaults above.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(alias="global")
    tally: Optional[TallyConfig] = Field(default=None)


def _check_pattern(value: str) -> str:
    try:
        compiled = re.compile(value)
    except re.error as err:
        raise ValueError(f"invalid regular expression {value!r}: {err}") from err
    if compiled.groups < 1:
        raise ValueError(f"regular expression {value!r} needs a capture group")
    return value


class TaskPatternSpec(BaseModel):
    """How to find one part's answer, and optionally its timing, in a line."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    answer: str = Field(
        default=DEFAULT_ANSWER_PATTERN,
        description="Regex whose first group is the answer",
    )
    time: Optional[str] = Field(
        default=None,
        description="Regex whose first group is an integer duration",
    )

    @field_validator("answer")
    @classmethod
    def _answer_compiles(cls, value: str) -> str:
        return _check_pattern(value)

    @field_validator("time")
    @classmethod
    def _time_compiles(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _check_pattern(value)


class ExtractionFile(BaseModel):
    """Contents of a `.parse.yaml` file."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    task_one: TaskPatternSpec = Field(default_factory=TaskPatternSpec)
    task_two: TaskPatternSpec = Field(default_factory=TaskPatternSpec)


class CompileSpec(BaseModel):
    """Optional build step plus the command that runs the built program."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    build: Optional[str] = Field(
        default=None,
        description="Command run once before benchmarking; non-zero exit is a compile error",
    )
    execute: str = Field(description="Command that runs the built program")


class ToolchainSpec(BaseModel):
    """
    One language entry in a `.languages.yaml` file.

    Templates may use {file}, {day} and {args}, optionally prefixed with
    `rel:` or `name:`.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    ext: str = Field(description="File extension without the dot, e.g. 'go'")
    run: str = Field(description="Command that runs the entry file directly")
    dir: Optional[str] = Field(default=None, description="Working directory template")
    compile: Optional[CompileSpec] = Field(default=None)

    @field_validator("ext")
    @classmethod
    def _strip_dot(cls, value: str) -> str:
        value = value.strip().lstrip(".")
        if not value:
            raise ValueError("extension must not be empty")
        return value


class ToolchainFile(BaseModel):
    """Contents of a `.languages.yaml` file."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    toolchain: dict[str, ToolchainSpec] = Field(default_factory=dict)
