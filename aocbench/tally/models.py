# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Data models for the tally pipeline.

Each stage takes one of these in and hands the next one out:

    DiscoveredUnit -> CompiledUnit -> VerifiedUnit -> RunResult

and any day that drops out along the way becomes a UnitFailure instead.
They're all frozen dataclasses: a stage builds a new value rather than
editing the previous one, so nothing produced by an earlier stage changes
under a later one.
"""

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from aocbench.languages.command import RunnableCommand


@dataclass(frozen=True)
class ReferenceInfo:
    """Title and known answers for a day, as reported by the puzzle site."""

    title: str
    part_one: Optional[str] = None
    part_two: Optional[str] = None

    @property
    def is_unimplemented(self) -> bool:
        """No answers have been accepted yet, so there is nothing to compare against."""
        return self.part_one is None and self.part_two is None

    @classmethod
    def placeholder(cls) -> "ReferenceInfo":
        return cls(title="")


@dataclass(frozen=True)
class DiscoveredUnit:
    index: int
    folder: Path


@dataclass(frozen=True)
class CompiledUnit:
    index: int
    command: RunnableCommand


@dataclass(frozen=True)
class VerifiedUnit:
    index: int
    command: RunnableCommand
    info: ReferenceInfo


@dataclass(frozen=True)
class Answer:
    """One part's answer and its averaged timing."""

    value: Optional[str] = None
    time: Optional[int] = None


def _matches(answer: Optional[str], expected: Optional[str]) -> bool:
    return answer is not None and expected is not None and answer == expected


@dataclass(frozen=True)
class RunResult:
    """Everything a successful benchmark produced for one day."""

    index: int
    info: ReferenceInfo
    part_one: Answer = field(default_factory=Answer)
    part_two: Answer = field(default_factory=Answer)

    @property
    def correct_one(self) -> bool:
        return _matches(self.part_one.value, self.info.part_one)

    @property
    def correct_two(self) -> bool:
        return _matches(self.part_two.value, self.info.part_two)


class FailureKind(enum.Enum):
    """Why a day dropped out of the pipeline. One per day, terminal for that day."""

    MISSING_UNIT = "missing_unit"
    INPUT_UNAVAILABLE = "input_unavailable"
    MISSING_EXTENSION = "missing_extension"
    UNSUPPORTED_LANGUAGE = "unsupported_language"
    COMPILE_ERROR = "compile_error"
    MISSING_IMPLEMENTATION = "missing_implementation"
    RUNTIME_ERROR = "runtime_error"
    ANSWER_EXTRACTION_ERROR = "answer_extraction_error"


_DESCRIPTIONS: dict[FailureKind, str] = {
    FailureKind.MISSING_UNIT: "Missing day",
    FailureKind.INPUT_UNAVAILABLE: "Could not download input",
    FailureKind.MISSING_EXTENSION: "Missing extension",
    FailureKind.UNSUPPORTED_LANGUAGE: "Unsupported language",
    FailureKind.COMPILE_ERROR: "Compiler error",
    FailureKind.MISSING_IMPLEMENTATION: "Missing implementation",
    FailureKind.RUNTIME_ERROR: "Runtime error",
    FailureKind.ANSWER_EXTRACTION_ERROR: "Error getting answers",
}


@dataclass(frozen=True)
class UnitFailure:
    index: int
    info: ReferenceInfo
    kind: FailureKind
    detail: str = ""

    def describe(self) -> str:
        """One-line description suitable for a report row."""
        text = _DESCRIPTIONS[self.kind]
        if self.detail:
            text = f"{text}: {self.detail}"
        return " ".join(text.split())


Outcome = Union[RunResult, UnitFailure]


@dataclass(frozen=True)
class ReportEntry:
    """One row of the final report: a day and how it ended."""

    index: int
    outcome: Outcome

    @property
    def succeeded(self) -> bool:
        return isinstance(self.outcome, RunResult)


@dataclass(frozen=True)
class SlotStatistics:
    """
    Timing statistics for one part across every day that reported a time.

    `median` is the lower median: for an even number of days it is the
    smaller of the two middle values.
    """

    count: int
    total: int
    mean: int
    median: int
    max_time: int
    max_index: int


@dataclass(frozen=True)
class TallySummary:
    part_one: Optional[SlotStatistics] = None
    part_two: Optional[SlotStatistics] = None
    succeeded: int = 0
    failed: int = 0

    @property
    def total_time(self) -> int:
        return sum(s.total for s in (self.part_one, self.part_two) if s is not None)


@dataclass(frozen=True)
class TallyReport:
    """What run_pipeline returns: ordered rows plus summary statistics."""

    entries: list[ReportEntry]
    summary: TallySummary
    run_count: int = 1
    time_unit: str = "ms"
