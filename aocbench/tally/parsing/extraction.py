# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Pulling answers and timings out of whatever a solution printed.

Solutions print however they like: bare numbers, "Part 1: 1234", coloured
output with timings in brackets. An ExtractionConfig says which regex finds
each part's answer (and, optionally, its timing) in a line. With no config
the first two non-empty lines are the two answers.

The scan is the same for answers and timings:
  1. strip terminal escape sequences
  2. split into lines, dropping empty ones
  3. for each line: if part one's pattern matches and part one is still
     unset, take group 1; otherwise, if part two's pattern matches and part
     two is still unset, take group 1 for part two
  4. stop once both are set
"""

import re
from dataclasses import dataclass, field
from typing import Callable, Optional, TypeVar, Union

from aocbench.config.schema import DEFAULT_ANSWER_PATTERN, ExtractionFile, TaskPatternSpec
from aocbench.tally.exceptions import OutputDecodeError

# CSI (ESC [ ... final), OSC (ESC ] ... BEL or ST), two-byte ESC sequences,
# and finally any stray ESC so a second pass has nothing left to match.
_ESCAPE_RE = re.compile(
    r"\x1b\[[0-?]*[ -/]*[@-~]"
    r"|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)"
    r"|\x1b[@-Z\\-_]"
    r"|\x1b"
)

_T = TypeVar("_T")


@dataclass(frozen=True)
class TaskPatterns:
    answer: "re.Pattern[str]" = field(default_factory=lambda: re.compile(DEFAULT_ANSWER_PATTERN))
    time: Optional["re.Pattern[str]"] = None

    @classmethod
    def from_spec(cls, spec: TaskPatternSpec) -> "TaskPatterns":
        return cls(
            answer=re.compile(spec.answer),
            time=re.compile(spec.time) if spec.time is not None else None,
        )


@dataclass(frozen=True)
class ExtractionConfig:
    """Per-day extraction rules. The default reads one answer per line."""

    part_one: TaskPatterns = field(default_factory=TaskPatterns)
    part_two: TaskPatterns = field(default_factory=TaskPatterns)

    @classmethod
    def from_file(cls, parsed: ExtractionFile) -> "ExtractionConfig":
        return cls(
            part_one=TaskPatterns.from_spec(parsed.task_one),
            part_two=TaskPatterns.from_spec(parsed.task_two),
        )


def strip_control_sequences(text: str) -> str:
    """Remove ANSI/terminal escape sequences. Stripping twice changes nothing."""
    return _ESCAPE_RE.sub("", text)


def _to_text(raw: Union[str, bytes]) -> str:
    if isinstance(raw, bytes):
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as err:
            raise OutputDecodeError(f"output is not valid UTF-8: {err}") from err
    return raw


def _lines(raw: Union[str, bytes]) -> list[str]:
    text = strip_control_sequences(_to_text(raw))
    lines = (line.rstrip("\r") for line in text.split("\n"))
    return [line for line in lines if line]


def _scan(
    lines: list[str],
    first: Callable[[str], Optional[_T]],
    second: Callable[[str], Optional[_T]],
) -> tuple[Optional[_T], Optional[_T]]:
    slot_one: Optional[_T] = None
    slot_two: Optional[_T] = None

    for line in lines:
        if slot_one is not None and slot_two is not None:
            break

        value = first(line) if slot_one is None else None
        if value is not None:
            slot_one = value
            continue

        value = second(line) if slot_two is None else None
        if value is not None:
            slot_two = value

    return slot_one, slot_two


def _answer_matcher(pattern: "re.Pattern[str]") -> Callable[[str], Optional[str]]:
    def _match(line: str) -> Optional[str]:
        found = pattern.search(line)
        if found is None:
            return None
        return found.group(1)

    return _match


def _time_matcher(pattern: Optional["re.Pattern[str]"]) -> Callable[[str], Optional[int]]:
    def _match(line: str) -> Optional[int]:
        if pattern is None:
            return None
        found = pattern.search(line)
        if found is None:
            return None
        captured = found.group(1)
        # Non-numeric captures are skipped; the scan moves on.
        if captured is None or not (captured.isascii() and captured.isdigit()):
            return None
        return int(captured)

    return _match


def extract_answers(
    raw: Union[str, bytes],
    config: ExtractionConfig,
) -> tuple[Optional[str], Optional[str]]:
    """
    Find part one's and part two's answers in program output.

    Raises:
        OutputDecodeError: If `raw` is bytes that aren't valid UTF-8.
    """
    return _scan(
        _lines(raw),
        _answer_matcher(config.part_one.answer),
        _answer_matcher(config.part_two.answer),
    )


def extract_times(
    raw: Union[str, bytes],
    config: ExtractionConfig,
) -> tuple[Optional[int], Optional[int]]:
    """
    Find part one's and part two's timings in program output.

    Parts without a time pattern always come back as None.

    Raises:
        OutputDecodeError: If `raw` is bytes that aren't valid UTF-8.
    """
    return _scan(
        _lines(raw),
        _time_matcher(config.part_one.time),
        _time_matcher(config.part_two.time),
    )
