# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for answer and timing extraction.

The scenarios mirror how real solutions print: bare numbers, labelled parts
with timings in brackets, coloured output, and cargo chatter mixed in.
"""

import re

import pytest

from aocbench.config.schema import ExtractionFile, TaskPatternSpec
from aocbench.tally.exceptions import OutputDecodeError
from aocbench.tally.parsing.extraction import (
    ExtractionConfig,
    TaskPatterns,
    extract_answers,
    extract_times,
    strip_control_sequences,
)


def _labelled() -> ExtractionConfig:
    return ExtractionConfig(
        part_one=TaskPatterns(
            answer=re.compile(r"Task one:\s*(\S+)"),
            time=re.compile(r"\((\d+)ms\)\s*Task one"),
        ),
        part_two=TaskPatterns(
            answer=re.compile(r"Task two:\s*(\S+)"),
            time=re.compile(r"\((\d+)ms\)\s*Task two"),
        ),
    )


class TestStripControlSequences:
    def test_removes_colour_codes(self) -> None:
        assert strip_control_sequences("\x1b[1;32m12345\x1b[0m") == "12345"

    def test_removes_osc_sequences(self) -> None:
        assert strip_control_sequences("\x1b]0;title\x07done") == "done"

    @pytest.mark.parametrize(
        "text",
        ["\x1b[31mred\x1b[0m", "\x1b\x1b[31m", "plain", "\x1b]8;;link\x1b\\x", "\x1b\x1b\x1b["],
    )
    def test_stripping_is_idempotent(self, text: str) -> None:
        once = strip_control_sequences(text)
        assert strip_control_sequences(once) == once


class TestExtractAnswers:
    def test_default_takes_first_two_lines(self) -> None:
        assert extract_answers("12345\n67890", ExtractionConfig()) == ("12345", "67890")

    def test_default_skips_empty_lines(self) -> None:
        assert extract_answers("\n\n12345\n\n67890\n\n", ExtractionConfig()) == ("12345", "67890")

    def test_default_keeps_lines_verbatim(self) -> None:
        text = "  answer with spaces \nsecond: line"
        assert extract_answers(text, ExtractionConfig()) == ("  answer with spaces ", "second: line")

    def test_windows_line_endings(self) -> None:
        assert extract_answers(b"1\r\n2\r\n", ExtractionConfig()) == ("1", "2")

    def test_custom_patterns(self) -> None:
        text = "(3ms)   Task one: 12345\n(3ms)   Task two: 67890"
        assert extract_answers(text, _labelled()) == ("12345", "67890")

    def test_custom_patterns_ignore_noise(self) -> None:
        text = (
            "   Compiling day_01 v0.1.0\n"
            "    Finished release [optimized] target(s)\n"
            "\x1b[32m(3ms)   Task one: 12345\x1b[0m\n"
            "(4ms)   Task two: 67890\n"
        )
        assert extract_answers(text, _labelled()) == ("12345", "67890")

    def test_only_one_answer(self) -> None:
        assert extract_answers("only one\n", ExtractionConfig()) == ("only one", None)

    def test_empty_output(self) -> None:
        assert extract_answers("", ExtractionConfig()) == (None, None)

    def test_first_match_wins_per_slot(self) -> None:
        text = "Task one: a\nTask one: b\nTask two: c\nTask two: d"
        assert extract_answers(text, _labelled()) == ("a", "c")

    def test_invalid_utf8_raises(self) -> None:
        with pytest.raises(OutputDecodeError):
            extract_answers(b"\xff\xfe\n", ExtractionConfig())

    def test_config_from_file(self) -> None:
        parsed = ExtractionFile(
            task_one=TaskPatternSpec(answer=r"Part 1: (\d+)"),
            task_two=TaskPatternSpec(answer=r"Part 2: (\d+)"),
        )
        config = ExtractionConfig.from_file(parsed)
        assert extract_answers("Part 2: 7\nPart 1: 3", config) == ("3", "7")


class TestExtractTimes:
    def test_no_time_patterns_means_no_times(self) -> None:
        assert extract_times("12345\n67890", ExtractionConfig()) == (None, None)

    def test_times_from_labelled_output(self) -> None:
        text = "(3ms)   Task one: 12345\n(14ms)   Task two: 67890"
        assert extract_times(text, _labelled()) == (3, 14)

    def test_non_numeric_capture_is_skipped(self) -> None:
        config = ExtractionConfig(
            part_one=TaskPatterns(time=re.compile(r"t1=(\S+)")),
            part_two=TaskPatterns(time=re.compile(r"t2=(\S+)")),
        )
        text = "t1=fast\nt1=12\nt2=-5\nt2=30"
        assert extract_times(text, config) == (12, 30)
