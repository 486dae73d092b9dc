# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for report assembly and the report writer.

Verifies row ordering, that report.json is valid JSON with one row per day,
and that report.txt shows results, failures and the summary.
"""

import json
from pathlib import Path

import pytest
import yaml

from aocbench.tally.models import (
    Answer,
    FailureKind,
    ReferenceInfo,
    RunResult,
    TallyReport,
    UnitFailure,
)
from aocbench.tally.reporting.assembler import assemble_entries, assemble_report
from aocbench.tally.reporting.writer import format_entry, format_report_text, write_report


def _success(index: int, one: str = "12345", two: str = "67890") -> RunResult:
    return RunResult(
        index=index,
        info=ReferenceInfo(f"Puzzle {index}", "12345", "67890"),
        part_one=Answer(one, 12),
        part_two=Answer(two, None),
    )


def _failure(index: int, kind: FailureKind = FailureKind.MISSING_UNIT, detail: str = "") -> UnitFailure:
    return UnitFailure(index=index, info=ReferenceInfo.placeholder(), kind=kind, detail=detail)


def _sample_report() -> TallyReport:
    return assemble_report(
        [_success(3), _success(1, two="wrong")],
        [_failure(2, FailureKind.RUNTIME_ERROR, "thread 'main' panicked\n  at src/main.rs")],
        run_count=5,
    )


class TestAssemble:
    def test_entries_are_in_day_order(self) -> None:
        entries = assemble_entries([_success(5), _success(1)], [_failure(3), _failure(2)])
        assert [e.index for e in entries] == [1, 2, 3, 5]
        assert [e.succeeded for e in entries] == [True, False, False, True]

    def test_a_day_cannot_both_succeed_and_fail(self) -> None:
        with pytest.raises(ValueError, match="more than one outcome"):
            assemble_entries([_success(1)], [_failure(1)])

    def test_report_has_summary(self) -> None:
        report = _sample_report()
        assert report.summary.succeeded == 2
        assert report.summary.failed == 1
        assert report.summary.part_one is not None
        assert report.summary.part_one.total == 24
        assert report.summary.part_two is None
        assert report.run_count == 5


class TestFormatting:
    def test_success_row_marks(self) -> None:
        row = format_entry(assemble_entries([_success(1, two="nope")], [])[0])
        assert "Puzzle 1" in row
        assert "12345" in row
        assert "ok" in row
        assert "wrong" in row
        assert "12ms" in row
        assert "NA" in row

    def test_failure_row_is_one_line(self) -> None:
        row = format_entry(assemble_entries([], [_failure(2, FailureKind.RUNTIME_ERROR, "a\nb")])[0])
        assert "\n" not in row
        assert "Runtime error: a b" in row

    def test_report_text_sections(self) -> None:
        text = format_report_text(_sample_report())
        assert "AOCBENCH TALLY REPORT" in text
        assert "Runs per day: 5" in text
        assert "--- DAYS ---" in text
        assert "--- SUMMARY ---" in text
        assert "Slowest: 12ms (day 1)" in text
        assert "Part two: NA" in text

    def test_time_unit_is_used(self) -> None:
        report = assemble_report([_success(1)], [], time_unit="us")
        assert "12us" in format_report_text(report)


class TestWriteReport:
    def test_writes_all_files(self, tmp_path: Path) -> None:
        output_dir = tmp_path / "out" / "tally"
        write_report(_sample_report(), output_dir, {"tally": {"runs": 5}})

        assert (output_dir / "report.txt").is_file()
        snapshot = yaml.safe_load((output_dir / "config_snapshot.yaml").read_text(encoding="utf-8"))
        assert snapshot == {"tally": {"runs": 5}}

    def test_json_has_one_row_per_day(self, tmp_path: Path) -> None:
        write_report(_sample_report(), tmp_path)

        data = json.loads((tmp_path / "report.json").read_text(encoding="utf-8"))
        assert [row["day"] for row in data["days"]] == [1, 2, 3]
        assert data["days"][0]["part_two"]["correct"] is False
        assert data["days"][1]["failure"]["kind"] == "runtime_error"
        assert data["summary"]["part_one"]["max_day"] == 1

    def test_snapshot_is_optional(self, tmp_path: Path) -> None:
        write_report(_sample_report(), tmp_path)
        assert not (tmp_path / "config_snapshot.yaml").exists()
