# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tally report writer.

A run's output directory ends up as:

    <output_dir>/
    ├── report.json           machine-readable rows and statistics
    ├── report.txt            the same thing for humans
    └── config_snapshot.yaml  the config used for this run

report.json is the authoritative output; report.txt is a convenience view of
the same data and is also what `aocbench tally` prints. All three files are
written atomically.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import yaml

from aocbench.logging.logger import get_logger
from aocbench.tally.models import (
    Answer,
    ReportEntry,
    RunResult,
    SlotStatistics,
    TallyReport,
    UnitFailure,
)
from aocbench.utils.filesystem import atomic_write

logger = get_logger(__name__)

NOT_AVAILABLE = "NA"
_WIDTH = 78


def _answer_dict(answer: Answer, expected: Optional[str], correct: bool) -> dict[str, object]:
    return {
        "answer": answer.value,
        "expected": expected,
        "correct": correct,
        "time": answer.time,
    }


def _entry_dict(entry: ReportEntry) -> dict[str, object]:
    outcome = entry.outcome
    row: dict[str, object] = {"day": entry.index, "title": outcome.info.title}

    if isinstance(outcome, RunResult):
        row["status"] = "ok"
        row["part_one"] = _answer_dict(outcome.part_one, outcome.info.part_one, outcome.correct_one)
        row["part_two"] = _answer_dict(outcome.part_two, outcome.info.part_two, outcome.correct_two)
    else:
        row["status"] = "failed"
        row["failure"] = {
            "kind": outcome.kind.value,
            "detail": outcome.detail,
            "description": outcome.describe(),
        }
    return row


def _stats_dict(stats: Optional[SlotStatistics]) -> Optional[dict[str, int]]:
    if stats is None:
        return None
    return {
        "count": stats.count,
        "total": stats.total,
        "mean": stats.mean,
        "median": stats.median,
        "max_time": stats.max_time,
        "max_day": stats.max_index,
    }


def report_to_dict(report: TallyReport) -> dict[str, object]:
    summary = report.summary
    return {
        "run_count": report.run_count,
        "time_unit": report.time_unit,
        "days": [_entry_dict(e) for e in report.entries],
        "summary": {
            "succeeded": summary.succeeded,
            "failed": summary.failed,
            "total_time": summary.total_time,
            "part_one": _stats_dict(summary.part_one),
            "part_two": _stats_dict(summary.part_two),
        },
    }


def write_report(
    report: TallyReport,
    output_dir: Path,
    config_snapshot: Optional[dict[str, object]] = None,
) -> Path:
    """
    Write report.json, report.txt and (if given) config_snapshot.yaml.

    Returns the output directory.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    atomic_write(
        output_dir / "report.json",
        json.dumps(report_to_dict(report), indent=2, sort_keys=True),
    )
    atomic_write(output_dir / "report.txt", format_report_text(report))

    if config_snapshot is not None:
        atomic_write(
            output_dir / "config_snapshot.yaml",
            yaml.dump(config_snapshot, default_flow_style=False, sort_keys=True),
        )

    logger.info("Tally report written", extra={"output_dir": str(output_dir)})
    return output_dir


def _value(value: Optional[object]) -> str:
    return NOT_AVAILABLE if value is None else str(value)


def _mark(answer: Optional[str], expected: Optional[str]) -> str:
    if answer is None or expected is None:
        return NOT_AVAILABLE
    return "ok" if answer == expected else "wrong"


def _time(time: Optional[int], unit: str) -> str:
    return NOT_AVAILABLE if time is None else f"{time}{unit}"


def _part_cells(answer: Answer, expected: Optional[str], unit: str) -> str:
    return f"{_value(answer.value):<16} {_mark(answer.value, expected):<5} {_time(answer.time, unit):>9}"


def format_entry(entry: ReportEntry, time_unit: str = "ms") -> str:
    """One report row."""
    outcome = entry.outcome
    title = outcome.info.title or NOT_AVAILABLE
    head = f"{entry.index:>3}  {title[:28]:<28}"

    if isinstance(outcome, UnitFailure):
        return f"{head}  {outcome.describe()}"

    return (
        f"{head}  {_part_cells(outcome.part_one, outcome.info.part_one, time_unit)}"
        f"  {_part_cells(outcome.part_two, outcome.info.part_two, time_unit)}"
    )


def _stats_lines(label: str, stats: Optional[SlotStatistics], unit: str) -> list[str]:
    if stats is None:
        return [f"{label}: {NOT_AVAILABLE}"]
    return [
        f"{label}:",
        f"  Total:   {stats.total}{unit}",
        f"  Average: {stats.mean}{unit}",
        f"  Median:  {stats.median}{unit}",
        f"  Slowest: {stats.max_time}{unit} (day {stats.max_index})",
    ]


def format_report_text(report: TallyReport) -> str:
    """Render the report as plain text."""
    unit = report.time_unit
    summary = report.summary
    timestamp = datetime.now(tz=timezone.utc).isoformat()

    lines: list[str] = [
        "=" * _WIDTH,
        "AOCBENCH TALLY REPORT",
        f"Generated: {timestamp}",
        f"Runs per day: {report.run_count}",
        "=" * _WIDTH,
        "",
        "--- DAYS ---",
    ]
    lines.extend(format_entry(entry, unit) for entry in report.entries)

    lines.extend(
        [
            "",
            "--- SUMMARY ---",
            f"Succeeded: {summary.succeeded}",
            f"Failed: {summary.failed}",
            f"Total time: {summary.total_time}{unit}",
        ]
    )
    lines.extend(_stats_lines("Part one", summary.part_one, unit))
    lines.extend(_stats_lines("Part two", summary.part_two, unit))

    lines.extend(["", "=" * _WIDTH])
    return "\n".join(lines) + "\n"
