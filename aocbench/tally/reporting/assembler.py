# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Merging successes and failures into the ordered rows of a report."""

from typing import Sequence

from aocbench.tally.metrics.engine import compute_summary
from aocbench.tally.models import ReportEntry, RunResult, TallyReport, UnitFailure


def assemble_entries(
    results: Sequence[RunResult],
    failures: Sequence[UnitFailure],
) -> list[ReportEntry]:
    """
    One entry per day, ascending by day.

    Raises:
        ValueError: If a day shows up more than once across both lists.
    """
    entries = [ReportEntry(r.index, r) for r in results]
    entries.extend(ReportEntry(f.index, f) for f in failures)

    seen: set[int] = set()
    for entry in entries:
        if entry.index in seen:
            raise ValueError(f"Day {entry.index} has more than one outcome")
        seen.add(entry.index)

    return sorted(entries, key=lambda e: e.index)


def assemble_report(
    results: Sequence[RunResult],
    failures: Sequence[UnitFailure],
    run_count: int = 1,
    time_unit: str = "ms",
) -> TallyReport:
    return TallyReport(
        entries=assemble_entries(results, failures),
        summary=compute_summary(results, failed=len(failures)),
        run_count=run_count,
        time_unit=time_unit,
    )
