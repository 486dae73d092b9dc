# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Summary statistics for a tally.

For each part (one and two) we look at every successful day that reported a
time for that part and compute:

  - total: the sum of the times
  - mean: integer mean
  - median: the lower median, i.e. element (n - 1) // 2 of the sorted times,
    so an even count picks the smaller middle value
  - max: the slowest time and which day it belongs to

Days without a time for a part still show up in the report, they just don't
count here. Everything is a pure function of the results passed in.
"""

from typing import Callable, Optional, Sequence

from aocbench.logging.logger import get_logger
from aocbench.tally.models import Answer, RunResult, SlotStatistics, TallySummary

logger = get_logger(__name__)


def lower_median(values: Sequence[int]) -> int:
    """
    Raises:
        ValueError: If `values` is empty.
    """
    if not values:
        raise ValueError("median of an empty sequence")
    ordered = sorted(values)
    return ordered[(len(ordered) - 1) // 2]


def compute_slot_statistics(timed: Sequence[tuple[int, int]]) -> Optional[SlotStatistics]:
    """
    Statistics over `(day, time)` pairs, or None when there are none.

    Ties for the slowest time go to the lowest day.
    """
    if not timed:
        return None

    times = [time for _, time in timed]
    total = sum(times)
    max_index, max_time = max(sorted(timed), key=lambda pair: pair[1])

    return SlotStatistics(
        count=len(times),
        total=total,
        mean=total // len(times),
        median=lower_median(times),
        max_time=max_time,
        max_index=max_index,
    )


def _timed(
    results: Sequence[RunResult],
    slot: Callable[[RunResult], Answer],
) -> list[tuple[int, int]]:
    pairs: list[tuple[int, int]] = []
    for result in results:
        time = slot(result).time
        if time is not None:
            pairs.append((result.index, time))
    return pairs


def compute_summary(results: Sequence[RunResult], failed: int = 0) -> TallySummary:
    """Crunch the per-part timing statistics for a finished run."""
    summary = TallySummary(
        part_one=compute_slot_statistics(_timed(results, lambda r: r.part_one)),
        part_two=compute_slot_statistics(_timed(results, lambda r: r.part_two)),
        succeeded=len(results),
        failed=failed,
    )

    logger.info(
        "Summary computed",
        extra={
            "succeeded": summary.succeeded,
            "failed": summary.failed,
            "total_time": summary.total_time,
        },
    )
    return summary
