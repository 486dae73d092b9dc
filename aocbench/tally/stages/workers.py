# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Fan-out/join used by every concurrent stage.

One task per day goes onto a thread pool; the call returns only once every
task has finished, so a stage is a barrier. Workers report a day's failure
by raising UnitRunError. That exception is caught here and handed back as
the day's outcome, so the caller (on the coordinating thread) is the only
one that records failures.

Any other exception from a worker is a bug, not a day failing, and is
re-raised.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Optional, Protocol, Sequence, TypeVar, Union

from aocbench.logging.logger import get_logger
from aocbench.tally.exceptions import UnitRunError

logger = get_logger(__name__)


class _Indexed(Protocol):
    @property
    def index(self) -> int: ...


_U = TypeVar("_U", bound=_Indexed)
_R = TypeVar("_R")


def run_per_unit(
    units: Sequence[_U],
    worker: Callable[[_U], _R],
    max_workers: Optional[int] = None,
    stage: str = "stage",
) -> list[tuple[_U, Union[_R, UnitRunError]]]:
    """
    Run `worker` once per unit, concurrently, and collect every outcome.

    Outcomes come back sorted by day, whatever order the tasks finished in.
    `max_workers` defaults to one thread per unit.
    """
    if not units:
        return []

    workers = min(max_workers or len(units), len(units))
    outcomes: list[tuple[_U, Union[_R, UnitRunError]]] = []

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix=f"aocbench-{stage}") as pool:
        futures = {pool.submit(worker, unit): unit for unit in units}
        for future in as_completed(futures):
            unit = futures[future]
            try:
                outcomes.append((unit, future.result()))
            except UnitRunError as err:
                outcomes.append((unit, err))

    outcomes.sort(key=lambda pair: pair[0].index)

    failed = sum(1 for _, outcome in outcomes if isinstance(outcome, UnitRunError))
    logger.info(
        "Stage finished",
        extra={
            "stage": stage,
            "units": len(units),
            "failed": failed,
            "max_workers": workers,
        },
    )
    return outcomes
