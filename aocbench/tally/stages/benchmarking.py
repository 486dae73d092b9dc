# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Benchmark stage: run each verified day N times and collect its answers.

Days run concurrently with each other, but a single day's iterations run one
after another so they don't compete for the machine and so the first failing
iteration stops the rest.

What a day reports:
  - answers: from the first iteration. Later iterations are assumed to print
    the same thing and are not compared.
  - timings: per part, the integer mean over all iterations, but only if
    every iteration printed a time for that part. One missing time means no
    time for that part at all.
"""

import subprocess
from typing import Optional, Sequence

from aocbench.logging.logger import get_logger
from aocbench.tally.context import PipelineContext
from aocbench.tally.exceptions import OutputDecodeError, UnitRunError
from aocbench.tally.models import Answer, FailureKind, RunResult, VerifiedUnit
from aocbench.tally.parsing.extraction import ExtractionConfig, extract_answers, extract_times
from aocbench.tally.stages.workers import run_per_unit

logger = get_logger(__name__)

_Iteration = tuple[Optional[str], Optional[int], Optional[str], Optional[int]]


def average_time(times: Sequence[Optional[int]]) -> Optional[int]:
    """Integer mean of `times`, or None if any is missing (or there are none)."""
    if not times or any(t is None for t in times):
        return None
    return sum(times) // len(times)  # type: ignore[arg-type]


def _run_once(unit: VerifiedUnit, config: ExtractionConfig, timeout_seconds: Optional[float]) -> _Iteration:
    try:
        completed = unit.command.run(timeout_seconds)
    except FileNotFoundError as err:
        raise UnitRunError(
            FailureKind.RUNTIME_ERROR, f"{unit.command.program} not found"
        ) from err
    except subprocess.TimeoutExpired as err:
        raise UnitRunError(
            FailureKind.RUNTIME_ERROR, f"timed out after {timeout_seconds}s"
        ) from err
    except OSError as err:
        raise UnitRunError(
            FailureKind.RUNTIME_ERROR, f"could not start {unit.command.program}: {err}"
        ) from err

    if completed.returncode != 0:
        stderr = completed.stderr.decode("utf-8", errors="replace").strip()
        raise UnitRunError(
            FailureKind.RUNTIME_ERROR,
            stderr or f"exited with code {completed.returncode}",
        )

    try:
        answer_one, answer_two = extract_answers(completed.stdout, config)
        time_one, time_two = extract_times(completed.stdout, config)
    except OutputDecodeError as err:
        raise UnitRunError(FailureKind.ANSWER_EXTRACTION_ERROR, str(err)) from err

    if answer_one is None:
        raise UnitRunError(FailureKind.ANSWER_EXTRACTION_ERROR)

    return answer_one, time_one, answer_two, time_two


def run_unit(
    unit: VerifiedUnit,
    config: ExtractionConfig,
    run_count: int,
    timeout_seconds: Optional[float] = None,
) -> RunResult:
    """
    Run one day `run_count` times (at least once).

    Raises:
        UnitRunError: RUNTIME_ERROR or ANSWER_EXTRACTION_ERROR from the first
            iteration that fails. Nothing from earlier iterations survives.
    """
    iterations: list[_Iteration] = []

    for iteration in range(max(run_count, 1)):
        iterations.append(_run_once(unit, config, timeout_seconds))
        logger.debug(
            "Iteration finished",
            extra={"day": unit.index, "iteration": iteration + 1},
        )

    answer_one, _, answer_two, _ = iterations[0]
    return RunResult(
        index=unit.index,
        info=unit.info,
        part_one=Answer(answer_one, average_time([it[1] for it in iterations])),
        part_two=Answer(answer_two, average_time([it[3] for it in iterations])),
    )


def benchmark_units(
    ctx: PipelineContext,
    verified: Sequence[VerifiedUnit],
    run_count: int,
    max_workers: Optional[int] = None,
    timeout_seconds: Optional[float] = None,
) -> list[RunResult]:
    """
    Benchmark every verified day concurrently. Failures go into `ctx`.
    """

    def _worker(unit: VerifiedUnit) -> RunResult:
        return run_unit(unit, ctx.config_for(unit.index), run_count, timeout_seconds)

    results: list[RunResult] = []
    for unit, outcome in run_per_unit(verified, _worker, max_workers, stage="benchmark"):
        if isinstance(outcome, UnitRunError):
            ctx.record_failure(unit.index, outcome.kind, outcome.detail)
            continue

        logger.info(
            "Day benchmarked",
            extra={
                "day": unit.index,
                "runs": max(run_count, 1),
                "correct_one": outcome.correct_one,
                "correct_two": outcome.correct_two,
            },
        )
        results.append(outcome)
    return results
