# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The tally pipeline, end to end.

    discover ──┐
               ├─> compile ─> verify ─> benchmark ─> report
    fetch info ┘

Discovery and reference-info retrieval run at the same time. After that each
stage is a barrier: every day finishes one stage before any day starts the
next. A day that fails anywhere is recorded once and dropped from the later
stages, so every requested day ends up in the report exactly once, either
with results or with the reason it failed.

Things that make the whole run pointless (unreadable year folder, broken
`.parse.yaml`) are raised before any day is built.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Optional

from aocbench.languages.registry import CapabilityRegistry
from aocbench.logging.logger import get_logger
from aocbench.reference.source import InputSource, ReferenceSource, ReferenceUnavailableError
from aocbench.tally.context import PipelineContext
from aocbench.tally.discovery.scanner import discover_units
from aocbench.tally.models import DiscoveredUnit, FailureKind, ReferenceInfo, TallyReport
from aocbench.tally.parsing.loader import load_extraction_config
from aocbench.tally.reporting.assembler import assemble_report
from aocbench.tally.stages.benchmarking import benchmark_units
from aocbench.tally.stages.compiling import compile_units
from aocbench.tally.stages.verification import verify_units

logger = get_logger(__name__)


def _fetch_info(source: ReferenceSource, index: int) -> Optional[ReferenceInfo]:
    try:
        return source.get_info(index)
    except ReferenceUnavailableError as err:
        logger.warning(
            "No reference info for day",
            extra={"day": index, "error": str(err)},
        )
        return None


def _discover_and_fetch(
    root: Path,
    indices: list[int],
    reference_source: ReferenceSource,
    max_workers: Optional[int],
) -> tuple[list[DiscoveredUnit], dict[int, ReferenceInfo]]:
    workers = max_workers or len(indices) + 1
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="aocbench-info") as pool:
        discovery = pool.submit(discover_units, root, indices)
        lookups: dict[int, Future[Optional[ReferenceInfo]]] = {
            index: pool.submit(_fetch_info, reference_source, index) for index in indices
        }

        discovered = discovery.result()
        infos: dict[int, ReferenceInfo] = {}
        for index, future in lookups.items():
            info = future.result()
            if info is not None:
                infos[index] = info

    return discovered, infos


def run_pipeline(
    root: Path,
    indices: Iterable[int],
    run_count: int,
    *,
    registry: CapabilityRegistry,
    reference_source: ReferenceSource,
    input_source: Optional[InputSource] = None,
    max_workers: Optional[int] = None,
    release: bool = True,
    compile_timeout_seconds: Optional[float] = None,
    run_timeout_seconds: Optional[float] = None,
    time_unit: str = "ms",
    user_config_dir: Optional[Path] = None,
) -> TallyReport:
    """
    Build, verify and benchmark the requested days under `root`.

    Args:
        root: The year folder containing the day folders.
        indices: Which days to tally. Duplicates are ignored.
        run_count: How many times each day is executed (at least once).
        registry: Extension -> language capability lookup.
        reference_source: Where titles and accepted answers come from.
        input_source: Used to download `input` files that are missing.
            Without one, a missing input fails the day.
        max_workers: Upper bound on days handled at once in each stage.

    Returns:
        A TallyReport with one entry per requested day, in day order.

    Raises:
        DiscoveryError: If `root` can't be listed.
        ConfigLoadError / ConfigValidationError: If a `.parse.yaml` that
            applies to one of the days is malformed.
    """
    requested = sorted(set(indices))
    run_count = max(run_count, 1)
    ctx = PipelineContext(root=root)

    logger.info(
        "Tally started",
        extra={"root": str(root), "days": requested, "runs": run_count},
    )

    discovered, infos = _discover_and_fetch(root, requested, reference_source, max_workers)
    ctx.infos.update(infos)

    for unit in discovered:
        ctx.configs[unit.index] = load_extraction_config(root, unit.folder, user_config_dir)

    found = {unit.index for unit in discovered}
    for index in requested:
        if index not in found:
            ctx.record_failure(index, FailureKind.MISSING_UNIT, f"no folder for day {index}")

    compiled = compile_units(
        ctx,
        discovered,
        registry,
        input_source=input_source,
        max_workers=max_workers,
        release=release,
        timeout_seconds=compile_timeout_seconds,
    )
    verified = verify_units(ctx, compiled)
    results = benchmark_units(
        ctx,
        verified,
        run_count,
        max_workers=max_workers,
        timeout_seconds=run_timeout_seconds,
    )

    report = assemble_report(results, ctx.failures, run_count=run_count, time_unit=time_unit)

    logger.info(
        "Tally finished",
        extra={
            "succeeded": report.summary.succeeded,
            "failed": report.summary.failed,
        },
    )
    return report
