# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Run one day interactively.

This is the `aocbench run` path: no benchmarking and no report, just the
day's own output on the terminal as it happens. The day goes through the
same preparation as in a tally (entry file, input download, language
lookup), but the capability's `run` command is used instead of building a
release binary first. Answers are extracted with the day's `.parse.yaml`
so they can optionally be checked against the accepted ones.
"""

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from aocbench.config.exceptions import TemplateError
from aocbench.languages.registry import CapabilityRegistry
from aocbench.logging.logger import get_logger
from aocbench.reference.source import InputSource
from aocbench.tally.discovery.scanner import discover_units
from aocbench.tally.exceptions import AnswerMismatchError, UnitRunError
from aocbench.tally.models import FailureKind, ReferenceInfo
from aocbench.tally.parsing.extraction import extract_answers
from aocbench.tally.parsing.loader import load_extraction_config
from aocbench.tally.stages.compiling import prepare_unit

logger = get_logger(__name__)


@dataclass(frozen=True)
class SingleRunResult:
    index: int
    output: str
    part_one: Optional[str]
    part_two: Optional[str]


def run_day(
    root: Path,
    index: int,
    registry: CapabilityRegistry,
    *,
    input_source: Optional[InputSource] = None,
    release: bool = True,
    sink: Optional[Callable[[str], object]] = None,
    user_config_dir: Optional[Path] = None,
) -> SingleRunResult:
    """
    Run day `index` once, streaming its stdout to `sink` (default: our stdout).

    Raises:
        UnitRunError: If the day can't be found, prepared or started, or if
            it exits non-zero (RUNTIME_ERROR, after its output was streamed).
        ConfigError: If the day's `.parse.yaml` is malformed.
    """
    units = discover_units(root, [index])
    if not units:
        raise UnitRunError(FailureKind.MISSING_UNIT, f"no folder for day {index}")
    unit = units[0]

    config = load_extraction_config(root, unit.folder, user_config_dir)
    capability, unit_ctx = prepare_unit(unit, registry, root, input_source, release)

    try:
        command = capability.run(unit_ctx)
    except TemplateError as err:
        raise UnitRunError(FailureKind.COMPILE_ERROR, str(err)) from err

    logger.info("Running day", extra={"day": index, "command": command.describe()})

    try:
        returncode, output = command.stream(sink or sys.stdout.write)
    except OSError as err:
        raise UnitRunError(
            FailureKind.RUNTIME_ERROR, f"could not start {command.program}: {err}"
        ) from err

    if returncode != 0:
        raise UnitRunError(FailureKind.RUNTIME_ERROR, f"exited with code {returncode}")

    part_one, part_two = extract_answers(output, config)
    return SingleRunResult(index=index, output=output, part_one=part_one, part_two=part_two)


def check_answers(result: SingleRunResult, info: ReferenceInfo) -> None:
    """
    Compare a run's answers with the accepted ones.

    Parts without an accepted answer yet are skipped, so a day that is only
    half solved can still be checked.

    Raises:
        AnswerMismatchError: On the first part that differs.
    """
    parts = (
        ("one", result.part_one, info.part_one),
        ("two", result.part_two, info.part_two),
    )
    for name, answer, expected in parts:
        if expected is None:
            continue
        if answer != expected:
            raise AnswerMismatchError(
                f"Day {result.index} part {name}: got {answer!r}, expected {expected!r}"
            )
        logger.info("Answer correct", extra={"day": result.index, "part": name})
