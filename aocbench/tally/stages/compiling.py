# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Compile stage: turn each discovered day folder into a RunnableCommand.

Per day, in order:
  1. find the entry file (`main.<ext>`, the day folder first, then its
     subfolders)
  2. make sure `<folder>/input` exists, downloading it if we can
  3. look up the language capability for the entry file's extension
  4. let the capability build the day and hand back the command to run

Days are compiled concurrently. A day that fails any step is recorded and
left out of the result; the others carry on.
"""

from pathlib import Path
from typing import Optional, Sequence

from aocbench.config.exceptions import TemplateError
from aocbench.languages.command import BuildError, UnitContext
from aocbench.languages.registry import Capability, CapabilityRegistry
from aocbench.logging.logger import get_logger
from aocbench.reference.source import InputSource, InputUnavailableError
from aocbench.tally.context import PipelineContext
from aocbench.tally.exceptions import UnitRunError
from aocbench.tally.models import CompiledUnit, DiscoveredUnit, FailureKind
from aocbench.tally.stages.workers import run_per_unit
from aocbench.utils.filesystem import find_file

logger = get_logger(__name__)

ENTRY_PREFIX = "main"
INPUT_FILE = "input"


def find_entry_file(folder: Path, registry: CapabilityRegistry) -> Path:
    """
    Locate a day's entry file.

    A `main.*` with an extension the registry knows is preferred. Failing
    that, any `main*` file is returned so the caller can say which language
    it couldn't handle.

    Raises:
        UnitRunError: MISSING_IMPLEMENTATION if there's no entry file at all.
    """
    entry = find_file(folder, ENTRY_PREFIX, registry.extensions())
    if entry is None:
        entry = find_file(folder, ENTRY_PREFIX)
    if entry is None:
        raise UnitRunError(FailureKind.MISSING_IMPLEMENTATION, f"no {ENTRY_PREFIX} file in {folder}")
    return entry


def ensure_input(
    unit: DiscoveredUnit,
    input_source: Optional[InputSource] = None,
) -> Path:
    """
    Return the day's input file, downloading it first if it's missing.

    Raises:
        UnitRunError: INPUT_UNAVAILABLE if there's no file and no way to get one.
    """
    input_file = unit.folder / INPUT_FILE
    if input_file.is_file():
        return input_file

    if input_source is None:
        raise UnitRunError(FailureKind.INPUT_UNAVAILABLE, f"{input_file} does not exist")

    try:
        return input_source.download_input(unit.index, unit.folder)
    except InputUnavailableError as err:
        raise UnitRunError(FailureKind.INPUT_UNAVAILABLE, str(err)) from err
    except OSError as err:
        raise UnitRunError(FailureKind.INPUT_UNAVAILABLE, f"could not save input: {err}") from err


def prepare_unit(
    unit: DiscoveredUnit,
    registry: CapabilityRegistry,
    root: Path,
    input_source: Optional[InputSource] = None,
    release: bool = True,
    timeout_seconds: Optional[float] = None,
) -> tuple[Capability, UnitContext]:
    """
    Everything before the build: entry file, input, language.

    Raises:
        UnitRunError: MISSING_IMPLEMENTATION, MISSING_EXTENSION,
            INPUT_UNAVAILABLE or UNSUPPORTED_LANGUAGE.
    """
    entry_file = find_entry_file(unit.folder, registry)
    extension = entry_file.suffix.lstrip(".")
    if not extension:
        raise UnitRunError(FailureKind.MISSING_EXTENSION, entry_file.name)

    input_file = ensure_input(unit, input_source)

    capability = registry.lookup(extension)
    if capability is None:
        raise UnitRunError(FailureKind.UNSUPPORTED_LANGUAGE, extension)

    unit_ctx = UnitContext(
        index=unit.index,
        folder=unit.folder,
        entry_file=entry_file,
        input_file=input_file,
        root=root,
        release=release,
        build_timeout_seconds=timeout_seconds,
    )
    return capability, unit_ctx


def compile_unit(
    unit: DiscoveredUnit,
    registry: CapabilityRegistry,
    root: Path,
    input_source: Optional[InputSource] = None,
    release: bool = True,
    timeout_seconds: Optional[float] = None,
) -> CompiledUnit:
    """
    Build one day.

    Raises:
        UnitRunError: With the kind of whichever step failed.
    """
    capability, unit_ctx = prepare_unit(unit, registry, root, input_source, release, timeout_seconds)

    try:
        command = capability.compile(unit_ctx)
    except BuildError as err:
        raise UnitRunError(FailureKind.COMPILE_ERROR, err.detail) from err
    except TemplateError as err:
        raise UnitRunError(FailureKind.COMPILE_ERROR, str(err)) from err

    logger.info(
        "Day compiled",
        extra={
            "day": unit.index,
            "language": unit_ctx.entry_file.suffix.lstrip("."),
            "command": command.describe(),
        },
    )
    return CompiledUnit(index=unit.index, command=command)


def compile_units(
    ctx: PipelineContext,
    units: Sequence[DiscoveredUnit],
    registry: CapabilityRegistry,
    input_source: Optional[InputSource] = None,
    max_workers: Optional[int] = None,
    release: bool = True,
    timeout_seconds: Optional[float] = None,
) -> list[CompiledUnit]:
    """
    Compile every day concurrently. Failures go into `ctx`; the rest come
    back in day order.
    """

    def _worker(unit: DiscoveredUnit) -> CompiledUnit:
        return compile_unit(
            unit,
            registry,
            ctx.root,
            input_source=input_source,
            release=release,
            timeout_seconds=timeout_seconds,
        )

    compiled: list[CompiledUnit] = []
    for unit, outcome in run_per_unit(units, _worker, max_workers, stage="compile"):
        if isinstance(outcome, UnitRunError):
            ctx.record_failure(unit.index, outcome.kind, outcome.detail)
        else:
            compiled.append(outcome)
    return compiled
