# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Verify stage: only days with known answers go on to be benchmarked."""

from typing import Sequence

from aocbench.logging.logger import get_logger
from aocbench.tally.context import PipelineContext
from aocbench.tally.models import CompiledUnit, FailureKind, VerifiedUnit

logger = get_logger(__name__)


def verify_units(ctx: PipelineContext, compiled: Sequence[CompiledUnit]) -> list[VerifiedUnit]:
    """
    Pair each compiled day with its reference info.

    No info at all means the puzzle site never told us about the day
    (MISSING_UNIT). Info with neither answer means it hasn't been solved
    yet (MISSING_IMPLEMENTATION).
    """
    verified: list[VerifiedUnit] = []

    for unit in compiled:
        info = ctx.info_for(unit.index)
        if info is None:
            ctx.record_failure(unit.index, FailureKind.MISSING_UNIT)
            continue
        if info.is_unimplemented:
            ctx.record_failure(unit.index, FailureKind.MISSING_IMPLEMENTATION)
            continue
        verified.append(VerifiedUnit(index=unit.index, command=unit.command, info=info))

    logger.debug(
        "Verification finished",
        extra={"verified": [u.index for u in verified]},
    )
    return verified
