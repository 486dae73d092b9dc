# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Per-run state shared by the pipeline stages.

A PipelineContext lives for exactly one run_pipeline call. It holds what the
stages look up by day (extraction configs, reference info) and the growing
list of failures. Stage workers never touch it directly: they hand their
outcome back to the coordinating thread, which records failures here.
"""

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from aocbench.logging.logger import get_logger
from aocbench.tally.models import FailureKind, ReferenceInfo, UnitFailure
from aocbench.tally.parsing.extraction import ExtractionConfig

logger = get_logger(__name__)


@dataclass
class PipelineContext:
    root: Path
    configs: dict[int, ExtractionConfig] = field(default_factory=dict)
    infos: dict[int, ReferenceInfo] = field(default_factory=dict)
    failures: list[UnitFailure] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def info_for(self, index: int) -> Optional[ReferenceInfo]:
        return self.infos.get(index)

    def config_for(self, index: int) -> ExtractionConfig:
        return self.configs.get(index) or ExtractionConfig()

    def record_failure(self, index: int, kind: FailureKind, detail: str = "") -> UnitFailure:
        """
        Record that a day dropped out. A day can only fail once per run.

        Raises:
            ValueError: If `index` already has a failure recorded.
        """
        failure = UnitFailure(
            index=index,
            info=self.infos.get(index) or ReferenceInfo.placeholder(),
            kind=kind,
            detail=detail,
        )
        with self._lock:
            if any(f.index == index for f in self.failures):
                raise ValueError(f"Day {index} already has a recorded failure")
            self.failures.append(failure)

        logger.info(
            "Day failed",
            extra={"day": index, "kind": kind.value, "detail": detail},
        )
        return failure

    def failed_indices(self) -> frozenset[int]:
        with self._lock:
            return frozenset(f.index for f in self.failures)
