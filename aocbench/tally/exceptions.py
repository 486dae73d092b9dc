# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Exceptions for the tally pipeline.

Two very different things go wrong in a tally run. A single day failing to
build or run is routine and ends up as a UnitFailure row in the report; it
is never raised past its stage. The exceptions here are for the other kind:
problems that mean there is no sensible run at all (the year folder can't
be read, the requested days can't be worked out). Those abort before any
day is touched.
"""

from aocbench.tally.models import FailureKind


class TallyError(Exception):
    """Base for run-level tally errors."""


class DiscoveryError(TallyError):
    """Raised when the year folder cannot be listed."""


class SelectionError(TallyError):
    """Raised when the set of days to tally cannot be determined."""


class OutputDecodeError(ValueError):
    """Program output was not valid UTF-8."""


class UnitRunError(Exception):
    """
    Raised inside a stage worker for a single day's failure.

    Carries the FailureKind and detail so the coordinating thread can record
    it. Never escapes the stage.
    """

    def __init__(self, kind: FailureKind, detail: str = "") -> None:
        super().__init__(f"{kind.value}: {detail}" if detail else kind.value)
        self.kind = kind
        self.detail = detail


class AnswerMismatchError(TallyError):
    """A single-day run printed answers that differ from the accepted ones."""
