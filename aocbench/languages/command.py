# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runnable commands and the build-step harness.

A RunnableCommand is what a language capability hands back after building a
day: program, arguments, working directory. It is frozen and carries no
process state, so the benchmark stage can run the same command as many times
as it likes without rebuilding anything.

Commands never go through a shell. Toolchain templates are split with shlex
before they get here, and subprocess always receives an argument list.
"""

import os
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

from aocbench.logging.logger import get_logger

logger = get_logger(__name__)

# Compiler diagnostics we surface instead of the whole build log.
_ERROR_MARKER = "error: "


class BuildError(Exception):
    """A build step exited non-zero (or could not be started)."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


@dataclass(frozen=True)
class UnitContext:
    """Everything a capability needs to know about one day."""

    index: int
    folder: Path
    entry_file: Path
    input_file: Path
    root: Path
    release: bool = True
    arguments: tuple[str, ...] = ()
    build_timeout_seconds: Optional[float] = None


@dataclass(frozen=True)
class RunnableCommand:
    """An opaque, repeatable process invocation."""

    program: str
    args: tuple[str, ...] = ()
    cwd: Optional[Path] = None
    env: tuple[tuple[str, str], ...] = field(default=())

    def argv(self) -> list[str]:
        return [self.program, *self.args]

    def _environment(self) -> Optional[dict[str, str]]:
        if not self.env:
            return None
        merged = dict(os.environ)
        merged.update(dict(self.env))
        return merged

    def run(self, timeout_seconds: Optional[float] = None) -> "subprocess.CompletedProcess[bytes]":
        """
        Run once, capturing stdout and stderr separately as raw bytes.

        Raises whatever subprocess raises (FileNotFoundError for a missing
        program, TimeoutExpired when the timeout is hit). Callers decide
        what that means for the day.
        """
        return subprocess.run(
            self.argv(),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            cwd=str(self.cwd) if self.cwd is not None else None,
            env=self._environment(),
            timeout=timeout_seconds,
            check=False,
        )

    def stream(self, sink: Callable[[str], object]) -> tuple[int, str]:
        """
        Run once, passing each stdout line to `sink` as it arrives.

        stderr is not captured; it goes straight to ours, so compiler progress
        and panics show up on the terminal without reaching answer
        extraction. Returns (exit code, everything printed to stdout).
        Raises what subprocess.Popen raises for a program that can't start.
        """
        lines: list[str] = []
        with subprocess.Popen(
            self.argv(),
            stdout=subprocess.PIPE,
            cwd=str(self.cwd) if self.cwd is not None else None,
            env=self._environment(),
            encoding="utf-8",
            errors="replace",
        ) as proc:
            assert proc.stdout is not None
            for line in proc.stdout:
                sink(line)
                lines.append(line)
            returncode = proc.wait()
        return returncode, "".join(lines)

    def describe(self) -> str:
        return " ".join(self.argv())


def first_error_line(output: str) -> str:
    """Pick the first line that looks like a compiler error, else the whole output."""
    for line in output.splitlines():
        if line.startswith(_ERROR_MARKER):
            return line
    return output


def run_build(command: RunnableCommand, timeout_seconds: Optional[float] = None) -> str:
    """
    Run a build step and return its combined output.

    stderr is folded into stdout so diagnostics keep their order relative to
    progress lines. A non-zero exit becomes a BuildError carrying the first
    `error: ` line, which is what you want to see in a one-line report row.

    Raises:
        BuildError: On non-zero exit, timeout, or a build tool that cannot start.
    """
    start = time.monotonic()

    try:
        result = subprocess.run(
            command.argv(),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            cwd=str(command.cwd) if command.cwd is not None else None,
            env=command._environment(),
            timeout=timeout_seconds,
            check=False,
        )
    except subprocess.TimeoutExpired as err:
        logger.warning(
            "Build timed out",
            extra={"command": command.describe(), "timeout_seconds": timeout_seconds},
        )
        raise BuildError(f"build timed out after {timeout_seconds}s") from err
    except FileNotFoundError as err:
        logger.error(
            "Build tool not found",
            extra={"command": command.describe()},
        )
        raise BuildError(f"{command.program} executable not found") from err
    except OSError as err:
        logger.error(
            "Build could not start",
            extra={"command": command.describe(), "error": str(err)},
        )
        raise BuildError(f"could not start {command.program}: {err}") from err

    elapsed = time.monotonic() - start
    output = result.stdout.decode("utf-8", errors="replace")

    logger.debug(
        "Build finished",
        extra={
            "command": command.describe(),
            "exit_code": result.returncode,
            "elapsed_seconds": round(elapsed, 3),
        },
    )

    if result.returncode != 0:
        raise BuildError(first_error_line(output))

    return output
