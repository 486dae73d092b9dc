# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Language capabilities and the registry that maps extensions to them.

A capability knows how to turn a day folder into a RunnableCommand. It has
two operations:

  compile(ctx): run whatever build step the language needs, then return the
                command that executes the result
  run(ctx):     return a command that executes the entry file as-is

The registry is a plain object built once at startup and passed into the
pipeline. Tests build their own registries with fake capabilities.
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Protocol

from aocbench.config.loader import load_toolchain_file
from aocbench.languages.command import RunnableCommand, UnitContext, run_build
from aocbench.languages.toolchain import ToolchainCapability
from aocbench.logging.logger import get_logger

logger = get_logger(__name__)


class Capability(Protocol):
    """What the compile stage needs from a language."""

    @property
    def extension(self) -> str: ...

    def compile(self, ctx: UnitContext) -> RunnableCommand: ...

    def run(self, ctx: UnitContext) -> RunnableCommand: ...


class RustCapability:
    """
    Cargo projects. Each day is its own crate named after its folder, so the
    release binary ends up at <day>/target/<profile>/<day>.
    """

    extension = "rs"

    def compile(self, ctx: UnitContext) -> RunnableCommand:
        build_args = ("build", "--release") if ctx.release else ("build",)
        run_build(
            RunnableCommand("cargo", build_args, cwd=ctx.folder),
            timeout_seconds=ctx.build_timeout_seconds,
        )

        profile = "release" if ctx.release else "debug"
        binary = ctx.folder / "target" / profile / ctx.folder.name
        return RunnableCommand(
            str(binary),
            (*ctx.arguments, str(ctx.input_file)),
            cwd=ctx.folder,
        )

    def run(self, ctx: UnitContext) -> RunnableCommand:
        args = ["run", "--color", "always"]
        if ctx.release:
            args.append("--release")
        args.extend(["--", *ctx.arguments, str(ctx.input_file)])
        return RunnableCommand("cargo", tuple(args), cwd=ctx.folder)


class PythonCapability:
    """Plain scripts: nothing to build, run with the current interpreter."""

    extension = "py"

    def __init__(self, interpreter: Optional[str] = None) -> None:
        self._interpreter = interpreter or sys.executable or "python3"

    def compile(self, ctx: UnitContext) -> RunnableCommand:
        return self.run(ctx)

    def run(self, ctx: UnitContext) -> RunnableCommand:
        return RunnableCommand(
            self._interpreter,
            (str(ctx.entry_file), *ctx.arguments, str(ctx.input_file)),
            cwd=ctx.folder,
        )


@dataclass
class CapabilityRegistry:
    """Extension -> capability lookup. Later registrations win."""

    _capabilities: dict[str, Capability] = field(default_factory=dict)

    def register(self, capability: Capability) -> None:
        ext = capability.extension
        if ext in self._capabilities:
            logger.debug("Overriding capability", extra={"extension": ext})
        self._capabilities[ext] = capability

    def lookup(self, extension: str) -> Optional[Capability]:
        return self._capabilities.get(extension.lstrip("."))

    def extensions(self) -> frozenset[str]:
        return frozenset(self._capabilities)

    def __len__(self) -> int:
        return len(self._capabilities)


def builtin_capabilities() -> list[Capability]:
    return [RustCapability(), PythonCapability()]


def build_registry(
    toolchain_file: Optional[Path] = None,
    extra: Iterable[Capability] = (),
) -> CapabilityRegistry:
    """
    Build the registry for a run.

    Built-ins go in first, then every toolchain from `toolchain_file` (if it
    exists), then `extra`. A toolchain using the same extension as a built-in
    replaces it.

    Raises:
        ConfigLoadError / ConfigValidationError: If the toolchain file is malformed.
    """
    registry = CapabilityRegistry()
    for capability in builtin_capabilities():
        registry.register(capability)

    if toolchain_file is not None and toolchain_file.is_file():
        parsed = load_toolchain_file(toolchain_file)
        for name in sorted(parsed.toolchain):
            registry.register(ToolchainCapability(name, parsed.toolchain[name]))
        logger.info(
            "Toolchain file loaded",
            extra={"path": str(toolchain_file), "toolchains": sorted(parsed.toolchain)},
        )

    for capability in extra:
        registry.register(capability)

    return registry
