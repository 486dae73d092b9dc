# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Toolchains declared in a `.languages.yaml` file.

This is how a year folder teaches aocbench a language it doesn't ship with:

    toolchain:
      go:
        ext: go
        run: "go run {file} {args}"
        dir: "{day}"
        compile:
          build: "go build -o {day}/solution {file}"
          execute: "{day}/solution"

Template keys:
  {file}  the entry file        {day}  the day folder
  {args}  forwarded arguments

A key may carry a prefix: `rel:` gives the name of the path's top-level
folder under the year root, `name:` gives the last path component. With no
prefix the absolute path is used.

The expanded string is split with shlex. Nothing is ever run through a shell.
"""

import re
import shlex
from pathlib import Path
from typing import Optional

from aocbench.config.exceptions import TemplateError
from aocbench.config.schema import ToolchainSpec
from aocbench.languages.command import RunnableCommand, UnitContext, run_build

_TEMPLATE_RE = re.compile(r"\{([^}]+)\}")


def _relative_name(path: Path, ctx: UnitContext) -> str:
    try:
        relative = path.resolve().relative_to(ctx.root.resolve())
    except ValueError as err:
        raise TemplateError(f"{path} is not inside {ctx.root}") from err
    return relative.parts[0] if relative.parts else ""


def expand_template(template: str, ctx: UnitContext) -> str:
    """
    Replace every {prefix:key} in `template` with its value for this day.

    Raises:
        TemplateError: On an unknown key or prefix.
    """

    def _replace(match: "re.Match[str]") -> str:
        raw = match.group(1)
        prefix, _, key = raw.rpartition(":")

        if key == "args":
            return " ".join(shlex.quote(a) for a in ctx.arguments)

        paths = {"day": ctx.folder, "file": ctx.entry_file}
        if key not in paths:
            raise TemplateError(f"unknown template key {key!r} in {template!r}")
        path = paths[key]

        if prefix == "":
            return str(path)
        if prefix == "rel":
            return _relative_name(path, ctx)
        if prefix == "name":
            return path.name
        raise TemplateError(f"unknown template prefix {prefix!r} in {template!r}")

    return _TEMPLATE_RE.sub(_replace, template)


class ToolchainCapability:
    """A capability backed by command templates instead of Python code."""

    def __init__(self, name: str, spec: ToolchainSpec) -> None:
        self.name = name
        self._spec = spec

    @property
    def extension(self) -> str:
        return self._spec.ext

    def _command(self, template: str, ctx: UnitContext, include_input: bool) -> RunnableCommand:
        argv = shlex.split(expand_template(template, ctx))
        if not argv:
            raise TemplateError(f"toolchain {self.name!r} has an empty command")
        if include_input:
            argv.append(str(ctx.input_file))

        cwd: Optional[Path] = ctx.folder
        if self._spec.dir is not None:
            cwd = Path(expand_template(self._spec.dir, ctx))
            if not cwd.is_absolute():
                cwd = ctx.root / cwd

        return RunnableCommand(argv[0], tuple(argv[1:]), cwd=cwd)

    def run(self, ctx: UnitContext) -> RunnableCommand:
        return self._command(self._spec.run, ctx, include_input=True)

    def compile(self, ctx: UnitContext) -> RunnableCommand:
        """
        Run the build step if there is one, then hand back the execute command.
        A toolchain without a compile section runs its `run` command as-is.

        Raises:
            BuildError: If the build step fails.
            TemplateError: If a template can't be expanded.
        """
        compile_spec = self._spec.compile
        if compile_spec is None:
            return self.run(ctx)

        if compile_spec.build is not None:
            run_build(
                self._command(compile_spec.build, ctx, include_input=False),
                timeout_seconds=ctx.build_timeout_seconds,
            )

        return self._command(compile_spec.execute, ctx, include_input=True)
