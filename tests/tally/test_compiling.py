# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the compile stage.

Each failure kind the stage can produce gets its own day folder; the
successful ones are Python solutions so nothing needs a real compiler.
"""

import shlex
import sys
from pathlib import Path
from typing import Callable

import pytest

from aocbench.config.schema import CompileSpec, ToolchainSpec
from aocbench.languages.registry import CapabilityRegistry
from aocbench.languages.toolchain import ToolchainCapability
from aocbench.reference.source import InputUnavailableError
from aocbench.tally.context import PipelineContext
from aocbench.tally.exceptions import UnitRunError
from aocbench.tally.models import DiscoveredUnit, FailureKind
from aocbench.tally.stages.compiling import compile_unit, compile_units


class _WritingInputSource:
    def __init__(self) -> None:
        self.calls: list[int] = []

    def download_input(self, index: int, folder: Path) -> Path:
        self.calls.append(index)
        target = folder / "input"
        target.write_text("downloaded\n", encoding="utf-8")
        return target


class _FailingInputSource:
    def download_input(self, index: int, folder: Path) -> Path:
        raise InputUnavailableError(f"no token for day {index}")


class _UnwritableInputSource:
    def download_input(self, index: int, folder: Path) -> Path:
        raise PermissionError(f"cannot write {folder / 'input'}")


def _unit(folder: Path, index: int) -> DiscoveredUnit:
    return DiscoveredUnit(index=index, folder=folder)


class TestCompileUnit:
    def test_python_day_compiles(
        self, make_day: Callable[..., Path], year_root: Path, python_registry: CapabilityRegistry
    ) -> None:
        folder = make_day(1, "print('hi')\n")

        compiled = compile_unit(_unit(folder, 1), python_registry, year_root)
        assert compiled.index == 1
        assert compiled.command.program == sys.executable
        assert compiled.command.args[-1] == str(folder / "input")

    def test_entry_file_in_subfolder(
        self, make_day: Callable[..., Path], year_root: Path, python_registry: CapabilityRegistry
    ) -> None:
        folder = make_day(2)
        (folder / "src").mkdir()
        (folder / "src" / "main.py").write_text("print(1)\n", encoding="utf-8")

        compiled = compile_unit(_unit(folder, 2), python_registry, year_root)
        assert compiled.command.args[0] == str(folder / "src" / "main.py")

    def test_missing_entry_file(
        self, make_day: Callable[..., Path], year_root: Path, python_registry: CapabilityRegistry
    ) -> None:
        folder = make_day(3)

        with pytest.raises(UnitRunError) as excinfo:
            compile_unit(_unit(folder, 3), python_registry, year_root)
        assert excinfo.value.kind is FailureKind.MISSING_IMPLEMENTATION

    def test_entry_file_without_extension(
        self, make_day: Callable[..., Path], year_root: Path, python_registry: CapabilityRegistry
    ) -> None:
        folder = make_day(4, "echo hi\n", entry="main")

        with pytest.raises(UnitRunError) as excinfo:
            compile_unit(_unit(folder, 4), python_registry, year_root)
        assert excinfo.value.kind is FailureKind.MISSING_EXTENSION

    def test_unsupported_language(
        self, make_day: Callable[..., Path], year_root: Path, python_registry: CapabilityRegistry
    ) -> None:
        folder = make_day(5, "const std = @import(\"std\");\n", entry="main.zig")

        with pytest.raises(UnitRunError) as excinfo:
            compile_unit(_unit(folder, 5), python_registry, year_root)
        assert excinfo.value.kind is FailureKind.UNSUPPORTED_LANGUAGE
        assert excinfo.value.detail == "zig"

    def test_missing_input_without_source(
        self, make_day: Callable[..., Path], year_root: Path, python_registry: CapabilityRegistry
    ) -> None:
        folder = make_day(6, "print(1)\n", input_text=None)

        with pytest.raises(UnitRunError) as excinfo:
            compile_unit(_unit(folder, 6), python_registry, year_root)
        assert excinfo.value.kind is FailureKind.INPUT_UNAVAILABLE

    def test_missing_input_is_downloaded(
        self, make_day: Callable[..., Path], year_root: Path, python_registry: CapabilityRegistry
    ) -> None:
        folder = make_day(7, "print(1)\n", input_text=None)
        source = _WritingInputSource()

        compile_unit(_unit(folder, 7), python_registry, year_root, input_source=source)
        assert source.calls == [7]
        assert (folder / "input").read_text(encoding="utf-8") == "downloaded\n"

    def test_existing_input_is_not_downloaded(
        self, make_day: Callable[..., Path], year_root: Path, python_registry: CapabilityRegistry
    ) -> None:
        folder = make_day(8, "print(1)\n")
        source = _WritingInputSource()

        compile_unit(_unit(folder, 8), python_registry, year_root, input_source=source)
        assert source.calls == []

    def test_download_failure(
        self, make_day: Callable[..., Path], year_root: Path, python_registry: CapabilityRegistry
    ) -> None:
        folder = make_day(9, "print(1)\n", input_text=None)

        with pytest.raises(UnitRunError) as excinfo:
            compile_unit(
                _unit(folder, 9), python_registry, year_root, input_source=_FailingInputSource()
            )
        assert excinfo.value.kind is FailureKind.INPUT_UNAVAILABLE
        assert "no token" in excinfo.value.detail

    def test_input_that_cannot_be_saved(
        self, make_day: Callable[..., Path], year_root: Path, python_registry: CapabilityRegistry
    ) -> None:
        folder = make_day(9, "print(1)\n", input_text=None)

        with pytest.raises(UnitRunError) as excinfo:
            compile_unit(
                _unit(folder, 9), python_registry, year_root, input_source=_UnwritableInputSource()
            )
        assert excinfo.value.kind is FailureKind.INPUT_UNAVAILABLE
        assert "could not save input" in excinfo.value.detail

    def test_build_failure_is_a_compile_error(
        self, make_day: Callable[..., Path], year_root: Path
    ) -> None:
        folder = make_day(10, "broken\n", entry="main.bad")
        python = shlex.quote(sys.executable)
        registry = CapabilityRegistry()
        registry.register(
            ToolchainCapability(
                "bad",
                ToolchainSpec(
                    ext="bad",
                    run="true",
                    compile=CompileSpec(
                        build=f"{python} -c \"import sys; print('error: cannot find value'); sys.exit(1)\"",
                        execute="{day}/out",
                    ),
                ),
            )
        )

        with pytest.raises(UnitRunError) as excinfo:
            compile_unit(_unit(folder, 10), registry, year_root)
        assert excinfo.value.kind is FailureKind.COMPILE_ERROR
        assert excinfo.value.detail == "error: cannot find value"

    def test_build_step_that_cannot_start_is_a_compile_error(
        self, make_day: Callable[..., Path], year_root: Path
    ) -> None:
        folder = make_day(12, "#!/bin/sh\necho 1\n", entry="main.sh")
        (folder / "main.sh").chmod(0o644)
        registry = CapabilityRegistry()
        registry.register(
            ToolchainCapability(
                "sh",
                ToolchainSpec(ext="sh", run="{file}", compile=CompileSpec(build="{file}", execute="{file}")),
            )
        )

        with pytest.raises(UnitRunError) as excinfo:
            compile_unit(_unit(folder, 12), registry, year_root)
        assert excinfo.value.kind is FailureKind.COMPILE_ERROR
        assert "could not start" in excinfo.value.detail

    def test_bad_template_is_a_compile_error(
        self, make_day: Callable[..., Path], year_root: Path
    ) -> None:
        folder = make_day(11, "x\n", entry="main.tpl")
        registry = CapabilityRegistry()
        registry.register(ToolchainCapability("tpl", ToolchainSpec(ext="tpl", run="run {nope}")))

        with pytest.raises(UnitRunError) as excinfo:
            compile_unit(_unit(folder, 11), registry, year_root)
        assert excinfo.value.kind is FailureKind.COMPILE_ERROR


class TestCompileUnits:
    def test_failures_are_isolated_and_recorded(
        self, make_day: Callable[..., Path], year_root: Path, python_registry: CapabilityRegistry
    ) -> None:
        units = [
            _unit(make_day(1, "print(1)\n"), 1),
            _unit(make_day(2), 2),
            _unit(make_day(3, "print(3)\n"), 3),
            _unit(make_day(4, "x\n", entry="main.zig"), 4),
        ]
        ctx = PipelineContext(root=year_root)

        compiled = compile_units(ctx, units, python_registry, max_workers=2)

        assert [c.index for c in compiled] == [1, 3]
        kinds = {f.index: f.kind for f in ctx.failures}
        assert kinds == {
            2: FailureKind.MISSING_IMPLEMENTATION,
            4: FailureKind.UNSUPPORTED_LANGUAGE,
        }

    def test_no_units(self, year_root: Path, python_registry: CapabilityRegistry) -> None:
        ctx = PipelineContext(root=year_root)
        assert compile_units(ctx, [], python_registry) == []
        assert ctx.failures == []
