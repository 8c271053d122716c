"""Preset selection and sequential configure/build/clean execution."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from core.command_runner import CommandRunner
from core.console import Console

from .catalog import BuildPreset, PresetCatalog
from .options import RunOptions, Step, clean_first, plan_steps

NO_PRESETS_MESSAGE = "No build presets available given the current arguments."


def select_presets(catalog: PresetCatalog, include_all: bool) -> tuple[BuildPreset, ...]:
    """Return the build presets to act on, in catalog order."""

    if include_all:
        return catalog.build_presets
    return tuple(preset for preset in catalog.build_presets if catalog.copies_build(preset))


def format_banner(message: str, border_character: str = "=") -> List[str]:
    if len(border_character) != 1:
        raise ValueError(f'borderCharacter "{border_character}" must be exactly one character')
    border = border_character * len(message)
    return [border, message, border]


def list_presets(selected: Sequence[BuildPreset], console: Console) -> None:
    console.echo(f"The following {len(selected)} presets will be processed:")
    for index, preset in enumerate(selected, start=1):
        console.echo(f"[{index}] {preset.name}")


@dataclass(frozen=True)
class StepOutcome:
    preset: BuildPreset
    step: Step
    returncode: int

    @property
    def success(self) -> bool:
        return self.returncode == 0


class PresetRunner:
    """Runs CMake steps for build presets one at a time.

    The first step that exits non-zero ends the run; nothing after it is
    attempted and nothing before it is undone.
    """

    def __init__(
        self,
        command_runner: CommandRunner,
        console: Console,
        *,
        cmake: str = "cmake",
        cwd: Path | None = None,
    ) -> None:
        self._runner = command_runner
        self._console = console
        self._cmake = cmake
        self._cwd = cwd
        self.outcomes: List[StepOutcome] = []

    def command_for(self, preset: BuildPreset, step: Step, *, rebuild: bool = False) -> List[str]:
        if step is Step.CONFIGURE:
            return [self._cmake, "--preset", preset.configure_preset]
        if step is Step.CLEAN:
            return [self._cmake, "--build", "--target", "clean", "--preset", preset.name]
        command = [self._cmake, "--build"]
        if rebuild:
            command.append("--clean-first")
        command.extend(["--preset", preset.name])
        return command

    def run(self, selected: Sequence[BuildPreset], options: RunOptions) -> int:
        steps = plan_steps(options)
        rebuild = clean_first(options)
        total = len(selected)
        self._console.debug(f"Running steps {[step.value for step in steps]} for {total} preset(s)")

        for index, preset in enumerate(selected):
            for step in steps:
                message = f"{preset.configure_preset} ({step.value} - task {index + 1} of {total})"
                self._console.lines(format_banner(message))
                command = self.command_for(preset, step, rebuild=rebuild)
                self._console.debug(f"Executing: {self._runner.format_command(command)}")
                result = self._runner.run(command, cwd=self._cwd, note=f"{preset.name}:{step.value}")
                self.outcomes.append(StepOutcome(preset=preset, step=step, returncode=result.returncode))
                if not result.success:
                    self._console.error(
                        f"{step.value} step for preset '{preset.name}' failed with exit code {result.returncode}"
                    )
                    return 1
        return 0


__all__ = [
    "NO_PRESETS_MESSAGE",
    "PresetRunner",
    "StepOutcome",
    "format_banner",
    "list_presets",
    "select_presets",
]
