"""Run options and the precedence rules between conflicting flags."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from operator import attrgetter
from typing import Callable, Tuple


class RunMode(Enum):
    HELP = "help"
    LIST = "list"
    CLEAN = "clean"
    BUILD = "build"


class Step(Enum):
    CONFIGURE = "configure"
    BUILD = "build"
    CLEAN = "clean"


@dataclass(frozen=True)
class RunOptions:
    include_all: bool = False
    list_only: bool = False
    clean_only: bool = False
    skip_configure: bool = False
    skip_build: bool = False
    rebuild: bool = False
    help: bool = False


# Highest priority first. BUILD is the fallback when nothing else applies.
MODE_PRIORITY: Tuple[Tuple[RunMode, Callable[[RunOptions], bool]], ...] = (
    (RunMode.HELP, attrgetter("help")),
    (RunMode.LIST, attrgetter("list_only")),
    (RunMode.CLEAN, attrgetter("clean_only")),
)


def resolve_mode(options: RunOptions) -> RunMode:
    for mode, applies in MODE_PRIORITY:
        if applies(options):
            return mode
    return RunMode.BUILD


def plan_steps(options: RunOptions) -> Tuple[Step, ...]:
    """Steps to run for every selected preset.

    ``skip_configure`` and ``skip_build`` only apply outside clean-only mode,
    and are independent of each other. Help and list modes run nothing.
    """

    mode = resolve_mode(options)
    if mode in (RunMode.HELP, RunMode.LIST):
        return ()
    if mode is RunMode.CLEAN:
        return (Step.CLEAN,)
    steps = []
    if not options.skip_configure:
        steps.append(Step.CONFIGURE)
    if not options.skip_build:
        steps.append(Step.BUILD)
    return tuple(steps)


def clean_first(options: RunOptions) -> bool:
    """Whether the build step should clean before building."""

    return options.rebuild and Step.BUILD in plan_steps(options)


__all__ = ["MODE_PRIORITY", "RunMode", "RunOptions", "Step", "clean_first", "plan_steps", "resolve_mode"]
