"""Run CMake configure/build/clean steps across the presets of a presets file."""
from __future__ import annotations

from .catalog import BuildPreset, ConfigurePreset, PresetCatalog, load_catalog
from .options import RunMode, RunOptions, Step, plan_steps, resolve_mode
from .runner import PresetRunner, format_banner, list_presets, select_presets

__all__ = [
    "BuildPreset",
    "ConfigurePreset",
    "PresetCatalog",
    "PresetRunner",
    "RunMode",
    "RunOptions",
    "Step",
    "format_banner",
    "list_presets",
    "load_catalog",
    "plan_steps",
    "resolve_mode",
    "select_presets",
]
