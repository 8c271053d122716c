"""Typed, read-only view over a CMake presets file."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Sequence
import math

from core.config_loader import load_config_file

COPY_BUILD = "COPY_BUILD"


def is_truthy(value: Any) -> bool:
    """Loose truthiness for cache variable values.

    Only ``None``, ``False``, zero, NaN and the empty string are false. Any
    other string (``"OFF"`` and ``"0"`` included) and any list or mapping,
    even an empty one, counts as set.
    """

    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, (int, float)):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return value != ""
    return True


@dataclass(frozen=True, slots=True)
class ConfigurePreset:
    name: str
    cache_variables: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class BuildPreset:
    name: str
    configure_preset: str


def _require_name(entry: Any, *, section: str, index: int) -> str:
    if not isinstance(entry, Mapping):
        raise TypeError(f"{section}[{index}] must be a mapping")
    name = entry.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValueError(f"{section}[{index}] is missing a non-empty 'name'")
    return name


def _entries(data: Mapping[str, Any], section: str) -> List[Any]:
    raw = data.get(section)
    if raw is None:
        return []
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        raise TypeError(f"'{section}' must be a list")
    return list(raw)


class PresetCatalog:
    """Configure and build presets, in file order.

    A catalog is built once and never mutated; pass it to whatever needs it.
    """

    def __init__(
        self,
        configure_presets: Iterable[ConfigurePreset] = (),
        build_presets: Iterable[BuildPreset] = (),
    ) -> None:
        self._configure_presets = tuple(configure_presets)
        self._build_presets = tuple(build_presets)
        index: Dict[str, ConfigurePreset] = {}
        for preset in self._configure_presets:
            index.setdefault(preset.name, preset)
        self._by_name = MappingProxyType(index)

    @property
    def configure_presets(self) -> tuple[ConfigurePreset, ...]:
        return self._configure_presets

    @property
    def build_presets(self) -> tuple[BuildPreset, ...]:
        return self._build_presets

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PresetCatalog":
        configure_presets: List[ConfigurePreset] = []
        for index, entry in enumerate(_entries(data, "configurePresets")):
            name = _require_name(entry, section="configurePresets", index=index)
            cache_variables = entry.get("cacheVariables") or {}
            if not isinstance(cache_variables, Mapping):
                raise TypeError(f"configurePreset '{name}': 'cacheVariables' must be a mapping")
            configure_presets.append(
                ConfigurePreset(name=name, cache_variables=MappingProxyType(dict(cache_variables)))
            )

        build_presets: List[BuildPreset] = []
        for index, entry in enumerate(_entries(data, "buildPresets")):
            name = _require_name(entry, section="buildPresets", index=index)
            configure_preset = entry.get("configurePreset")
            if not isinstance(configure_preset, str):
                raise TypeError(f"buildPreset '{name}': 'configurePreset' must be a string")
            build_presets.append(BuildPreset(name=name, configure_preset=configure_preset))

        return cls(configure_presets, build_presets)

    def find_configure_preset(self, name: str) -> ConfigurePreset | None:
        return self._by_name.get(name)

    def copies_build(self, build_preset: BuildPreset) -> bool:
        """Whether the build preset's configure preset sets ``COPY_BUILD`` itself.

        Only the configure preset's own ``cacheVariables`` are consulted. An
        unresolved configure preset counts as not having the flag.
        """

        configure_preset = self.find_configure_preset(build_preset.configure_preset)
        if configure_preset is None:
            return False
        return is_truthy(configure_preset.cache_variables.get(COPY_BUILD))


def load_catalog(path: Path) -> PresetCatalog:
    """Decode ``path`` and build a :class:`PresetCatalog` from it."""

    return PresetCatalog.from_mapping(load_config_file(path))


__all__ = [
    "BuildPreset",
    "COPY_BUILD",
    "ConfigurePreset",
    "PresetCatalog",
    "is_truthy",
    "load_catalog",
]
