"""Shared core utilities for the preset scripts."""

from .command_runner import (
    CommandResult,
    CommandRunner,
    RecordingCommandRunner,
    SubprocessCommandRunner,
    format_command,
)
from .config_loader import (
    ConfigLoader,
    FILE_LOADERS,
    load_config_file,
    resolve_config_path,
)
from .console import Console, resolve_log_level

__all__ = [
    "CommandResult",
    "CommandRunner",
    "RecordingCommandRunner",
    "SubprocessCommandRunner",
    "format_command",
    "ConfigLoader",
    "FILE_LOADERS",
    "load_config_file",
    "resolve_config_path",
    "Console",
    "resolve_log_level",
]
