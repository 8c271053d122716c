"""Level-gated console output shared by the command-line scripts."""
from __future__ import annotations

from typing import Iterable, TextIO
import sys


class Console:
    """Simple console output handler with configurable log level.

    Levels: none < error < info < debug
    Default: 'none' (no output)

    ``echo`` and ``lines`` are the primary output of a script and are never
    filtered by the level.
    """

    LEVELS = {
        "none": 0,
        "error": 1,
        "info": 2,
        "debug": 3,
    }

    def __init__(self, level: str = "none", dry_run: bool = False, stream: TextIO | None = None):
        if level not in self.LEVELS:
            raise ValueError(f"Unknown log level '{level}'. Choose from: {', '.join(self.LEVELS)}")
        self.level_name = level
        self.level = self.LEVELS[level]
        self.dry_run = dry_run
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def echo(self, message: str) -> None:
        print(message, file=self.stream)

    def lines(self, messages: Iterable[str]) -> None:
        for message in messages:
            self.echo(message)

    def info(self, message: str) -> None:
        if self.level >= self.LEVELS["info"]:
            print(f"[INFO] {message}", file=self.stream)

    def error(self, message: str) -> None:
        if self.level >= self.LEVELS["error"]:
            print(f"[ERROR] {message}", file=sys.stderr)

    def dry(self, message: str) -> None:
        if self.dry_run:
            print(f"[DRY] {message}", file=self.stream)

    def debug(self, message: str) -> None:
        if self.level >= self.LEVELS["debug"]:
            print(f"[DEBUG] {message}", file=self.stream)


def resolve_log_level(log: str | None, verbose: bool, default: str = "none") -> str:
    """Explicit ``--log`` wins; otherwise ``--verbose`` maps to debug."""

    if log:
        return log
    return "debug" if verbose else default


__all__ = ["Console", "resolve_log_level"]
