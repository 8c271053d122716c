"""In-place source reformatting with an external formatter."""
from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, List

from core.command_runner import CommandRunner
from core.console import Console

DEFAULT_ROOT = Path("src")
DEFAULT_EXTENSIONS = (".cpp", ".hpp")
DEFAULT_FORMATTER = "clang-format"


def normalize_extensions(extensions: Iterable[str]) -> tuple[str, ...]:
    normalized: List[str] = []
    for extension in extensions:
        text = extension.strip().lower()
        if not text:
            continue
        if not text.startswith("."):
            text = f".{text}"
        if text not in normalized:
            normalized.append(text)
    return tuple(normalized)


class FormatterSweep:
    """Runs ``<formatter> -i`` on every matching file below ``root``.

    Each invocation is awaited before the next one starts. A failing
    invocation is left to speak for itself and the sweep carries on.
    """

    def __init__(
        self,
        command_runner: CommandRunner,
        console: Console,
        *,
        root: Path = DEFAULT_ROOT,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        formatter: str = DEFAULT_FORMATTER,
    ) -> None:
        self._runner = command_runner
        self._console = console
        self.root = Path(root)
        self.extensions = normalize_extensions(extensions)
        self.formatter = formatter

    def iter_sources(self) -> Iterator[Path]:
        for path in sorted(self.root.rglob("*")):
            if path.is_file() and path.suffix.lower() in self.extensions:
                yield path

    def run(self) -> List[Path]:
        if not self.root.is_dir():
            self._console.error(f"Source directory not found: {self.root}")
            return []

        visited: List[Path] = []
        for path in self.iter_sources():
            self._console.echo(str(path))
            result = self._runner.run([self.formatter, "-i", str(path)])
            if not result.success:
                self._console.debug(f"{self.formatter} exited with {result.returncode} for {path}")
            visited.append(path)
        return visited


__all__ = ["DEFAULT_EXTENSIONS", "DEFAULT_FORMATTER", "DEFAULT_ROOT", "FormatterSweep", "normalize_extensions"]
