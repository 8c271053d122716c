"""Command line interface for the source formatter sweep."""
from __future__ import annotations

from argparse import ArgumentParser
from pathlib import Path
from typing import Iterable
import sys

from core.command_runner import RecordingCommandRunner, SubprocessCommandRunner
from core.console import Console, resolve_log_level

from .cli import ArgumentValidationError, ValidatingArgumentParser
from .formatter import DEFAULT_EXTENSIONS, DEFAULT_FORMATTER, DEFAULT_ROOT, FormatterSweep


def build_parser() -> ArgumentParser:
    parser = ValidatingArgumentParser(
        prog="format_sources", description="Reformat source files in place", allow_abbrev=False
    )
    parser.add_argument("--root", type=Path, default=DEFAULT_ROOT, help=f"Directory to walk (default: {DEFAULT_ROOT})")
    parser.add_argument(
        "--extension",
        dest="extensions",
        action="append",
        default=[],
        metavar="EXT",
        help="File extension to format, case-insensitive (repeatable; default: .cpp .hpp)",
    )
    parser.add_argument("--formatter", default=DEFAULT_FORMATTER, help="Formatter executable")
    parser.add_argument("--dry-run", "-n", action="store_true", help="Print commands without executing them")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output (maps to debug)")
    parser.add_argument("--log", choices=list(Console.LEVELS), default=None, help="Set log level (default: error)")
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(list(sys.argv[1:] if argv is None else argv))
    except ArgumentValidationError as exc:
        print(f"{parser.prog}: error: {exc}", file=sys.stderr)
        parser.print_help()
        return 1

    console = Console(level=resolve_log_level(args.log, args.verbose, default="error"), dry_run=args.dry_run)
    runner = RecordingCommandRunner() if args.dry_run else SubprocessCommandRunner()
    sweep = FormatterSweep(
        runner,
        console,
        root=args.root,
        extensions=args.extensions or DEFAULT_EXTENSIONS,
        formatter=args.formatter,
    )
    try:
        visited = sweep.run()
    except OSError as exc:
        console.error(f"Failed to start {args.formatter}: {exc}")
        return 1

    console.info(f"Formatted {len(visited)} file(s)")
    if isinstance(runner, RecordingCommandRunner):
        for line in runner.iter_formatted():
            console.dry(line)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
