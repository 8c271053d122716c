"""Command line interface for running CMake build presets."""
from __future__ import annotations

from argparse import ArgumentParser, Namespace, RawDescriptionHelpFormatter
from pathlib import Path
from typing import Iterable, NoReturn
import sys

import yaml

from core.command_runner import CommandRunner, RecordingCommandRunner, SubprocessCommandRunner
from core.config_loader import resolve_config_path
from core.console import Console, resolve_log_level

from .catalog import load_catalog
from .options import RunMode, RunOptions, resolve_mode
from .runner import NO_PRESETS_MESSAGE, PresetRunner, list_presets, select_presets

DEFAULT_PRESETS_FILE = "CMakeUserPresets.json"
PRESETS_FILE_ENV = "PRESETBUILD_PRESETS_FILE"

PRIORITY_EPILOG = "\n".join(
    [
        "In case of conflicting arguments, the priority is in this order:",
        "",
        "    help > list-only > clean-only > skip-configure == skip-build > rebuild",
    ]
)


class ArgumentValidationError(ValueError):
    """Raised instead of exiting when the command line does not parse."""


class ValidatingArgumentParser(ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise ArgumentValidationError(message)


def build_parser() -> ArgumentParser:
    parser = ValidatingArgumentParser(
        prog="build_all",
        description="Configure, build or clean the CMake build presets of a presets file.",
        epilog=PRIORITY_EPILOG,
        formatter_class=RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("--help", "-h", action="store_true", help="Prints this help.")
    parser.add_argument(
        "--all",
        dest="include_all",
        action="store_true",
        help="Build all presets. Without it, build presets whose configure preset "
        "does not enable COPY_BUILD are excluded.",
    )
    parser.add_argument(
        "--list-only",
        action="store_true",
        help="List the presets that would be processed given the other arguments.",
    )
    parser.add_argument("--rebuild", action="store_true", help="Cleans and builds the project.")
    parser.add_argument("--skip-configure", action="store_true", help="Skip CMake configure step.")
    parser.add_argument("--skip-build", action="store_true", help="Skip building step.")
    parser.add_argument(
        "--clean-only", action="store_true", help="Only clean the targets. Prevents CMake configure."
    )
    parser.add_argument(
        "--presets-file",
        type=Path,
        default=None,
        help=f"Presets file to read (default: ${PRESETS_FILE_ENV} or ./{DEFAULT_PRESETS_FILE})",
    )
    parser.add_argument("--cmake", default="cmake", help="CMake executable to invoke")
    parser.add_argument("--dry-run", "-n", action="store_true", help="Print commands without executing them")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output (maps to debug)")
    parser.add_argument(
        "--log",
        choices=list(Console.LEVELS),
        default=None,
        help="Set log level (default: error)",
    )
    return parser


def options_from_args(args: Namespace) -> RunOptions:
    return RunOptions(
        include_all=args.include_all,
        list_only=args.list_only,
        clean_only=args.clean_only,
        skip_configure=args.skip_configure,
        skip_build=args.skip_build,
        rebuild=args.rebuild,
        help=args.help,
    )


def _make_runner(dry_run: bool) -> CommandRunner:
    return RecordingCommandRunner() if dry_run else SubprocessCommandRunner()


def main(argv: Iterable[str] | None = None, *, workspace: Path | None = None) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(list(sys.argv[1:] if argv is None else argv))
    except ArgumentValidationError as exc:
        print(f"{parser.prog}: error: {exc}", file=sys.stderr)
        parser.print_help()
        return 1

    options = options_from_args(args)
    mode = resolve_mode(options)
    if mode is RunMode.HELP:
        parser.print_help()
        return 0

    workspace = workspace or Path.cwd()
    console = Console(level=resolve_log_level(args.log, args.verbose, default="error"), dry_run=args.dry_run)
    presets_path = resolve_config_path(
        args.presets_file,
        env_var=PRESETS_FILE_ENV,
        default=workspace / DEFAULT_PRESETS_FILE,
    )

    console.debug(f"Loading presets from {presets_path}")
    try:
        catalog = load_catalog(presets_path)
    except (OSError, ValueError, TypeError, yaml.YAMLError) as exc:
        console.error(f"Failed to load presets from {presets_path}: {exc}")
        return 1

    selected = select_presets(catalog, options.include_all)
    console.debug(f"Selected {len(selected)} of {len(catalog.build_presets)} build preset(s)")
    if not selected:
        console.echo(NO_PRESETS_MESSAGE)
        return 0

    if mode is RunMode.LIST:
        list_presets(selected, console)
        return 0

    runner = _make_runner(args.dry_run)
    preset_runner = PresetRunner(runner, console, cmake=args.cmake, cwd=presets_path.parent)
    try:
        status = preset_runner.run(selected, options)
    except OSError as exc:
        console.error(f"Failed to start {args.cmake}: {exc}")
        return 1

    if isinstance(runner, RecordingCommandRunner):
        for line in runner.iter_formatted(workspace=workspace):
            console.dry(line)
    return status


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
