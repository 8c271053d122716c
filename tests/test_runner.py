from __future__ import annotations

from pathlib import Path
from typing import Sequence
import io
import unittest

from core.command_runner import RecordingCommandRunner
from core.console import Console
from presetbuild.catalog import PresetCatalog
from presetbuild.options import RunOptions, Step
from presetbuild.runner import PresetRunner, format_banner, list_presets, select_presets


class FailingCommandRunner(RecordingCommandRunner):
    """Records commands and fails the ones listed in ``failures``."""

    def __init__(self, failures: Sequence[Sequence[str]]) -> None:
        super().__init__()
        self.failures = [list(command) for command in failures]

    def _returncode_for(self, command: Sequence[str]) -> int:
        return 2 if list(command) in self.failures else 0


def _catalog() -> PresetCatalog:
    return PresetCatalog.from_mapping(
        {
            "configurePresets": [
                {"name": "dbg", "cacheVariables": {"COPY_BUILD": True}},
                {"name": "rel", "cacheVariables": {"COPY_BUILD": True}},
                {"name": "local", "cacheVariables": {"COPY_BUILD": False}},
                {"name": "plain"},
            ],
            "buildPresets": [
                {"name": "debug", "configurePreset": "dbg"},
                {"name": "scratch", "configurePreset": "local"},
                {"name": "release", "configurePreset": "rel"},
                {"name": "orphan", "configurePreset": "missing"},
                {"name": "bare", "configurePreset": "plain"},
            ],
        }
    )


class SelectPresetsTests(unittest.TestCase):
    def test_include_all_keeps_every_preset_in_order(self) -> None:
        catalog = _catalog()
        self.assertEqual(select_presets(catalog, True), catalog.build_presets)

    def test_filters_on_copy_build_preserving_order(self) -> None:
        selected = select_presets(_catalog(), False)
        self.assertEqual([preset.name for preset in selected], ["debug", "release"])

    def test_unresolved_reference_is_excluded(self) -> None:
        selected = select_presets(_catalog(), False)
        self.assertNotIn("orphan", [preset.name for preset in selected])

    def test_flag_is_read_from_the_configure_preset_itself(self) -> None:
        catalog = PresetCatalog.from_mapping(
            {
                "configurePresets": [
                    {"name": "base", "cacheVariables": {"COPY_BUILD": True}},
                    {"name": "child", "inherits": "base"},
                    {"name": "lost", "inherits": "ghost", "cacheVariables": {"COPY_BUILD": True}},
                    {"name": "off", "cacheVariables": {"COPY_BUILD": "OFF"}},
                ],
                "buildPresets": [
                    {"name": "c", "configurePreset": "child"},
                    {"name": "g", "configurePreset": "lost"},
                    {"name": "o", "configurePreset": "off"},
                ],
            }
        )
        self.assertEqual([preset.name for preset in select_presets(catalog, False)], ["g", "o"])

    def test_empty_selection_is_not_an_error(self) -> None:
        catalog = PresetCatalog.from_mapping({"buildPresets": [{"name": "x", "configurePreset": "y"}]})
        self.assertEqual(select_presets(catalog, False), ())


class BannerTests(unittest.TestCase):
    def test_border_matches_message_length(self) -> None:
        for message in ("a", "dbg (configure - task 1 of 2)", "x" * 317):
            with self.subTest(length=len(message)):
                border, text, closing = format_banner(message)
                self.assertEqual(text, message)
                self.assertEqual(border, "=" * len(message))
                self.assertEqual(closing, border)

    def test_custom_border_character(self) -> None:
        self.assertEqual(format_banner("abc", "-")[0], "---")

    def test_border_character_must_be_single(self) -> None:
        with self.assertRaises(ValueError):
            format_banner("abc", "==")


class ListPresetsTests(unittest.TestCase):
    def test_prints_one_based_index(self) -> None:
        buffer = io.StringIO()
        list_presets(select_presets(_catalog(), False), Console(stream=buffer))
        self.assertEqual(
            buffer.getvalue().splitlines(),
            ["The following 2 presets will be processed:", "[1] debug", "[2] release"],
        )


class PresetRunnerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.output = io.StringIO()
        self.console = Console(stream=self.output)
        self.selected = select_presets(_catalog(), False)

    def _commands(self, runner: RecordingCommandRunner) -> list[list[str]]:
        return [record.command for record in runner.iter_commands()]

    def test_configures_and_builds_each_preset_in_order(self) -> None:
        runner = RecordingCommandRunner()
        status = PresetRunner(runner, self.console).run(self.selected, RunOptions())
        self.assertEqual(status, 0)
        self.assertEqual(
            self._commands(runner),
            [
                ["cmake", "--preset", "dbg"],
                ["cmake", "--build", "--preset", "debug"],
                ["cmake", "--preset", "rel"],
                ["cmake", "--build", "--preset", "release"],
            ],
        )
        self.assertEqual(runner.commands[0].note, "debug:configure")

    def test_clean_only_never_configures_or_builds(self) -> None:
        runner = RecordingCommandRunner()
        status = PresetRunner(runner, self.console).run(
            self.selected, RunOptions(clean_only=True, rebuild=True, skip_configure=True)
        )
        self.assertEqual(status, 0)
        self.assertEqual(
            self._commands(runner),
            [
                ["cmake", "--build", "--target", "clean", "--preset", "debug"],
                ["cmake", "--build", "--target", "clean", "--preset", "release"],
            ],
        )

    def test_rebuild_requests_clean_first(self) -> None:
        runner = RecordingCommandRunner()
        PresetRunner(runner, self.console).run(self.selected[:1], RunOptions(rebuild=True, skip_configure=True))
        self.assertEqual(self._commands(runner), [["cmake", "--build", "--clean-first", "--preset", "debug"]])

    def test_skip_build_only_configures(self) -> None:
        runner = RecordingCommandRunner()
        PresetRunner(runner, self.console).run(self.selected, RunOptions(skip_build=True))
        self.assertEqual(self._commands(runner), [["cmake", "--preset", "dbg"], ["cmake", "--preset", "rel"]])

    def test_list_only_runs_nothing(self) -> None:
        runner = RecordingCommandRunner()
        status = PresetRunner(runner, self.console).run(self.selected, RunOptions(list_only=True, clean_only=True))
        self.assertEqual(status, 0)
        self.assertEqual(self._commands(runner), [])

    def test_stops_at_first_failure(self) -> None:
        catalog = PresetCatalog.from_mapping(
            {
                "configurePresets": [{"name": name} for name in ("c1", "c2", "c3")],
                "buildPresets": [
                    {"name": "b1", "configurePreset": "c1"},
                    {"name": "b2", "configurePreset": "c2"},
                    {"name": "b3", "configurePreset": "c3"},
                ],
            }
        )
        runner = FailingCommandRunner([["cmake", "--preset", "c2"]])
        preset_runner = PresetRunner(runner, self.console)

        status = preset_runner.run(catalog.build_presets, RunOptions())

        self.assertEqual(status, 1)
        self.assertEqual(
            self._commands(runner),
            [
                ["cmake", "--preset", "c1"],
                ["cmake", "--build", "--preset", "b1"],
                ["cmake", "--preset", "c2"],
            ],
        )
        failed = preset_runner.outcomes[-1]
        self.assertEqual((failed.preset.name, failed.step, failed.returncode), ("b2", Step.CONFIGURE, 2))
        self.assertFalse(failed.success)
        self.assertTrue(all(outcome.success for outcome in preset_runner.outcomes[:-1]))

    def test_failed_clean_aborts_run(self) -> None:
        runner = FailingCommandRunner([["cmake", "--build", "--target", "clean", "--preset", "debug"]])
        status = PresetRunner(runner, self.console).run(self.selected, RunOptions(clean_only=True))
        self.assertEqual(status, 1)
        self.assertEqual(len(self._commands(runner)), 1)

    def test_prints_banner_before_each_step(self) -> None:
        PresetRunner(RecordingCommandRunner(), self.console).run(self.selected, RunOptions())
        lines = self.output.getvalue().splitlines()
        self.assertEqual(
            lines[:3],
            ["=" * len("dbg (configure - task 1 of 2)"), "dbg (configure - task 1 of 2)", "=" * 29],
        )
        self.assertIn("rel (build - task 2 of 2)", lines)

    def test_custom_executable_and_working_directory(self) -> None:
        runner = RecordingCommandRunner()
        PresetRunner(runner, self.console, cmake="/opt/cmake/bin/cmake", cwd=Path("/work")).run(
            self.selected[:1], RunOptions(skip_build=True)
        )
        record = runner.commands[0]
        self.assertEqual(record.command[0], "/opt/cmake/bin/cmake")
        self.assertEqual(record.cwd, "/work")
        self.assertEqual(record.note, "debug:configure")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
