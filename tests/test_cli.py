"""Tests für die Haupt-CLI (click.testing.CliRunner, lokale Datenquelle)."""

import asyncio
from pathlib import Path

import pytest
from click.testing import CliRunner

from data.local_store import LocalTimetableStore
from main import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _setup_with_data(runner: CliRunner) -> None:
    result = runner.invoke(cli, ["setup", "--school-name", "Testschule"])
    assert result.exit_code == 0, result.output
    result = runner.invoke(cli, ["generate", "--seed", "42"])
    assert result.exit_code == 0, result.output


class TestCli:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("setup", "config", "generate", "classes", "show", "edit"):
            assert command in result.output

    def test_missing_config_aborts(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["classes"])
            assert result.exit_code == 1
            assert "Keine Konfiguration" in result.output

    def test_setup_creates_config(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["setup"])
            assert result.exit_code == 0
            assert Path("config/app_config.yaml").exists()

            again = runner.invoke(cli, ["setup"])
            assert "existiert bereits" in again.output

            shown = runner.invoke(cli, ["config", "show"])
            assert shown.exit_code == 0
            assert "Muster-Schule" in shown.output

    def test_classes_and_show(self, runner):
        with runner.isolated_filesystem():
            _setup_with_data(runner)

            classes = runner.invoke(cli, ["classes"])
            assert classes.exit_code == 0
            assert "C9A" in classes.output

            by_class = runner.invoke(cli, ["show", "--class-id", "C9A"])
            assert by_class.exit_code == 0, by_class.output
            assert "Stundenplan Klasse C9A" in by_class.output

            by_teacher = runner.invoke(cli, ["show", "--teacher-id", "T01"])
            assert by_teacher.exit_code == 0, by_teacher.output
            assert "Stunden/Woche" in by_teacher.output

            empty = runner.invoke(cli, ["show", "--class-id", "C10B"])
            assert "Keine Stundenplan-Einträge" in empty.output

    def test_show_needs_exactly_one_filter(self, runner):
        with runner.isolated_filesystem():
            result = runner.invoke(cli, ["show"])
            assert result.exit_code == 2

    def test_edit_quit_without_changes(self, runner):
        with runner.isolated_filesystem():
            _setup_with_data(runner)
            result = runner.invoke(cli, ["edit", "C10B"], input="0\n")
            assert result.exit_code == 0, result.output
            assert "Nicht gespeichert" in result.output

    def test_edit_unknown_class(self, runner):
        with runner.isolated_filesystem():
            _setup_with_data(runner)
            result = runner.invoke(cli, ["edit", "C99Z"])
            assert "Klasse nicht gefunden" in result.output

    def test_edit_assign_and_save(self, runner):
        """Zelle Mo 1. mit dem ersten Fach belegen und speichern."""
        with runner.isolated_filesystem():
            _setup_with_data(runner)
            keys = "1\nMo\n1\n1\n1\ns\n5\n"
            result = runner.invoke(cli, ["edit", "C10B"], input=keys)
            assert result.exit_code == 0, result.output
            assert "Stundenplan gespeichert" in result.output

            store = LocalTimetableStore(Path("data/timetable.yaml"))
            entries = asyncio.run(store.get_timetable(class_id="C10B"))
            assert [(e.day_of_week, e.period_number, e.subject_id) for e in entries] == [
                (0, 1, "S-M"),
            ]
