"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
Each test gets its own SQLite file passed through --db.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from lingua.core.exercise_type import ExerciseType

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


@pytest.fixture
def cli(tmp_path):
    """Runner bound to a fresh database file."""
    db_url = f"sqlite:///{tmp_path / 'cards.db'}"
    env = {k: v for k, v in os.environ.items() if k not in ("AI_API_KEY", "GEMINI_API_KEY", "ACTIVE_LANGUAGE")}
    env["PYTHONIOENCODING"] = "utf-8"

    def run(*args: str, input: str | None = None, timeout: int = 60) -> tuple[int, str, str]:
        """
        Run a CLI command and return exit code, stdout, stderr.

        Args:
            args: Command arguments (after 'python -m lingua.cli.main --db URL')
            input: Text fed to stdin for interactive commands
            timeout: Maximum time to wait
        """
        result = subprocess.run(
            [sys.executable, "-m", "lingua.cli.main", "--db", db_url, *args],
            cwd=PROJECT_ROOT,
            input=input,
            capture_output=True,
            text=True,
            encoding="utf-8",
            env=env,
            timeout=timeout,
        )
        return result.returncode, result.stdout, result.stderr

    return run


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self, cli):
        code, stdout, stderr = cli("--help")

        assert code == 0, f"Help failed: {stderr}"
        assert "lingua-cards" in stdout
        assert "cards" in stdout
        assert "practice" in stdout

    @pytest.mark.parametrize("group", ["cards", "streak", "prefs", "icons", "db"])
    def test_group_help(self, cli, group):
        code, stdout, stderr = cli(group, "--help")
        assert code == 0, f"{group} help failed: {stderr}"

    def test_version(self, cli):
        code, stdout, _ = cli("version")

        assert code == 0
        assert "lingua-cards v" in stdout


class TestCardCommands:
    def test_db_init(self, cli):
        code, stdout, _ = cli("db", "init")

        assert code == 0
        assert "Database initialized" in stdout

    def test_add_and_list(self, cli):
        code, stdout, stderr = cli("cards", "add", "Hund", "dog", "-l", "de", "-c", "animals", "-t", "pets")
        assert code == 0, stderr
        assert "Added card" in stdout

        code, stdout, _ = cli("cards", "list")
        assert code == 0
        assert "Hund" in stdout

        code, stdout, _ = cli("cards", "list", "--search", "katze")
        assert "No cards found" in stdout

    def test_add_reports_duplicate(self, cli):
        cli("cards", "add", "Hund", "dog", "-l", "de")
        code, stdout, _ = cli("cards", "add", "Hund", "dog", "-l", "de")

        assert code == 0
        assert "Possible duplicate" in stdout

    def test_add_strict_refuses_duplicate(self, cli):
        cli("cards", "add", "Hund", "dog", "-l", "de")
        code, stdout, _ = cli("cards", "add", "Hund", "dog", "-l", "de", "--strict")

        assert code == 1
        assert "already exists" in stdout

    def test_add_invalid_difficulty(self, cli):
        code, stdout, _ = cli("cards", "add", "Hund", "dog", "-l", "de", "-d", "9")

        assert code == 1
        assert "Difficulty must be between 1 and 5" in stdout

    def test_import_export_and_stats(self, cli, tmp_path):
        source = tmp_path / "import.json"
        source.write_text(
            json.dumps({
                "cards": [
                    {"front": "Hund", "back": "dog", "language": "de", "category": "animals"},
                    {"front": "Katze", "back": "cat", "language": "de", "category": "animals"},
                    {"front": "", "back": "broken", "language": "de", "category": "animals"},
                ]
            }),
            encoding="utf-8",
        )
        code, stdout, _ = cli("cards", "import", str(source))
        assert code == 0
        assert "Imported 2 cards" in stdout
        assert "Skipped 1 rows" in stdout

        target = tmp_path / "export.json"
        code, stdout, _ = cli("cards", "export", str(target))
        assert code == 0
        assert {c["frontText"] for c in json.loads(target.read_text(encoding="utf-8"))} == {"Hund", "Katze"}

        code, stdout, _ = cli("cards", "stats")
        assert code == 0
        assert "Total cards" in stdout

    def test_import_missing_file(self, cli, tmp_path):
        code, stdout, _ = cli("cards", "import", str(tmp_path / "nope.json"))

        assert code == 1
        assert "File not found" in stdout

    def test_show_archive_delete_by_prefix(self, cli, tmp_path):
        cli("cards", "add", "Hund", "dog", "-l", "de")
        target = tmp_path / "export.json"
        cli("cards", "export", str(target))
        prefix = json.loads(target.read_text(encoding="utf-8"))[0]["id"][:8]

        code, stdout, _ = cli("cards", "show", prefix)
        assert code == 0
        assert "Exercise scores" in stdout

        code, stdout, _ = cli("cards", "archive", prefix)
        assert "archived" in stdout

        code, stdout, _ = cli("cards", "delete", prefix, "--yes")
        assert code == 0
        assert "Card deleted" in stdout

        code, stdout, _ = cli("cards", "show", prefix)
        assert code == 1
        assert "Card not found" in stdout

    def test_duplicates(self, cli):
        cli("cards", "add", "Bank", "bank", "-l", "de")
        cli("cards", "add", "Bank", "bench", "-l", "de")

        code, stdout, _ = cli("cards", "duplicates")
        assert code == 0
        assert "Possible duplicates" in stdout

        code, stdout, _ = cli("cards", "duplicates", "--preset", "loose")
        assert "No duplicates found" in stdout

        code, stdout, _ = cli("cards", "duplicates", "--preset", "paranoid")
        assert code == 1


class TestPracticeCommands:
    def test_nothing_due(self, cli):
        code, stdout, _ = cli("practice")

        assert code == 0
        assert "Nothing due" in stdout

    def test_practice_session_records_streak(self, cli):
        cli("cards", "add", "Hund", "dog", "-l", "de")
        for exercise_type in ExerciseType.implemented():
            if exercise_type is not ExerciseType.WRITING_TRANSLATION:
                cli("prefs", "toggle", exercise_type.value)

        code, stdout, stderr = cli("practice", input="dog\n")
        assert code == 0, stderr
        assert "Correct!" in stdout
        assert "1/1 correct" in stdout

        code, stdout, _ = cli("streak", "show")
        assert code == 0
        assert "1 days" in stdout

        code, stdout, _ = cli("due")
        assert "Nothing due" in stdout

    def test_streak_reset(self, cli):
        code, stdout, _ = cli("streak", "reset", "--yes")

        assert code == 0
        assert "Streak reset" in stdout


class TestPreferenceCommands:
    def test_show(self, cli):
        code, stdout, _ = cli("prefs", "show")

        assert code == 0
        assert "Recognition" in stdout
        assert "coming soon" in stdout

    def test_toggle(self, cli):
        code, stdout, _ = cli("prefs", "toggle", "article-selection")
        assert code == 0
        assert "Article Selection disabled" in stdout

        code, stdout, _ = cli("prefs", "toggle", "article_selection")
        assert "Article Selection enabled" in stdout

    def test_toggle_unavailable_and_unknown(self, cli):
        code, stdout, _ = cli("prefs", "toggle", "sentence_fill")
        assert code == 1
        assert "not available yet" in stdout

        code, stdout, _ = cli("prefs", "toggle", "telepathy")
        assert code == 1
        assert "Unknown exercise type" in stdout

    def test_order(self, cli):
        code, stdout, _ = cli("prefs", "order", "--shuffle")

        assert code == 0
        assert "shuffled" in stdout


class TestInfoCommands:
    def test_info(self, cli):
        code, stdout, _ = cli("info")

        assert code == 0
        assert "Configuration" in stdout

    def test_enrich_without_ai_key(self, cli):
        code, stdout, _ = cli("enrich", "Haus")

        assert code == 1
        assert "not configured" in stdout
