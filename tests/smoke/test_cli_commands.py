"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

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
from typer.testing import CliRunner

from readprep.cli.main import app

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent

runner = CliRunner()


def run_cli_command(command: str, timeout: int = 30) -> tuple[int, str, str]:
    """
    Run a CLI command and return exit code, stdout, stderr.

    Args:
        command: The command to run (after 'python -m readprep')
        timeout: Maximum time to wait

    Returns:
        Tuple of (exit_code, stdout, stderr)
    """
    full_command = f"{sys.executable} -m readprep {command}"

    result = subprocess.run(
        full_command,
        shell=True,
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        timeout=timeout,
        env={**os.environ, "COLUMNS": "120"},
    )

    return result.returncode, result.stdout, result.stderr


@pytest.fixture
def pool_file(tmp_path, item_pool):
    path = tmp_path / "pool.json"
    path.write_text(
        json.dumps([
            {
                "id": item.id,
                "passageId": item.passage_id,
                "difficulty": item.difficulty.value,
                "genre": item.genre.value,
            }
            for item in item_pool
        ]),
        encoding="utf-8",
    )
    return path


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self):
        """Main help should display without errors."""
        code, stdout, stderr = run_cli_command("--help")

        assert code == 0, f"Help failed: {stderr}"
        assert "readprep" in stdout.lower()
        assert "Commands" in stdout

    @pytest.mark.parametrize("command", ["ingest", "select", "recommend", "review"])
    def test_subcommand_help(self, command):
        code, stdout, stderr = run_cli_command(f"{command} --help")

        assert code == 0, f"{command} --help failed: {stderr}"
        assert "Usage" in stdout


class TestIngest:
    def test_ingest_writes_passages(self, tmp_path, prose_text):
        source = tmp_path / "lighthouse.txt"
        source.write_text("\n\n".join([prose_text, prose_text]), encoding="utf-8")
        output = tmp_path / "passages.json"

        result = runner.invoke(
            app,
            ["ingest", str(source), "--genre", "history", "--output-json", str(output)],
        )

        assert result.exit_code == 0, result.output
        assert "Ingestion" in result.output
        passages = json.loads(output.read_text(encoding="utf-8"))
        assert len(passages) == 1
        assert passages[0]["genre"] == "history"
        assert passages[0]["wordCount"] == 168
        assert passages[0]["sourceTitle"] == "lighthouse"

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["ingest", str(tmp_path / "missing.txt")])

        assert result.exit_code == 1
        assert "File not found" in result.output


class TestSelect:
    def test_select_prints_stats(self, pool_file):
        result = runner.invoke(app, ["select", str(pool_file), "--count", "20"])

        assert result.exit_code == 0, result.output
        assert "Passage diversity" in result.output
        assert "20/20" in result.output

    def test_select_with_accuracy(self, pool_file):
        result = runner.invoke(
            app, ["select", str(pool_file), "--count", "10", "--accuracy", "85", "--show-items"]
        )

        assert result.exit_code == 0, result.output
        assert "item-" in result.output

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "pool.json"
        path.write_text("{broken", encoding="utf-8")

        result = runner.invoke(app, ["select", str(path)])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_scalar_json_pool(self, tmp_path):
        path = tmp_path / "pool.json"
        path.write_text("5", encoding="utf-8")

        result = runner.invoke(app, ["select", str(path)])

        assert result.exit_code == 1
        assert "Invalid item pool" in result.output

    def test_invalid_policy(self, pool_file):
        result = runner.invoke(app, ["select", str(pool_file), "--max-per-passage", "0"])

        assert result.exit_code == 1


class TestRecommend:
    def test_recommend(self):
        result = runner.invoke(app, ["recommend", "85"])

        assert result.exit_code == 0
        assert "hard 50%" in result.output


class TestReview:
    def _invoke(self, db, *args):
        return runner.invoke(app, ["review", *args, "--db", str(db)])

    def test_add_grade_due_stats_remove(self, tmp_path):
        db = tmp_path / "reviews.db"

        result = self._invoke(db, "add", "q1", "q2", "--session", "s1", "--today", "2024-03-01")
        assert result.exit_code == 0, result.output
        assert "Registered 2 items" in result.output

        result = self._invoke(db, "grade", "q1", "4", "--today", "2024-03-01")
        assert result.exit_code == 0, result.output
        assert "2024-03-02" in result.output

        result = self._invoke(db, "due", "--today", "2024-03-01")
        assert result.exit_code == 0, result.output
        assert "q2" in result.output
        assert "q1" not in result.output

        result = self._invoke(db, "stats", "--today", "2024-03-01")
        assert result.exit_code == 0, result.output
        assert "Total" in result.output

        result = self._invoke(db, "remove", "q2")
        assert result.exit_code == 0, result.output
        assert "Removed q2" in result.output

        result = self._invoke(db, "due", "--today", "2024-03-01")
        assert "Nothing due" in result.output

    def test_due_resolved_against_pool(self, tmp_path, pool_file):
        db = tmp_path / "reviews.db"
        self._invoke(db, "add", "item-004", "gone", "--today", "2024-03-01")

        result = self._invoke(db, "due", "--pool", str(pool_file), "--today", "2024-03-01")

        assert result.exit_code == 0, result.output
        assert "item-004" in result.output
        assert "gone" not in result.output

    def test_due_with_broken_pool(self, tmp_path):
        db = tmp_path / "reviews.db"
        pool = tmp_path / "pool.json"
        pool.write_text("{broken", encoding="utf-8")
        self._invoke(db, "add", "q1", "--today", "2024-03-01")

        result = self._invoke(db, "due", "--pool", str(pool), "--today", "2024-03-01")

        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_due_with_missing_pool(self, tmp_path):
        db = tmp_path / "reviews.db"
        self._invoke(db, "add", "q1", "--today", "2024-03-01")

        result = self._invoke(
            db, "due", "--pool", str(tmp_path / "missing.json"), "--today", "2024-03-01"
        )

        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_grade_unknown_item(self, tmp_path):
        result = self._invoke(tmp_path / "reviews.db", "grade", "nope", "4")

        assert result.exit_code == 1
        assert "not in review queue" in result.output

    def test_grade_out_of_range(self, tmp_path):
        db = tmp_path / "reviews.db"
        self._invoke(db, "add", "q1")

        result = self._invoke(db, "grade", "q1", "9")

        assert result.exit_code == 1

    def test_invalid_date(self, tmp_path):
        result = self._invoke(tmp_path / "reviews.db", "stats", "--today", "yesterday")

        assert result.exit_code == 1
        assert "Invalid date" in result.output
