"""Tests for the change-entropy command line."""

import logging
import os

import pytest
from typer.testing import CliRunner

from change_entropy import __version__
from change_entropy.cli import app

from conftest import requires_git

runner = CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("CHANGE_ENTROPY_"):
            monkeypatch.delenv(key)
    monkeypatch.delenv("REFMINER_PATH", raising=False)
    yield
    package_logger = logging.getLogger("change_entropy")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)


class TestArguments:
    """Argument validation exits with status 1 before any analysis."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_bad_period_length(self, tmp_path):
        result = runner.invoke(app, ["-r", str(tmp_path), "-p", "0", "-m", "1", "-q"])
        assert result.exit_code == 1
        assert not (tmp_path / "results.csv").exists()

    def test_bad_mode(self, tmp_path):
        result = runner.invoke(app, ["-r", str(tmp_path), "-p", "5", "-m", "9", "-q"])
        assert result.exit_code == 1

    def test_missing_repository(self, tmp_path):
        result = runner.invoke(app, ["-r", str(tmp_path / "missing"), "-p", "5", "-q"])
        assert result.exit_code == 1

    def test_missing_period_length(self, tmp_path):
        result = runner.invoke(app, ["-r", str(tmp_path), "-m", "1", "-q"])
        assert result.exit_code == 1

    def test_missing_mode(self, tmp_path):
        """There is no default report mode."""
        output = tmp_path / "out.csv"
        result = runner.invoke(app, ["-r", str(tmp_path), "-p", "5", "-o", str(output), "-q"])
        assert result.exit_code == 1
        assert not output.exists()

    def test_missing_filter_file(self, tmp_path):
        result = runner.invoke(
            app, ["-r", str(tmp_path), "-p", "5", "-f", str(tmp_path / "none.yaml"), "-q"]
        )
        assert result.exit_code == 1

    def test_refactoring_mode_without_detector(self, tmp_path, monkeypatch):
        """Modes that mark refactorings need RefactoringMiner."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("PATH", str(tmp_path / "empty"))
        output = tmp_path / "out.csv"
        result = runner.invoke(
            app, ["-r", str(tmp_path), "-p", "5", "-m", "3", "-o", str(output), "-q"]
        )
        assert result.exit_code == 1
        assert not output.exists()


@requires_git
class TestRun:
    """End-to-end runs over a throwaway repository."""

    def _history(self, git_repo):
        git_repo.write("A.java", ["a"])
        git_repo.write("B.java", ["b"])
        git_repo.commit("c1")
        git_repo.write("A.java", ["a", "a2", "a3"])
        git_repo.commit("c2")
        git_repo.write("notes.md", ["n"])
        git_repo.commit("c3")

    def test_period_entropy(self, git_repo, tmp_path):
        self._history(git_repo)
        output = tmp_path / "results.csv"
        result = runner.invoke(
            app, ["-r", str(git_repo.root), "-p", "2", "-m", "1", "-o", str(output), "-q"]
        )
        assert result.exit_code == 0
        # period 0: A 1+2 lines, B 1 line; period 1: notes.md alone
        assert output.read_text(encoding="utf-8") == "0,0.8113\n1,0.0000\n"

    def test_filters_and_mode_4(self, git_repo, tmp_path):
        self._history(git_repo)
        filters = tmp_path / "filters.yaml"
        filters.write_text("file_types_to_include:\n  - java\n")
        output = tmp_path / "results.csv"
        result = runner.invoke(
            app,
            [
                "-r", str(git_repo.root), "-p", "1", "-m", "4",
                "-f", str(filters), "-o", str(output), "-q",
            ],
        )
        assert result.exit_code == 0
        assert output.read_text(encoding="utf-8") == "A.java,0.5000,0.0000\nB.java,0.5000\n"

    def test_log_file(self, git_repo, tmp_path):
        self._history(git_repo)
        log_file = tmp_path / "run.log"
        result = runner.invoke(
            app,
            [
                "-r", str(git_repo.root), "-p", "3", "-m", "1",
                "-o", str(tmp_path / "results.csv"),
                "--log-file", str(log_file),
            ],
        )
        assert result.exit_code == 0
        logged = log_file.read_text(encoding="utf-8")
        assert "Found 3 non-merge commits" in logged
        assert f"[{git_repo.root}]" in logged
