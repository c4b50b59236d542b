"""Shared test fixtures for change-entropy."""

import os
import shutil
import subprocess
from pathlib import Path

import pytest

from change_entropy.mining.models import NULL_PATH, Commit, Edit, FileDiff

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not found")


def make_commits(count: int, start: int = 1_700_000_000) -> list[Commit]:
    """Linear non-merge commits c00, c01, ... one minute apart, oldest first."""
    return [
        Commit(hash=f"c{i:02d}" + "0" * 37, timestamp=start + 60 * i, parent_count=1 if i else 0)
        for i in range(count)
    ]


def modified(path: str, *edits: tuple[int, int]) -> FileDiff:
    return FileDiff(old_path=path, new_path=path, edits=[Edit(a, b) for a, b in edits])


def added(path: str, lines: int) -> FileDiff:
    return FileDiff(old_path=NULL_PATH, new_path=path, edits=[Edit(0, lines)])


def deleted(path: str, lines: int) -> FileDiff:
    return FileDiff(old_path=path, new_path=NULL_PATH, edits=[Edit(lines, 0)])


def renamed(old: str, new: str, *edits: tuple[int, int]) -> FileDiff:
    return FileDiff(old_path=old, new_path=new, edits=[Edit(a, b) for a, b in edits])


class FakeRepository:
    """In-memory stand-in for GitRepository.

    ``history`` is given oldest first (as a test reads it) and returned newest
    first, the way git log reports it.
    """

    def __init__(self, history=(), diffs=None, lines=None, head="f" * 40):
        self.history = list(history)
        self.diffs = diffs or {}
        self.lines = lines or {}
        self.head = head
        self.diffed: list[str] = []

    def resolve_head(self) -> str:
        return self.head

    def list_commits(self, ref: str = "HEAD") -> list[Commit]:
        return list(reversed(self.history))

    def diff_commit(self, commit: Commit) -> list[FileDiff]:
        self.diffed.append(commit.hash)
        return list(self.diffs.get(commit.hash, []))

    def line_counts(self, commit_hash: str) -> dict[str, int]:
        return dict(self.lines.get(commit_hash, {}))


class FakeDetector:
    """Returns canned refactorings and records what it was asked."""

    def __init__(self, at_commit=None, between=None, error=None):
        self.at_commit = at_commit or {}
        self.between = between or {}
        self.error = error
        self.calls: list[tuple] = []

    def detect_at_commit(self, commit, into):
        self.calls.append(("at", commit))
        if self.error is not None:
            raise self.error
        into.extend(self.at_commit.get(commit, []))

    def detect_between_commits(self, start, end, into):
        self.calls.append(("between", start, end))
        if self.error is not None:
            raise self.error
        into.extend(self.between.get((start, end), []))


class GitRepoBuilder:
    """Builds a throwaway git repository with deterministic commit times."""

    def __init__(self, root: Path):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)
        self._tick = 0
        self.git("init", "-q")
        self.git("config", "user.email", "test@test.com")
        self.git("config", "user.name", "Test")
        self.git("config", "commit.gpgsign", "false")

    def git(self, *args: str) -> str:
        date = f"{1_700_000_000 + self._tick * 60} +0000"
        env = {**os.environ, "GIT_AUTHOR_DATE": date, "GIT_COMMITTER_DATE": date}
        result = subprocess.run(
            ["git", "-C", str(self.root), *args],
            capture_output=True,
            text=True,
            env=env,
            check=True,
        )
        return result.stdout

    def write(self, path: str, lines: list[str]) -> None:
        target = self.root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")

    def commit(self, message: str) -> str:
        self._tick += 1
        self.git("add", "-A")
        self.git("commit", "-q", "--allow-empty", "-m", message)
        return self.git("rev-parse", "HEAD").strip()


@pytest.fixture
def git_repo(tmp_path):
    if shutil.which("git") is None:
        pytest.skip("git not found")
    return GitRepoBuilder(tmp_path / "repo")
