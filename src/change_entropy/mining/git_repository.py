"""Read-only access to a git repository via the git executable."""

from __future__ import annotations

import re
import subprocess
from pathlib import Path
from typing import Optional

from ..exceptions import VersionControlError
from ..logging_config import get_logger
from .models import NULL_PATH, Commit, Edit, FileDiff

logger = get_logger(__name__)

# Matches: @@ -old_start[,old_len] +new_start[,new_len] @@
_HUNK_RE = re.compile(r"^@@ -\d+(?:,(\d+))? \+\d+(?:,(\d+))? @@")
_BINARY_RE = re.compile(r"^Binary files (.+) and (.+) differ$")


class GitRepository:
    """Thin wrapper around ``git`` subprocess calls for one repository."""

    def __init__(self, repo_path: str):
        self.repo_path = str(Path(repo_path).resolve())

    def _run(self, args: list[str], stdin: Optional[str] = None) -> str:
        cmd = ["git", "-C", self.repo_path, "-c", "core.quotePath=false", *args]
        try:
            result = subprocess.run(
                cmd,
                input=stdin,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as e:
            raise VersionControlError(cmd, "git executable not found") from e

        if result.returncode != 0:
            raise VersionControlError(
                cmd, f"exit status {result.returncode}", stderr=result.stderr
            )
        return result.stdout

    def resolve_head(self) -> str:
        """Return the commit hash HEAD points to."""
        return self._run(["rev-parse", "--verify", "HEAD^{commit}"]).strip()

    def list_commits(self, ref: str = "HEAD") -> list[Commit]:
        """List every commit reachable from ref, newest first, merges included."""
        raw = self._run(["log", "--format=%H %ct %P", ref])
        return parse_log(raw)

    def diff_commit(self, commit: Commit) -> list[FileDiff]:
        """Diff a commit against its first parent, or the empty tree for a root commit."""
        raw = self._run(
            [
                "diff-tree",
                "-r",
                "--root",
                "--no-commit-id",
                "-M",
                "-p",
                "--unified=0",
                "--no-color",
                commit.hash,
            ]
        )
        return parse_diff(raw)

    def empty_tree(self) -> str:
        """Hash of the empty tree in this repository's object format."""
        return self._run(["hash-object", "-t", "tree", "--stdin"], stdin="").strip()

    def line_counts(self, commit_hash: str) -> dict[str, int]:
        """Every file in the tree at a commit with its number of lines.

        Binary files count zero lines.
        """
        raw = self._run(
            ["diff", "--numstat", "-z", "--no-renames", self.empty_tree(), commit_hash]
        )
        return parse_numstat(raw)


def parse_log(raw: str) -> list[Commit]:
    """Parse ``git log --format='%H %ct %P'`` output into Commit objects."""
    commits = []
    for line in raw.splitlines():
        parts = line.split()
        if not parts:
            continue
        if len(parts) < 2:
            raise VersionControlError(["log"], f"unparseable log line: {line!r}")
        try:
            timestamp = int(parts[1])
        except ValueError as e:
            raise VersionControlError(["log"], f"unparseable log line: {line!r}") from e
        commits.append(Commit(hash=parts[0], timestamp=timestamp, parent_count=len(parts) - 2))
    return commits


def _strip_prefix(path: str, prefix: str) -> str:
    if path == NULL_PATH:
        return path
    return path[len(prefix):] if path.startswith(prefix) else path


def _split_header_paths(rest: str) -> tuple[str, str]:
    """Split ``a/<old> b/<new>`` from a ``diff --git`` line.

    The common case of identical paths is split exactly at the midpoint so
    that paths containing " b/" are handled; otherwise fall back to the
    first separator.
    """
    n = len(rest)
    if n % 2 == 1:
        left, right = rest[: n // 2], rest[n // 2 + 1:]
        if left.startswith("a/") and right.startswith("b/") and left[2:] == right[2:]:
            return left[2:], right[2:]
    if " b/" in rest:
        left, right = rest.split(" b/", 1)
        return _strip_prefix(left, "a/"), right
    return rest, rest


def parse_diff(raw: str) -> list[FileDiff]:
    """Parse zero-context patch output into per-file edit lists.

    Each ``@@`` hunk becomes one Edit. Binary files, mode changes and pure
    renames produce a FileDiff with no edits.
    """
    diffs: list[FileDiff] = []
    current: Optional[FileDiff] = None

    for line in raw.splitlines():
        if line.startswith("diff --git "):
            old_path, new_path = _split_header_paths(line[len("diff --git "):])
            current = FileDiff(old_path=old_path, new_path=new_path)
            diffs.append(current)
            continue
        if current is None:
            continue

        if line.startswith("@@"):
            match = _HUNK_RE.match(line)
            if match is None:
                raise VersionControlError(["diff-tree"], f"unparseable hunk header: {line!r}")
            old_len = int(match.group(1)) if match.group(1) is not None else 1
            new_len = int(match.group(2)) if match.group(2) is not None else 1
            current.edits.append(Edit(old_length=old_len, new_length=new_len))
        elif line.startswith("--- ") and not current.edits:
            current.old_path = _strip_prefix(line[4:].rstrip("\t"), "a/")
        elif line.startswith("+++ ") and not current.edits:
            current.new_path = _strip_prefix(line[4:].rstrip("\t"), "b/")
        elif line.startswith("new file mode"):
            current.old_path = NULL_PATH
        elif line.startswith("deleted file mode"):
            current.new_path = NULL_PATH
        elif line.startswith("rename from "):
            current.old_path = line[len("rename from "):]
        elif line.startswith("rename to "):
            current.new_path = line[len("rename to "):]
        elif line.startswith("Binary files "):
            current.binary = True
            match = _BINARY_RE.match(line)
            if match:
                current.old_path = _strip_prefix(match.group(1), "a/")
                current.new_path = _strip_prefix(match.group(2), "b/")

    return diffs


def parse_numstat(raw: str) -> dict[str, int]:
    """Parse ``git diff --numstat -z`` output into path -> added lines.

    Without rename detection each record is ``added<TAB>deleted<TAB>path``
    terminated by NUL; binary files report ``-`` for both counts.
    """
    counts: dict[str, int] = {}
    for record in raw.split("\0"):
        if not record:
            continue
        parts = record.split("\t", 2)
        if len(parts) != 3:
            raise VersionControlError(
                ["diff", "--numstat"], f"unparseable numstat record: {record!r}"
            )
        added, _, path = parts
        counts[path] = 0 if added == "-" else int(added)
    return counts
