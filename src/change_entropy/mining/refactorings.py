"""Refactoring detection via RefactoringMiner and per-period aggregation."""

from __future__ import annotations

import json
import os
import shutil
import subprocess
import tempfile
from collections import Counter, defaultdict
from collections.abc import Collection, Iterable, Mapping
from pathlib import Path
from typing import Any, Optional, Protocol

from ..exceptions import InvalidConfigError, RefactoringDetectionError
from ..logging_config import get_logger
from .models import Period, Refactoring

logger = get_logger(__name__)

# Where a source checkout of RefactoringMiner leaves its executable jars
_TOOLS_DIR = Path("tools/RefactoringMiner")
_JAR_GLOBS = ("build/libs/RM-fat.jar", "build/libs/*-all.jar")


class RefactoringDetector(Protocol):
    """Detectors append what they find to the caller's list."""

    def detect_at_commit(self, commit: str, into: list[Refactoring]) -> None: ...

    def detect_between_commits(
        self, start: str, end: str, into: list[Refactoring]
    ) -> None: ...


def parse_refminer_json(data: dict[str, Any]) -> list[Refactoring]:
    """Parse RefactoringMiner JSON output.

    Typical structure:
    {"commits": [{"sha1": "...", "refactorings": [
        {"type": "Extract Method", "description": "...",
         "leftSideLocations": [{"filePath": "..."}], ...}]}]}

    The "before" side of a refactoring is its leftSideLocations.
    """
    refactorings = []
    for commit_data in data.get("commits", []):
        sha = commit_data.get("sha1", "")
        for item in commit_data.get("refactorings", []):
            before_paths = frozenset(
                loc["filePath"] for loc in item.get("leftSideLocations", []) if loc.get("filePath")
            )
            refactorings.append(
                Refactoring(
                    type=item.get("type", ""),
                    before_paths=before_paths,
                    commit=sha,
                    description=item.get("description", ""),
                )
            )
    return refactorings


class RefactoringMinerDetector:
    """Runs the RefactoringMiner command line against a local repository.

    The tool is located, in order, from an explicit path (a jar or a
    launcher script), the REFMINER_PATH environment variable, a source
    build under tools/RefactoringMiner, or a RefactoringMiner launcher on
    PATH.
    """

    def __init__(
        self,
        repo_path: str,
        refminer_path: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.repo_path = str(Path(repo_path).resolve())
        self.timeout = timeout
        self.command = self._resolve_command(refminer_path or os.environ.get("REFMINER_PATH"))

    @staticmethod
    def _resolve_command(refminer_path: Optional[str]) -> list[str]:
        if refminer_path:
            path = Path(refminer_path)
            if not path.is_file():
                raise InvalidConfigError("refminer_path", refminer_path, "file does not exist")
            if path.suffix == ".jar":
                return ["java", "-jar", str(path.resolve())]
            return [str(path.resolve())]

        if _TOOLS_DIR.exists():
            for pattern in _JAR_GLOBS:
                jars = sorted(_TOOLS_DIR.glob(pattern))
                if jars:
                    return ["java", "-jar", str(jars[0].resolve())]

        launcher = shutil.which("RefactoringMiner")
        if launcher:
            return [launcher]

        raise InvalidConfigError(
            "refminer_path",
            None,
            "RefactoringMiner not found; pass --refminer or set REFMINER_PATH",
        )

    def detect_at_commit(self, commit: str, into: list[Refactoring]) -> None:
        data = self._run(["-c", self.repo_path, commit], commit)
        into.extend(parse_refminer_json(data))

    def detect_between_commits(self, start: str, end: str, into: list[Refactoring]) -> None:
        data = self._run(["-bc", self.repo_path, start, end], f"{start}..{end}")
        into.extend(parse_refminer_json(data))

    def _run(self, args: list[str], commit: str) -> dict[str, Any]:
        with tempfile.TemporaryDirectory(prefix="refminer-") as tmp_dir:
            out_path = Path(tmp_dir) / "refactorings.json"
            cmd = [*self.command, *args, "-json", str(out_path)]
            logger.debug("Running %s", " ".join(cmd))
            try:
                result = subprocess.run(
                    cmd, capture_output=True, text=True, timeout=self.timeout
                )
            except subprocess.TimeoutExpired as e:
                raise RefactoringDetectionError(
                    f"timed out after {self.timeout}s", commit=commit
                ) from e
            except FileNotFoundError as e:
                raise RefactoringDetectionError(
                    f"cannot execute {self.command[0]}", commit=commit
                ) from e

            if result.returncode != 0:
                raise RefactoringDetectionError(
                    f"exit status {result.returncode}", commit=commit, stderr=result.stderr
                )
            if not out_path.exists() or out_path.stat().st_size == 0:
                # RefactoringMiner writes nothing when a range holds no commits
                return {}
            try:
                with open(out_path, encoding="utf-8") as f:
                    return json.load(f)
            except json.JSONDecodeError as e:
                raise RefactoringDetectionError(
                    f"unreadable JSON output: {e}", commit=commit
                ) from e


class RefactoringAggregator:
    """Count refactorings per file and type for a period."""

    def __init__(self, detector: RefactoringDetector, refactoring_types: Iterable[str]):
        self.detector = detector
        self.refactoring_types = frozenset(refactoring_types)

    def summarise(
        self,
        period: Period,
        changed_files: Optional[Collection[str]] = None,
        renames: Optional[Mapping[str, str]] = None,
    ) -> dict[str, dict[str, int]]:
        """Map each refactored file to {refactoring type: occurrences}.

        The start commit is analysed on its own as well as being the lower
        bound of the range, since a between-commits run only covers the
        commits after it. Each refactoring is credited to every file on its
        "before" side, under the path that file has at the end of the period
        when renames maps it elsewhere. With changed_files, files outside it
        are dropped.
        """
        found: list[Refactoring] = []
        try:
            self.detector.detect_at_commit(period.start.hash, found)
            if len(period) > 1:
                self.detector.detect_between_commits(period.start.hash, period.end.hash, found)
        except RefactoringDetectionError as e:
            raise RefactoringDetectionError(
                e.reason, commit=e.commit, period=period.index, stderr=e.stderr
            ) from e

        counts: dict[str, Counter[str]] = defaultdict(Counter)
        for refactoring in found:
            logger.debug("- %s: %s", refactoring.commit[:8], refactoring.description or refactoring.type)
            if refactoring.type not in self.refactoring_types:
                continue
            for before_path in refactoring.before_paths:
                path = renames.get(before_path, before_path) if renames else before_path
                if changed_files is not None and path not in changed_files:
                    continue
                counts[path][refactoring.type] += 1

        logger.debug(
            "Period %d: %d refactorings detected, %d files refactored",
            period.index,
            len(found),
            len(counts),
        )
        return {path: dict(sorted(counts[path].items())) for path in sorted(counts)}
