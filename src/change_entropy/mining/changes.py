"""Per-period change aggregation: changed-line counts per file."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from ..exceptions import InvalidConfigError, VersionControlError
from ..logging_config import get_logger
from .git_repository import GitRepository
from .models import FileDiff, Period

logger = get_logger(__name__)


class FileFilter:
    """File-type inclusion and path-pattern exclusion.

    A file type is an extension ("java", ".py") or an exact file name
    ("Makefile"). An empty type list includes every file. Exclusion
    patterns are regular expressions searched anywhere in the path.
    Both checks consider either side of a rename.
    """

    def __init__(
        self,
        file_types: Sequence[str] = (),
        exclude_patterns: Sequence[str] = (),
    ):
        self.file_types = tuple(t.strip() for t in file_types if t.strip())
        self._suffixes = tuple("." + t.lstrip(".") for t in self.file_types)
        try:
            self._excludes = [re.compile(p) for p in exclude_patterns]
        except re.error as e:
            raise InvalidConfigError("file_path_patterns_to_exclude", e.pattern, str(e)) from e

    def _has_included_type(self, path: str) -> bool:
        if not self.file_types:
            return True
        name = path.rsplit("/", 1)[-1]
        return path.endswith(self._suffixes) or name in self.file_types

    def _is_excluded(self, path: str) -> bool:
        return any(pattern.search(path) for pattern in self._excludes)

    def accepts(self, paths: Iterable[str]) -> bool:
        paths = list(paths)
        if not paths:
            return False
        if not any(self._has_included_type(p) for p in paths):
            return False
        return not any(self._is_excluded(p) for p in paths)


class ChangeAggregator:
    """Sum per-commit diffs of a period into a path -> changed-lines map.

    Every count of a period is keyed by the file's path at the end of that
    period: a rename moves what was accumulated under the old path onto the
    new one.
    """

    def __init__(self, repository: GitRepository, file_filter: FileFilter):
        self.repository = repository
        self.file_filter = file_filter

    def summarise(self, period: Period) -> dict[str, int]:
        summary, _ = self.summarise_with_renames(period)
        return summary

    def summarise_with_renames(self, period: Period) -> tuple[dict[str, int], dict[str, str]]:
        """Summarise a period and report where its renamed files ended up.

        Returns:
            (summary, renames) where renames maps every path a file had
            earlier in the period to the path it is summarised under.

        Raises:
            VersionControlError: If a commit cannot be diffed; the period
                index is added to the error's details.
        """
        if period.start.timestamp > period.end.timestamp:
            logger.warning(
                "Period %d starts at %s, which is newer than its end commit %s",
                period.index,
                period.start.hash[:8],
                period.end.hash[:8],
            )

        summary: dict[str, int] = {}
        renames: dict[str, str] = {}
        for commit in period.commits:
            logger.debug("Listing changes in commit %s", commit.hash)
            try:
                diffs = self.repository.diff_commit(commit)
            except VersionControlError as e:
                e.add_context(period=period.index)
                raise
            for diff in diffs:
                if not self.file_filter.accepts(diff.paths):
                    continue
                self._accumulate(summary, renames, diff)

        summary = dict(sorted(summary.items()))
        self._log_summary(period, summary)
        return summary, renames

    @staticmethod
    def _accumulate(summary: dict[str, int], renames: dict[str, str], diff: FileDiff) -> None:
        count = diff.changed_lines
        if diff.is_rename:
            carried = summary.pop(diff.old_path, 0)
            summary[diff.new_path] = summary.get(diff.new_path, 0) + carried + count
            # earlier names of the file follow it to its new path
            for earlier, current in renames.items():
                if current == diff.old_path:
                    renames[earlier] = diff.new_path
            renames[diff.old_path] = diff.new_path
            renames.pop(diff.new_path, None)
            logger.debug("- %s -> %s (%d lines)", diff.old_path, diff.new_path, count)
        else:
            key = diff.key_path
            summary[key] = summary.get(key, 0) + count
            logger.debug("- %s (%d lines)", key, count)

    def count_lines(self, period: Period) -> int:
        """Lines in the files passing the filters in the tree at the period's end."""
        line_counts = self.repository.line_counts(period.end.hash)
        return sum(lines for path, lines in line_counts.items() if self.file_filter.accepts([path]))

    @staticmethod
    def _log_summary(period: Period, summary: dict[str, int]) -> None:
        logger.debug(
            "Period %d (%s..%s): %d changed lines across %d files",
            period.index,
            period.start.hash[:8],
            period.end.hash[:8],
            sum(summary.values()),
            len(summary),
        )
        for path, count in summary.items():
            logger.debug("- %s (%d lines)", path, count)
