"""Commit sequence extraction and segmentation into periods."""

from __future__ import annotations

from collections.abc import Sequence

from ..exceptions import InvalidConfigError
from ..logging_config import get_logger
from .git_repository import GitRepository
from .models import Commit, Period

logger = get_logger(__name__)


def extract_commit_sequence(repository: GitRepository) -> list[Commit]:
    """Return the non-merge commits reachable from HEAD, oldest first.

    Merge commits are dropped entirely: their changes are already
    attributed to their parents.

    Raises:
        VersionControlError: If HEAD cannot be resolved or history walked.
    """
    head = repository.resolve_head()
    commits = repository.list_commits(head)
    non_merge = [c for c in commits if not c.is_merge]
    non_merge.reverse()

    logger.info(
        "Found %d non-merge commits reachable from %s (%d merges skipped)",
        len(non_merge),
        head[:8],
        len(commits) - len(non_merge),
    )
    return non_merge


def segment_into_periods(commits: Sequence[Commit], period_length: int) -> list[Period]:
    """Tile a commit sequence with consecutive periods of period_length commits.

    The final period holds the remainder (1..period_length commits). An empty
    sequence yields no periods.

    Raises:
        InvalidConfigError: If period_length is less than 1.
    """
    if period_length < 1:
        raise InvalidConfigError("period_length", period_length, "must be a positive integer")

    periods = [
        Period(index=index, commits=tuple(commits[start : start + period_length]))
        for index, start in enumerate(range(0, len(commits), period_length))
    ]

    logger.debug(
        "Segmented %d commits into %d periods of up to %d commits",
        len(commits),
        len(periods),
        period_length,
    )
    return periods
