"""Repository mining: commit history, per-period changes and refactorings."""

from .changes import ChangeAggregator, FileFilter
from .git_repository import GitRepository
from .history import extract_commit_sequence, segment_into_periods
from .models import Commit, Edit, EditType, FileDiff, Period, Refactoring
from .refactorings import (
    RefactoringAggregator,
    RefactoringDetector,
    RefactoringMinerDetector,
    parse_refminer_json,
)

__all__ = [
    "ChangeAggregator",
    "Commit",
    "Edit",
    "EditType",
    "FileDiff",
    "FileFilter",
    "GitRepository",
    "Period",
    "Refactoring",
    "RefactoringAggregator",
    "RefactoringDetector",
    "RefactoringMinerDetector",
    "extract_commit_sequence",
    "parse_refminer_json",
    "segment_into_periods",
]
