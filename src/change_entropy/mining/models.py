"""Data models for mining git history and refactorings."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

# Path git reports for the missing side of an added or deleted file
NULL_PATH = "/dev/null"


@dataclass(frozen=True)
class Commit:
    hash: str
    timestamp: int  # unix seconds, committer time
    parent_count: int

    @property
    def is_merge(self) -> bool:
        return self.parent_count >= 2


@dataclass(frozen=True)
class Period:
    """A contiguous, inclusive slice of the commit sequence."""

    index: int
    commits: tuple[Commit, ...]

    @property
    def start(self) -> Commit:
        return self.commits[0]

    @property
    def end(self) -> Commit:
        return self.commits[-1]

    def __len__(self) -> int:
        return len(self.commits)


class EditType(str, Enum):
    INSERT = "insert"
    DELETE = "delete"
    REPLACE = "replace"


@dataclass(frozen=True)
class Edit:
    """One changed region of a file, as described by a zero-context hunk."""

    old_length: int
    new_length: int

    @property
    def type(self) -> EditType:
        if self.old_length == 0:
            return EditType.INSERT
        if self.new_length == 0:
            return EditType.DELETE
        return EditType.REPLACE

    @property
    def changed_lines(self) -> int:
        # REPLACE counts both sides of the region
        if self.type is EditType.INSERT:
            return self.new_length
        if self.type is EditType.DELETE:
            return self.old_length
        return self.old_length + self.new_length


@dataclass
class FileDiff:
    old_path: str
    new_path: str
    edits: list[Edit] = field(default_factory=list)
    binary: bool = False

    @property
    def is_addition(self) -> bool:
        return self.old_path == NULL_PATH

    @property
    def is_deletion(self) -> bool:
        return self.new_path == NULL_PATH

    @property
    def is_rename(self) -> bool:
        return (
            not self.is_addition
            and not self.is_deletion
            and self.old_path != self.new_path
        )

    @property
    def key_path(self) -> str:
        """Path the change is recorded under within a single commit."""
        return self.new_path if self.is_addition else self.old_path

    @property
    def paths(self) -> list[str]:
        """The real (non-null) paths on either side of the diff."""
        return [p for p in (self.old_path, self.new_path) if p != NULL_PATH]

    @property
    def changed_lines(self) -> int:
        return sum(edit.changed_lines for edit in self.edits)


@dataclass(frozen=True)
class Refactoring:
    """A refactoring reported by the detector."""

    type: str
    before_paths: frozenset[str]
    commit: str = ""
    description: str = ""
