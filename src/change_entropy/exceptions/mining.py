"""Collaborator failures: git and RefactoringMiner."""

from typing import List, Optional

from .base import ChangeEntropyError


def _stripped(stderr: Optional[str]) -> Optional[str]:
    return stderr.strip() or None if stderr else None


class MiningError(ChangeEntropyError):
    """Base class for failures of the version-control or detection collaborators.

    These are never retried: the run is aborted and no results are written.
    """

    pass


class VersionControlError(MiningError):
    """Raised when a git command fails or its output cannot be parsed."""

    def __init__(self, command: List[str], reason: str, stderr: Optional[str] = None):
        super().__init__(
            f"git command failed: {reason}",
            details={"command": " ".join(command), "reason": reason, "stderr": _stripped(stderr)},
        )
        self.command = command
        self.reason = reason
        self.stderr = stderr


class RefactoringDetectionError(MiningError):
    """Raised when RefactoringMiner fails, is missing, or returns unreadable output."""

    def __init__(
        self,
        reason: str,
        commit: Optional[str] = None,
        period: Optional[int] = None,
        stderr: Optional[str] = None,
    ):
        super().__init__(
            f"Refactoring detection failed: {reason}",
            details={
                "reason": reason,
                "commit": commit,
                "period": period,
                "stderr": _stripped(stderr),
            },
        )
        self.reason = reason
        self.commit = commit
        self.period = period
        self.stderr = stderr
