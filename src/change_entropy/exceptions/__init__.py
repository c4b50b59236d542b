"""Exception hierarchy for change-entropy."""

from .base import ChangeEntropyError
from .config import (
    ConfigurationError,
    FilterConfigError,
    InvalidConfigError,
    InvalidPathError,
)
from .mining import MiningError, RefactoringDetectionError, VersionControlError

__all__ = [
    "ChangeEntropyError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "FilterConfigError",
    "MiningError",
    "VersionControlError",
    "RefactoringDetectionError",
]
