"""Configuration exceptions: repository path, run parameters, filter file."""

from pathlib import Path
from typing import Any

from .base import ChangeEntropyError


class ConfigurationError(ChangeEntropyError):
    """Base class for configuration-related errors.

    Always raised before any repository or detector call is made.
    """

    pass


class InvalidPathError(ConfigurationError):
    """Raised when a provided path is invalid."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class FilterConfigError(ConfigurationError):
    """Raised when the YAML filter file cannot be read or has the wrong shape."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Invalid filter file: {path}", details={"path": str(path), "reason": reason}
        )
        self.path = path
        self.reason = reason
