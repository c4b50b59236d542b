"""Configuration loading and validation for change-entropy.

Configuration sources are merged in priority order (lowest to highest):
    1. Defaults (defined in AnalysisConfig; repository_path, period_length
       and mode have none and must come from a later source)
    2. Filter file (YAML, the three filter lists)
    3. Environment variables (CHANGE_ENTROPY_* prefix, scalar fields only)
    4. CLI overrides (passed as kwargs)

Example filter file:

    file_types_to_include:
      - java
    file_path_patterns_to_exclude:
      - ^src/test/
    refactoring_types_to_include:
      - Extract Method
      - Rename Class
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Any, Optional, get_type_hints

import yaml

from .exceptions import (
    FilterConfigError,
    InvalidConfigError,
    InvalidPathError,
)

FILTER_GROUPS = (
    "file_types_to_include",
    "file_path_patterns_to_exclude",
    "refactoring_types_to_include",
)

ENV_PREFIX = "CHANGE_ENTROPY_"


class ReportMode(IntEnum):
    """What the results file contains."""

    PERIOD_ENTROPY = 1
    FILE_ENTROPY = 2
    FILE_ENTROPY_MARK_REFACTORED = 3
    FILE_ENTROPY_CHANGED_ONLY = 4
    FILE_ENTROPY_CHANGED_MARK_REFACTORED = 5
    PERCENTAGE_CHANGE = 6
    REFACTORING_BLOCK_CHANGE = 7

    @property
    def marks_refactored(self) -> bool:
        return self in (
            ReportMode.FILE_ENTROPY_MARK_REFACTORED,
            ReportMode.FILE_ENTROPY_CHANGED_MARK_REFACTORED,
            ReportMode.PERCENTAGE_CHANGE,
            ReportMode.REFACTORING_BLOCK_CHANGE,
        )

    @property
    def marks_unchanged(self) -> bool:
        return self >= ReportMode.FILE_ENTROPY_CHANGED_ONLY

    @property
    def needs_refactorings(self) -> bool:
        return self.marks_refactored


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for one analysis run.

    Attributes:
        repository_path: Root directory of the git repository
        period_length: Number of non-merge commits per period
        mode: Report to produce (see ReportMode)
        file_types_to_include: Extensions of the only files considered (empty = all)
        file_path_patterns_to_exclude: Regular expressions of paths to ignore
        refactoring_types_to_include: RefactoringMiner type names to consider
        results_path: CSV file the results are written to
        normalise: Divide period entropy by log2 of the lines of code in the system
        refminer_path: RefactoringMiner jar or launcher (auto-detected if None)
        refminer_timeout: Seconds allowed per RefactoringMiner call (None = no limit)
    """

    repository_path: str
    period_length: int
    mode: ReportMode

    file_types_to_include: list[str] = field(default_factory=list)
    file_path_patterns_to_exclude: list[str] = field(default_factory=list)
    refactoring_types_to_include: list[str] = field(default_factory=list)

    results_path: str = "results.csv"
    normalise: bool = False

    refminer_path: Optional[str] = None
    refminer_timeout: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not Path(self.repository_path).is_dir():
            raise InvalidPathError(
                Path(self.repository_path), "not a path to an existing directory"
            )

        if isinstance(self.period_length, bool) or not isinstance(self.period_length, int):
            raise InvalidConfigError(
                "period_length", self.period_length, "must be a positive integer"
            )
        if self.period_length < 1:
            raise InvalidConfigError(
                "period_length", self.period_length, "must be a positive integer"
            )

        try:
            object.__setattr__(self, "mode", ReportMode(self.mode))
        except ValueError:
            raise InvalidConfigError("mode", self.mode, "must be an integer between 1 and 7")

        for pattern in self.file_path_patterns_to_exclude:
            try:
                re.compile(pattern)
            except re.error as e:
                raise InvalidConfigError("file_path_patterns_to_exclude", pattern, str(e))

        if self.refminer_timeout is not None and self.refminer_timeout < 1:
            raise InvalidConfigError(
                "refminer_timeout", self.refminer_timeout, "must be at least 1 second"
            )


def load_filters(path: Optional[Path]) -> dict[str, list[str]]:
    """Load the three filter groups from a YAML file.

    Missing groups (or a missing/empty file when path is None) are empty
    lists.

    Raises:
        FilterConfigError: If the file cannot be read or is not a mapping
            of group name -> list of strings
    """
    filters: dict[str, list[str]] = {group: [] for group in FILTER_GROUPS}
    if path is None:
        return filters

    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except FileNotFoundError:
        raise FilterConfigError(path, "file not found")
    except OSError as e:
        raise FilterConfigError(path, f"cannot be read: {e}")
    except yaml.YAMLError as e:
        raise FilterConfigError(path, f"invalid YAML: {e}")

    raw = raw or {}
    if not isinstance(raw, dict):
        raise FilterConfigError(path, "top level must be a mapping of filter groups")

    for group in FILTER_GROUPS:
        values = raw.get(group)
        if values is None:
            continue
        if not isinstance(values, list):
            raise FilterConfigError(path, f"'{group}' must be a list")
        filters[group] = [str(v) for v in values]

    return filters


def load_config(filters_file: Optional[Path] = None, **overrides: Any) -> AnalysisConfig:
    """Load configuration from the filter file, environment and CLI overrides.

    Args:
        filters_file: Optional YAML filter file
        **overrides: Direct overrides (typically from CLI flags); None values
            are ignored so unset CLI options do not mask the environment

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If any source is invalid
    """
    merged: dict[str, Any] = {}
    merged.update(load_filters(filters_file))
    merged.update(_load_env_vars())
    merged.update({k: v for k, v in overrides.items() if v is not None})

    for required in ("repository_path", "period_length", "mode"):
        if required not in merged:
            raise InvalidConfigError(required, None, "is required")

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        raise InvalidConfigError("config", merged, str(e))


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from CHANGE_ENTROPY_* environment variables.

    Supported environment variables:
        CHANGE_ENTROPY_REPOSITORY_PATH: str
        CHANGE_ENTROPY_PERIOD_LENGTH: int
        CHANGE_ENTROPY_MODE: int
        CHANGE_ENTROPY_RESULTS_PATH: str
        CHANGE_ENTROPY_NORMALISE: bool (true/false/1/0)
        CHANGE_ENTROPY_REFMINER_PATH: str
        CHANGE_ENTROPY_REFMINER_TIMEOUT: int

    Returns:
        Dict of field_name -> parsed_value for any variables found.
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}
    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type.

    Returns None for types that cannot come from the environment (lists).

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is list or type_hint is list:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int or type_hint is ReportMode:
        return int(value)

    if type_hint is str:
        return value

    return None
