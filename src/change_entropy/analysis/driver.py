"""Orchestrates one analysis run: history -> periods -> entropy -> results."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..config import AnalysisConfig, ReportMode
from ..formatters import CsvResultWriter
from ..logging_config import get_logger
from ..math.entropy import Entropy
from ..mining import (
    ChangeAggregator,
    FileFilter,
    GitRepository,
    Period,
    RefactoringAggregator,
    RefactoringDetector,
    RefactoringMinerDetector,
    extract_commit_sequence,
    segment_into_periods,
)
from .series import (
    FileSeries,
    SeriesValue,
    block_average_changes,
    build_file_series,
    percentage_changes,
)

logger = get_logger(__name__)

REFACTORED_MARKER = "R"


def format_value(value: float) -> str:
    return f"{value:.4f}"


class AnalysisDriver:
    """Run the analysis configured by an AnalysisConfig and write its results.

    The repository, detector and writer can be injected; by default they are
    built from the config. The detector is only built for modes that mark
    refactorings, so RefactoringMiner is not needed otherwise.
    """

    def __init__(
        self,
        config: AnalysisConfig,
        repository: Optional[GitRepository] = None,
        detector: Optional[RefactoringDetector] = None,
        writer: Optional[CsvResultWriter] = None,
    ):
        self.config = config
        self.mode = config.mode
        self.repository = repository or GitRepository(config.repository_path)
        self.writer = writer or CsvResultWriter(config.results_path)

        file_filter = FileFilter(
            config.file_types_to_include, config.file_path_patterns_to_exclude
        )
        self.change_aggregator = ChangeAggregator(self.repository, file_filter)

        self.refactoring_aggregator: Optional[RefactoringAggregator] = None
        if self.mode.needs_refactorings:
            if detector is None:
                detector = RefactoringMinerDetector(
                    config.repository_path,
                    refminer_path=config.refminer_path,
                    timeout=config.refminer_timeout,
                )
            self.refactoring_aggregator = RefactoringAggregator(
                detector, config.refactoring_types_to_include
            )

    def run(self) -> Path:
        """Analyse the repository and write the results file."""
        rows = self.analyse()
        return self.writer.write(rows)

    def analyse(self) -> list[list[str]]:
        """Analyse the repository and return the result rows for the mode."""
        commits = extract_commit_sequence(self.repository)
        periods = segment_into_periods(commits, self.config.period_length)
        logger.info(
            "Analysing %d periods of %d commits (mode %d: %s)",
            len(periods),
            self.config.period_length,
            self.mode.value,
            self.mode.name.lower(),
        )

        changes = [self.change_aggregator.summarise_with_renames(p) for p in periods]
        change_summaries = [summary for summary, _ in changes]
        entropies = [
            self._period_entropy(period, summary)
            for period, summary in zip(periods, change_summaries)
        ]

        if self.mode is ReportMode.PERIOD_ENTROPY:
            return [[str(i), format_value(e)] for i, e in enumerate(entropies)]

        refactoring_summaries = None
        if self.refactoring_aggregator is not None:
            refactoring_summaries = [
                self.refactoring_aggregator.summarise(
                    period, changed_files=summary, renames=renames
                )
                for period, (summary, renames) in zip(periods, changes)
            ]

        series = build_file_series(change_summaries, refactoring_summaries, entropies)
        return [self._series_row(path, values) for path, values in series.items()]

    def _period_entropy(self, period: Period, summary: dict[str, int]) -> float:
        if self.config.normalise:
            entropy = Entropy.normalized(summary, self.change_aggregator.count_lines(period))
        else:
            entropy = Entropy.shannon(summary)
        logger.info("Period %d: entropy = %.4f (%d files changed)", period.index, entropy, len(summary))
        return entropy

    def _series_row(self, path: str, values: FileSeries) -> list[str]:
        if self.mode is ReportMode.PERCENTAGE_CHANGE:
            return [path, *(format_value(c) for c in percentage_changes(values))]
        if self.mode is ReportMode.REFACTORING_BLOCK_CHANGE:
            return [path, *(format_value(c) for c in block_average_changes(values))]

        row = [path]
        for value in values:
            cell = self._series_cell(value)
            if cell is not None:
                row.append(cell)
        return row

    def _series_cell(self, value: SeriesValue) -> Optional[str]:
        """Render one period; None means the period is omitted from the row."""
        if value.is_refactored:
            return REFACTORED_MARKER
        if value.is_unchanged:
            return None if self.mode.marks_unchanged else ""
        return format_value(value.value)
