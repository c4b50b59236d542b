"""Per-file entropy series and the reports derived from them."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..math.entropy import Entropy


class ValueKind(str, Enum):
    ENTROPY = "entropy"
    REFACTORED = "refactored"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class SeriesValue:
    """One period of a file's series: an entropy value or a marker."""

    kind: ValueKind
    value: float = 0.0

    @staticmethod
    def entropy(value: float) -> "SeriesValue":
        return SeriesValue(ValueKind.ENTROPY, value)

    @property
    def is_entropy(self) -> bool:
        return self.kind is ValueKind.ENTROPY

    @property
    def is_refactored(self) -> bool:
        return self.kind is ValueKind.REFACTORED

    @property
    def is_unchanged(self) -> bool:
        return self.kind is ValueKind.UNCHANGED


REFACTORED = SeriesValue(ValueKind.REFACTORED)
UNCHANGED = SeriesValue(ValueKind.UNCHANGED)

FileSeries = list[SeriesValue]


def build_file_series(
    change_summaries: Sequence[Mapping[str, int]],
    refactoring_summaries: Optional[Sequence[Mapping[str, Mapping[str, int]]]] = None,
    period_entropies: Optional[Sequence[float]] = None,
) -> dict[str, FileSeries]:
    """Build one series per file seen in any period, in path order.

    For each period: a file absent from the change summary is UNCHANGED;
    a changed file present in the refactoring summary is REFACTORED;
    otherwise its share of the period's entropy is recorded. Without
    refactoring summaries nothing is marked REFACTORED.

    Args:
        change_summaries: Per-period path -> changed-line counts
        refactoring_summaries: Per-period path -> {type: count}
        period_entropies: Per-period entropy to apportion (Shannon entropy
            of each change summary when omitted)
    """
    if period_entropies is None:
        period_entropies = [Entropy.shannon(s) for s in change_summaries]

    paths = sorted({path for summary in change_summaries for path in summary})
    series: dict[str, FileSeries] = {path: [] for path in paths}

    for i, changes in enumerate(change_summaries):
        refactored = refactoring_summaries[i] if refactoring_summaries is not None else {}
        for path in paths:
            if path not in changes:
                series[path].append(UNCHANGED)
            elif path in refactored:
                series[path].append(REFACTORED)
            else:
                share = Entropy.file_share(changes, path, total_entropy=period_entropies[i])
                series[path].append(SeriesValue.entropy(share))

    return series


def percentage_change(before: float, after: float) -> Optional[float]:
    """100·(after − before)/before, or None when before is zero."""
    if before == 0.0:
        return None
    return 100.0 * (after - before) / before


def percentage_changes(series: Sequence[SeriesValue]) -> list[float]:
    """Percentage change between consecutive changed, non-refactored periods.

    UNCHANGED periods are skipped so that pairs of change periods are
    compared; a REFACTORED period breaks the chain so no change spans it.
    A zero previous value is a gap: nothing is emitted for that pair.
    """
    changes: list[float] = []
    previous: Optional[float] = None
    for item in series:
        if item.is_unchanged:
            continue
        if item.is_refactored:
            previous = None
            continue
        if previous is not None:
            change = percentage_change(previous, item.value)
            if change is not None:
                changes.append(change)
        previous = item.value
    return changes


class _BlockState(Enum):
    SCANNING = "scanning"
    IN_BLOCK = "in_block"


def block_averages(series: Sequence[SeriesValue]) -> list[float]:
    """Mean entropy of each run of changed periods between refactorings."""
    means: list[float] = []
    state = _BlockState.SCANNING
    total = 0.0
    count = 0

    for item in series:
        if item.is_unchanged:
            continue
        if item.is_refactored:
            if state is _BlockState.IN_BLOCK:
                means.append(total / count)
                total, count = 0.0, 0
                state = _BlockState.SCANNING
            continue
        total += item.value
        count += 1
        state = _BlockState.IN_BLOCK

    if state is _BlockState.IN_BLOCK:
        means.append(total / count)
    return means


def block_average_changes(series: Sequence[SeriesValue]) -> list[float]:
    """Percentage change between consecutive before/after-refactoring means."""
    means = block_averages(series)
    changes = []
    for before, after in zip(means, means[1:]):
        change = percentage_change(before, after)
        if change is not None:
            changes.append(change)
    return changes
