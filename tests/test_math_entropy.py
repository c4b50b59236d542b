"""Tests for change_entropy.math.entropy module."""

import math

import pytest

from change_entropy.math.entropy import Entropy


class TestShannonEntropy:
    """Tests for period entropy over a change summary."""

    def test_eight_files_one_line_each(self):
        """Eight equally changed files carry log2(8) = 3 bits."""
        summary = {name: 1 for name in "ABCDEFGH"}
        assert Entropy.shannon(summary) == pytest.approx(3.0)

    def test_only_zero_count_file(self):
        """A file with no changed lines contributes nothing."""
        assert Entropy.shannon({"A": 0}) == 0.0

    def test_mixed_distribution(self):
        """Known mixed distribution with zero-count files."""
        summary = {"A": 18, "B": 12, "C": 7, "D": 1, "E": 1, "F": 1, "G": 0, "H": 0}
        assert round(Entropy.shannon(summary), 4) == 1.8787

    def test_empty_summary(self):
        """Empty change summary has zero entropy."""
        assert Entropy.shannon({}) == 0.0

    def test_single_changed_file(self):
        """All changes in one file: no scattering."""
        assert Entropy.shannon({"A": 250, "B": 0}) == 0.0

    @pytest.mark.parametrize("n", [2, 3, 5, 16, 100])
    def test_even_distribution_equals_log2_n(self, n):
        """Equal counts over N files give log2(N)."""
        summary = {f"f{i}.py": 7 for i in range(n)}
        assert Entropy.shannon(summary) == pytest.approx(math.log2(n))

    def test_bounded_by_log2_n(self):
        """Entropy is non-negative and never exceeds log2(N)."""
        summaries = [
            {"a": 1},
            {"a": 99, "b": 1},
            {"x": 10, "y": 20, "z": 30},
            {"p": 3, "q": 3, "r": 4, "s": 0},
        ]
        for summary in summaries:
            h = Entropy.shannon(summary)
            assert 0.0 <= h <= math.log2(len(summary)) + 1e-12

    def test_zero_count_files_do_not_change_result(self):
        """Adding zero-count files leaves entropy unchanged."""
        base = {"a": 5, "b": 15}
        assert Entropy.shannon({**base, "c": 0, "d": 0}) == Entropy.shannon(base)


class TestFileShare:
    """Tests for per-file entropy within a period."""

    def test_shares_sum_to_period_entropy(self):
        """Per-file contributions add up to the period's entropy."""
        summary = {"A": 18, "B": 12, "C": 7, "D": 1, "E": 1, "F": 1, "G": 0}
        total = Entropy.shannon(summary)
        shares = [Entropy.file_share(summary, path) for path in summary]
        assert sum(shares) == pytest.approx(total)

    def test_share_proportional_to_churn(self):
        """A file with three times the changes gets three times the share."""
        summary = {"a": 30, "b": 10}
        assert Entropy.file_share(summary, "a") == pytest.approx(
            3 * Entropy.file_share(summary, "b")
        )

    def test_absent_file(self):
        """A file outside the summary has no share."""
        assert Entropy.file_share({"a": 3, "b": 4}, "c") == 0.0

    def test_zero_count_file(self):
        """A zero-count file has no share."""
        assert Entropy.file_share({"a": 3, "b": 0}, "b") == 0.0

    def test_all_zero_summary(self):
        """No changed lines at all gives 0.0, not a division error."""
        assert Entropy.file_share({"a": 0, "b": 0}, "a") == 0.0

    def test_precomputed_total(self):
        """A supplied period entropy is apportioned instead of recomputed."""
        summary = {"a": 1, "b": 3}
        assert Entropy.file_share(summary, "b", total_entropy=2.0) == pytest.approx(1.5)


class TestNormalizedEntropy:
    """Tests for entropy normalised by the number of files in the system."""

    def test_even_over_all_files_is_one(self):
        """Changing every file equally gives normalised entropy 1.0."""
        summary = {f"f{i}": 2 for i in range(8)}
        assert Entropy.normalized(summary, 8) == pytest.approx(1.0)

    def test_scaled_by_system_size(self):
        """Four of sixteen files changed evenly: 2 bits / 4 bits."""
        summary = {f"f{i}": 1 for i in range(4)}
        assert Entropy.normalized(summary, 16) == pytest.approx(0.5)

    @pytest.mark.parametrize("n", [0, 1])
    def test_trivial_system(self, n):
        """Systems of zero or one file have no entropy to normalise."""
        assert Entropy.normalized({"a": 4}, n) == 0.0
