"""Change entropy: Shannon entropy over changed-line counts per file."""

import math
from collections.abc import Mapping
from typing import Union

_LOG_2 = math.log(2)


class Entropy:
    """Change entropy calculations over a period's change summary."""

    @staticmethod
    def shannon(distribution: Mapping[str, Union[int, float]]) -> float:
        """
        Compute Shannon entropy H = -Σ p(x) log₂ p(x).

        Entries with a count of zero or less are skipped (binary files and
        pure renames produce them). An empty or all-zero distribution has
        entropy 0.0.

        Args:
            distribution: Dictionary with file path -> changed-line count

        Returns:
            Entropy in bits
        """
        total = sum(count for count in distribution.values() if count > 0)
        if total <= 0:
            return 0.0

        entropy = 0.0
        for count in distribution.values():
            if count <= 0:
                continue
            p = count / total
            entropy -= p * math.log(p) / _LOG_2

        return entropy

    @staticmethod
    def normalized(distribution: Mapping[str, Union[int, float]], n: int) -> float:
        """
        Entropy taken to log base n instead of base 2.

        H_norm = -Σ p(x) log_n p(x) = H / log₂(n), with n the size of the
        system the changes happened in (lines of code at the end of the
        period), so periods of systems of different size compare.

        Returns:
            Normalized entropy, 0.0 when n <= 1
        """
        if n <= 1:
            return 0.0
        return Entropy.shannon(distribution) / (math.log(n) / _LOG_2)

    @staticmethod
    def file_share(
        distribution: Mapping[str, Union[int, float]],
        path: str,
        total_entropy: Union[float, None] = None,
    ) -> float:
        """
        Apportion a period's entropy to one file by its share of the churn.

        H_file = H · c_file / T

        This is not an independent entropy measure: summed over every file
        with a positive count it gives back H.

        Args:
            distribution: Dictionary with file path -> changed-line count
            path: File whose contribution is wanted
            total_entropy: Precomputed period entropy (computed if omitted)

        Returns:
            The file's contribution, 0.0 if it is absent or nothing changed
        """
        count = distribution.get(path)
        if count is None or count <= 0:
            return 0.0

        total = sum(c for c in distribution.values() if c > 0)
        if total <= 0:
            return 0.0

        if total_entropy is None:
            total_entropy = Entropy.shannon(distribution)

        return total_entropy * (count / total)
