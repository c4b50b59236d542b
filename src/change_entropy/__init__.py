"""
change-entropy - change entropy and refactoring analysis of git history

Splits the non-merge history of a repository into fixed-length periods of
commits, measures how scattered each period's changes are across files
(Shannon entropy of changed-line counts), and relates the per-file entropy
series to structural refactorings detected by RefactoringMiner.
"""

__version__ = "0.1.0"

from .analysis import AnalysisDriver
from .config import AnalysisConfig, ReportMode, load_config
from .math.entropy import Entropy

__all__ = [
    "AnalysisConfig",
    "AnalysisDriver",
    "Entropy",
    "ReportMode",
    "load_config",
]
