#!/usr/bin/env python3
"""
Example: Basic usage of change-entropy as a Python library
"""

from change_entropy import AnalysisDriver, Entropy, load_config

# Period entropy over blocks of 50 commits
config = load_config(repository_path="/path/to/project", period_length=50, mode=1)
driver = AnalysisDriver(config)

for index, entropy in driver.analyse():
    print(f"period {index}: {entropy}")

# The same measure over a hand-made change summary
summary = {"src/A.java": 18, "src/B.java": 12, "src/C.java": 7, "README.md": 1}
print(f"entropy of summary: {Entropy.shannon(summary):.4f} bits")
