"""Output writers."""

from .csv_formatter import CsvResultWriter

__all__ = ["CsvResultWriter"]
