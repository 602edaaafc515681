"""Tally: aggregation of copy-trading strategy result files."""

__version__ = "0.1.0"
