"""Aggregation module for strategy and trader statistics.

- strategies: per-strategy running performance
- traders: per-trader best ROI and occurrence count
- state: the accumulators of one run
- summary: rankings, corpus statistics, artifact payload
"""
