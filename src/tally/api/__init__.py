"""API module for Tally.

Read-only API layer:
- Runs aggregations and serves the persisted artifact
- Serves simulation comparison views
"""
