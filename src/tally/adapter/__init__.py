"""Adapter module for file system IO boundaries.

Business logic should use adapters rather than touching the file
system directly.

Structure:
- adapter/results_fs.py - result file listing/reading, artifact writing
"""

from tally.adapter.results_fs import (
    list_result_files,
    load_result_file,
    read_artifact,
    write_artifact,
)

__all__ = [
    "list_result_files",
    "load_result_file",
    "read_artifact",
    "write_artifact",
]
