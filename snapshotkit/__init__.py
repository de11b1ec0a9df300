"""Snapshot-testing toolbox: redactions, pattern normalization, diffs and directory fixtures."""

__version__ = "0.1.0"

__all__ = [
    "filters",
    "fixture",
    "fsops",
    "palette",
    "pathdiff",
    "pattern",
    "redactions",
    "report",
    "root",
]