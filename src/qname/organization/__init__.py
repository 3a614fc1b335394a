"""Renaming files from their tag selections."""

from .executor import RenameExecutor
from .models import RenameOperation
from .planner import RenamePlanner, read_filename, split_extension

__all__ = [
    "RenameExecutor",
    "RenameOperation",
    "RenamePlanner",
    "read_filename",
    "split_extension",
]
