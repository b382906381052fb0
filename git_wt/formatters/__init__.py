"""Formatting utilities for git-wt.

This package provides shared formatting functions used by the list
output and the completion candidates.
"""

from .worktree import (
    format_current_marker,
    format_head,
    format_branch,
)
from .text import truncate, format_completion

__all__ = [
    # Worktree rows
    "format_current_marker",
    "format_head",
    "format_branch",
    # Text
    "truncate",
    "format_completion",
]
