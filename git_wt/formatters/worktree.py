"""Worktree row formatting utilities."""

from git_wt.constants import SYMBOL_CURRENT_WORKTREE
from git_wt.models.worktree import WorktreeEntry


def format_current_marker(is_current: bool) -> str:
    """
    Format the current-worktree marker column.

    Args:
        is_current: Whether the invocation runs inside this worktree

    Returns:
        "*" for the current worktree, empty string otherwise
    """
    return SYMBOL_CURRENT_WORKTREE if is_current else ""


def format_head(entry: WorktreeEntry) -> str:
    """Abbreviated commit hash; bare entries have none."""
    return "" if entry.bare else entry.short_head


def format_branch(entry: WorktreeEntry) -> str:
    """
    Format the branch column.

    Returns:
        The short branch name, "(bare)" for the bare entry or "(detached)"
    """
    return entry.branch_label
