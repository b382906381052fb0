"""Data models for git-wt."""

from .action import (
    Action,
    ArgumentKind,
    CompleteAction,
    CreateOrSwitchAction,
    DeleteAction,
    InitShellAction,
    ListAction,
)
from .worktree import WorktreeEntry, WorktreeStatus

__all__ = [
    "Action",
    "ArgumentKind",
    "CompleteAction",
    "CreateOrSwitchAction",
    "DeleteAction",
    "InitShellAction",
    "ListAction",
    "WorktreeEntry",
    "WorktreeStatus",
]
