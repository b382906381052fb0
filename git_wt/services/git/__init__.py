"""Git-related services for git-wt."""

from .runner import GitResult, GitRunner
from .worktrees import WorktreeService
from .branches import BranchService

__all__ = [
    "GitResult",
    "GitRunner",
    "WorktreeService",
    "BranchService",
]
