"""Worktree data models."""

from dataclasses import dataclass, field
from typing import List

from git_wt.constants import LABEL_BARE, LABEL_DETACHED, SHORT_SHA_LENGTH


@dataclass
class WorktreeEntry:
    """A working tree registered with the repository."""

    path: str
    head: str = ""
    branch: str = ""  # Empty when detached or bare
    bare: bool = False
    current: bool = False

    @property
    def detached(self) -> bool:
        return not self.bare and not self.branch

    @property
    def short_head(self) -> str:
        return self.head[:SHORT_SHA_LENGTH]

    @property
    def branch_label(self) -> str:
        """Branch name as shown to humans."""
        if self.bare:
            return LABEL_BARE
        return self.branch or LABEL_DETACHED

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "branch": self.branch,
            "head": self.head,
            "bare": self.bare,
            "current": self.current,
        }

    def __str__(self) -> str:
        marker = " (current)" if self.current else ""
        return f"{self.branch_label} @ {self.path}{marker}"


@dataclass
class WorktreeStatus:
    """Local changes in a worktree, from `git status --porcelain`."""

    untracked: List[str] = field(default_factory=list)
    modified: List[str] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.untracked and not self.modified
