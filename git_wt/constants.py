"""Shared constants for git-wt."""

from dataclasses import dataclass
from typing import List


CONFIG_NAMESPACE = "wt"

# Config keys (stored as wt.<key>)
KEY_BASEDIR = "basedir"
KEY_COPYIGNORED = "copyignored"
KEY_COPYUNTRACKED = "copyuntracked"
KEY_COPYMODIFIED = "copymodified"
KEY_COPY = "copy"
KEY_NOCOPY = "nocopy"
KEY_HOOK = "hook"
KEY_DELETEHOOK = "deletehook"
KEY_NOCD = "nocd"
KEY_RELATIVE = "relative"

BOOL_KEYS = (KEY_COPYIGNORED, KEY_COPYUNTRACKED, KEY_COPYMODIFIED, KEY_RELATIVE)
LIST_KEYS = (KEY_COPY, KEY_NOCOPY, KEY_HOOK, KEY_DELETEHOOK)

DEFAULT_BASEDIR = ".wt"
LEGACY_BASEDIR_PATTERN = "../{gitroot}-wt"
GITROOT_PLACEHOLDER = "{gitroot}"

# Shell integration
SHELL_INTEGRATION_ENV = "GIT_WT_SHELL_INTEGRATION"
NOCD_MARKER = "#nocd "
SUPPORTED_SHELLS = ("bash", "zsh", "fish", "powershell")

# Remote used for remote-tracking branch lookups
DEFAULT_REMOTE = "origin"
FALLBACK_DEFAULT_BRANCHES = ("main", "master")

# Display labels
LABEL_BARE = "(bare)"
LABEL_DETACHED = "(detached)"
SYMBOL_CURRENT_WORKTREE = "*"
SHORT_SHA_LENGTH = 7

# Completion
COMPLETION_SUBJECT_LENGTH = 40
COMPLETE_COMMAND = "__complete"

# Exit codes
EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_CANCELLED = 130


@dataclass
class ColumnDefinition:
    """Definition of a table column."""

    key: str
    label: str
    width: int = 0  # 0 means auto-width


COLUMNS: List[ColumnDefinition] = [
    ColumnDefinition("current", "", 1),
    ColumnDefinition("path", "PATH"),
    ColumnDefinition("branch", "BRANCH"),
    ColumnDefinition("head", "HEAD", SHORT_SHA_LENGTH),
]


BASEDIR_GITIGNORE = "*\n"

BASEDIR_README = """\
# git-wt worktrees

This directory is managed by git-wt. Every subdirectory is a git worktree
created with `git wt <branch>`.

Remove a worktree with `git wt -d <branch>` rather than deleting the
directory by hand, so that git forgets about it too.
"""
