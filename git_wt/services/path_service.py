"""Worktree path resolution for git-wt."""

import os
from typing import List, Optional, Tuple

from git_wt.config import Config
from git_wt.constants import GITROOT_PLACEHOLDER, LEGACY_BASEDIR_PATTERN
from git_wt.exceptions import LegacyLayoutError, UsageError
from git_wt.logging_config import get_logger
from git_wt.models.action import ArgumentKind
from git_wt.models.worktree import WorktreeEntry
from git_wt.services.git.branches import BranchService
from git_wt.services.git.worktrees import WorktreeService
from git_wt.utils.paths import canonical, is_within

logger = get_logger(__name__)


def is_explicit_path(arg: str) -> bool:
    """True for arguments that can only be meant as a filesystem path."""
    return (
        arg in (".", "..")
        or arg.startswith("./")
        or arg.startswith("../")
        or os.path.isabs(arg)
        or arg.startswith("~")
    )


def expand_template(template: str, main_root: str) -> str:
    """Expand a basedir template to an absolute path.

    ``{gitroot}`` becomes the main root's basename, a leading ``~`` the home
    directory; relative results are anchored at the main root.
    """
    expanded = template.replace(GITROOT_PLACEHOLDER, os.path.basename(main_root))
    expanded = os.path.expanduser(expanded)
    if not os.path.isabs(expanded):
        expanded = os.path.join(main_root, expanded)
    return os.path.normpath(expanded)


class PathResolver:
    """Maps user arguments to worktrees and worktree paths."""

    def __init__(
        self,
        config: Config,
        worktrees: WorktreeService,
        branches: BranchService,
        cwd: Optional[str] = None,
    ):
        self.config = config
        self.worktrees = worktrees
        self.branches = branches
        self.cwd = cwd or worktrees.runner.cwd
        self._entries: Optional[List[WorktreeEntry]] = None

    @property
    def main_root(self) -> str:
        return self.worktrees.main_root()

    def entries(self, refresh: bool = False) -> List[WorktreeEntry]:
        if self._entries is None or refresh:
            self._entries = self.worktrees.list_worktrees(cwd=self.cwd)
        return self._entries

    def current_entry(self) -> Optional[WorktreeEntry]:
        for entry in self.entries():
            if entry.current:
                return entry
        return None

    def expand_basedir(self) -> str:
        return expand_template(self.config.basedir, self.main_root)

    def worktree_path_for(self, name: str) -> str:
        """Path a new worktree named ``name`` is created at."""
        return os.path.join(self.expand_basedir(), name)

    def in_basedir(self, entry: WorktreeEntry) -> bool:
        basedir = canonical(self.expand_basedir())
        return entry.path != basedir and is_within(entry.path, basedir)

    def dir_name(self, entry: WorktreeEntry) -> str:
        """Name of a worktree relative to the basedir, or its basename when outside it."""
        if self.in_basedir(entry):
            basedir = canonical(self.expand_basedir())
            return os.path.relpath(entry.path, basedir).replace(os.sep, "/")
        return os.path.basename(entry.path)

    def find_by_name(self, name: str) -> Optional[WorktreeEntry]:
        """Look a worktree up by branch, basedir-relative name or directory basename."""
        candidates = [e for e in self.entries() if not e.bare]
        for entry in candidates:
            if entry.branch and entry.branch == name:
                return entry
        for entry in candidates:
            if self.dir_name(entry) == name:
                return entry
        for entry in candidates:
            if os.path.basename(entry.path) == name:
                return entry
        return None

    def find_by_path(self, arg: str) -> Optional[WorktreeEntry]:
        """Deepest worktree (bare root included) containing the given path."""
        target = canonical(os.path.join(self.cwd, arg))
        best: Optional[WorktreeEntry] = None
        for entry in self.entries():
            if is_within(target, entry.path):
                if best is None or len(entry.path) > len(best.path):
                    best = entry
        return best

    def classify(self, arg: str) -> Tuple[ArgumentKind, Optional[WorktreeEntry]]:
        """Decide whether ``arg`` is a name or a path and find its worktree.

        Names of existing worktrees always win over like-named directories.

        Raises:
            UsageError: an explicit path that is not inside any worktree
        """
        if arg == ".":
            current = self.current_entry()
            if current is None:
                raise UsageError(f"'{arg}' is not inside a worktree")
            return ArgumentKind.PATH_HINT, current

        entry = self.find_by_name(arg)
        if entry is not None:
            return ArgumentKind.NAME, entry

        if is_explicit_path(arg):
            entry = self.find_by_path(os.path.expanduser(arg))
            if entry is None:
                raise UsageError(f"'{arg}' is not inside a worktree")
            return ArgumentKind.PATH_HINT, entry

        if os.sep in arg or "/" in arg:
            if not self.branches.is_branch_ref(arg) and os.path.isdir(os.path.join(self.cwd, arg)):
                entry = self.find_by_path(arg)
                if entry is not None:
                    return ArgumentKind.PATH_HINT, entry

        return ArgumentKind.NAME, None

    def check_legacy_layout(self) -> None:
        """Refuse to create worktrees while an old sibling directory exists.

        Raises:
            LegacyLayoutError: basedir is not configured and ../{gitroot}-wt exists
        """
        if self.config.basedir_configured:
            return
        legacy_path = expand_template(LEGACY_BASEDIR_PATTERN, self.main_root)
        if os.path.isdir(legacy_path):
            raise LegacyLayoutError(legacy_path, LEGACY_BASEDIR_PATTERN)

    def with_relative(self, path: str) -> str:
        """Append the invocation's subdirectory when relative mode is on.

        The subdirectory is taken relative to the worktree the command runs
        in; it is only appended if it exists in the target.
        """
        if not self.config.relative:
            return path
        if self.worktrees.is_bare_root():
            return path
        prefix = self.worktrees.show_prefix()
        if not prefix:
            return path
        candidate = os.path.join(path, prefix)
        if os.path.isdir(candidate):
            return candidate
        logger.debug(f"{candidate} does not exist, using {path}")
        return path

    def copy_exclusions(self, source_root: str) -> List[str]:
        """Relative paths under ``source_root`` that must never be copied."""
        basedir = canonical(self.expand_basedir())
        source_root = canonical(source_root)
        if is_within(source_root, basedir):
            return []
        if is_within(basedir, source_root):
            return [os.path.relpath(basedir, source_root).replace(os.sep, "/")]
        return []
