"""Worktree operations service for git-wt."""

import os
from typing import Any, Dict, List, Optional

from git_wt.constants import BASEDIR_GITIGNORE, BASEDIR_README
from git_wt.exceptions import DirtyWorktreeError, VCSError
from git_wt.logging_config import get_logger
from git_wt.models.worktree import WorktreeEntry, WorktreeStatus
from git_wt.services.git.runner import GitRunner
from git_wt.utils.paths import canonical, is_within

logger = get_logger(__name__)

# git ls-files flags per file category
LS_FILES_ARGS = {
    "tracked": ["--cached"],
    "ignored": ["--others", "--ignored", "--exclude-standard"],
    "untracked": ["--others", "--exclude-standard"],
    "modified": ["--modified"],
}


def parse_worktree_list(output: str) -> List[WorktreeEntry]:
    """Parse `git worktree list --porcelain` output.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name   (or "detached", or "bare")
        (blank line between worktrees)
    """
    entries: List[WorktreeEntry] = []
    current: Dict[str, Any] = {}

    def flush():
        if current.get("path"):
            entries.append(
                WorktreeEntry(
                    path=canonical(current["path"]),
                    head=current.get("HEAD", ""),
                    branch=current.get("branch", ""),
                    bare=current.get("bare", False),
                )
            )

    for line in output.split("\n"):
        line = line.rstrip("\r")
        if not line:
            flush()
            current = {}
            continue

        if line.startswith("worktree "):
            current["path"] = line.split(" ", 1)[1]
        elif line.startswith("HEAD "):
            current["HEAD"] = line.split(" ", 1)[1]
        elif line.startswith("branch "):
            branch_ref = line.split(" ", 1)[1]
            if branch_ref.startswith("refs/heads/"):
                current["branch"] = branch_ref[len("refs/heads/"):]
            else:
                current["branch"] = branch_ref
        elif line == "bare":
            current["bare"] = True
        elif line == "detached":
            current["branch"] = ""

    flush()

    # The bare entry, if any, always comes first
    entries.sort(key=lambda e: not e.bare)
    return entries


def mark_current(entries: List[WorktreeEntry], cwd: str) -> None:
    """Flag the deepest entry containing ``cwd`` as current."""
    cwd = canonical(cwd)
    best: Optional[WorktreeEntry] = None
    for entry in entries:
        entry.current = False
        if is_within(cwd, entry.path):
            if best is None or len(entry.path) > len(best.path):
                best = entry
    if best is not None:
        best.current = True


def parse_status(output: str) -> WorktreeStatus:
    """Parse `git status --porcelain` into untracked and modified paths."""
    status = WorktreeStatus()
    for line in output.split("\n"):
        if len(line) < 4:
            continue
        path = line[3:]
        if line.startswith("??"):
            status.untracked.append(path)
        elif not line.startswith("!!"):
            status.modified.append(path)
    return status


class WorktreeService:
    """Service for managing git worktrees."""

    def __init__(self, runner: GitRunner):
        """Initialize the worktree service.

        Args:
            runner: Git command runner bound to the invocation directory
        """
        self.runner = runner
        self._main_root: Optional[str] = None

    def list_worktrees(self, cwd: Optional[str] = None) -> List[WorktreeEntry]:
        """Get every registered worktree, bare entry first, current one marked.

        Args:
            cwd: Directory that decides the current worktree (defaults to the
                directory git runs in)
        """
        output = self.runner.output("worktree", "list", "--porcelain")
        entries = parse_worktree_list(output)
        mark_current(entries, cwd or self.runner.cwd)

        logger.debug(f"Found {len(entries)} worktrees")
        for entry in entries:
            logger.debug(f"  {entry}")
        return entries

    def current_worktree(self) -> Optional[WorktreeEntry]:
        for entry in self.list_worktrees():
            if entry.current:
                return entry
        return None

    def main_root(self) -> str:
        """Principal working tree, or the repository directory itself when bare."""
        if self._main_root is None:
            common_dir = self.runner.output(
                "rev-parse", "--path-format=absolute", "--git-common-dir"
            ).strip()
            common_dir = canonical(common_dir)
            if os.path.basename(common_dir) == ".git":
                self._main_root = os.path.dirname(common_dir)
            else:
                self._main_root = common_dir
            logger.debug(f"Main root: {self._main_root}")
        return self._main_root

    def is_bare_root(self) -> bool:
        """True when invoked from a bare repository directory (no working tree)."""
        result = self.runner.run("rev-parse", "--is-inside-work-tree", check=False)
        return result.stdout.strip() != "true"

    def toplevel(self) -> Optional[str]:
        result = self.runner.run("rev-parse", "--show-toplevel", check=False)
        if not result.ok or not result.stdout.strip():
            return None
        return canonical(result.stdout.strip())

    def show_prefix(self) -> str:
        """Path of the invocation directory relative to its worktree root."""
        result = self.runner.run("rev-parse", "--show-prefix", check=False)
        if not result.ok:
            return ""
        return result.stdout.strip().rstrip("/")

    def add_worktree(
        self,
        path: str,
        ref: str,
        create_branch: bool = False,
        start_point: Optional[str] = None,
        detach: bool = False,
    ) -> None:
        """Register a new worktree at ``path``.

        When ``create_branch`` is set a new branch ``ref`` is created at
        ``start_point`` (or HEAD). Otherwise the existing ref is checked out
        and ``start_point`` is ignored.
        """
        os.makedirs(os.path.dirname(path), exist_ok=True)

        if create_branch:
            args = ["worktree", "add", "-b", ref, path]
            if start_point:
                args.append(start_point)
        elif detach:
            args = ["worktree", "add", "--detach", path, ref]
        else:
            if start_point:
                logger.info(f"Ignoring start point {start_point}: {ref} already exists")
            args = ["worktree", "add", path, ref]

        self.runner.run(*args, cwd=self.main_root(), relay=True)
        logger.info(f"Added worktree for {ref} at {path}")

    def status(self, path: str) -> WorktreeStatus:
        output = self.runner.output("status", "--porcelain", "--untracked-files=all", cwd=path)
        return parse_status(output)

    def ensure_clean(self, path: str, name: Optional[str] = None) -> None:
        """Raise DirtyWorktreeError if the worktree has modified or untracked files."""
        status = self.status(path)
        label = name or os.path.basename(path)
        if status.modified:
            raise DirtyWorktreeError(label, "modified")
        if status.untracked:
            raise DirtyWorktreeError(label, "untracked")

    def remove_worktree(self, path: str, force: bool = False, name: Optional[str] = None) -> None:
        """Unregister and delete the worktree at ``path``.

        Raises:
            DirtyWorktreeError: not forced and the worktree has local changes
            VCSError: git refused the removal
        """
        if not force:
            self.ensure_clean(path, name)

        args = ["worktree", "remove"]
        if force:
            args.append("--force")
        args.append(path)

        # Run from the main root: path may be the invocation directory
        self.runner.run(*args, cwd=self.main_root(), relay=True)
        logger.info(f"Removed worktree at {path}")

    def list_files(self, root: str, category: str) -> List[str]:
        """List files of a category relative to ``root``.

        Args:
            root: Working tree to inspect
            category: One of tracked, ignored, untracked, modified
        """
        if category not in LS_FILES_ARGS:
            raise ValueError(f"unknown file category: {category}")
        output = self.runner.run("ls-files", "-z", *LS_FILES_ARGS[category], cwd=root).stdout
        return [name for name in output.split("\0") if name]

    def init_basedir(self, basedir: str) -> None:
        """Create ``basedir`` with a catch-all .gitignore and a README."""
        try:
            os.makedirs(basedir, exist_ok=True)
            gitignore = os.path.join(basedir, ".gitignore")
            if not os.path.exists(gitignore):
                with open(gitignore, "w") as f:
                    f.write(BASEDIR_GITIGNORE)
            readme = os.path.join(basedir, "README.md")
            if not os.path.exists(readme):
                with open(readme, "w") as f:
                    f.write(BASEDIR_README)
        except OSError as e:
            raise VCSError("worktree add", basedir, f"cannot prepare directory: {e}")
