"""Completion candidates for the shell integration scripts."""

from typing import List, Set

from git_wt.constants import COMPLETION_SUBJECT_LENGTH, SUPPORTED_SHELLS
from git_wt.formatters import format_completion, truncate
from git_wt.logging_config import get_logger
from git_wt.models.action import CompleteAction
from git_wt.services.git.branches import BranchService
from git_wt.services.path_service import PathResolver
from git_wt.exceptions import GitWtError

logger = get_logger(__name__)

FLAGS = [
    ("-d", "Delete worktree and branch (safe delete, only if merged)"),
    ("-D", "Force delete worktree and branch"),
    ("--delete", "Delete worktree and branch (safe delete, only if merged)"),
    ("--force-delete", "Force delete worktree and branch"),
    ("--init", "Output shell initialization script"),
    ("--nocd", "Do not change directory to the worktree"),
    ("--basedir", "Override wt.basedir"),
    ("--copyignored", "Override wt.copyignored"),
    ("--copyuntracked", "Override wt.copyuntracked"),
    ("--copymodified", "Override wt.copymodified"),
    ("--copy", "Always copy files matching pattern"),
    ("--nocopy", "Exclude files matching pattern from copying"),
    ("--hook", "Run command after creating a new worktree"),
    ("--deletehook", "Run command in the worktree before deleting it"),
    ("--relative", "Keep the current subdirectory when switching"),
    ("--allow-delete-default", "Allow deletion of the default branch"),
    ("--json", "List worktrees as JSON"),
    ("--help", "Show help"),
    ("--version", "Show version"),
]

DELETE_FLAGS = ("-d", "-D", "--delete", "--force-delete")
VALUE_FLAGS = ("--basedir", "--copy", "--nocopy", "--hook", "--deletehook", "--init")


class CompletionService:
    """Builds ``candidate<TAB>description`` lines."""

    def __init__(self, resolver: PathResolver, branches: BranchService):
        self.resolver = resolver
        self.branches = branches

    def _subject(self, ref: str) -> str:
        return truncate(self.branches.commit_subject(ref), COMPLETION_SUBJECT_LENGTH)

    def _describe(self, label: str, ref: str) -> str:
        subject = self._subject(ref) if ref else ""
        return f"{label} {subject}" if subject else label

    def complete(self, action: CompleteAction) -> List[str]:
        prefix = action.prefix
        words = action.words

        if prefix.startswith("-"):
            return [format_completion(flag, desc) for flag, desc in FLAGS if flag.startswith(prefix)]

        if words and words[-1] == "--init":
            return [shell for shell in SUPPORTED_SHELLS if shell.startswith(prefix)]
        if words and words[-1] in VALUE_FLAGS:
            return []

        positionals = []
        skip = False
        for word in words:
            if skip:
                skip = False
                continue
            if word in VALUE_FLAGS:
                skip = True
                continue
            if not word.startswith("-"):
                positionals.append(word)
        deleting = any(word in DELETE_FLAGS for word in words)

        try:
            if len(positionals) == 1 and not deleting:
                candidates = self.start_points()
            elif positionals and not deleting:
                return []
            else:
                candidates = self.targets()
        except GitWtError as e:
            logger.debug(f"Completion failed: {e}")
            return []

        return [line for line in candidates if line.startswith(prefix)]

    def targets(self) -> List[str]:
        """Worktrees (by branch and by directory name) followed by local branches."""
        seen: Set[str] = set()
        lines = []

        for entry in self.resolver.entries():
            if entry.bare:
                continue
            dir_name = self.resolver.dir_name(entry)
            in_basedir = self.resolver.in_basedir(entry)
            wt_info = dir_name if in_basedir else entry.path

            if entry.branch and entry.branch not in seen:
                seen.add(entry.branch)
                if dir_name == entry.branch:
                    label = f"[worktree: branch={entry.branch}]"
                else:
                    label = f"[branch: worktree={wt_info}]"
                lines.append(format_completion(entry.branch, self._describe(label, entry.branch)))

            if in_basedir and dir_name not in seen:
                seen.add(dir_name)
                branch_info = entry.branch or "detached"
                if dir_name == branch_info:
                    label = f"[worktree: {dir_name}]"
                else:
                    label = f"[worktree: branch={branch_info}]"
                lines.append(format_completion(dir_name, self._describe(label, entry.branch or entry.head)))

        for branch in self.branches.list_branches():
            if branch not in seen:
                seen.add(branch)
                lines.append(format_completion(branch, self._describe("[branch]", branch)))
        return lines

    def start_points(self) -> List[str]:
        """Local branches, then branches that only exist on origin."""
        seen: Set[str] = set()
        lines = []
        for branch in self.branches.list_branches():
            if branch not in seen:
                seen.add(branch)
                lines.append(format_completion(branch, self._describe("[branch]", branch)))
        for branch in self.branches.list_remote_branches():
            if branch not in seen:
                seen.add(branch)
                lines.append(format_completion(branch, self._describe("[remote]", f"origin/{branch}")))
        return lines
