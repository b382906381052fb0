"""Worktree and branch deletion."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from git_wt.config import Config
from git_wt.exceptions import (
    ProtectedBareError,
    ProtectedDefaultBranchError,
    TargetNotFoundError,
    VCSError,
)
from git_wt.logging_config import get_logger
from git_wt.models.action import DeleteAction
from git_wt.models.worktree import WorktreeEntry
from git_wt.services.git.branches import BranchService
from git_wt.services.git.worktrees import WorktreeService
from git_wt.services.hook_service import HookRunner
from git_wt.services.output_service import OutputWriter
from git_wt.services.path_service import PathResolver

logger = get_logger(__name__)


class TargetState(Enum):
    """Progress of a single delete target."""

    RESOLVED = "resolved"
    CHECKED = "checked"
    REMOVED = "removed"
    BRANCH_ONLY = "branch_only"
    BRANCH_DELETED = "branch_deleted"
    BRANCH_RETAINED = "branch_retained"


@dataclass
class DeleteOutcome:
    """What happened to one target."""

    target: str
    state: TargetState = TargetState.RESOLVED
    entry: Optional[WorktreeEntry] = None
    branch: str = ""
    message: str = ""

    @property
    def removed_current(self) -> bool:
        return self.entry is not None and self.entry.current and self.state in (
            TargetState.REMOVED,
            TargetState.BRANCH_DELETED,
            TargetState.BRANCH_RETAINED,
        )


class DeleteService:
    """Deletes worktrees and their branches, one target at a time.

    Targets are processed in order and the first failure stops the run;
    targets already handled are not rolled back.
    """

    def __init__(
        self,
        config: Config,
        resolver: PathResolver,
        worktrees: WorktreeService,
        branches: BranchService,
        hooks: HookRunner,
        output: OutputWriter,
    ):
        self.config = config
        self.resolver = resolver
        self.worktrees = worktrees
        self.branches = branches
        self.hooks = hooks
        self.output = output

    def delete(self, action: DeleteAction) -> List[DeleteOutcome]:
        # Resolve before anything is removed: later git calls run from here
        main_root = self.worktrees.main_root()
        outcomes = []
        for target in action.targets:
            outcome = self.delete_target(target, action.force, action.allow_default, main_root)
            outcomes.append(outcome)
            self.output.info(outcome.message)
        return outcomes

    def delete_target(
        self, target: str, force: bool, allow_default: bool, main_root: str
    ) -> DeleteOutcome:
        outcome = DeleteOutcome(target=target)
        _, entry = self.resolver.classify(target)

        if entry is None:
            return self._delete_branch_only(outcome, force, allow_default, main_root)

        if entry.bare:
            raise ProtectedBareError()

        outcome.entry = entry
        outcome.branch = entry.branch
        dir_name = self.resolver.dir_name(entry)
        branch_exists = self.branches.local_branch_exists(entry.branch)
        is_default = branch_exists and self.branches.is_default_branch(entry.branch)
        if not force:
            self.worktrees.ensure_clean(entry.path, dir_name)
        outcome.state = TargetState.CHECKED

        if self.config.deletehook:
            self.hooks.run(self.config.deletehook, cwd=entry.path)

        # Local changes were checked above; files the hooks leave behind go too
        self.worktrees.remove_worktree(entry.path, force=True, name=dir_name)
        outcome.state = TargetState.REMOVED
        if entry.current:
            # git can no longer run in the removed directory; arguments still
            # resolve against the directory the user ran from
            self.worktrees.runner.cwd = main_root
        self.resolver.entries(refresh=True)

        branch = entry.branch
        short = dir_name == branch
        if not branch_exists:
            outcome.message = f'Deleted worktree "{dir_name}" (branch "{branch}" did not exist locally)'
            if not branch:
                outcome.message = f'Deleted worktree "{dir_name}" (detached HEAD)'
            return outcome

        if is_default and not allow_default:
            outcome.state = TargetState.BRANCH_RETAINED
            if short:
                outcome.message = f'Deleted worktree "{branch}" (branch is default, not deleted)'
            else:
                outcome.message = f'Deleted worktree "{dir_name}" (branch "{branch}" is default, not deleted)'
            return outcome

        try:
            self.branches.delete_branch(branch, force=force, cwd=main_root)
        except VCSError as e:
            logger.debug(f"Keeping branch {branch}: {e}")
            outcome.state = TargetState.BRANCH_RETAINED
            if short:
                outcome.message = f'Deleted worktree, but failed to delete branch "{branch}" (use -D to force)'
            else:
                outcome.message = (
                    f'Deleted worktree "{dir_name}", but failed to delete branch "{branch}" (use -D to force)'
                )
            return outcome

        outcome.state = TargetState.BRANCH_DELETED
        if short:
            outcome.message = f'Deleted worktree and branch "{branch}"'
        else:
            outcome.message = f'Deleted worktree "{dir_name}" and branch "{branch}"'
        return outcome

    def _delete_branch_only(
        self, outcome: DeleteOutcome, force: bool, allow_default: bool, main_root: str
    ) -> DeleteOutcome:
        name = outcome.target
        if not self.branches.local_branch_exists(name):
            raise TargetNotFoundError(name)
        outcome.state = TargetState.BRANCH_ONLY
        outcome.branch = name

        if self.branches.is_default_branch(name) and not allow_default:
            raise ProtectedDefaultBranchError(name)

        try:
            self.branches.delete_branch(name, force=force, cwd=main_root)
        except VCSError as e:
            raise VCSError("branch", name, f"{e.message} (use -D to force)", e.returncode)

        outcome.state = TargetState.BRANCH_DELETED
        outcome.message = f'Deleted branch "{name}" (no worktree was associated)'
        return outcome
