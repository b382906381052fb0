"""Core functionality for git-wt"""

from typing import Any, Dict, List, Optional

from git_wt.config import Config, NocdMode, parse_nocd
from git_wt.constants import SUPPORTED_SHELLS
from git_wt.exceptions import HookFailedError, UsageError
from git_wt.logging_config import get_logger
from git_wt.models.action import (
    Action,
    CompleteAction,
    CreateOrSwitchAction,
    DeleteAction,
    InitShellAction,
    ListAction,
)
from git_wt.services.completion_service import CompletionService
from git_wt.services.copy_service import FileCopier
from git_wt.services.delete_service import DeleteService
from git_wt.services.display_service import DisplayService
from git_wt.services.git import BranchService, GitRunner, WorktreeService
from git_wt.services.hook_service import HookRunner
from git_wt.services.output_service import OutputWriter, shell_integration_active
from git_wt.services.path_service import PathResolver
from git_wt.services.shell_service import init_script
from git_wt.utils.cancel import CancelToken

logger = get_logger(__name__)


def unique(items: List[str]) -> List[str]:
    """Drop duplicates, keeping the first occurrence."""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def resolve_action(args) -> Action:
    """Pick the action from the shape of the parsed command line.

    Raises:
        UsageError: the positional arguments do not fit any action
    """
    positionals: List[str] = list(args.args or [])

    if args.init:
        # Only a full nocd drops the wrapper; nocd=create still needs it to cd on switch
        nocd = args.nocd is not None and parse_nocd(args.nocd) is NocdMode.TRUE
        if positionals:
            raise UsageError("--init does not take positional arguments")
        return InitShellAction(shell=args.init, nocd=nocd)

    if args.delete or args.force_delete:
        if not positionals:
            raise UsageError("-d/-D requires at least one <branch|worktree>")
        return DeleteAction(
            targets=unique(positionals),
            force=bool(args.force_delete),
            allow_default=bool(args.allow_delete_default),
        )

    if not positionals:
        return ListAction(json=bool(args.json))

    if len(positionals) > 2:
        raise UsageError(
            f"too many arguments: expected <branch> [<start-point>], got {len(positionals)} arguments"
        )

    start_point = positionals[1] if len(positionals) == 2 else None
    return CreateOrSwitchAction(target=positionals[0], start_point=start_point)


class GitWt:
    """Runs one resolved action against the repository at ``cwd``."""

    def __init__(
        self,
        cwd: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
        token: Optional[CancelToken] = None,
        output: Optional[OutputWriter] = None,
    ):
        """Initialize GitWt.

        Args:
            cwd: Invocation directory (defaults to the process cwd)
            overrides: Per-invocation config values from flags; None means not given
            token: Cancellation token shared with every child process
            output: Writer for stdout / stderr
        """
        self.token = token or CancelToken()
        self.runner = GitRunner(cwd, self.token)
        self.worktrees = WorktreeService(self.runner)
        self.branches = BranchService(self.runner)
        self.output = output or OutputWriter()
        self.overrides = overrides or {}
        self._config: Optional[Config] = None
        self._resolver: Optional[PathResolver] = None

    @property
    def config(self) -> Config:
        if self._config is None:
            self._config = Config.load(self.runner, self.overrides)
        return self._config

    @property
    def resolver(self) -> PathResolver:
        if self._resolver is None:
            self._resolver = PathResolver(self.config, self.worktrees, self.branches)
        return self._resolver

    def run(self, action: Action) -> None:
        logger.debug(f"Running {action}")
        if isinstance(action, InitShellAction):
            self.init_shell(action)
        elif isinstance(action, CompleteAction):
            self.complete(action)
        elif isinstance(action, ListAction):
            self.list(action)
        elif isinstance(action, DeleteAction):
            self.delete(action)
        elif isinstance(action, CreateOrSwitchAction):
            self.create_or_switch(action)
        else:
            raise UsageError(f"unsupported action: {action!r}")

    def init_shell(self, action: InitShellAction) -> None:
        if action.shell not in SUPPORTED_SHELLS:
            raise UsageError(
                f"unsupported shell: {action.shell} (supported: {', '.join(SUPPORTED_SHELLS)})"
            )
        self.output.data(init_script(action.shell, nocd=action.nocd))

    def complete(self, action: CompleteAction) -> None:
        lines = CompletionService(self.resolver, self.branches).complete(action)
        if lines:
            self.output.data("\n".join(lines))

    def list(self, action: ListAction) -> None:
        entries = self.worktrees.list_worktrees()
        self.output.data(DisplayService().display_worktrees(entries, as_json=action.json))

    def create_or_switch(self, action: CreateOrSwitchAction) -> None:
        config = self.config
        resolver = self.resolver
        target = action.target

        _, entry = resolver.classify(target)
        if entry is not None:
            if action.start_point:
                logger.info(f"Ignoring start point {action.start_point}: {target} already exists")
            path = resolver.with_relative(entry.path)
            self.output.path(path, suppress_cd=config.nocd is NocdMode.TRUE)
            return

        resolver.check_legacy_layout()
        path = resolver.worktree_path_for(target)
        self.worktrees.init_basedir(resolver.expand_basedir())

        bare_root = self.worktrees.is_bare_root()
        source_root = None if bare_root else self.worktrees.toplevel()

        if self.branches.local_branch_exists(target) or self.branches.remote_branch_exists(target):
            self.worktrees.add_worktree(path, target, start_point=action.start_point)
        elif action.start_point is None and self.branches.resolve_ref(target):
            # A tag or commit: check it out without inventing a branch
            self.worktrees.add_worktree(path, target, detach=True)
        else:
            self.worktrees.add_worktree(
                path, target, create_branch=True, start_point=action.start_point
            )

        if source_root:
            copier = FileCopier(self.worktrees, config, self.token)
            copier.copy(source_root, path, resolver.copy_exclusions(source_root))

        if config.hook:
            try:
                HookRunner(self.token).run(config.hook, cwd=path)
            except HookFailedError:
                self.output.info(f"Worktree was created at {path}")
                raise

        path = resolver.with_relative(path)
        self.output.path(path, suppress_cd=config.nocd in (NocdMode.TRUE, NocdMode.CREATE))

    def delete(self, action: DeleteAction) -> None:
        config = self.config
        service = DeleteService(
            config,
            self.resolver,
            self.worktrees,
            self.branches,
            HookRunner(self.token),
            self.output,
        )
        main_root = self.worktrees.main_root()
        outcomes = service.delete(action)
        if any(outcome.removed_current for outcome in outcomes) and shell_integration_active():
            self.output.path(main_root)
