"""Custom exceptions for git-wt"""

from typing import Optional


class GitWtError(Exception):
    """Base exception for all git-wt errors."""
    pass


class UsageError(GitWtError):
    """Exception raised for invalid command-line usage."""
    pass


class ConfigInvalidError(GitWtError):
    """Exception raised when a wt.* config value cannot be parsed."""

    def __init__(self, key: str, value: str, message: Optional[str] = None):
        self.key = key
        self.value = value

        error_msg = f"invalid value for wt.{key}: '{value}'"
        if message:
            error_msg += f" ({message})"

        super().__init__(error_msg)


class LegacyLayoutError(GitWtError):
    """Exception raised when the old sibling worktree directory is still around."""

    def __init__(self, legacy_path: str, legacy_pattern: str):
        self.legacy_path = legacy_path
        super().__init__(
            f"the default for wt.basedir has changed to '.wt', but a worktree directory "
            f"was found at {legacy_path}; remove it or keep using it with: "
            f"git config wt.basedir \"{legacy_pattern}\""
        )


class VCSError(GitWtError):
    """Exception raised for errors in Git operations."""

    def __init__(
        self,
        operation: str,
        target: Optional[str] = None,
        message: Optional[str] = None,
        returncode: Optional[int] = None,
    ):
        self.operation = operation
        self.target = target
        self.message = message
        self.returncode = returncode

        error_msg = f"git {operation} failed"
        if target:
            error_msg += f" for '{target}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class DirtyWorktreeError(GitWtError):
    """Exception raised when a safe delete finds local changes."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"cannot delete worktree \"{name}\": has {reason} files, use -D to force deletion")


class ProtectedDefaultBranchError(GitWtError):
    """Exception raised when deleting the default branch without override."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(
            f"cannot delete default branch \"{branch}\": use --allow-delete-default to override"
        )


class ProtectedBareError(GitWtError):
    """Exception raised when the bare repository entry is targeted for deletion."""

    def __init__(self):
        super().__init__("cannot delete bare repository entry")


class TargetNotFoundError(GitWtError):
    """Exception raised when a delete target matches neither a worktree nor a branch."""

    def __init__(self, target: str):
        self.target = target
        super().__init__(f"no worktree or branch found for \"{target}\"")


class HookFailedError(GitWtError):
    """Exception raised when a hook command exits non-zero."""

    def __init__(self, command: str, returncode: Optional[int] = None):
        self.command = command
        self.returncode = returncode
        super().__init__(f"hook failed: {command}")


class CopyFailedError(GitWtError):
    """Exception raised when a file cannot be copied into a new worktree."""

    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        error_msg = f"failed to copy {path}"
        if message:
            error_msg += f": {message}"
        super().__init__(error_msg)


class OperationCancelledError(GitWtError):
    """Exception raised when the invocation is interrupted."""

    def __init__(self):
        super().__init__("interrupted")
