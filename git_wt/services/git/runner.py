"""Low-level git command execution."""

import os
import sys
from dataclasses import dataclass
from typing import Optional, Sequence

import git

from git_wt.exceptions import OperationCancelledError, VCSError
from git_wt.logging_config import get_logger
from git_wt.utils.cancel import CancelToken

logger = get_logger(__name__)


@dataclass
class GitResult:
    """Outcome of one git invocation."""

    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _operation_name(args: Sequence[str]) -> str:
    for arg in args:
        if not arg.startswith("-"):
            return arg
    return " ".join(args)


class GitRunner:
    """Runs git commands through GitPython with cancellation support.

    Every command is started with ``as_process=True`` so that the child can
    be registered with the invocation's CancelToken; a cancelled token kills
    the child and the call raises OperationCancelledError.
    """

    def __init__(self, cwd: Optional[str] = None, token: Optional[CancelToken] = None):
        self.cwd = cwd or os.getcwd()
        self.token = token or CancelToken()

    def run(
        self,
        *args: str,
        cwd: Optional[str] = None,
        check: bool = True,
        relay: bool = False,
    ) -> GitResult:
        """Run ``git <args>`` and return its result.

        Args:
            cwd: Directory to run in (defaults to the invocation directory)
            check: Raise VCSError on a non-zero exit status
            relay: Forward git's stdout and stderr to our stderr

        Raises:
            VCSError: git failed (and check is set) or could not be started
            OperationCancelledError: the invocation was interrupted
        """
        self.token.check()
        workdir = cwd or self.cwd
        command = ["git", *args]
        logger.debug(f"Running {' '.join(command)} in {workdir}")

        try:
            # GitPython sets its own creationflags on Windows
            group = {"start_new_session": True} if os.name == "posix" else {}
            handle = git.Git(workdir).execute(command, as_process=True, **group)
        except git.exc.GitCommandNotFound as e:
            raise VCSError(_operation_name(args), message=f"git executable not found: {e}")

        proc = handle.proc
        with self.token.track(proc):
            out, err = proc.communicate()
        self.token.check()

        result = GitResult(
            returncode=proc.returncode,
            stdout=out.decode("utf-8", errors="replace") if out else "",
            stderr=err.decode("utf-8", errors="replace") if err else "",
        )

        if relay:
            if result.stdout:
                sys.stderr.write(result.stdout)
            if result.stderr:
                sys.stderr.write(result.stderr)
            sys.stderr.flush()

        if result.returncode < 0 and self.token.cancelled:
            raise OperationCancelledError()

        if check and not result.ok:
            stderr = result.stderr.strip()
            logger.debug(f"git {' '.join(args)} exited {result.returncode}: {stderr}")
            raise VCSError(
                _operation_name(args),
                message=stderr or f"exit status {result.returncode}",
                returncode=result.returncode,
            )
        return result

    def output(self, *args: str, cwd: Optional[str] = None) -> str:
        """Run git and return stdout without the trailing newline."""
        return self.run(*args, cwd=cwd).stdout.rstrip("\n")

    def succeeds(self, *args: str, cwd: Optional[str] = None) -> bool:
        """Run git and report whether it exited zero."""
        return self.run(*args, cwd=cwd, check=False).ok
