"""Run user-configured hook commands."""

import os
import subprocess
import sys
from typing import List, Optional, TextIO

from git_wt.exceptions import HookFailedError
from git_wt.logging_config import get_logger
from git_wt.utils.cancel import CancelToken, process_group_kwargs

logger = get_logger(__name__)


def shell_command(command: str) -> List[str]:
    """argv that runs ``command`` through the platform shell."""
    if os.name == "nt":
        return [os.environ.get("COMSPEC", "cmd.exe"), "/C", command]
    return ["sh", "-c", command]


class HookRunner:
    """Runs hook commands in order inside a worktree.

    Hook output (stdout and stderr) is relayed to our stderr so that stdout
    keeps carrying nothing but the cd target.
    """

    def __init__(self, token: Optional[CancelToken] = None, stream: Optional[TextIO] = None):
        self.token = token or CancelToken()
        self.stream = stream

    def run(self, commands: List[str], cwd: str) -> None:
        """Run each command with ``cwd`` as working directory.

        Raises:
            HookFailedError: a command exited non-zero (later ones do not run)
            OperationCancelledError: the invocation was interrupted
        """
        stream = self.stream or sys.stderr
        for command in commands:
            self.token.check()
            logger.info(f"Running hook in {cwd}: {command}")
            proc = subprocess.Popen(
                shell_command(command),
                cwd=cwd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                **process_group_kwargs(),
            )
            with self.token.track(proc):
                for line in proc.stdout:
                    stream.write(line.decode("utf-8", errors="replace"))
                    stream.flush()
                proc.stdout.close()
                returncode = proc.wait()
            self.token.check()
            if returncode != 0:
                logger.debug(f"Hook exited {returncode}: {command}")
                raise HookFailedError(command, returncode)
