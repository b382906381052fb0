"""Output handling: stdout carries cd targets, everything else goes to stderr."""

import os
import sys
from typing import Optional, TextIO

from rich.console import Console

from git_wt.constants import NOCD_MARKER, SHELL_INTEGRATION_ENV


def shell_integration_active() -> bool:
    """True when running under the shell wrapper emitted by --init."""
    return os.environ.get(SHELL_INTEGRATION_ENV) == "1"


class OutputWriter:
    """Enforces the stdout contract the shell wrappers rely on.

    The last line on stdout is either a directory the wrapper may cd into
    or something that is not a directory at all (a table, JSON, a script).
    """

    def __init__(self, stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None):
        self._stdout = stdout
        self._stderr = stderr
        self.console = Console(file=stderr, stderr=stderr is None, highlight=False, emoji=False)

    @property
    def stdout(self) -> TextIO:
        return self._stdout or sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr or sys.stderr

    def path(self, path: str, suppress_cd: bool = False) -> None:
        """Print a worktree path for the wrapper to cd into.

        With ``suppress_cd`` and an active wrapper the line carries a marker
        telling the wrapper to print it instead of changing directory.
        """
        line = path
        if suppress_cd and shell_integration_active():
            line = NOCD_MARKER + path
        self.stdout.write(line + "\n")
        self.stdout.flush()

    def data(self, text: str) -> None:
        """Print non-path output (tables, JSON, scripts, completions)."""
        self.stdout.write(text if text.endswith("\n") or not text else text + "\n")
        self.stdout.flush()

    def info(self, message: str) -> None:
        self.console.print(message, markup=False, soft_wrap=True)

    def success(self, message: str) -> None:
        self.console.print(message, style="green", markup=False, soft_wrap=True)

    def warning(self, message: str) -> None:
        self.console.print(f"Warning: {message}", style="yellow", markup=False, soft_wrap=True)

    def error(self, message: str) -> None:
        self.console.print(f"Error: {message}", style="red", markup=False, soft_wrap=True)
