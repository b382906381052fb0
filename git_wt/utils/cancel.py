"""Cancellation support for long-running child processes and copy loops."""

import os
import signal
import subprocess
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List

from git_wt.exceptions import OperationCancelledError
from git_wt.logging_config import get_logger

logger = get_logger(__name__)


def process_group_kwargs() -> Dict[str, Any]:
    """Popen arguments that start the child in a process group of its own.

    A whole group can then be signalled, so grandchildren (``sh -c`` running
    ``sleep``) do not keep our pipes open after cancellation.
    """
    if os.name == "posix":
        return {"start_new_session": True}
    if os.name == "nt":
        creationflags = getattr(subprocess, "CREATE_NEW_PROCESS_GROUP", None)
        if isinstance(creationflags, int):
            return {"creationflags": creationflags}
    return {}


def terminate_process_group(proc: subprocess.Popen) -> None:
    """Send SIGTERM to the child's process group, or just the child if it leads none."""
    if proc.poll() is not None:
        return
    if os.name == "posix":
        try:
            if os.getpgid(proc.pid) == proc.pid:
                os.killpg(proc.pid, signal.SIGTERM)
                return
        except OSError as e:
            logger.debug(f"Could not signal process group {proc.pid}: {e}")
    try:
        proc.terminate()
    except OSError as e:
        logger.debug(f"Could not terminate {proc.pid}: {e}")


class CancelToken:
    """A single abort signal threaded through every blocking call.

    Child processes are registered with :meth:`track` for the duration of
    the call; :meth:`cancel` (typically from a SIGINT handler) terminates
    every registered child, together with its process group, so the
    blocked reader returns promptly.
    """

    def __init__(self):
        self._event = threading.Event()
        self._processes: List[subprocess.Popen] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Mark the token cancelled and terminate every tracked child."""
        self._event.set()
        for proc in list(self._processes):
            logger.debug(f"Terminating child process {proc.pid}")
            terminate_process_group(proc)

    def check(self) -> None:
        """Raise OperationCancelledError if the token has been cancelled."""
        if self._event.is_set():
            raise OperationCancelledError()

    @contextmanager
    def track(self, proc: subprocess.Popen) -> Iterator[subprocess.Popen]:
        """Register ``proc`` so that cancel() can terminate it."""
        self._processes.append(proc)
        try:
            if self.cancelled:
                terminate_process_group(proc)
            yield proc
        finally:
            self._processes.remove(proc)
