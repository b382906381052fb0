"""Seed new worktrees with files from the source working tree."""

import os
import shutil
import sys
from typing import Iterable, List, Optional

from git_wt.config import Config
from git_wt.exceptions import CopyFailedError
from git_wt.logging_config import get_logger
from git_wt.services.git.worktrees import WorktreeService
from git_wt.utils.cancel import CancelToken
from git_wt.utils.patterns import PatternSet, escape_glob

# Import fcntl for copy-on-write clones (Linux)
try:
    import fcntl
    HAS_FCNTL = True
except ImportError:
    HAS_FCNTL = False

logger = get_logger(__name__)

# _IOW(0x94, 9, int) from linux/fs.h
FICLONE = 0x40049409


def _clone_file(src: str, dst: str) -> bool:
    """Try a copy-on-write clone of ``src`` into ``dst``; False if unsupported."""
    if not HAS_FCNTL or not sys.platform.startswith("linux"):
        return False
    with open(src, "rb") as fsrc, open(dst, "wb") as fdst:
        try:
            fcntl.ioctl(fdst.fileno(), FICLONE, fsrc.fileno())
        except OSError as e:
            logger.debug(f"FICLONE not available for {dst}: {e}")
            return False
    return True


def copy_entry(src: str, dst: str) -> bool:
    """Materialise one file at ``dst``, keeping its mode and timestamps.

    Symlinks are recreated with the same target. Directories and files that
    vanished since they were listed are skipped.

    Returns:
        True if something was copied
    """
    if os.path.islink(src):
        os.makedirs(os.path.dirname(dst), exist_ok=True)
        if os.path.lexists(dst):
            os.remove(dst)
        os.symlink(os.readlink(src), dst)
        return True

    if not os.path.exists(src) or os.path.isdir(src):
        return False

    os.makedirs(os.path.dirname(dst), exist_ok=True)
    if os.path.islink(dst):
        os.remove(dst)
    if not _clone_file(src, dst):
        shutil.copyfile(src, dst)
    shutil.copymode(src, dst)
    st = os.stat(src)
    os.utime(dst, ns=(st.st_atime_ns, st.st_mtime_ns))
    return True


def _unique(items: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


class FileCopier:
    """Copies ignored / untracked / modified files into a fresh worktree."""

    def __init__(self, worktrees: WorktreeService, config: Config, token: Optional[CancelToken] = None):
        self.worktrees = worktrees
        self.config = config
        self.token = token or worktrees.runner.token

    def candidates(self, source_root: str) -> List[str]:
        """Relative paths selected by the copy flags and wt.copy patterns."""
        files: List[str] = []
        listings = {}

        def listing(category: str) -> List[str]:
            if category not in listings:
                listings[category] = self.worktrees.list_files(source_root, category)
            return listings[category]

        if self.config.copymodified:
            files.extend(listing("modified"))
        if self.config.copyuntracked:
            files.extend(listing("untracked"))
        if self.config.copyignored:
            files.extend(listing("ignored"))

        copy_patterns = self.config.copy_patterns
        if copy_patterns:
            for category in ("tracked", "untracked", "ignored"):
                files.extend(f for f in listing(category) if copy_patterns.match(f))

        return _unique(f for f in files if not f.startswith(".git/"))

    def select(self, files: List[str], exclusions: Optional[List[str]] = None) -> List[str]:
        """Drop files under an excluded directory or matched by wt.nocopy."""
        excluded_dirs = PatternSet(
            [f"/{escape_glob(d.strip('/'))}/" for d in exclusions or []], key="basedir"
        )
        nocopy = self.config.nocopy_patterns

        selected = []
        for path in files:
            if excluded_dirs.match(path):
                logger.debug(f"Skipping {path}: inside the worktree base directory")
                continue
            if nocopy.match(path):
                logger.debug(f"Skipping {path}: matches wt.nocopy")
                continue
            selected.append(path)
        return selected

    def copy(self, source_root: str, dest_root: str, exclusions: Optional[List[str]] = None) -> List[str]:
        """Copy the selected files from ``source_root`` into ``dest_root``.

        Returns:
            Relative paths that were copied

        Raises:
            CopyFailedError: a file could not be copied
            OperationCancelledError: the invocation was interrupted
        """
        files = self.select(self.candidates(source_root), exclusions)
        copied = []
        for rel in files:
            self.token.check()
            src = os.path.join(source_root, rel)
            dst = os.path.join(dest_root, rel)
            try:
                if copy_entry(src, dst):
                    copied.append(rel)
            except OSError as e:
                raise CopyFailedError(rel, e.strerror or str(e))
        if copied:
            logger.info(f"Copied {len(copied)} file(s) into {dest_root}")
        return copied
