"""Path helpers shared by the resolver and the copier."""

import os


def canonical(path: str) -> str:
    """Absolute path with symlinks resolved."""
    return os.path.realpath(os.path.abspath(os.path.expanduser(path)))


def is_within(path: str, root: str) -> bool:
    """True when ``path`` equals ``root`` or lies below it (both canonical)."""
    if path == root:
        return True
    prefix = root if root.endswith(os.sep) else root + os.sep
    return path.startswith(prefix)

