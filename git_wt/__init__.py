"""
git-wt - git worktree management with shell integration
"""

from .__version__ import __version__
from .core import GitWt
from .cli.main import main

__all__ = ["GitWt", "main", "__version__"]
