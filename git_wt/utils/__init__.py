"""Utility functions for git-wt.

This package provides utility modules:
- cancel: cancellation token shared by every subprocess and copy loop
- patterns: gitignore-style pattern matching for wt.copy / wt.nocopy
- paths: canonicalisation and containment helpers
"""

from .cancel import CancelToken
from .patterns import PatternSet
from .paths import canonical, is_within

__all__ = [
    "CancelToken",
    "PatternSet",
    "canonical",
    "is_within",
]
