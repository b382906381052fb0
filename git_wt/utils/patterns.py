"""Gitignore-style pattern matching.

Used for ``wt.copy`` and ``wt.nocopy``. Supported syntax:

* blank lines and lines starting with ``#`` are ignored
* ``!pattern`` re-includes a path excluded by an earlier pattern
* ``*`` and ``?`` never match ``/``; ``[abc]`` / ``[!abc]`` character classes
* ``**`` matches any number of directories (``**/x``, ``a/**``, ``a/**/b``)
* a trailing ``/`` matches directories only
* a leading ``/``, or any ``/`` in the middle, anchors the pattern at the root;
  otherwise the pattern matches the basename at any depth

As in git, once a directory is matched every path below it is matched too;
a negation cannot re-include a file whose parent directory is excluded.
"""

import re
from typing import Iterable, List, Optional

from git_wt.exceptions import ConfigInvalidError


def _translate(glob: str, key: str, raw: str) -> str:
    """Translate one slash separated glob into a regex fragment."""
    out = []
    i, n = 0, len(glob)
    while i < n:
        c = glob[i]
        if c == "*":
            if glob.startswith("**", i):
                at_start = i == 0 or glob[i - 1] == "/"
                at_end = i + 2 == n
                followed_by_slash = i + 2 < n and glob[i + 2] == "/"
                if at_start and followed_by_slash:
                    out.append("(?:.*/)?")
                    i += 3
                    continue
                if at_start and at_end:
                    out.append(".*")
                    i += 2
                    continue
            out.append("[^/]*")
            while i < n and glob[i] == "*":
                i += 1
            continue
        if c == "?":
            out.append("[^/]")
        elif c == "[":
            end = glob.find("]", i + 2 if glob[i + 1:i + 2] in ("!", "^", "]") else i + 1)
            if end == -1:
                raise ConfigInvalidError(key, raw, "unterminated character class")
            body = glob[i + 1:end]
            if body[:1] in ("!", "^"):
                body = "^" + body[1:]
            out.append("[" + body.replace("\\", "\\\\") + "]")
            i = end
        elif c == "\\" and i + 1 < n:
            i += 1
            out.append(re.escape(glob[i]))
        else:
            out.append(re.escape(c))
        i += 1
    return "".join(out)


class Pattern:
    """A single compiled gitignore line."""

    def __init__(self, raw: str, key: str = "nocopy"):
        self.raw = raw
        text = raw.rstrip()
        self.negated = text.startswith("!")
        if self.negated:
            text = text[1:]
        elif text.startswith("\\!") or text.startswith("\\#"):
            text = text[1:]

        self.dir_only = text.endswith("/")
        text = text.rstrip("/")

        self.anchored = "/" in text
        text = text.lstrip("/")
        if not text:
            raise ConfigInvalidError(key, raw, "empty pattern")

        body = _translate(text, key, raw)
        if self.anchored:
            self.regex = re.compile("^" + body + "$")
        else:
            self.regex = re.compile("^(?:.*/)?" + body + "$")

    def matches(self, path: str, is_dir: bool = False) -> bool:
        if self.dir_only and not is_dir:
            return False
        return self.regex.match(path) is not None

    def __repr__(self) -> str:
        return f"Pattern({self.raw!r})"


class PatternSet:
    """An ordered list of patterns with gitignore's last-match-wins rule."""

    def __init__(self, patterns: Optional[Iterable[str]] = None, key: str = "nocopy"):
        self.patterns: List[Pattern] = []
        for line in patterns or []:
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            self.patterns.append(Pattern(stripped, key))

    def __bool__(self) -> bool:
        return bool(self.patterns)

    def _decide(self, path: str, is_dir: bool) -> bool:
        matched = False
        for pattern in self.patterns:
            if pattern.matches(path, is_dir):
                matched = not pattern.negated
        return matched

    def match(self, path: str, is_dir: bool = False) -> bool:
        """Return True if the slash separated relative ``path`` is matched."""
        if not self.patterns:
            return False
        path = path.strip("/")
        parts = path.split("/")
        for i in range(1, len(parts)):
            if self._decide("/".join(parts[:i]), True):
                return True
        return self._decide(path, is_dir)


def escape_glob(path: str) -> str:
    """Escape glob metacharacters so ``path`` matches literally."""
    return "".join("\\" + c if c in "*?[]\\" else c for c in path)
