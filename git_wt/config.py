"""Configuration handling for git-wt.

Settings live in git's own config store under the ``wt.`` namespace
(``git config wt.basedir ../{gitroot}-wt``). Every key has a command-line
counterpart; an explicitly given flag beats the stored value, which beats
the default.
"""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from git_wt.constants import (
    BOOL_KEYS,
    CONFIG_NAMESPACE,
    DEFAULT_BASEDIR,
    KEY_BASEDIR,
    KEY_COPY,
    KEY_NOCD,
    KEY_NOCOPY,
    LIST_KEYS,
)
from git_wt.exceptions import ConfigInvalidError
from git_wt.logging_config import get_logger
from git_wt.utils.patterns import PatternSet

logger = get_logger(__name__)

TRUE_VALUES = ("true", "yes", "on", "1")
FALSE_VALUES = ("false", "no", "off", "0", "")


class NocdMode(Enum):
    """When to keep the shell in its current directory."""

    FALSE = "false"
    TRUE = "true"  # never cd
    CREATE = "create"  # do not cd into newly created worktrees


def parse_bool(key: str, value: Optional[str]) -> bool:
    """Parse a git-style boolean; a key given without a value means true."""
    if value is None:
        return True
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ConfigInvalidError(key, value, "expected a boolean")


def parse_nocd(value: Optional[str]) -> NocdMode:
    """Parse wt.nocd: a boolean, ``all`` (same as true) or ``create``."""
    if value is not None:
        lowered = value.strip().lower()
        if lowered == "all":
            return NocdMode.TRUE
        if lowered == "create":
            return NocdMode.CREATE
    try:
        return NocdMode.TRUE if parse_bool(KEY_NOCD, value) else NocdMode.FALSE
    except ConfigInvalidError:
        raise ConfigInvalidError(KEY_NOCD, value or "", "expected true, false or create")


def parse_config_entries(output: str) -> List[Tuple[str, Optional[str]]]:
    """Parse `git config -z --get-regexp` output into (key, value) pairs.

    Each record is ``key\\nvalue`` terminated by NUL; a key set without a
    value has no newline.
    """
    entries = []
    for record in output.split("\0"):
        if not record:
            continue
        key, sep, value = record.partition("\n")
        entries.append((key.lower(), value if sep else None))
    return entries


@dataclass
class Config:
    """Effective wt.* settings for one invocation."""

    basedir: str = DEFAULT_BASEDIR
    copyignored: bool = False
    copyuntracked: bool = False
    copymodified: bool = False
    copy: List[str] = field(default_factory=list)
    nocopy: List[str] = field(default_factory=list)
    hook: List[str] = field(default_factory=list)
    deletehook: List[str] = field(default_factory=list)
    nocd: NocdMode = NocdMode.FALSE
    relative: bool = False

    # True when wt.basedir is stored or --basedir was given
    basedir_configured: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_basedir()
        self._validate_nocd()
        self._validate_patterns()

    def _validate_basedir(self):
        """Validate basedir is not empty."""
        if not self.basedir or not self.basedir.strip():
            raise ConfigInvalidError(KEY_BASEDIR, self.basedir or "", "cannot be empty")
        self.basedir = self.basedir.strip()

    def _validate_nocd(self):
        """Accept nocd given as a string."""
        if not isinstance(self.nocd, NocdMode):
            self.nocd = parse_nocd(str(self.nocd))

    def _validate_patterns(self):
        """Compile copy patterns so malformed globs fail early."""
        self.copy_patterns = PatternSet(self.copy, key=KEY_COPY)
        self.nocopy_patterns = PatternSet(self.nocopy, key=KEY_NOCOPY)

    @classmethod
    def from_entries(cls, entries: List[Tuple[str, Optional[str]]]) -> "Config":
        """Create Config from (key, value) pairs of the wt namespace."""
        values: Dict[str, Any] = {}
        prefix = f"{CONFIG_NAMESPACE}."
        for full_key, value in entries:
            if not full_key.startswith(prefix):
                continue
            key = full_key[len(prefix):]
            if key in LIST_KEYS:
                if value:
                    values.setdefault(key, []).append(value)
            elif key in BOOL_KEYS:
                values[key] = parse_bool(key, value)
            elif key == KEY_NOCD:
                values[key] = parse_nocd(value)
            elif key == KEY_BASEDIR:
                if value:
                    values[key] = value
                    values["basedir_configured"] = True
            else:
                logger.debug(f"Ignoring unknown config key {full_key}")
        return cls(**values)

    @classmethod
    def load(cls, runner, overrides: Optional[Mapping[str, Any]] = None) -> "Config":
        """Read the wt namespace from git config and apply flag overrides."""
        result = runner.run(
            "config", "-z", "--get-regexp", rf"^{CONFIG_NAMESPACE}\.", check=False
        )
        # Exit status 1 means no key matched
        entries = parse_config_entries(result.stdout) if result.ok else []
        config = cls.from_entries(entries)
        if overrides:
            config = config.with_overrides(overrides)
        logger.debug(f"Effective config: {config}")
        return config

    def with_overrides(self, overrides: Mapping[str, Any]) -> "Config":
        """Return a copy with every non-None override applied.

        List-valued overrides replace the stored list.
        """
        known = {f.name for f in fields(self)}
        changes: Dict[str, Any] = {}
        for key, value in overrides.items():
            if value is None or key not in known:
                continue
            if key == KEY_NOCD and not isinstance(value, NocdMode):
                value = parse_nocd(value)
            changes[key] = list(value) if key in LIST_KEYS else value
        if KEY_BASEDIR in changes:
            changes["basedir_configured"] = True
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "basedir": self.basedir,
            "copyignored": self.copyignored,
            "copyuntracked": self.copyuntracked,
            "copymodified": self.copymodified,
            "copy": list(self.copy),
            "nocopy": list(self.nocopy),
            "hook": list(self.hook),
            "deletehook": list(self.deletehook),
            "nocd": self.nocd.value,
            "relative": self.relative,
        }
