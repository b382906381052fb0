"""Actions an invocation resolves to."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ArgumentKind(Enum):
    """How a positional argument is to be interpreted."""

    NAME = "name"
    PATH_HINT = "path"


@dataclass
class Action:
    """Base class for every resolved action."""


@dataclass
class ListAction(Action):
    json: bool = False


@dataclass
class CreateOrSwitchAction(Action):
    target: str = ""
    start_point: Optional[str] = None


@dataclass
class DeleteAction(Action):
    targets: List[str] = field(default_factory=list)
    force: bool = False
    allow_default: bool = False


@dataclass
class InitShellAction(Action):
    shell: str = ""
    nocd: bool = False


@dataclass
class CompleteAction(Action):
    """Completion request: the words already typed and the prefix being completed."""

    prefix: str = ""
    words: List[str] = field(default_factory=list)
