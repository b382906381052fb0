"""Display service for the worktree list"""
import json
from typing import List

from rich.console import Console
from rich.table import Table
from rich.text import Text

from git_wt.constants import COLUMNS
from git_wt.formatters import format_branch, format_current_marker, format_head
from git_wt.logging_config import get_logger
from git_wt.models.worktree import WorktreeEntry

logger = get_logger(__name__)


class DisplayService:
    """Renders the worktree list for `git wt` with no arguments."""

    def build_rows(self, entries: List[WorktreeEntry]) -> List[List[str]]:
        """Cell values in COLUMNS order: marker, path, branch, head."""
        return [
            [
                format_current_marker(entry.current),
                entry.path,
                format_branch(entry),
                format_head(entry),
            ]
            for entry in entries
        ]

    def render_table(self, entries: List[WorktreeEntry]) -> str:
        """Render the worktree table as plain text."""
        rows = self.build_rows(entries)

        table = Table(box=None, show_edge=False, pad_edge=False, padding=(0, 1, 0, 0))
        for col in COLUMNS:
            table.add_column(col.label, no_wrap=True, justify="left")
        for row in rows:
            table.add_row(*(Text(cell) for cell in row))

        # Wide enough that no cell is ever wrapped or truncated
        widths = [max([len(col.label)] + [len(row[i]) for row in rows]) for i, col in enumerate(COLUMNS)]
        width = sum(widths) + len(widths) + 1

        console = Console(width=width, color_system=None, highlight=False, emoji=False)
        with console.capture() as capture:
            console.print(table)
        lines = [line.rstrip() for line in capture.get().splitlines()]
        return "\n".join(lines) + "\n"

    def render_json(self, entries: List[WorktreeEntry]) -> str:
        return json.dumps([entry.to_dict() for entry in entries], indent=2) + "\n"

    def display_worktrees(self, entries: List[WorktreeEntry], as_json: bool = False) -> str:
        """Render the worktree list as a table or JSON array."""
        logger.debug(f"Displaying {len(entries)} worktrees (json={as_json})")
        if as_json:
            return self.render_json(entries)
        return self.render_table(entries)
