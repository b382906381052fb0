"""Tests for DisplayService"""
import json

from git_wt.models.worktree import WorktreeEntry
from git_wt.services.display_service import DisplayService

HEAD_A = "a" * 40
HEAD_B = "b" * 40


def sample_entries():
    return [
        WorktreeEntry(path="/src/repo.git", bare=True),
        WorktreeEntry(path="/src/repo.git/.wt/main", head=HEAD_A, branch="main", current=True),
        WorktreeEntry(path="/src/repo.git/.wt/review", head=HEAD_B),
    ]


class TestTable:
    """Test the human readable list."""

    def test_header_and_rows(self):
        output = DisplayService().render_table(sample_entries())
        lines = output.splitlines()
        assert len(lines) == 4
        assert "PATH" in lines[0] and "BRANCH" in lines[0] and "HEAD" in lines[0]
        assert "(bare)" in lines[1]
        assert lines[2].startswith("*")
        assert "/src/repo.git/.wt/main" in lines[2]
        assert "aaaaaaa" in lines[2]
        assert HEAD_A not in lines[2]
        assert "(detached)" in lines[3]
        assert not lines[3].startswith("*")

    def test_long_paths_are_not_truncated(self):
        long_path = "/very" + "/deeply/nested" * 20 + "/worktree"
        entries = [WorktreeEntry(path=long_path, head=HEAD_A, branch="feature/x")]
        output = DisplayService().render_table(entries)
        assert long_path in output

    def test_no_trailing_whitespace(self):
        output = DisplayService().render_table(sample_entries())
        assert all(line == line.rstrip() for line in output.splitlines())

    def test_rows_in_column_order(self):
        rows = DisplayService().build_rows(sample_entries())
        assert rows[0] == ["", "/src/repo.git", "(bare)", ""]
        assert rows[1] == ["*", "/src/repo.git/.wt/main", "main", "aaaaaaa"]


class TestJson:
    """Test the machine readable list."""

    def test_json_array(self):
        output = DisplayService().display_worktrees(sample_entries(), as_json=True)
        data = json.loads(output)
        assert [item["path"] for item in data] == [
            "/src/repo.git",
            "/src/repo.git/.wt/main",
            "/src/repo.git/.wt/review",
        ]
        assert data[0]["bare"] is True
        assert data[1] == {
            "path": "/src/repo.git/.wt/main",
            "branch": "main",
            "head": HEAD_A,
            "bare": False,
            "current": True,
        }
        assert data[2]["branch"] == ""
