"""Pytest fixtures for git-wt tests"""
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

import pytest
import git

from git_wt.cli.main import main


@dataclass
class WtResult:
    """Outcome of one in-process git-wt invocation."""

    code: int
    out: str
    err: str

    @property
    def last_line(self) -> str:
        lines = self.out.splitlines()
        return lines[-1] if lines else ""


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(os.path.realpath(tmpdir))


@pytest.fixture(autouse=True)
def isolated_git_env(tmp_path_factory, monkeypatch):
    """Keep the user's global git config and shell integration out of the tests."""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(home / ".gitconfig"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.delenv("GIT_WT_SHELL_INTEGRATION", raising=False)
    monkeypatch.delenv("GIT_DIR", raising=False)
    monkeypatch.delenv("GIT_WORK_TREE", raising=False)


def _configure_user(repo):
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")


def _commit_file(repo, name, content="content\n", message=None):
    path = Path(repo.working_tree_dir) / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    repo.index.add([name])
    repo.index.commit(message or f"Add {name}")
    return path


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository for testing."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    # Initialize repository
    repo = git.Repo.init(repo_path)
    _configure_user(repo)

    # Create initial commit on main branch
    test_file = repo_path / "README.md"
    test_file.write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")

    # Rename master to main if needed
    repo.git.branch('-M', 'main')

    yield repo

    # Cleanup
    repo.close()


@pytest.fixture
def repo_root(git_repo):
    """Path of the main working tree."""
    return Path(git_repo.working_tree_dir)


@pytest.fixture
def bare_repo(temp_dir, git_repo):
    """A bare clone of git_repo, as used by bare-repository worktree layouts."""
    bare_path = temp_dir / "bare_repo.git"
    repo = git_repo.clone(str(bare_path), bare=True)
    _configure_user(repo)
    yield repo
    repo.close()


@pytest.fixture
def run_wt(monkeypatch, capsys):
    """Run git-wt in-process from a given directory."""

    def _run(*argv, cwd):
        monkeypatch.chdir(cwd)
        code = main([str(arg) for arg in argv])
        captured = capsys.readouterr()
        return WtResult(code, captured.out, captured.err)

    return _run


@pytest.fixture
def shell_integration(monkeypatch):
    """Pretend to run under the shell wrapper emitted by --init."""
    monkeypatch.setenv("GIT_WT_SHELL_INTEGRATION", "1")


@pytest.fixture
def commit_file():
    """Write a file in a repository's working tree and commit it."""
    return _commit_file
