"""Tests for PathResolver"""
import os

import pytest

from git_wt.config import Config
from git_wt.exceptions import LegacyLayoutError, UsageError
from git_wt.models.action import ArgumentKind
from git_wt.services.git import BranchService, GitRunner, WorktreeService
from git_wt.services.path_service import PathResolver, expand_template, is_explicit_path


def make_resolver(cwd, config=None):
    runner = GitRunner(str(cwd))
    return PathResolver(config or Config(), WorktreeService(runner), BranchService(runner))


class TestTemplateExpansion:
    """Test basedir template expansion."""

    def test_default_is_under_main_root(self):
        """.wt resolves against the main root."""
        assert expand_template(".wt", "/src/repo") == "/src/repo/.wt"

    def test_gitroot_placeholder(self):
        """{gitroot} is the main root's basename."""
        assert expand_template("../{gitroot}-wt", "/src/repo") == "/src/repo-wt"

    def test_absolute_template(self):
        """Absolute templates are used as is."""
        assert expand_template("/tmp/wt/{gitroot}", "/src/repo") == "/tmp/wt/repo"

    def test_home_expansion(self, monkeypatch):
        """A leading ~ is the home directory."""
        monkeypatch.setenv("HOME", "/home/tester")
        assert expand_template("~/worktrees/{gitroot}", "/src/repo") == "/home/tester/worktrees/repo"

    def test_expansion_is_idempotent(self):
        """Expanding twice gives the same absolute path."""
        once = expand_template("../{gitroot}-wt", "/src/repo")
        assert expand_template(once, "/src/repo") == once

    @pytest.mark.parametrize("arg", [".", "..", "./x", "../x", "/abs/x"])
    def test_explicit_paths(self, arg):
        assert is_explicit_path(arg) is True

    @pytest.mark.parametrize("arg", ["feature", "feature/x", "v1.0"])
    def test_names_are_not_explicit_paths(self, arg):
        assert is_explicit_path(arg) is False


class TestClassify:
    """Test name vs path disambiguation."""

    def test_new_name(self, git_repo, repo_root):
        """An unknown name is something to create."""
        kind, entry = make_resolver(repo_root).classify("feature")
        assert kind is ArgumentKind.NAME
        assert entry is None

    def test_branch_name_of_existing_worktree(self, git_repo, repo_root):
        """A worktree is found by its branch name."""
        wt_path = repo_root / ".wt" / "feature"
        git_repo.git.worktree("add", "-b", "feature", str(wt_path))
        kind, entry = make_resolver(repo_root).classify("feature")
        assert kind is ArgumentKind.NAME
        assert entry.path == str(wt_path)

    def test_directory_name_of_existing_worktree(self, git_repo, repo_root):
        """A worktree is found by its directory name below the basedir."""
        wt_path = repo_root / ".wt" / "review"
        git_repo.git.worktree("add", "-b", "some-long-branch", str(wt_path))
        _, entry = make_resolver(repo_root).classify("review")
        assert entry.branch == "some-long-branch"

    def test_name_beats_local_directory(self, git_repo, repo_root):
        """A like-named directory in cwd does not shadow a worktree name."""
        wt_path = repo_root / ".wt" / "test"
        git_repo.git.worktree("add", "-b", "test", str(wt_path))
        (repo_root / "test").mkdir()
        kind, entry = make_resolver(repo_root).classify("test")
        assert kind is ArgumentKind.NAME
        assert entry.path == str(wt_path)

    def test_dot_is_current_worktree(self, git_repo, repo_root):
        """. resolves to the worktree containing cwd."""
        wt_path = repo_root / ".wt" / "here"
        git_repo.git.worktree("add", "-b", "here", str(wt_path))
        sub = wt_path / "sub"
        sub.mkdir()
        kind, entry = make_resolver(sub).classify(".")
        assert kind is ArgumentKind.PATH_HINT
        assert entry.path == str(wt_path)

    def test_relative_path_hint(self, git_repo, repo_root):
        """A ./ path resolves to the worktree containing it."""
        wt_path = repo_root / ".wt" / "feature"
        git_repo.git.worktree("add", "-b", "feature", str(wt_path))
        kind, entry = make_resolver(repo_root).classify("./.wt/feature")
        assert kind is ArgumentKind.PATH_HINT
        assert entry.branch == "feature"

    def test_absolute_path_hint(self, git_repo, repo_root):
        """An absolute path inside a worktree resolves to it."""
        wt_path = repo_root / ".wt" / "feature"
        git_repo.git.worktree("add", "-b", "feature", str(wt_path))
        _, entry = make_resolver(repo_root).classify(str(wt_path / "README.md"))
        assert entry.path == str(wt_path)

    def test_explicit_path_outside_worktrees(self, temp_dir, git_repo, repo_root):
        """An explicit path that is in no worktree is an error."""
        with pytest.raises(UsageError):
            make_resolver(repo_root).classify(str(temp_dir))

    def test_slash_name_that_is_a_branch(self, git_repo, repo_root):
        """feature/x naming a branch stays a name even if such a directory exists."""
        git_repo.git.branch("feature/x")
        (repo_root / "feature" / "x").mkdir(parents=True)
        kind, entry = make_resolver(repo_root).classify("feature/x")
        assert kind is ArgumentKind.NAME
        assert entry is None

    def test_slash_argument_that_is_a_directory(self, git_repo, repo_root):
        """A slashed non-branch argument naming a directory is a path hint."""
        wt_path = repo_root / ".wt" / "feature"
        git_repo.git.worktree("add", "-b", "feature", str(wt_path))
        kind, entry = make_resolver(repo_root).classify(".wt/feature")
        assert kind is ArgumentKind.PATH_HINT
        assert entry.path == str(wt_path)


class TestLegacyLayout:
    """Test the legacy basedir guard."""

    def test_legacy_directory_blocks(self, temp_dir, git_repo, repo_root):
        """A sibling <repo>-wt directory stops creation when basedir is unset."""
        (temp_dir / "test_repo-wt").mkdir()
        with pytest.raises(LegacyLayoutError) as exc_info:
            make_resolver(repo_root).check_legacy_layout()
        message = str(exc_info.value)
        assert "wt.basedir has changed" in message
        assert 'git config wt.basedir "../{gitroot}-wt"' in message

    def test_configured_basedir_skips_check(self, temp_dir, git_repo, repo_root):
        """An explicit basedir means the user has decided."""
        (temp_dir / "test_repo-wt").mkdir()
        config = Config(basedir="../{gitroot}-wt", basedir_configured=True)
        make_resolver(repo_root, config).check_legacy_layout()

    def test_no_legacy_directory(self, git_repo, repo_root):
        make_resolver(repo_root).check_legacy_layout()


class TestRelativeAndExclusions:
    """Test the relative subdirectory extension and basedir exclusion."""

    def test_relative_appends_existing_subdirectory(self, git_repo, repo_root):
        """The invocation's subdirectory is kept when it exists in the target."""
        (repo_root / "src").mkdir()
        target = repo_root.parent / "target"
        (target / "src").mkdir(parents=True)
        resolver = make_resolver(repo_root / "src", Config(relative=True))
        assert resolver.with_relative(str(target)) == str(target / "src")

    def test_relative_falls_back_when_missing(self, git_repo, repo_root):
        """A missing subdirectory leaves the path unchanged."""
        (repo_root / "docs").mkdir()
        target = repo_root.parent / "target"
        target.mkdir()
        resolver = make_resolver(repo_root / "docs", Config(relative=True))
        assert resolver.with_relative(str(target)) == str(target)

    def test_relative_disabled(self, git_repo, repo_root):
        (repo_root / "src").mkdir()
        resolver = make_resolver(repo_root / "src")
        assert resolver.with_relative("/x") == "/x"

    def test_basedir_excluded_when_inside_source(self, git_repo, repo_root):
        """The default .wt lives inside the main root and is excluded."""
        assert make_resolver(repo_root).copy_exclusions(str(repo_root)) == [".wt"]

    def test_no_exclusion_when_source_inside_basedir(self, git_repo, repo_root):
        """Copying from a worktree under the basedir excludes nothing."""
        wt_path = repo_root / ".wt" / "feature"
        git_repo.git.worktree("add", "-b", "feature", str(wt_path))
        assert make_resolver(wt_path).copy_exclusions(str(wt_path)) == []

    def test_dir_name(self, git_repo, repo_root):
        """Worktrees under the basedir are named relative to it."""
        wt_path = repo_root / ".wt" / "feature" / "x"
        git_repo.git.worktree("add", "-b", "feature/x", str(wt_path))
        resolver = make_resolver(repo_root)
        entry = resolver.find_by_name("feature/x")
        assert resolver.dir_name(entry) == "feature/x"
        assert resolver.worktree_path_for("feature/x") == str(wt_path)
        assert os.path.basename(resolver.dir_name(resolver.entries()[0])) == "test_repo"
