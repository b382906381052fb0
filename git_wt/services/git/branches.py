"""Branch queries and mutations for git-wt."""

from typing import List, Optional

from git_wt.constants import DEFAULT_REMOTE, FALLBACK_DEFAULT_BRANCHES
from git_wt.logging_config import get_logger
from git_wt.services.git.runner import GitRunner

logger = get_logger(__name__)


class BranchService:
    """Service for branch lookups and deletion."""

    def __init__(self, runner: GitRunner):
        self.runner = runner
        self._default_branch: Optional[str] = None

    def _ref_exists(self, ref: str) -> bool:
        return self.runner.succeeds("show-ref", "--verify", "--quiet", ref)

    def local_branch_exists(self, name: str) -> bool:
        if not name:
            return False
        return self._ref_exists(f"refs/heads/{name}")

    def remote_branch_exists(self, name: str) -> bool:
        if not name:
            return False
        return self._ref_exists(f"refs/remotes/{DEFAULT_REMOTE}/{name}")

    def branch_exists(self, name: str) -> bool:
        """True if ``name`` is a local branch or a branch on origin."""
        return self.local_branch_exists(name) or self.remote_branch_exists(name)

    def resolve_ref(self, name: str) -> Optional[str]:
        """Commit hash ``name`` resolves to, or None."""
        result = self.runner.run("rev-parse", "--verify", "--quiet", f"{name}^{{commit}}", check=False)
        if not result.ok:
            return None
        return result.stdout.strip() or None

    def is_branch_ref(self, name: str) -> bool:
        """True if ``name`` resolves and names a local or remote-tracking branch."""
        if not self.resolve_ref(name):
            return False
        if self.branch_exists(name):
            return True
        return self._ref_exists(f"refs/remotes/{name}")

    def default_branch(self) -> str:
        """Branch origin/HEAD points at, else the first of main/master that exists."""
        if self._default_branch is None:
            result = self.runner.run(
                "symbolic-ref", f"refs/remotes/{DEFAULT_REMOTE}/HEAD", "--short", check=False
            )
            branch = ""
            if result.ok and result.stdout.strip():
                branch = result.stdout.strip()
                prefix = f"{DEFAULT_REMOTE}/"
                if branch.startswith(prefix):
                    branch = branch[len(prefix):]
            else:
                for name in FALLBACK_DEFAULT_BRANCHES:
                    if self.local_branch_exists(name):
                        branch = name
                        break
            self._default_branch = branch
            logger.debug(f"Default branch: {branch or '(none)'}")
        return self._default_branch

    def is_default_branch(self, name: str) -> bool:
        return bool(name) and name == self.default_branch()

    def delete_branch(self, name: str, force: bool = False, cwd: Optional[str] = None) -> None:
        """Delete a local branch with -d (or -D when forced).

        Raises:
            VCSError: git refused, e.g. the branch is not fully merged
        """
        self.runner.run("branch", "-D" if force else "-d", name, cwd=cwd, relay=True)
        logger.info(f"Deleted branch {name}")

    def list_branches(self) -> List[str]:
        output = self.runner.output("branch", "--format=%(refname:short)")
        return [line for line in output.split("\n") if line]

    def list_remote_branches(self) -> List[str]:
        """Remote branch names without the remote prefix, origin/HEAD excluded."""
        output = self.runner.output(
            "branch", "-r", "--format=%(refname:short)"
        )
        branches = []
        for line in output.split("\n"):
            if not line or "/" not in line:
                continue
            remote, _, name = line.partition("/")
            if name == "HEAD" or remote != DEFAULT_REMOTE:
                continue
            branches.append(name)
        return branches

    def commit_subject(self, ref: str) -> str:
        result = self.runner.run("log", "-1", "--format=%s", ref, "--", check=False)
        return result.stdout.strip() if result.ok else ""
