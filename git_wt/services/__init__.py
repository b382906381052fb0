"""Services behind the git-wt actions."""
