"""Command-line argument parsing for git-wt."""

import argparse
from typing import List, Optional

from git_wt.__version__ import __version__
from git_wt.constants import SUPPORTED_SHELLS

DESCRIPTION = "A Git subcommand that makes 'git worktree' simple"

EPILOG = """\
Examples:
  git wt                                    List all worktrees
  git wt <branch|worktree>                  Switch to worktree (create worktree/branch if needed)
  git wt <branch|worktree> <start-point>    Create worktree from start-point (e.g., origin/main)
  git wt -d <branch|worktree>...            Delete worktree and branch (safe)
  git wt -D <branch|worktree>...            Force delete worktree and branch

Shell integration:
  eval "$(git-wt --init bash)"              # ~/.bashrc
  eval "$(git-wt --init zsh)"               # ~/.zshrc
  git-wt --init fish | source               # ~/.config/fish/config.fish
  Invoke-Expression (git-wt --init powershell | Out-String)

Configuration (git config wt.<key>, overridden by the matching flag):
  wt.basedir        Worktree base directory, supports {gitroot} (default: .wt)
  wt.copyignored    Copy ignored files (e.g. .env) into new worktrees
  wt.copyuntracked  Copy untracked files into new worktrees
  wt.copymodified   Copy modified files into new worktrees
  wt.copy           Always copy files matching these patterns (multi-valued)
  wt.nocopy         Never copy files matching these patterns (multi-valued, wins over wt.copy)
  wt.hook           Commands run in a new worktree after creation (multi-valued)
  wt.deletehook     Commands run in a worktree before it is deleted (multi-valued)
  wt.nocd           true/all: never cd, create: no cd into new worktrees, false: always cd
  wt.relative       Keep the current subdirectory when switching

The default branch is protected: with a worktree only the worktree is deleted,
without one deletion is refused. Use --allow-delete-default to override.
"""

NOCD_CHOICES = ["true", "false", "create", "all"]


def normalize_argv(argv: List[str]) -> List[str]:
    """Rewrite ``--nocd=<value>`` so that plain ``--nocd`` can stay a switch."""
    result = []
    for arg in argv:
        if arg.startswith("--nocd="):
            result.append("--nocd-value=" + arg[len("--nocd="):])
        else:
            result.append(arg)
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-wt",
        usage="git wt [flags] [<branch|worktree> [<start-point>]]\n"
        "       git wt -d|-D [flags] <branch|worktree>...\n"
        "       git wt --init <shell> [--nocd]",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("args", nargs="*", metavar="branch|worktree", help=argparse.SUPPRESS)
    parser.add_argument("--version", action="version", version=f"git-wt {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )

    # Actions
    parser.add_argument(
        "-d", "--delete", action="store_true",
        help="Delete worktree and branch (safe delete, only if merged)",
    )
    parser.add_argument(
        "-D", "--force-delete", action="store_true", help="Force delete worktree and branch"
    )
    parser.add_argument(
        "--init", metavar="SHELL",
        help=f"Output shell initialization script ({', '.join(SUPPORTED_SHELLS)})",
    )
    parser.add_argument("--json", action="store_true", help="List worktrees as JSON")
    parser.add_argument(
        "--allow-delete-default", action="store_true",
        help="Allow deletion of the default branch (main, master)",
    )

    # Config overrides; None means "not given"
    parser.add_argument(
        "--nocd", dest="nocd", action="store_const", const="true", default=None,
        help="Do not change directory to the worktree (also disables the git() wrapper with --init). "
        "--nocd=create only skips the cd for new worktrees",
    )
    parser.add_argument("--nocd-value", dest="nocd", choices=NOCD_CHOICES, help=argparse.SUPPRESS)
    parser.add_argument("--basedir", default=None, help="Override wt.basedir (worktree base directory)")
    parser.add_argument(
        "--copyignored", action=argparse.BooleanOptionalAction, default=None,
        help="Override wt.copyignored (copy ignored files)",
    )
    parser.add_argument(
        "--copyuntracked", action=argparse.BooleanOptionalAction, default=None,
        help="Override wt.copyuntracked (copy untracked files)",
    )
    parser.add_argument(
        "--copymodified", action=argparse.BooleanOptionalAction, default=None,
        help="Override wt.copymodified (copy modified files)",
    )
    parser.add_argument(
        "--copy", action="append", default=None, metavar="PATTERN",
        help="Always copy files matching pattern (can be specified multiple times)",
    )
    parser.add_argument(
        "--nocopy", action="append", default=None, metavar="PATTERN",
        help="Exclude files matching pattern from copying (can be specified multiple times)",
    )
    parser.add_argument(
        "--hook", action="append", default=None, metavar="COMMAND",
        help="Run command after creating a new worktree (can be specified multiple times)",
    )
    parser.add_argument(
        "--deletehook", action="append", default=None, metavar="COMMAND",
        help="Run command in a worktree before deleting it (can be specified multiple times)",
    )
    parser.add_argument(
        "--relative", action=argparse.BooleanOptionalAction, default=None,
        help="Override wt.relative (keep the current subdirectory when switching)",
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = build_parser()
    return parser.parse_intermixed_args(normalize_argv(argv or []))


def config_overrides(args: argparse.Namespace) -> dict:
    """Flag values that override stored wt.* config (None = not given)."""
    return {
        "basedir": args.basedir,
        "copyignored": args.copyignored,
        "copyuntracked": args.copyuntracked,
        "copymodified": args.copymodified,
        "copy": args.copy,
        "nocopy": args.nocopy,
        "hook": args.hook,
        "deletehook": args.deletehook,
        "nocd": args.nocd,
        "relative": args.relative,
    }
