"""Tests for argument parsing and action resolution"""
import pytest

from git_wt.cli.args import config_overrides, normalize_argv, parse_args
from git_wt.core import resolve_action, unique
from git_wt.exceptions import UsageError
from git_wt.models.action import (
    CreateOrSwitchAction,
    DeleteAction,
    InitShellAction,
    ListAction,
)


def resolve(*argv):
    return resolve_action(parse_args(list(argv)))


class TestResolveAction:
    """Test mapping argument shapes to actions."""

    def test_no_arguments_lists(self):
        """No positional and no delete flag means list."""
        assert resolve() == ListAction(json=False)

    def test_json_list(self):
        """--json is carried on the list action."""
        assert resolve("--json") == ListAction(json=True)

    def test_one_positional_creates_or_switches(self):
        """A single name is a create-or-switch."""
        assert resolve("feature") == CreateOrSwitchAction(target="feature", start_point=None)

    def test_two_positionals_carry_start_point(self):
        """The second positional is the start point."""
        assert resolve("feature", "origin/main") == CreateOrSwitchAction(
            target="feature", start_point="origin/main"
        )

    def test_three_positionals_is_an_error(self):
        """More than two positionals without -d is rejected."""
        with pytest.raises(UsageError) as exc_info:
            resolve("a", "b", "c")
        assert "too many arguments" in str(exc_info.value)
        assert "got 3 arguments" in str(exc_info.value)

    def test_safe_delete(self):
        """-d deletes every positional without force."""
        action = resolve("-d", "a", "b", "c")
        assert action == DeleteAction(targets=["a", "b", "c"], force=False, allow_default=False)

    def test_force_delete_with_allow_default(self):
        """-D sets force; --allow-delete-default is carried through."""
        action = resolve("-D", "main", "--allow-delete-default")
        assert action == DeleteAction(targets=["main"], force=True, allow_default=True)

    def test_delete_targets_are_deduplicated(self):
        """Repeated targets are processed once, in first-seen order."""
        assert resolve("-d", "b", "a", "b").targets == ["b", "a"]

    def test_delete_without_target(self):
        """-d needs at least one target."""
        with pytest.raises(UsageError):
            resolve("-d")

    def test_flags_after_positionals(self):
        """Flags may follow positional arguments."""
        assert resolve("a", "-D").targets == ["a"]

    def test_init(self):
        """--init selects the shell script action."""
        assert resolve("--init", "zsh") == InitShellAction(shell="zsh", nocd=False)

    def test_init_nocd(self):
        """--init with --nocd drops the cd wrapper."""
        assert resolve("--init", "bash", "--nocd") == InitShellAction(shell="bash", nocd=True)

    @pytest.mark.parametrize("value,nocd", [("true", True), ("all", True), ("create", False), ("false", False)])
    def test_init_nocd_values(self, value, nocd):
        """Only nocd=true/all drops the wrapper; create still needs it for switching."""
        assert resolve("--init", "fish", f"--nocd={value}") == InitShellAction(shell="fish", nocd=nocd)


class TestFlagParsing:
    """Test tri-state flags and config overrides."""

    def test_unset_flags_are_none(self):
        """Flags that were not given do not override anything."""
        overrides = config_overrides(parse_args([]))
        assert all(value is None for value in overrides.values())

    def test_boolean_flags(self):
        """--flag is True and --no-flag is False."""
        args = parse_args(["--copyignored", "--no-relative"])
        assert args.copyignored is True
        assert args.relative is False

    def test_repeated_list_flags(self):
        """List flags accumulate in order."""
        args = parse_args(["--hook", "a", "--hook", "b", "--nocopy", "*.log"])
        assert args.hook == ["a", "b"]
        assert args.nocopy == ["*.log"]

    def test_nocd_switch_and_value(self):
        """--nocd alone means true; --nocd=<value> selects a mode."""
        assert parse_args(["--nocd"]).nocd == "true"
        assert parse_args(["--nocd=create"]).nocd == "create"
        assert parse_args(["feature"]).nocd is None

    def test_normalize_argv(self):
        """Only --nocd=<value> is rewritten."""
        assert normalize_argv(["--nocd=false", "--nocd", "x"]) == ["--nocd-value=false", "--nocd", "x"]

    def test_invalid_nocd_value(self):
        """argparse rejects unknown nocd modes."""
        with pytest.raises(SystemExit):
            parse_args(["--nocd=sometimes"])


class TestUnique:
    """Test order-preserving de-duplication."""

    def test_unique(self):
        assert unique(["a", "b", "a", "c", "b"]) == ["a", "b", "c"]
