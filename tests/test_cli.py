"""Tests for argument parsing and CLI dispatch."""

import argparse

import pytest

from dotfiles import cli, output
from dotfiles.cli import COMMANDS, VERSION, build_parser, main
from dotfiles.models import ConflictStrategy


@pytest.fixture
def parser():
    return build_parser()


class TestParser:
    def test_every_command_has_a_handler(self, parser):
        subparsers = next(action for action in parser._actions
                          if isinstance(action, argparse._SubParsersAction))
        assert set(subparsers.choices) == set(COMMANDS)

    def test_global_dry_run_survives_subcommand(self, parser):
        assert parser.parse_args(["--dry-run", "stow", "zsh"]).dry_run
        assert parser.parse_args(["--dry-run", "update"]).dry_run
        assert not parser.parse_args(["stow", "zsh"]).dry_run

    def test_stow_short_dry_run(self, parser):
        args = parser.parse_args(["stow", "-n", "zsh", "vim"])
        assert args.dry_run
        assert args.packages == ["zsh", "vim"]

    def test_subcommand_verbose(self, parser):
        assert parser.parse_args(["-v", "diff"]).verbose
        assert parser.parse_args(["diff", "-v"]).verbose
        assert not parser.parse_args(["diff"]).verbose

    def test_strategy_flags(self, parser):
        assert parser.parse_args(["stow", "zsh"]).strategy is None
        assert parser.parse_args(["stow", "--adopt", "zsh"]).strategy == ConflictStrategy.ADOPT
        assert parser.parse_args(["install", "--auto-resolve"]).strategy == ConflictStrategy.AUTO

    def test_strategy_flags_are_exclusive(self, parser):
        with pytest.raises(SystemExit):
            parser.parse_args(["stow", "--backup", "--adopt", "zsh"])

    def test_hooks_add_keeps_command_name(self, parser):
        args = parser.parse_args(["hooks", "add", "pre_install", "brew update"])

        assert args.command == "hooks"
        assert args.hook_type == "pre_install"
        assert args.hook_command == "brew update"

    def test_global_and_local_yes(self, parser):
        args = parser.parse_args(["-y", "clone", "minimal"])
        assert args.assume_yes and not args.yes

        args = parser.parse_args(["clone", "-y", "minimal"])
        assert args.yes and not args.assume_yes

    def test_defaults(self, parser):
        assert parser.parse_args(["add", "git"]).type == "brew"
        assert parser.parse_args(["install"]).output == "./Brewfile"
        assert parser.parse_args(["snapshot", "clean"]).days == 30
        assert parser.parse_args(["github", "setup"]).type == "ed25519"

    def test_nested_action_required(self, parser):
        with pytest.raises(SystemExit):
            parser.parse_args(["groups"])


class TestMain:
    def test_no_command_prints_help(self, env, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main([])

        assert excinfo.value.code == 0
        assert "usage: dotfiles" in capsys.readouterr().out

    def test_version(self, env, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--version"])

        assert excinfo.value.code == 0
        assert VERSION in capsys.readouterr().out

    def test_errors_exit_one(self, env, capsys):
        env.config.config_path.write_text("[]")

        with pytest.raises(SystemExit) as excinfo:
            main(["list"])

        assert excinfo.value.code == 1
        assert capsys.readouterr().err.startswith("Error: Config must be a JSON object")

    def test_keyboard_interrupt(self, env, monkeypatch):
        def interrupt(config, args):
            raise KeyboardInterrupt

        monkeypatch.setitem(cli.COMMANDS, "list", interrupt)

        with pytest.raises(SystemExit) as excinfo:
            main(["list"])
        assert excinfo.value.code == 130

    def test_runtime_flags_reach_config(self, env, monkeypatch, tmp_path):
        seen = {}

        def record(config, args):
            seen["config"] = config

        monkeypatch.setitem(cli.COMMANDS, "list", record)

        main(["--config", str(tmp_path / "other.json"), "-v", "-y", "--dry-run", "list"])

        config = seen["config"]
        assert config.config_path == tmp_path / "other.json"
        assert config.dryrun and config.verbose and config.assume_yes
        assert output.VERBOSE
