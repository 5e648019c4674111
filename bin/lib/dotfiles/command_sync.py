"""Sync command implementation."""

# ============================================================
# Imports
# ============================================================

import argparse
import os

from .config import Config
from .errors import ConfigError
from .hooks import run_hooks
from .output import confirm, print_header, print_info, print_key_value, print_success, print_warning
from .process import query_lines, run_command


DEFAULT_COMMIT_MESSAGE = "Update dotfiles configuration"


# ============================================================
# Entry Point
# ============================================================

def execute_sync(config: Config, args: argparse.Namespace) -> None:
    """Pull and push the dotfiles repository."""
    if not (config.dotfiles_dir / ".git").exists():
        raise ConfigError(f"{config.dotfiles_dir} is not a git repository. Run 'git init' there first.")

    # Navigate to repository root
    os.chdir(config.dotfiles_dir)

    dotfiles_config = config.load()
    run_hooks(config, dotfiles_config.hook_commands("pre_sync"), "pre-sync")

    # Without --pull or --push, do both
    do_pull = args.pull or not args.push
    do_push = args.push or not args.pull

    print_header("🔄 Syncing dotfiles")

    if not has_remote():
        print_warning("No git remote configured; skipping pull and push")
    else:
        if do_pull:
            pull_commits_from_remote(config)
        if do_push:
            push_changes(config, args.message or DEFAULT_COMMIT_MESSAGE, auto=args.auto)

    run_hooks(config, dotfiles_config.hook_commands("post_sync"), "post-sync")


# ============================================================
# Git Operations
# ============================================================

def has_remote() -> bool:
    return bool(query_lines(['git', 'remote']))


def uncommitted_changes() -> list[str]:
    """Return porcelain status lines for the working tree."""
    return query_lines(['git', 'status', '--porcelain'])


def pull_commits_from_remote(config: Config) -> None:
    print_info("⬇️  Pulling changes...")
    run_command(config, ['git', 'pull', '--rebase'])
    print_success("Pulled latest changes")


def push_changes(config: Config, message: str, auto: bool = False) -> None:
    """Commit all changes and push them, asking first unless auto."""
    changes = uncommitted_changes()
    if not changes:
        print_info("No local changes to push")
        return

    print_info(f"📝 {len(changes)} changed files:")
    for line in changes:
        print_info(f"  {line}")

    if not auto and not confirm("Commit and push these changes?", default=True,
                                assume_yes=config.assume_yes):
        print_info("Push cancelled")
        return

    print_key_value("Commit message", message)
    run_command(config, ['git', 'add', '.'])
    run_command(config, ['git', 'commit', '-m', message])
    run_command(config, ['git', 'push'])
    print_success("Changes pushed to remote")
